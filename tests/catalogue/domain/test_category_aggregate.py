"""Domain tests for the Category aggregate."""

from storefront.catalogue.category.category import Category
from storefront.catalogue.category.events import CategoryCreated, CategoryUpdated


class TestCategory:
    def test_create_trims_name(self):
        category = Category.create(name="  Kitchen  ", description="Pots and pans")

        assert category.name == "Kitchen"
        assert category.parent_id is None
        assert isinstance(category._events[-1], CategoryCreated)

    def test_update_details(self):
        category = Category.create(name="Kitchen")
        category.update_details(name="Kitchenware", parent_id="cat-home")

        assert category.name == "Kitchenware"
        assert category.parent_id == "cat-home"
        assert isinstance(category._events[-1], CategoryUpdated)

    def test_clear_parent(self):
        category = Category.create(name="Kitchen", parent_id="cat-home")
        category.update_details(clear_parent=True)
        assert category.parent_id is None

    def test_view_uses_camel_case_keys(self):
        view = Category.create(name="Kitchen").to_dict_view()
        assert set(view) == {"id", "name", "description", "parentId", "createdAt", "updatedAt"}
