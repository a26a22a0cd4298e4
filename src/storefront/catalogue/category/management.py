"""Category management: commands and handlers (admin only)."""

from protean import handle
from protean.exceptions import InvalidStateError, ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.utils.logging import get_logger
from storefront.utils.queries import fetch_all

logger = get_logger(__name__)


@storefront.command(part_of="Category")
class CreateCategory:
    name = String(required=True, max_length=100)
    description = Text()
    parent_id = Identifier()
    created_by = Identifier()


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id = Identifier(required=True)
    name = String(max_length=100)
    description = Text()
    parent_id = Identifier()
    clear_parent = Boolean(default=False)


@storefront.command(part_of="Category")
class DeleteCategory:
    category_id = Identifier(required=True)


def _assert_name_available(repo, name, exclude_id=None):
    wanted = name.strip().lower()
    for category in fetch_all(repo._dao.query):
        if category.name.lower() == wanted and str(category.id) != str(exclude_id):
            raise ValidationError({"name": ["Category name already exists"]})


def _assert_not_own_ancestor(repo, category_id, parent_id):
    """Walk up from ``parent_id``; reaching ``category_id`` would close a loop."""
    seen = set()
    current = parent_id
    while current:
        if str(current) == str(category_id):
            raise ValidationError({"parent_id": ["A category cannot be nested under itself or its descendants"]})
        if current in seen:
            break
        seen.add(current)
        current = repo.get(current).parent_id


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        _assert_name_available(repo, command.name)
        if command.parent_id:
            repo.get(command.parent_id)

        category = Category.create(
            name=command.name,
            description=command.description,
            parent_id=command.parent_id,
            created_by=command.created_by,
        )
        repo.add(category)

        logger.info("Category created", category_id=str(category.id), name=category.name)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name is not None:
            _assert_name_available(repo, command.name, exclude_id=category.id)
        if command.parent_id and not command.clear_parent:
            repo.get(command.parent_id)
            _assert_not_own_ancestor(repo, category.id, command.parent_id)

        category.update_details(
            name=command.name,
            description=command.description,
            parent_id=command.parent_id,
            clear_parent=command.clear_parent,
        )
        repo.add(category)
        return category.to_dict_view()

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        children = repo._dao.query.filter(parent_id=str(category.id)).all().items
        if children:
            raise InvalidStateError({"category": ["Category has sub-categories and cannot be deleted"]})

        products = (
            current_domain.repository_for(Product)._dao.query.filter(category_id=str(category.id)).all().items
        )
        if products:
            raise InvalidStateError({"category": ["Category still has products and cannot be deleted"]})

        repo._dao.delete(category)
        logger.info("Category deleted", category_id=str(category.id))
        return str(category.id)
