"""Domain events for the Category aggregate."""

from protean.fields import Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Category")
class CategoryCreated:
    __version__ = "v1"

    category_id = Identifier(required=True)
    name = String(required=True)
    parent_id = Identifier()


@storefront.event(part_of="Category")
class CategoryUpdated:
    __version__ = "v1"

    category_id = Identifier(required=True)
    name = String(required=True)
    parent_id = Identifier()
