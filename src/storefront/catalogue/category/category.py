"""Category aggregate root for product categorization."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String, Text

from storefront.catalogue.category.events import CategoryCreated, CategoryUpdated
from storefront.domain import storefront


@storefront.aggregate
class Category:
    """A named grouping of products, optionally nested under a parent category.

    Names are unique across the catalogue. The parent chain never loops back
    to the category itself.
    """

    name = String(required=True, max_length=100)
    description = Text()
    parent_id = Identifier()
    created_by = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, description=None, parent_id=None, created_by=None):
        now = datetime.now(UTC)
        category = cls(
            name=name.strip(),
            description=description,
            parent_id=parent_id,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=str(category.id),
                name=category.name,
                parent_id=parent_id,
            )
        )
        return category

    def update_details(self, name=None, description=None, parent_id=None, clear_parent=False):
        if name is not None:
            self.name = name.strip()
        if description is not None:
            self.description = description
        if clear_parent:
            self.parent_id = None
        elif parent_id is not None:
            self.parent_id = parent_id

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CategoryUpdated(
                category_id=str(self.id),
                name=self.name,
                parent_id=self.parent_id,
            )
        )

    def to_dict_view(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "parentId": self.parent_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
