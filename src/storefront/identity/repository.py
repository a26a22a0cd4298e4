"""Repository for the Account aggregate."""

from storefront.domain import storefront
from storefront.identity.account import Account, AccountRole
from storefront.utils.queries import fetch_all


@storefront.repository(part_of=Account)
class AccountRepository:
    def find_by_email(self, email: str) -> Account | None:
        """Find an account by its (lower-cased) email address."""
        matches = self._dao.query.filter(email=email.strip().lower()).all().items
        return matches[0] if matches else None

    def find_by_role(self, role: AccountRole) -> list[Account]:
        return list(fetch_all(self._dao.query.filter(role=role.value)))
