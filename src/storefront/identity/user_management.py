"""Admin user management: edit and delete any account, list and inspect users.

Admins create accounts through ``RegisterAccount`` like everyone else. An admin
may not delete their own account or change their own role, and a seller who
still lists products cannot be deleted.
"""

from protean import handle
from protean.exceptions import InvalidOperationError, InvalidStateError, ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.identity.account import Account, AccountRole
from storefront.identity.passwords import MIN_PASSWORD_LENGTH, hash_password
from storefront.utils.logging import get_logger
from storefront.utils.queries import fetch_all, paginate

logger = get_logger(__name__)


@storefront.command(part_of="Account")
class UpdateAccount:
    account_id = Identifier(required=True)
    acting_admin_id = Identifier(required=True)
    name = String(max_length=100)
    email = String(max_length=254)
    password = String(max_length=128)
    phone = String(max_length=20)
    address = Text()
    role = String(max_length=20)
    store_name = String(max_length=150)


@storefront.command(part_of="Account")
class DeleteAccount:
    account_id = Identifier(required=True)
    acting_admin_id = Identifier(required=True)
    role = String(max_length=20)  # Restrict the delete to accounts holding this role


def load_account(account_id, role: AccountRole | None = None) -> Account:
    """Fetch an account, reporting it as a missing user (or seller, when ``role`` is given)."""
    label = role.value if role else "User"
    try:
        account = current_domain.repository_for(Account).get(account_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"_entity": f"{label} not found"}) from None
    if role is not None and not account.has_role(role):
        raise ObjectNotFoundError({"_entity": f"{label} not found"})
    return account


@storefront.command_handler(part_of=Account)
class UserManagementHandler:
    @handle(UpdateAccount)
    def update_account(self, command):
        repo = current_domain.repository_for(Account)
        account = load_account(command.account_id)

        role = AccountRole.parse(command.role) if command.role else None
        if role is not None and str(account.id) == str(command.acting_admin_id) and not account.has_role(role):
            raise InvalidOperationError({"role": ["Admins cannot change their own role"]})

        if command.email is not None:
            existing = repo.find_by_email(command.email)
            if existing is not None and str(existing.id) != str(account.id):
                raise ValidationError({"email": ["An account with this email already exists"]})

        password_hash = None
        if command.password is not None:
            if len(command.password) < MIN_PASSWORD_LENGTH:
                raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})
            password_hash = hash_password(command.password)

        account.update_details(
            name=command.name,
            email=command.email,
            phone=command.phone,
            address=command.address,
            store_name=command.store_name,
            role=role,
            password_hash=password_hash,
        )
        repo.add(account)

        logger.info(
            "Account updated by admin",
            account_id=str(account.id),
            admin_id=str(command.acting_admin_id),
            role=account.role,
        )
        return account.to_profile()

    @handle(DeleteAccount)
    def delete_account(self, command):
        role = AccountRole.parse(command.role) if command.role else None
        account = load_account(command.account_id, role)

        if str(account.id) == str(command.acting_admin_id):
            raise InvalidOperationError({"account": ["Admins cannot delete their own account"]})
        if account.has_role(AccountRole.SELLER):
            listed = current_domain.repository_for(Product)._dao.query.filter(seller_id=str(account.id)).all()
            if listed.total:
                raise InvalidStateError({"seller": ["Seller still has products and cannot be deleted"]})

        current_domain.repository_for(Account)._dao.delete(account)
        logger.info(
            "Account deleted",
            account_id=str(account.id),
            role=account.role,
            admin_id=str(command.acting_admin_id),
        )
        return str(account.id)


def _matches(account: Account, search: str | None) -> bool:
    if not search:
        return True
    needle = search.strip().lower()
    return needle in f"{account.name} {account.email}".lower()


def list_accounts(search: str | None = None, role: str | None = None, page: int = 1, limit: int = 10) -> dict:
    query = current_domain.repository_for(Account)._dao.query
    if role:
        query = query.filter(role=AccountRole.parse(role).value)

    accounts = [a for a in fetch_all(query) if _matches(a, search)]
    accounts.sort(key=lambda a: a.registered_at, reverse=True)
    items, total, total_pages = paginate(accounts, page, limit)
    return {
        "page": max(page, 1),
        "limit": max(limit, 1),
        "totalUsers": total,
        "totalPages": total_pages,
        "users": [a.to_profile() for a in items],
    }


def get_account(account_id: str) -> dict:
    return load_account(account_id).to_profile()


def get_seller(seller_id: str) -> dict:
    return load_account(seller_id, AccountRole.SELLER).to_profile()
