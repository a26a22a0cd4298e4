"""Account registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.account import Account, AccountRole
from storefront.identity.passwords import MIN_PASSWORD_LENGTH, hash_password
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Account")
class RegisterAccount:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    password = String(required=True, max_length=128)
    role = String(required=True, max_length=20)
    phone = String(max_length=20)
    address = Text()
    store_name = String(max_length=150)


@storefront.command_handler(part_of=Account)
class RegisterAccountHandler:
    @handle(RegisterAccount)
    def register_account(self, command):
        if len(command.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})

        repo = current_domain.repository_for(Account)
        email = command.email.strip().lower()
        if repo.find_by_email(email) is not None:
            raise ValidationError({"email": ["An account with this email already exists"]})

        account = Account.register(
            name=command.name,
            email=email,
            password_hash=hash_password(command.password),
            role=AccountRole.parse(command.role).value,
            phone=command.phone,
            address=command.address,
            store_name=command.store_name,
        )
        repo.add(account)

        logger.info("Account registered", account_id=str(account.id), role=account.role)
        return str(account.id)
