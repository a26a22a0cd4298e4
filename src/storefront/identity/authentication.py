"""Login: verifies credentials for a role and issues a bearer token."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.account import Account, AccountRole
from storefront.identity.passwords import verify_password
from storefront.identity.tokens import issue_token
from storefront.shared.errors import AuthenticationError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Account")
class AuthenticateAccount:
    email = String(required=True, max_length=254)
    password = String(required=True, max_length=128)
    role = String(required=True, choices=AccountRole)


@storefront.command_handler(part_of=Account)
class AuthenticateAccountHandler:
    @handle(AuthenticateAccount)
    def authenticate(self, command):
        repo = current_domain.repository_for(Account)
        account = repo.find_by_email(command.email)

        # Unknown email, wrong password and wrong portal all look the same to the caller
        if (
            account is None
            or account.role != command.role
            or not verify_password(command.password, account.password_hash)
        ):
            logger.warning("Login rejected", email=command.email, role=command.role)
            raise AuthenticationError({"credentials": ["Invalid credentials"]})

        if not account.is_active:
            logger.warning("Login rejected for suspended account", account_id=str(account.id))
            raise AuthenticationError({"status": ["Account is suspended"]})

        account.record_login()
        repo.add(account)

        return {
            "token": issue_token(str(account.id), account.role),
            "account": account.to_profile(),
        }
