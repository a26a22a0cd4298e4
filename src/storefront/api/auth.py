"""Bearer-token authentication and role guards for the routers."""

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.account import Account, AccountRole
from storefront.identity.tokens import Principal, decode_token
from storefront.shared.errors import AuthenticationError
from storefront.utils.logging import add_context

bearer_scheme = HTTPBearer(auto_error=False)


async def get_principal(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> Principal:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Missing bearer token", headers={"WWW-Authenticate": "Bearer"})

    principal = decode_token(credentials.credentials)

    try:
        account = current_domain.repository_for(Account).get(principal.account_id)
    except ObjectNotFoundError:
        raise AuthenticationError({"token": ["Account no longer exists"]}) from None
    if not account.has_role(principal.role):
        raise AuthenticationError({"token": ["Account role has changed, please sign in again"]})
    if not account.is_active:
        raise AuthenticationError({"status": ["Account is suspended"]})

    add_context(account_id=principal.account_id, role=principal.role.value)
    return principal


def require_role(role: AccountRole):
    """Dependency factory admitting only principals holding ``role``."""

    async def _guard(principal: Principal = Depends(get_principal)) -> Principal:
        if principal.role is not role:
            raise HTTPException(status_code=403, detail=f"{role.value} access required")
        return principal

    return _guard


current_customer = require_role(AccountRole.CUSTOMER)
current_seller = require_role(AccountRole.SELLER)
current_admin = require_role(AccountRole.ADMIN)
