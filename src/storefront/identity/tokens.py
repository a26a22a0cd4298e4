"""Bearer token issue and verification (HS256 JWT via python-jose).

Tokens carry the account id as ``sub`` and the account role as ``role``.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt

from storefront.identity.account import AccountRole
from storefront.shared.errors import AuthenticationError
from storefront.utils import settings


@dataclass(frozen=True)
class Principal:
    """The authenticated caller decoded from a bearer token."""

    account_id: str
    role: AccountRole

    @property
    def is_customer(self) -> bool:
        return self.role is AccountRole.CUSTOMER

    @property
    def is_seller(self) -> bool:
        return self.role is AccountRole.SELLER

    @property
    def is_admin(self) -> bool:
        return self.role is AccountRole.ADMIN


def issue_token(account_id: str, role: str, expires_in: timedelta | None = None) -> str:
    now = datetime.now(UTC)
    expires_in = expires_in or timedelta(minutes=settings.jwt_expires_minutes())
    claims = {
        "sub": str(account_id),
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret(), algorithm=settings.jwt_algorithm())


def decode_token(token: str) -> Principal:
    """Verify ``token`` and resolve its role once into a ``Principal``."""
    try:
        claims = jwt.decode(token, settings.jwt_secret(), algorithms=[settings.jwt_algorithm()])
    except ExpiredSignatureError:
        raise AuthenticationError({"token": ["Token has expired"]}) from None
    except JWTError:
        raise AuthenticationError({"token": ["Invalid token"]}) from None

    account_id = claims.get("sub")
    try:
        role = AccountRole(claims.get("role"))
    except ValueError:
        raise AuthenticationError({"token": ["Invalid token"]}) from None
    if not account_id:
        raise AuthenticationError({"token": ["Invalid token"]})

    return Principal(account_id=str(account_id), role=role)
