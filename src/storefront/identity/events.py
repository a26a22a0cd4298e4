"""Domain events for the Account aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Account")
class AccountRegistered:
    """A customer, seller or admin account was created."""

    __version__ = "v1"

    account_id = Identifier(required=True)
    email = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@storefront.event(part_of="Account")
class SellerStatusChanged:
    """An admin activated or suspended a seller account."""

    __version__ = "v1"

    account_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)


@storefront.event(part_of="Account")
class AccountUpdated:
    """Account details, role or credentials were changed by the owner or an admin."""

    __version__ = "v1"

    account_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    role = String(required=True)
    password_changed = Boolean(default=False)
    updated_at = DateTime(required=True)
