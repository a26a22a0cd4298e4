"""Account aggregate: one identity type covering customers, sellers and admins.

The role is fixed when the account is created. Role-specific capabilities
(placing orders, managing products, administering the catalogue) are granted
at the API boundary from the role carried in the bearer token.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, Text

from storefront.domain import storefront
from storefront.identity.events import AccountRegistered, AccountUpdated, SellerStatusChanged

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_PATTERN = re.compile(r"^\+?\d{7,15}$")


class AccountRole(Enum):
    CUSTOMER = "Customer"
    SELLER = "Seller"
    ADMIN = "Admin"

    @classmethod
    def parse(cls, value) -> "AccountRole":
        """Look a role up by its value, ignoring case (``seller`` is ``Seller``)."""
        wanted = (value or "").strip().lower()
        for role in cls:
            if role.value.lower() == wanted:
                return role
        raise ValidationError({"role": [f"Unknown role '{value}'"]})


class AccountStatus(Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"


@storefront.aggregate
class Account:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    password_hash = String(required=True, max_length=255)
    phone = String(max_length=20)
    address = Text()
    store_name = String(max_length=150)
    description = Text()
    role = String(choices=AccountRole, required=True)
    status = String(choices=AccountStatus, default=AccountStatus.ACTIVE.value)
    registered_at = DateTime()
    last_login_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email and not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["Invalid email address"]})

    @invariant.post
    def phone_must_be_numeric(self):
        if self.phone and not _PHONE_PATTERN.match(self.phone):
            raise ValidationError({"phone": ["Phone number must contain 7 to 15 digits"]})

    @invariant.post
    def sellers_must_name_their_store(self):
        if self.role == AccountRole.SELLER.value and not (self.store_name or "").strip():
            raise ValidationError({"store_name": ["Store name is required for sellers"]})

    @classmethod
    def register(cls, name, email, password_hash, role, phone=None, address=None, store_name=None):
        account = cls(
            name=name.strip(),
            email=email.strip().lower(),
            password_hash=password_hash,
            role=role,
            phone=phone,
            address=address,
            store_name=store_name,
            status=AccountStatus.ACTIVE.value,
            registered_at=datetime.now(UTC),
        )
        account.raise_(
            AccountRegistered(
                account_id=str(account.id),
                email=account.email,
                role=account.role,
                registered_at=account.registered_at,
            )
        )
        return account

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE.value

    def has_role(self, role: AccountRole) -> bool:
        return self.role == role.value

    def record_login(self):
        self.last_login_at = datetime.now(UTC)

    def change_status(self, status):
        if not self.has_role(AccountRole.SELLER):
            raise ValidationError({"role": ["Only seller accounts can be activated or suspended"]})

        try:
            new_status = AccountStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown account status '{status}'"]}) from None
        if self.status == new_status.value:
            return

        previous = self.status
        self.status = new_status.value
        self.raise_(
            SellerStatusChanged(
                account_id=str(self.id),
                previous_status=previous,
                new_status=new_status.value,
            )
        )

    def update_details(
        self,
        name=None,
        email=None,
        phone=None,
        address=None,
        store_name=None,
        description=None,
        role=None,
        password_hash=None,
    ):
        """Apply every argument that is not None, then check invariants once.

        Leaving the seller role clears a suspension, since only sellers can be
        reactivated afterwards.
        """
        with atomic_change(self):
            if name is not None:
                self.name = name.strip()
            if email is not None:
                self.email = email.strip().lower()
            if phone is not None:
                self.phone = phone.strip() or None
            if address is not None:
                self.address = address.strip() or None
            if store_name is not None:
                self.store_name = store_name.strip()
            if description is not None:
                self.description = description.strip() or None
            if role is not None and role.value != self.role:
                if self.has_role(AccountRole.SELLER):
                    self.status = AccountStatus.ACTIVE.value
                self.role = role.value
            if password_hash is not None:
                self.password_hash = password_hash
            self.updated_at = datetime.now(UTC)

        self.raise_(
            AccountUpdated(
                account_id=str(self.id),
                name=self.name,
                email=self.email,
                role=self.role,
                password_changed=password_hash is not None,
                updated_at=self.updated_at,
            )
        )

    def to_profile(self) -> dict:
        profile = {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "role": self.role,
            "status": self.status,
            "registeredAt": self.registered_at,
            "lastLoginAt": self.last_login_at,
            "updatedAt": self.updated_at,
        }
        if self.has_role(AccountRole.SELLER):
            profile["storeName"] = self.store_name
            profile["description"] = self.description
        return profile
