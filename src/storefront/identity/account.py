"""Account aggregate — the storefront's Account Store.

Accounts identify purchasers and administrators. Administrators receive
order alerts and may act on any order; customers act only on their own.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, ValueObject

from storefront.domain import storefront
from storefront.identity.events import (
    AccountAmended,
    AccountProfileUpdated,
    AccountRegistered,
    AdminRoleGranted,
)

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

_FORBIDDEN_EMAIL_CHARS = set(" \t\n;,()\":<>[]\\")


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@storefront.value_object(part_of="Account")
class PostalAddress:
    """Where the account holder usually receives deliveries."""

    street: String(max_length=255, sanitize=False)
    city: String(max_length=100, sanitize=False)
    state: String(max_length=100, sanitize=False)
    postal_code: String(max_length=20, sanitize=False)
    country: String(max_length=100, default="India", sanitize=False)


@storefront.aggregate
class Account:
    """A person known to the storefront, identified by a unique email address."""

    full_name: String(required=True, max_length=100, sanitize=False)
    email: String(required=True, max_length=254, unique=True)
    phone: String(max_length=20)
    address: ValueObject(PostalAddress)
    role: String(choices=Role, default=Role.CUSTOMER.value)
    registered_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def email_must_be_well_formed(self):
        email = self.email or ""
        local_part, _, domain_part = email.partition("@")
        if (
            email.count("@") != 1
            or not local_part
            or "." not in domain_part
            or domain_part.startswith(".")
            or domain_part.endswith(".")
            or ".." in email
            or _FORBIDDEN_EMAIL_CHARS.intersection(email)
        ):
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @classmethod
    def register(cls, full_name, email, phone=None, address=None, role=Role.CUSTOMER.value):
        now = datetime.now(UTC)
        account = cls(
            full_name=full_name,
            email=(email or "").strip().lower(),
            phone=phone,
            address=PostalAddress(**address) if address else None,
            role=role,
            registered_at=now,
            updated_at=now,
        )
        account.raise_(
            AccountRegistered(
                account_id=str(account.id),
                email=account.email,
                full_name=account.full_name,
                role=account.role,
                registered_at=now,
            )
        )
        return account

    def update_profile(self, full_name=_UNSET, phone=_UNSET, address=_UNSET):
        """Apply a partial profile update; omitted fields are left as they are."""
        if full_name is not _UNSET:
            if not full_name:
                raise ValidationError({"full_name": ["Full name cannot be blank"]})
            self.full_name = full_name
        if phone is not _UNSET:
            self.phone = phone
        if address is not _UNSET:
            self.address = PostalAddress(**address) if address else None

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            AccountProfileUpdated(
                account_id=str(self.id),
                full_name=self.full_name,
                phone=self.phone,
                updated_at=now,
            )
        )

    def grant_admin(self):
        if self.is_admin:
            return

        now = datetime.now(UTC)
        self.role = Role.ADMIN.value
        self.updated_at = now
        self.raise_(
            AdminRoleGranted(
                account_id=str(self.id),
                email=self.email,
                granted_at=now,
            )
        )

    def amend(self, amended_by, full_name=_UNSET, email=_UNSET, role=_UNSET):
        """Administrator edit of name, email and role; omitted fields are left as they are."""
        if full_name is not _UNSET:
            if not full_name:
                raise ValidationError({"full_name": ["Full name cannot be blank"]})
            self.full_name = full_name
        if email is not _UNSET:
            self.email = (email or "").strip().lower()
        if role is not _UNSET:
            self.role = role

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            AccountAmended(
                account_id=str(self.id),
                full_name=self.full_name,
                email=self.email,
                role=self.role,
                amended_by=str(amended_by),
                amended_at=now,
            )
        )
