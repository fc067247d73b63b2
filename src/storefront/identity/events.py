"""Domain events for the Account aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Account")
class AccountRegistered:
    """A shopper or administrator account was created."""

    __version__ = 1

    account_id: Identifier(required=True)
    email: String(required=True)
    full_name: String(required=True, sanitize=False)
    role: String(required=True)
    registered_at: DateTime(required=True)


@storefront.event(part_of="Account")
class AccountProfileUpdated:
    """Name, phone or postal address changed."""

    __version__ = 1

    account_id: Identifier(required=True)
    full_name: String(sanitize=False)
    phone: String()
    updated_at: DateTime(required=True)


@storefront.event(part_of="Account")
class AdminRoleGranted:
    """An account was promoted to administrator."""

    __version__ = 1

    account_id: Identifier(required=True)
    email: String(required=True)
    granted_at: DateTime(required=True)


@storefront.event(part_of="Account")
class AccountAmended:
    """An administrator changed the account's name, email or role."""

    __version__ = 1

    account_id: Identifier(required=True)
    full_name: String(required=True, sanitize=False)
    email: String(required=True)
    role: String(required=True)
    amended_by: Identifier(required=True)
    amended_at: DateTime(required=True)
