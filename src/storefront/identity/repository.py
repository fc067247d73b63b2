"""Repository for the Account aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.identity.account import Account, Role


@storefront.repository(part_of=Account)
class AccountRepository:
    def find_by_email(self, email: str) -> Account | None:
        if not email:
            return None
        accounts = self._dao.query.filter(email=email.strip().lower()).all().items
        return accounts[0] if accounts else None

    def everyone(self) -> list[Account]:
        return self._dao.query.order_by("registered_at").all().items

    def administrators(self) -> list[Account]:
        """Every account holding the admin role, used for order alerts."""
        return self._dao.query.filter(role=Role.ADMIN.value).all().items

    def is_admin(self, account_id) -> bool:
        """True when the id names an existing administrator account."""
        if not account_id:
            return False
        try:
            return self.get(str(account_id)).is_admin
        except ObjectNotFoundError:
            return False
