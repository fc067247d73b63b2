"""Repository for the Order aggregate."""

from storefront.domain import storefront
from storefront.ordering.order import Order


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


@storefront.repository(part_of=Order)
class OrderRepository:
    def for_customer(self, customer_id) -> list[Order]:
        """A purchaser's orders, newest first."""
        return _newest_first(self._dao.query.filter(customer_id=str(customer_id)).all().items)

    def everything(self) -> list[Order]:
        """Every order, newest first. Administrators only."""
        return _newest_first(self._dao.query.all().items)
