"""Inventory Ledger — availability checks and stock movements.

The ledger is the only writer of stock records. Callers hand it lines of
``(product_id, quantity)``; it loads each record once, checks every line
before touching anything and persists the touched records together, so a
rejected reservation leaves stock exactly as it was.

The ledger writes through the repository of the domain it is given and
therefore joins whatever unit of work the caller's command handler runs in.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.exceptions import InsufficientStockError, NotFoundError
from storefront.inventory.stock import AdjustmentReason, StockItem

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Availability:
    available: bool
    current_stock: int


class InventoryLedger:
    def __init__(self, domain=None):
        self._repo = (domain or current_domain).repository_for(StockItem)

    def _load(self, product_id) -> StockItem:
        try:
            return self._repo.get(str(product_id))
        except ObjectNotFoundError as exc:
            raise NotFoundError({"_entity": [f"Product `{product_id}` does not exist"]}) from exc

    def open(self, product_id, quantity: int = 0) -> StockItem:
        item = StockItem.open(product_id, quantity)
        self._repo.add(item)
        return item

    def close(self, product_id) -> None:
        """Drop the stock record of a product leaving the catalogue. Unknown products are ignored."""
        try:
            item = self._repo.get(str(product_id))
        except ObjectNotFoundError:
            return
        self._repo._dao.delete(item)
        logger.info("Stock record closed", product_id=str(product_id), last_quantity=item.available)

    def check_availability(self, product_id, quantity: int) -> Availability:
        """Report whether ``quantity`` units can be taken, without reserving them."""
        item = self._load(product_id)
        return Availability(available=item.covers(quantity), current_stock=item.available)

    def apply_delta(self, product_id, delta: int, reason=AdjustmentReason.MANUAL.value, reference=None) -> int:
        item = self._load(product_id)
        new_quantity = item.apply_delta(delta, reason=reason, reference=reference)
        self._repo.add(item)
        logger.info(
            "Stock adjusted",
            product_id=str(product_id),
            delta=delta,
            new_quantity=new_quantity,
            reason=reason,
        )
        return new_quantity

    def reserve(self, lines: Iterable[tuple[str, int]], reference=None) -> dict[str, int]:
        """Take stock for every line or for none of them.

        Every line is checked against current stock before any decrement. The
        decrements themselves are conditional, so a product listed on several
        lines whose combined quantity exceeds stock is rejected as well.
        Returns the new stock per product.
        """
        lines = [(str(product_id), quantity) for product_id, quantity in lines]
        items = self._load_all(product_id for product_id, _ in lines)

        for product_id, quantity in lines:
            item = items[product_id]
            if not item.covers(quantity):
                raise InsufficientStockError(
                    {
                        "stock": [
                            f"Insufficient stock for product {product_id}: "
                            f"requested {quantity}, available {item.available}"
                        ]
                    }
                )

        for product_id, quantity in lines:
            items[product_id].apply_delta(-quantity, reason=AdjustmentReason.SALE.value, reference=reference)

        return self._persist(items)

    def restock(self, lines: Iterable[tuple[str, int]], reference=None) -> dict[str, int]:
        """Return every line's quantity to stock."""
        lines = [(str(product_id), quantity) for product_id, quantity in lines]
        items = self._load_all(product_id for product_id, _ in lines)

        for product_id, quantity in lines:
            items[product_id].apply_delta(quantity, reason=AdjustmentReason.RESTOCK.value, reference=reference)

        return self._persist(items)

    def _load_all(self, product_ids) -> dict[str, StockItem]:
        items: dict[str, StockItem] = {}
        for product_id in product_ids:
            if product_id not in items:
                items[product_id] = self._load(product_id)
        return items

    def _persist(self, items: dict[str, StockItem]) -> dict[str, int]:
        for item in items.values():
            self._repo.add(item)
        return {product_id: item.available for product_id, item in items.items()}
