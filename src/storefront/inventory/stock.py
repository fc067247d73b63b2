"""StockItem aggregate — the available quantity of one product.

A stock record shares its identity with the product it counts. Quantities
only change through ``apply_delta``, which refuses any movement that would
leave the record below zero. Order placement relies on that refusal as its
conditional decrement.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer

from storefront.domain import storefront
from storefront.exceptions import InsufficientStockError
from storefront.inventory.events import StockAdjusted, StockOpened


class AdjustmentReason(Enum):
    SALE = "sale"
    RESTOCK = "restock"
    MANUAL = "manual"


@storefront.aggregate
class StockItem:
    available = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open(cls, product_id, quantity=0):
        if quantity is None or quantity < 0:
            raise ValidationError({"quantity": ["Initial stock cannot be negative"]})

        now = datetime.now(UTC)
        item = cls(id=str(product_id), available=quantity, created_at=now, updated_at=now)
        item.raise_(
            StockOpened(
                product_id=str(product_id),
                initial_quantity=quantity,
                opened_at=now,
            )
        )
        return item

    def covers(self, quantity) -> bool:
        """Whether the requested quantity can be taken right now."""
        return quantity <= self.available

    def apply_delta(self, delta, reason=AdjustmentReason.MANUAL.value, reference=None) -> int:
        """Move stock by a signed delta and return the new quantity."""
        previous = self.available
        new_quantity = previous + delta
        if new_quantity < 0:
            raise InsufficientStockError(
                {"stock": [f"Insufficient stock for product {self.id}: requested {-delta}, available {previous}"]}
            )

        now = datetime.now(UTC)
        self.available = new_quantity
        self.updated_at = now
        self.raise_(
            StockAdjusted(
                product_id=str(self.id),
                delta=delta,
                previous_quantity=previous,
                new_quantity=new_quantity,
                reason=reason,
                reference=reference,
                adjusted_at=now,
            )
        )
        return new_quantity
