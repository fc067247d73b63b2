"""Domain events for the StockItem aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="StockItem")
class StockOpened:
    """A stock record was opened for a newly listed product."""

    __version__ = 1

    product_id = Identifier(required=True)
    initial_quantity = Integer(required=True)
    opened_at = DateTime(required=True)


@storefront.event(part_of="StockItem")
class StockAdjusted:
    """Stock moved by a signed delta (sale, restock or manual correction)."""

    __version__ = 1

    product_id = Identifier(required=True)
    delta = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    reason = String(max_length=50)
    reference = String(max_length=255)
    adjusted_at = DateTime(required=True)
