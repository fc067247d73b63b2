"""Manual stock adjustment — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import ForbiddenError
from storefront.identity.account import Account
from storefront.inventory.ledger import InventoryLedger
from storefront.inventory.stock import AdjustmentReason, StockItem


@storefront.command(part_of="StockItem")
class AdjustStock:
    product_id = Identifier(required=True)
    delta = Integer(required=True)
    adjusted_by = Identifier(required=True)
    reason = String(choices=AdjustmentReason, default=AdjustmentReason.MANUAL.value)


@storefront.command_handler(part_of=StockItem)
class AdjustStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        if not current_domain.repository_for(Account).is_admin(command.adjusted_by):
            raise ForbiddenError({"_entity": ["Only administrators can adjust stock"]})

        return InventoryLedger(current_domain).apply_delta(
            command.product_id,
            command.delta,
            reason=command.reason,
            reference=f"adjusted-by:{command.adjusted_by}",
        )
