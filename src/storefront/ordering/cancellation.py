"""Order cancellation and administrator status updates — commands and handler.

Both paths can end in a cancelled order, and both restock through the same
helper so an order's lines go back to stock exactly once: the aggregate
refuses to cancel an order that is already cancelled.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import ForbiddenError
from storefront.identity.account import Account
from storefront.inventory.ledger import InventoryLedger
from storefront.ordering.order import Order, OrderStatus
from storefront.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    requested_by = Identifier(required=True)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    requested_by = Identifier(required=True)


def _cancel_and_restock(order, actor_id, actor_is_admin):
    order.cancel(actor_id, actor_is_admin=actor_is_admin)
    InventoryLedger(current_domain).restock(order.stock_lines(), reference=f"order:{order.id}")
    current_domain.repository_for(Order).add(order)
    logger.info(
        "Order cancelled",
        order_id=str(order.id),
        cancelled_by=order.cancelled_by,
    )


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = fetch(Order, command.order_id, label="Order")
        actor_is_admin = current_domain.repository_for(Account).is_admin(command.requested_by)
        _cancel_and_restock(order, command.requested_by, actor_is_admin)
        return order.status

    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        if not current_domain.repository_for(Account).is_admin(command.requested_by):
            raise ForbiddenError({"_entity": ["Only administrators can update order status"]})

        order = fetch(Order, command.order_id, label="Order")
        if command.status == OrderStatus.CANCELLED.value and order.status != OrderStatus.CANCELLED.value:
            _cancel_and_restock(order, command.requested_by, actor_is_admin=True)
            return order.status

        if order.update_status(command.status):
            current_domain.repository_for(Order).add(order)
            logger.info(
                "Order status updated",
                order_id=str(order.id),
                status=order.status,
            )
        return order.status
