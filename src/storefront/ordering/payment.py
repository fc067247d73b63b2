"""Order payment — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order
from storefront.utils.lookup import fetch


@storefront.command(part_of="Order")
class MarkOrderPaid:
    order_id = Identifier(required=True)
    payment_method = String(max_length=10)  # Optional override


@storefront.command_handler(part_of=Order)
class MarkOrderPaidHandler:
    @handle(MarkOrderPaid)
    def mark_order_paid(self, command):
        order = fetch(Order, command.order_id, label="Order")
        order.mark_paid(payment_method=command.payment_method)
        current_domain.repository_for(Order).add(order)
        return order.payment_status
