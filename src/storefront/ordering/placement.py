"""Order placement — command and handler.

Placement runs as one unit of work: the purchaser and every product are
resolved, stock is reserved for all lines and the order is stored. Any
failure leaves both the ledger and the order store untouched. Confirmation
and admin alerts go out only after the unit of work commits.
"""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.identity.account import Account
from storefront.inventory.ledger import InventoryLedger
from storefront.ordering.order import Order, PaymentMethod, validate_order_request
from storefront.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    items = Text(required=True, sanitize=False)  # JSON: list of {product_id, quantity, name?, price?}
    total_amount = Float(required=True)
    payment_method = String(max_length=10, default=PaymentMethod.COD.value)
    delivery_address = Text(sanitize=False)  # JSON: address dict


def _resolve_lines(raw_lines):
    """Attach name and unit price snapshots to every requested line.

    Snapshots supplied with the request win; otherwise the current catalogue
    entry is used. Every product must exist either way.
    """
    resolved = []
    for line in raw_lines:
        product = fetch(Product, line["product_id"], label="Product")
        price = line.get("price", line.get("unit_price"))
        resolved.append(
            {
                "product_id": str(product.id),
                "name": line.get("name") or product.name,
                "unit_price": price if price is not None else product.price,
                "quantity": line["quantity"],
            }
        )
    return resolved


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        raw_lines = json.loads(command.items) if isinstance(command.items, str) else command.items
        validate_order_request(raw_lines, command.total_amount)

        fetch(Account, command.customer_id, label="Account")
        lines = _resolve_lines(raw_lines)

        delivery_address = json.loads(command.delivery_address) if command.delivery_address else None
        order = Order.place(
            customer_id=command.customer_id,
            lines=lines,
            total_amount=command.total_amount,
            payment_method=command.payment_method,
            delivery_address=delivery_address,
        )

        InventoryLedger(current_domain).reserve(order.stock_lines(), reference=f"order:{order.id}")
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(order.customer_id),
            line_count=len(lines),
            total_amount=order.total_amount,
        )
        return str(order.id)
