"""Order aggregate — the core of the Order Lifecycle Manager.

An order captures what a purchaser bought at the moment of purchase: line
snapshots of product name and unit price, the amount charged, where it goes
and how it is paid for. Line items never change after placement.

Status lattice:
    PLACED → PROCESSING → SHIPPED → DELIVERED   (steps may be skipped)
    PLACED | PROCESSING → CANCELLED              (restocks every line)

Status only moves forward. DELIVERED and CANCELLED are terminal, and an
order stops being cancellable once it has shipped.
"""

import json
import math
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from storefront.domain import storefront
from storefront.exceptions import ForbiddenError, InvalidTransitionError
from storefront.ordering.events import (
    OrderCancelled,
    OrderPaid,
    OrderPlaced,
    OrderStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PLACED = "placed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    COD = "cod"
    UPI = "upi"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"


class CancellationActor(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


# Forward-only lattice for administrator status updates
_FORWARD_TRANSITIONS = {
    OrderStatus.PLACED: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.DELIVERED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_CANCELLABLE_STATES = {OrderStatus.PLACED, OrderStatus.PROCESSING}


def validate_order_request(lines, total_amount):
    """Reject requests that can never become an order.

    Runs before any lookup so malformed requests fail without touching the
    catalogue or the ledger.
    """
    if not isinstance(lines, list):
        raise ValidationError({"items": ["Order items must be a list"]})
    if not lines:
        raise ValidationError({"items": ["No order items"]})

    for line in lines:
        if not isinstance(line, dict):
            raise ValidationError({"items": ["Every order item must be an object"]})
        if not line.get("product_id"):
            raise ValidationError({"items": ["Every item needs a product_id"]})
        quantity = line.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"items": [f"Quantity for product {line['product_id']} must be a positive integer"]})

    if isinstance(total_amount, bool) or not isinstance(total_amount, (int, float)) or not math.isfinite(total_amount):
        raise ValidationError({"total_amount": ["Total amount must be a finite number"]})


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order is delivered, frozen at placement."""

    street = String(max_length=255, sanitize=False)
    city = String(max_length=100, sanitize=False)
    state = String(max_length=100, sanitize=False)
    postal_code = String(max_length=20, sanitize=False)
    country = String(max_length=100, default="India", sanitize=False)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased line: product reference plus the name and price paid."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255, sanitize=False)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)

    def to_snapshot(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "name": self.name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True)
    delivery_address = ValueObject(DeliveryAddress)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    status = String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    cancelled_by = String(choices=CancellationActor)
    paid_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        lines,
        total_amount,
        payment_method=PaymentMethod.COD.value,
        delivery_address=None,
    ):
        """Create a placed order from resolved line snapshots.

        Args:
            customer_id: The purchasing account.
            lines: Dicts with product_id, name, unit_price and quantity.
            total_amount: Amount charged, accepted as given.
            payment_method: "cod" or "upi".
            delivery_address: Optional dict with street, city, state,
                              postal_code and country.
        """
        validate_order_request(lines, total_amount)

        now = datetime.now(UTC)
        order = cls(
            customer_id=str(customer_id),
            total_amount=float(total_amount),
            payment_method=payment_method or PaymentMethod.COD.value,
            delivery_address=DeliveryAddress(**delivery_address) if delivery_address else None,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(
                OrderItem(
                    product_id=str(line["product_id"]),
                    name=line["name"],
                    unit_price=line["unit_price"],
                    quantity=line["quantity"],
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(order.customer_id),
                items=json.dumps(order.line_snapshots()),
                total_amount=order.total_amount,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_snapshots(self) -> list[dict]:
        return [item.to_snapshot() for item in self.items]

    def stock_lines(self) -> list[tuple[str, int]]:
        """(product_id, quantity) pairs as the Inventory Ledger expects them."""
        return [(str(item.product_id), item.quantity) for item in self.items]

    def is_owned_by(self, account_id) -> bool:
        return account_id is not None and str(account_id) == str(self.customer_id)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def mark_paid(self, payment_method=None):
        """Record payment. Allowed in any status; optionally corrects the method."""
        if payment_method:
            self.payment_method = payment_method

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        self.paid_at = now
        self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                payment_method=self.payment_method,
                paid_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def cancel(self, actor_id, actor_is_admin=False):
        """Cancel on behalf of the owner or an administrator.

        The caller restocks the lines in the same unit of work.
        """
        owner = self.is_owned_by(actor_id)
        if not owner and not actor_is_admin:
            raise ForbiddenError({"_entity": ["Not authorized to cancel this order"]})

        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise InvalidTransitionError({"status": [f"Cannot cancel an order that is {current.value}"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_by = (CancellationActor.CUSTOMER if owner else CancellationActor.ADMIN).value
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                items=json.dumps(self.line_snapshots()),
                total_amount=self.total_amount,
                previous_status=current.value,
                cancelled_by=self.cancelled_by,
                cancelled_at=now,
            )
        )

    def update_status(self, new_status) -> bool:
        """Move the order forward. Returns False when the status is unchanged."""
        try:
            target = OrderStatus(new_status)
        except ValueError as exc:
            raise InvalidTransitionError({"status": [f"Unknown order status {new_status!r}"]}) from exc

        current = OrderStatus(self.status)
        if target == current:
            return False

        if target == OrderStatus.CANCELLED:
            raise InvalidTransitionError({"status": ["Orders are cancelled through cancellation, not status updates"]})
        if target not in _FORWARD_TRANSITIONS[current]:
            raise InvalidTransitionError({"status": [f"Cannot move an order from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True
