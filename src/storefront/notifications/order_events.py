"""Notifications reacts to Order events.

OrderPlaced sends the purchaser a confirmation and every administrator a
new-order alert. OrderCancelled sends the purchaser a cancellation notice and
administrators an alert. OrderStatusChanged tells the purchaser about the
move. Handlers run after the order's unit of work has committed, so nothing
sent here can roll an order back, and nothing raised here reaches the caller.
"""

import json

import structlog
from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.notifications.dispatch import notify_administrators, notify_customer
from storefront.notifications.notification import NotificationType
from storefront.ordering.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from storefront.ordering.order import Order

logger = structlog.get_logger(__name__)


def _best_effort(send, *args, **kwargs):
    try:
        return send(*args, **kwargs)
    except Exception as exc:
        logger.error(
            "Notification dispatch crashed",
            dispatcher=send.__name__,
            error=str(exc),
            exc_info=True,
        )
        return []


@storefront.event_handler(part_of=Order)
class OrderNotificationsHandler:
    """Reacts to Order events to notify purchasers and administrators."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        context = {
            "order_id": str(event.order_id),
            "customer_id": str(event.customer_id),
            "items": json.loads(event.items) if event.items else [],
            "total_amount": event.total_amount,
            "payment_method": event.payment_method,
        }
        source = "Storefront.OrderPlaced.v1"
        _best_effort(notify_customer, event.customer_id, NotificationType.ORDER_CONFIRMATION.value, context, source)
        _best_effort(notify_administrators, NotificationType.NEW_ORDER_ALERT.value, context, source)

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        context = {
            "order_id": str(event.order_id),
            "customer_id": str(event.customer_id),
            "items": json.loads(event.items) if event.items else [],
            "total_amount": event.total_amount,
            "previous_status": event.previous_status,
            "cancelled_by": event.cancelled_by,
        }
        source = "Storefront.OrderCancelled.v1"
        _best_effort(notify_customer, event.customer_id, NotificationType.ORDER_CANCELLATION.value, context, source)
        _best_effort(notify_administrators, NotificationType.CANCELLATION_ALERT.value, context, source)

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        context = {
            "order_id": str(event.order_id),
            "previous_status": event.previous_status,
            "new_status": event.new_status,
        }
        _best_effort(
            notify_customer,
            event.customer_id,
            NotificationType.ORDER_STATUS_UPDATE.value,
            context,
            "Storefront.OrderStatusChanged.v1",
        )
