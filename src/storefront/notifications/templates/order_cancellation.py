"""Order cancellation — sent to the purchaser when an order is cancelled."""

from storefront.notifications.notification import NotificationType


class OrderCancellationTemplate:
    notification_type = NotificationType.ORDER_CANCELLATION.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        name = context.get("full_name", "there")
        cancelled_by = context.get("cancelled_by", "customer")
        by_line = "at your request" if cancelled_by == "customer" else "by our team"
        return {
            "subject": f"Order #{order_id} cancelled",
            "body": (
                f"Hi {name},\n\n"
                f"Your order #{order_id} was cancelled {by_line}.\n"
                f"Status: {context.get('previous_status', 'placed')} -> cancelled\n\n"
                "If you already paid, the amount will be refunded."
            ),
        }
