"""Cancellation alert — sent to every administrator when an order is cancelled."""

from storefront.notifications.notification import NotificationType


class CancellationAlertTemplate:
    notification_type = NotificationType.CANCELLATION_ALERT.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        return {
            "subject": f"Order #{order_id} cancelled",
            "body": (
                f"Order #{order_id} was cancelled by the {context.get('cancelled_by', 'customer')}.\n"
                f"Previous status: {context.get('previous_status', 'placed')}\n"
                f"Total: {context.get('total_amount', 0.0):.2f}\n\n"
                "Stock for its items has been returned."
            ),
        }
