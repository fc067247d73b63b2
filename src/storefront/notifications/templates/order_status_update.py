"""Order status update — sent to the purchaser when an administrator moves the order."""

from storefront.notifications.notification import NotificationType

_STATUS_MESSAGES = {
    "processing": "We're preparing your order.",
    "shipped": "Your order is on its way.",
    "delivered": "Your order has been delivered. Enjoy!",
}


class OrderStatusUpdateTemplate:
    notification_type = NotificationType.ORDER_STATUS_UPDATE.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        previous_status = context.get("previous_status", "placed")
        new_status = context.get("new_status", "processing")
        return {
            "subject": f"Order #{order_id} is now {new_status}",
            "body": (
                f"Hi {context.get('full_name', 'there')},\n\n"
                f"Order #{order_id}: {previous_status} -> {new_status}\n\n"
                f"{_STATUS_MESSAGES.get(new_status, '')}"
            ).rstrip(),
        }
