"""New order alert — sent to every administrator when an order is placed."""

from storefront.notifications.notification import NotificationType


class NewOrderAlertTemplate:
    notification_type = NotificationType.NEW_ORDER_ALERT.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        customer = context.get("customer_email") or context.get("customer_id", "unknown")
        item_count = sum(item["quantity"] for item in context.get("items", []))
        return {
            "subject": f"New order #{order_id}",
            "body": (
                f"Order #{order_id} was placed by {customer}.\n\n"
                f"Items: {item_count}\n"
                f"Total: {context.get('total_amount', 0.0):.2f}\n"
                f"Payment method: {str(context.get('payment_method', 'cod')).upper()}"
            ),
        }
