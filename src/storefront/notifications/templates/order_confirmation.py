"""Order confirmation — sent to the purchaser when an order is placed."""

from storefront.notifications.notification import NotificationType


class OrderConfirmationTemplate:
    notification_type = NotificationType.ORDER_CONFIRMATION.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        name = context.get("full_name", "there")
        total_amount = context.get("total_amount", 0.0)
        payment_method = str(context.get("payment_method", "cod")).upper()
        lines = "\n".join(
            f"  - {item['name']} x {item['quantity']} @ {item['unit_price']:.2f}" for item in context.get("items", [])
        )
        return {
            "subject": f"Order #{order_id} placed",
            "body": (
                f"Hi {name},\n\n"
                f"Thank you for your order #{order_id}.\n\n"
                f"{lines}\n\n"
                f"Total: {total_amount:.2f}\n"
                f"Payment method: {payment_method}\n\n"
                "We'll let you know when it ships."
            ),
        }
