"""Template registry — maps NotificationType to template classes."""

from storefront.notifications.notification import NotificationType
from storefront.notifications.templates.cancellation_alert import CancellationAlertTemplate
from storefront.notifications.templates.new_order_alert import NewOrderAlertTemplate
from storefront.notifications.templates.order_cancellation import OrderCancellationTemplate
from storefront.notifications.templates.order_confirmation import OrderConfirmationTemplate
from storefront.notifications.templates.order_status_update import OrderStatusUpdateTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_CONFIRMATION.value: OrderConfirmationTemplate,
    NotificationType.NEW_ORDER_ALERT.value: NewOrderAlertTemplate,
    NotificationType.ORDER_CANCELLATION.value: OrderCancellationTemplate,
    NotificationType.CANCELLATION_ALERT.value: CancellationAlertTemplate,
    NotificationType.ORDER_STATUS_UPDATE.value: OrderStatusUpdateTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
