"""Best-effort notification delivery.

Renders a template, records a Notification, hands the message to the email
channel and marks the record sent or failed. Nothing here raises: every
failure is captured as a ``NotificationDeliveryError``, logged and recorded
on the notification.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.exceptions import NotificationDeliveryError
from storefront.identity.account import Account
from storefront.notifications.channel import get_channel
from storefront.notifications.notification import (
    Notification,
    NotificationChannel,
    RecipientType,
)
from storefront.notifications.templates import get_template

logger = structlog.get_logger(__name__)


def _send(notification: Notification) -> None:
    try:
        adapter = get_channel(notification.channel)
        result = adapter.send(
            to=notification.recipient_address,
            subject=notification.subject or "",
            body=notification.body,
        )
    except Exception as exc:
        raise NotificationDeliveryError(f"{type(exc).__name__}: {exc}") from exc

    if result.get("status") != "sent":
        raise NotificationDeliveryError(result.get("error", "Unknown dispatch error"))
    notification.mark_sent(message_id=result.get("message_id"))


def deliver(
    account: Account,
    notification_type: str,
    context: dict,
    recipient_type: str = RecipientType.CUSTOMER.value,
    source_event_type: str | None = None,
) -> Notification:
    """Send one templated email to an account and record the outcome."""
    rendered = get_template(notification_type).render({**context, "full_name": account.full_name})
    notification = Notification.create(
        recipient_id=str(account.id),
        recipient_address=account.email,
        notification_type=notification_type,
        subject=rendered.get("subject"),
        body=rendered["body"],
        recipient_type=recipient_type,
        order_id=context.get("order_id"),
        source_event_type=source_event_type,
    )

    try:
        _send(notification)
    except NotificationDeliveryError as exc:
        notification.mark_failed(str(exc))
        logger.warning(
            "Notification delivery failed",
            notification_type=notification_type,
            recipient_id=str(account.id),
            order_id=context.get("order_id"),
            error=str(exc),
        )

    current_domain.repository_for(Notification).add(notification)
    return notification


def notify_customer(customer_id, notification_type: str, context: dict, source_event_type=None) -> list[str]:
    """Notify the purchaser; returns the ids of the notifications recorded."""
    try:
        account = current_domain.repository_for(Account).get(str(customer_id))
    except ObjectNotFoundError:
        logger.warning(
            "Notification skipped, recipient account not found",
            error=str(NotificationDeliveryError(f"Account {customer_id} not found")),
            notification_type=notification_type,
            customer_id=str(customer_id),
        )
        return []

    return [str(deliver(account, notification_type, context, source_event_type=source_event_type).id)]


def notify_administrators(notification_type: str, context: dict, source_event_type=None) -> list[str]:
    """Broadcast to every administrator. One recipient's failure never stops the rest."""
    admins = current_domain.repository_for(Account).administrators()
    if not admins:
        logger.info("No administrators to notify", notification_type=notification_type)
        return []

    notification_ids = []
    for admin in admins:
        notification = deliver(
            admin,
            notification_type,
            context,
            recipient_type=RecipientType.ADMIN.value,
            source_event_type=source_event_type,
        )
        notification_ids.append(str(notification.id))

    logger.info(
        "Administrators notified",
        notification_type=notification_type,
        channel=NotificationChannel.EMAIL.value,
        count=len(notification_ids),
    )
    return notification_ids
