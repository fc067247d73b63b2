"""Notification aggregate — a record of one message to one recipient.

Notifications are created by the order event handlers, handed to a channel
adapter straight away and kept as an audit trail of what was sent and what
failed. Delivery is best effort: a failed notification is recorded and
logged, never retried or raised to the operation that triggered it.

State Machine:
    PENDING → SENT
    PENDING → FAILED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from storefront.domain import storefront
from storefront.notifications.events import NotificationFailed, NotificationSent


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    ORDER_CONFIRMATION = "OrderConfirmation"
    NEW_ORDER_ALERT = "NewOrderAlert"
    ORDER_CANCELLATION = "OrderCancellation"
    CANCELLATION_ALERT = "CancellationAlert"
    ORDER_STATUS_UPDATE = "OrderStatusUpdate"


class NotificationChannel(Enum):
    EMAIL = "Email"


class NotificationStatus(Enum):
    PENDING = "Pending"
    SENT = "Sent"
    FAILED = "Failed"


class RecipientType(Enum):
    CUSTOMER = "Customer"
    ADMIN = "Admin"


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Notification:
    recipient_id: Identifier()
    recipient_address: String(max_length=254)
    recipient_type: String(choices=RecipientType, default=RecipientType.CUSTOMER.value)

    notification_type: String(choices=NotificationType, required=True)
    channel: String(choices=NotificationChannel, default=NotificationChannel.EMAIL.value)

    subject: String(max_length=500, sanitize=False)
    body: Text(required=True, sanitize=False)

    # Correlation with the order event that triggered it
    order_id: Identifier()
    source_event_type: String(max_length=200)

    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    message_id: String(max_length=255)
    failure_reason: String(max_length=500)
    sent_at: DateTime()
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(
        cls,
        recipient_id,
        recipient_address,
        notification_type,
        subject,
        body,
        recipient_type=RecipientType.CUSTOMER.value,
        order_id=None,
        source_event_type=None,
    ):
        now = datetime.now(UTC)
        return cls(
            recipient_id=recipient_id,
            recipient_address=recipient_address,
            recipient_type=recipient_type,
            notification_type=notification_type,
            subject=subject,
            body=body,
            order_id=order_id,
            source_event_type=source_event_type,
            status=NotificationStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

    def _assert_pending(self):
        if NotificationStatus(self.status) != NotificationStatus.PENDING:
            raise ValidationError({"status": [f"Notification already {self.status}"]})

    def mark_sent(self, message_id=None):
        self._assert_pending()

        now = datetime.now(UTC)
        self.status = NotificationStatus.SENT.value
        self.message_id = message_id
        self.sent_at = now
        self.updated_at = now
        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                notification_type=self.notification_type,
                channel=self.channel,
                sent_at=now,
            )
        )

    def mark_failed(self, reason):
        self._assert_pending()

        now = datetime.now(UTC)
        self.status = NotificationStatus.FAILED.value
        self.failure_reason = (reason or "Unknown delivery error")[:500]
        self.updated_at = now
        self.raise_(
            NotificationFailed(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id) if self.recipient_id else None,
                notification_type=self.notification_type,
                channel=self.channel,
                reason=self.failure_reason,
                failed_at=now,
            )
        )
