"""Storefront error taxonomy.

Built on Protean's exceptions so that the framework's FastAPI integration and
unit of work treat them like their parents:

- ``ValidationError`` (Protean's own) for malformed input.
- ``NotFoundError`` when an order, product, stock record or account is unknown.
- ``InsufficientStockError`` when a requested quantity exceeds current stock.
- ``ForbiddenError`` when the caller is neither the owner nor an administrator.
- ``InvalidTransitionError`` when the order's status forbids the operation.
- ``NotificationDeliveryError`` for a failed notification. It is logged by the
  notifications package and never surfaces to callers.
"""

from protean.exceptions import (
    InvalidOperationError,
    ObjectNotFoundError,
    ValidationError,
)

__all__ = [
    "ForbiddenError",
    "InsufficientStockError",
    "InvalidTransitionError",
    "NotFoundError",
    "NotificationDeliveryError",
    "ValidationError",
]


class NotFoundError(ObjectNotFoundError):
    """A referenced order, product, stock record or account does not exist."""


class InsufficientStockError(ValidationError):
    """A requested quantity exceeds the product's current stock."""


class InvalidTransitionError(ValidationError):
    """The order's current status does not allow the requested change."""


class ForbiddenError(InvalidOperationError):
    """The caller is not allowed to act on the resource."""


class NotificationDeliveryError(Exception):
    """A notification could not be handed to its channel."""
