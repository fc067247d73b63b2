"""Storefront domain — order placement and fulfillment.

A single bounded context holding the Account Store, the Catalog Store, the
Inventory Ledger, the Order Lifecycle Manager and Notification Dispatch.
Orders and stock records share one domain so that placing or cancelling an
order commits the order and its stock movements in one unit of work.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
