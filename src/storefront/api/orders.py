"""FastAPI endpoints for the Order Lifecycle Manager."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_account, require_admin
from storefront.api.schemas import (
    AddressSchema,
    MarkPaidRequest,
    OrderIdResponse,
    OrderItemResponse,
    OrderResponse,
    OrderStatusResponse,
    PlaceOrderRequest,
    UpdateStatusRequest,
)
from storefront.exceptions import ForbiddenError
from storefront.identity.account import Account
from storefront.ordering.cancellation import CancelOrder, UpdateOrderStatus
from storefront.ordering.order import Order
from storefront.ordering.payment import MarkOrderPaid
from storefront.ordering.placement import PlaceOrder
from storefront.utils.lookup import fetch

router = APIRouter(prefix="/orders", tags=["orders"])


def _order_response(order: Order) -> OrderResponse:
    address = None
    if order.delivery_address:
        address = AddressSchema(
            street=order.delivery_address.street,
            city=order.delivery_address.city,
            state=order.delivery_address.state,
            postal_code=order.delivery_address.postal_code,
            country=order.delivery_address.country,
        )
    return OrderResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        items=[OrderItemResponse(**snapshot) for snapshot in order.line_snapshots()],
        total_amount=order.total_amount,
        delivery_address=address,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        status=order.status,
        cancelled_by=order.cancelled_by,
        created_at=order.created_at.isoformat() if order.created_at else None,
        updated_at=order.updated_at.isoformat() if order.updated_at else None,
    )


def _status_response(order_id: str) -> OrderStatusResponse:
    order = fetch(Order, order_id, label="Order")
    return OrderStatusResponse(order_id=order_id, status=order.status, payment_status=order.payment_status)


@router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest, caller: Account = Depends(current_account)) -> OrderIdResponse:
    command = PlaceOrder(
        customer_id=str(caller.id),
        items=json.dumps([line.model_dump(exclude_none=True) for line in body.items]),
        total_amount=body.total_amount,
        payment_method=body.payment_method,
        delivery_address=json.dumps(body.delivery_address.model_dump()) if body.delivery_address else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@router.get("/mine", response_model=list[OrderResponse])
async def my_orders(caller: Account = Depends(current_account)) -> list[OrderResponse]:
    return [_order_response(o) for o in current_domain.repository_for(Order).for_customer(caller.id)]


@router.get("", response_model=list[OrderResponse])
async def all_orders(caller: Account = Depends(current_account)) -> list[OrderResponse]:
    require_admin(caller)
    return [_order_response(o) for o in current_domain.repository_for(Order).everything()]


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, caller: Account = Depends(current_account)) -> OrderResponse:
    order = fetch(Order, order_id, label="Order")
    if not order.is_owned_by(caller.id) and not caller.is_admin:
        raise ForbiddenError({"_entity": ["Not authorized to view this order"]})
    return _order_response(order)


@router.put("/{order_id}/pay", response_model=OrderStatusResponse)
async def mark_paid(
    order_id: str,
    body: MarkPaidRequest | None = None,
    caller: Account = Depends(current_account),
) -> OrderStatusResponse:
    command = MarkOrderPaid(
        order_id=order_id,
        payment_method=body.payment_method if body else None,
    )
    current_domain.process(command, asynchronous=False)
    return _status_response(order_id)


@router.put("/{order_id}/cancel", response_model=OrderStatusResponse)
async def cancel_order(order_id: str, caller: Account = Depends(current_account)) -> OrderStatusResponse:
    command = CancelOrder(order_id=order_id, requested_by=str(caller.id))
    current_domain.process(command, asynchronous=False)
    return _status_response(order_id)


@router.put("/{order_id}/status", response_model=OrderStatusResponse)
async def update_status(
    order_id: str,
    body: UpdateStatusRequest,
    caller: Account = Depends(current_account),
) -> OrderStatusResponse:
    command = UpdateOrderStatus(order_id=order_id, status=body.status, requested_by=str(caller.id))
    current_domain.process(command, asynchronous=False)
    return _status_response(order_id)
