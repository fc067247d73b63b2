"""FastAPI endpoints for the Inventory Ledger."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_account
from storefront.api.schemas import AvailabilityResponse, StockAdjustmentRequest, StockResponse
from storefront.identity.account import Account
from storefront.inventory.adjustment import AdjustStock
from storefront.inventory.ledger import InventoryLedger

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/{product_id}", response_model=AvailabilityResponse)
async def check_availability(product_id: str, quantity: int = Query(1, ge=1)) -> AvailabilityResponse:
    availability = InventoryLedger(current_domain).check_availability(product_id, quantity)
    return AvailabilityResponse(
        product_id=product_id,
        available=availability.available,
        current_stock=availability.current_stock,
    )


@router.post("/{product_id}/adjustments", response_model=StockResponse)
async def adjust_stock(
    product_id: str,
    body: StockAdjustmentRequest,
    caller: Account = Depends(current_account),
) -> StockResponse:
    command = AdjustStock(product_id=product_id, delta=body.delta, adjusted_by=str(caller.id))
    new_stock = current_domain.process(command, asynchronous=False)
    return StockResponse(product_id=product_id, current_stock=new_stock)
