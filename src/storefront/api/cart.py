"""FastAPI endpoints for the caller's cart."""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_account
from storefront.api.schemas import CartItemRequest, CartItemResponse, CartResponse, StatusResponse
from storefront.cart.cart import Cart
from storefront.cart.management import AddToCart, ClearCart, RemoveFromCart
from storefront.catalogue.product import Product
from storefront.identity.account import Account

router = APIRouter(prefix="/cart", tags=["cart"])


def _item_response(item) -> CartItemResponse:
    # Products removed from the catalogue stay in the cart without details.
    try:
        product = current_domain.repository_for(Product).get(str(item.product_id))
    except ObjectNotFoundError:
        product = None
    return CartItemResponse(
        product_id=str(item.product_id),
        quantity=item.quantity,
        flavour=item.flavour,
        name=product.name if product else None,
        price=product.price if product else None,
    )


def _cart_response(customer_id: str) -> CartResponse:
    try:
        cart = current_domain.repository_for(Cart).get(customer_id)
    except ObjectNotFoundError:
        return CartResponse(customer_id=customer_id, items=[])
    return CartResponse(customer_id=customer_id, items=[_item_response(i) for i in cart.items])


@router.get("", response_model=CartResponse)
async def get_cart(caller: Account = Depends(current_account)) -> CartResponse:
    return _cart_response(str(caller.id))


@router.post("", response_model=CartResponse)
async def add_to_cart(body: CartItemRequest, caller: Account = Depends(current_account)) -> CartResponse:
    command = AddToCart(
        customer_id=str(caller.id),
        product_id=body.product_id,
        quantity=body.quantity,
        flavour=body.flavour,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(str(caller.id))


@router.delete("", response_model=StatusResponse)
async def clear_cart(caller: Account = Depends(current_account)) -> StatusResponse:
    current_domain.process(ClearCart(customer_id=str(caller.id)), asynchronous=False)
    return StatusResponse()


@router.delete("/{product_id}", response_model=CartResponse)
async def remove_from_cart(product_id: str, caller: Account = Depends(current_account)) -> CartResponse:
    current_domain.process(RemoveFromCart(customer_id=str(caller.id), product_id=product_id), asynchronous=False)
    return _cart_response(str(caller.id))
