"""FastAPI endpoints for the product catalogue."""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_account
from storefront.api.schemas import (
    AddProductRequest,
    ProductIdResponse,
    ProductResponse,
    RatingResponse,
    ReviewRequest,
    ReviewResponse,
    StatusResponse,
    UpdateProductRequest,
)
from storefront.catalogue.management import AddProduct, RemoveProduct, UpdateProductDetails
from storefront.catalogue.product import Product
from storefront.catalogue.reviews import AddProductReview
from storefront.identity.account import Account
from storefront.inventory.stock import StockItem
from storefront.utils.lookup import fetch

router = APIRouter(prefix="/products", tags=["products"])


def _stock_for(product_id) -> int | None:
    try:
        return current_domain.repository_for(StockItem).get(str(product_id)).available
    except ObjectNotFoundError:
        return None


def _product_response(product: Product, with_reviews: bool = False) -> ProductResponse:
    reviews = []
    if with_reviews:
        reviews = [
            ReviewResponse(
                account_id=str(r.account_id),
                reviewer_name=r.reviewer_name,
                rating=r.rating,
                comment=r.comment,
            )
            for r in product.reviews
        ]
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        brand=product.brand,
        category=product.category,
        description=product.description,
        price=product.price,
        rating=product.rating or 0.0,
        stock=_stock_for(product.id),
        reviews=reviews,
    )


@router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest, caller: Account = Depends(current_account)) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        price=body.price,
        brand=body.brand,
        category=body.category,
        description=body.description,
        stock=body.stock,
        added_by=str(caller.id),
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@router.get("", response_model=list[ProductResponse])
async def search_products(keyword: str | None = None, category: str | None = None) -> list[ProductResponse]:
    products = current_domain.repository_for(Product).search(keyword=keyword, category=category)
    return [_product_response(p) for p in products]


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(fetch(Product, product_id), with_reviews=True)


@router.put("/{product_id}", response_model=StatusResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    caller: Account = Depends(current_account),
) -> StatusResponse:
    command = UpdateProductDetails(
        product_id=product_id,
        updated_by=str(caller.id),
        name=body.name,
        brand=body.brand,
        category=body.category,
        description=body.description,
        price=body.price,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.delete("/{product_id}", response_model=StatusResponse)
async def remove_product(product_id: str, caller: Account = Depends(current_account)) -> StatusResponse:
    current_domain.process(RemoveProduct(product_id=product_id, removed_by=str(caller.id)), asynchronous=False)
    return StatusResponse()


@router.post("/{product_id}/reviews", status_code=201, response_model=RatingResponse)
async def add_review(
    product_id: str,
    body: ReviewRequest,
    caller: Account = Depends(current_account),
) -> RatingResponse:
    command = AddProductReview(
        product_id=product_id,
        account_id=str(caller.id),
        rating=body.rating,
        comment=body.comment,
    )
    rating = current_domain.process(command, asynchronous=False)
    return RatingResponse(rating=rating)
