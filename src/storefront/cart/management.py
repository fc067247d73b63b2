"""Cart management — commands and handler.

Adding to the cart checks the product exists and that current stock covers
the requested quantity. The check does not reserve anything.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.exceptions import InsufficientStockError
from storefront.inventory.ledger import InventoryLedger
from storefront.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)
    flavour = String(max_length=100, sanitize=False)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


@storefront.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = fetch(Product, command.product_id, label="Product")
        quantity = command.quantity or 1

        availability = InventoryLedger(current_domain).check_availability(product.id, quantity)
        if not availability.available:
            raise InsufficientStockError(
                {
                    "stock": [
                        f"Insufficient stock for product {product.id}: "
                        f"requested {quantity}, available {availability.current_stock}"
                    ]
                }
            )

        repo = current_domain.repository_for(Cart)
        try:
            cart = repo.get(str(command.customer_id))
        except ObjectNotFoundError:
            cart = Cart.open(command.customer_id)

        cart.set_item(product.id, quantity, flavour=command.flavour)
        repo.add(cart)

        logger.info(
            "Cart item set",
            customer_id=str(command.customer_id),
            product_id=str(product.id),
            quantity=quantity,
        )
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = fetch(Cart, command.customer_id, label="Cart")
        cart.remove_item(command.product_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        try:
            cart = repo.get(str(command.customer_id))
        except ObjectNotFoundError:
            return

        cart.clear()
        repo.add(cart)
