"""Catalogue management — listing products and editing their details."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import _UNSET, Product
from storefront.domain import storefront
from storefront.exceptions import ForbiddenError
from storefront.identity.account import Account
from storefront.inventory.ledger import InventoryLedger
from storefront.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class AddProduct:
    """List a product and open its stock record with the given quantity."""

    name = String(required=True, max_length=255, sanitize=False)
    price = Float(required=True, min_value=0.0)
    brand = String(max_length=100, sanitize=False)
    category = String(max_length=100, sanitize=False)
    description = Text(sanitize=False)
    stock = Integer(default=0, min_value=0)
    added_by = Identifier(required=True)


@storefront.command(part_of="Product")
class UpdateProductDetails:
    product_id = Identifier(required=True)
    updated_by = Identifier(required=True)
    name = String(max_length=255, sanitize=False)
    brand = String(max_length=100, sanitize=False)
    category = String(max_length=100, sanitize=False)
    description = Text(sanitize=False)
    price = Float(min_value=0.0)


@storefront.command(part_of="Product")
class RemoveProduct:
    """Take a product off the catalogue together with its stock record."""

    product_id = Identifier(required=True)
    removed_by = Identifier(required=True)


def _require_admin(account_id, action):
    if not current_domain.repository_for(Account).is_admin(account_id):
        raise ForbiddenError({"_entity": [f"Only administrators can {action}"]})


@storefront.command_handler(part_of=Product)
class CatalogueManagementHandler:
    @handle(AddProduct)
    def add_product(self, command):
        _require_admin(command.added_by, "add products")

        product = Product.add(
            name=command.name,
            price=command.price,
            brand=command.brand,
            category=command.category,
            description=command.description,
        )
        current_domain.repository_for(Product).add(product)
        InventoryLedger(current_domain).open(product.id, command.stock or 0)
        return str(product.id)

    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        _require_admin(command.updated_by, "edit products")

        product = fetch(Product, command.product_id)
        changes = {
            field: getattr(command, field)
            for field in ("name", "brand", "category", "description", "price")
            if getattr(command, field) is not None
        }
        product.update_details(**changes)
        current_domain.repository_for(Product).add(product)

    @handle(RemoveProduct)
    def remove_product(self, command):
        _require_admin(command.removed_by, "remove products")

        product = fetch(Product, command.product_id)
        current_domain.repository_for(Product)._dao.delete(product)
        InventoryLedger(current_domain).close(product.id)
        logger.info("Product removed", product_id=str(product.id), removed_by=str(command.removed_by))
