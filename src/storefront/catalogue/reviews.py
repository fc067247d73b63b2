"""Product reviews — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.identity.account import Account
from storefront.utils.lookup import fetch


@storefront.command(part_of="Product")
class AddProductReview:
    product_id = Identifier(required=True)
    account_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text()


@storefront.command_handler(part_of=Product)
class AddProductReviewHandler:
    @handle(AddProductReview)
    def add_review(self, command):
        reviewer = fetch(Account, command.account_id)
        product = fetch(Product, command.product_id)

        product.add_review(
            account_id=reviewer.id,
            reviewer_name=reviewer.full_name,
            rating=command.rating,
            comment=command.comment,
        )
        current_domain.repository_for(Product).add(product)
        return product.rating
