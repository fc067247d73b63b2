"""Cart aggregate — the products a signed-in shopper intends to buy.

Each account has at most one cart and the cart shares the account's id.
A product appears on one line only; putting it in the cart again replaces
the line's quantity rather than adding to it. Nothing is reserved while an
item sits in the cart; stock is taken when the order is placed.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier, Integer, String

from storefront.cart.events import CartCleared, CartItemRemoved, CartItemSet
from storefront.domain import storefront


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    flavour = String(max_length=100, sanitize=False)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class Cart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open(cls, customer_id):
        now = datetime.now(UTC)
        return cls(id=str(customer_id), customer_id=str(customer_id), created_at=now, updated_at=now)

    def line_for(self, product_id) -> CartItem | None:
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def set_item(self, product_id, quantity: int, flavour=None):
        """Put ``quantity`` units of the product in the cart, replacing any earlier quantity."""
        now = datetime.now(UTC)
        existing = self.line_for(product_id)
        if existing:
            existing.quantity = quantity
            if flavour is not None:
                existing.flavour = flavour
        else:
            self.add_items(
                CartItem(
                    product_id=str(product_id),
                    flavour=flavour,
                    quantity=quantity,
                    added_at=now,
                )
            )

        self.updated_at = now
        self.raise_(
            CartItemSet(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=quantity,
                flavour=flavour,
                set_at=now,
            )
        )

    def remove_item(self, product_id):
        """Drop the product's line. Removing a product that is not in the cart changes nothing."""
        item = self.line_for(product_id)
        if item is None:
            return

        now = datetime.now(UTC)
        self.remove_items(item)
        self.updated_at = now
        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id), removed_at=now))

    def clear(self):
        for item in list(self.items):
            self.remove_items(item)

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(CartCleared(cart_id=str(self.id), cleared_at=now))
