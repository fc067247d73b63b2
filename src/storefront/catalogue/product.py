"""Product aggregate — the storefront's Catalog Store.

Products carry the descriptive details shown to shoppers and the list price
that orders snapshot at placement. Stock is not kept here; it lives in the
Inventory Ledger under the product's id.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.catalogue.events import ProductAdded, ProductDetailsUpdated, ProductReviewed
from storefront.domain import storefront

_UNSET = object()


@storefront.entity(part_of="Product")
class Review:
    """One account's rating of a product. An account reviews a product once."""

    account_id = Identifier(required=True)
    reviewer_name = String(required=True, max_length=100, sanitize=False)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text()
    reviewed_at = DateTime()


@storefront.aggregate
class Product:
    name = String(required=True, max_length=255, sanitize=False)
    brand = String(max_length=100, sanitize=False)
    category = String(max_length=100, sanitize=False)
    description = Text(sanitize=False)
    price = Float(required=True, min_value=0.0)
    rating = Float(default=0.0)
    reviews = HasMany(Review)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def add(cls, name, price, brand=None, category=None, description=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            price=price,
            brand=brand,
            category=category,
            description=description,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                category=product.category,
                added_at=now,
            )
        )
        return product

    def update_details(
        self,
        name=_UNSET,
        brand=_UNSET,
        category=_UNSET,
        description=_UNSET,
        price=_UNSET,
    ):
        """Apply a partial update; omitted fields keep their current value."""
        if name is not _UNSET:
            self.name = name
        if brand is not _UNSET:
            self.brand = brand
        if category is not _UNSET:
            self.category = category
        if description is not _UNSET:
            self.description = description
        if price is not _UNSET:
            self.price = price

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                name=self.name,
                price=self.price,
                updated_at=now,
            )
        )

    def add_review(self, account_id, reviewer_name, rating, comment=None):
        if any(str(r.account_id) == str(account_id) for r in self.reviews):
            raise ValidationError({"review": ["Product already reviewed"]})

        now = datetime.now(UTC)
        self.add_reviews(
            Review(
                account_id=str(account_id),
                reviewer_name=reviewer_name,
                rating=rating,
                comment=comment,
                reviewed_at=now,
            )
        )
        self.rating = sum(r.rating for r in self.reviews) / len(self.reviews)
        self.updated_at = now
        self.raise_(
            ProductReviewed(
                product_id=str(self.id),
                account_id=str(account_id),
                rating=rating,
                average_rating=self.rating,
                review_count=len(self.reviews),
                reviewed_at=now,
            )
        )
