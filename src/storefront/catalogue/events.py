"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A product was listed in the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True, sanitize=False)
    price: Float(required=True)
    category: String(sanitize=False)
    added_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    """Descriptive details or the list price changed.

    Orders keep the name and price they captured when placed.
    """

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True, sanitize=False)
    price: Float(required=True)
    updated_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductReviewed:
    __version__ = 1

    product_id: Identifier(required=True)
    account_id: Identifier(required=True)
    rating: Integer(required=True)
    average_rating: Float(required=True)
    review_count: Integer(required=True)
    reviewed_at: DateTime(required=True)
