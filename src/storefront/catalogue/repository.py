"""Repository for the Product aggregate."""

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.repository(part_of=Product)
class ProductRepository:
    def search(self, keyword: str | None = None, category: str | None = None) -> list[Product]:
        """Products whose name contains ``keyword`` and whose category is ``category``.

        Both filters ignore case and either may be omitted.
        """
        query = self._dao.query
        if keyword:
            query = query.filter(name__icontains=keyword)
        if category:
            query = query.filter(category__iexact=category)
        return query.order_by("name").all().items
