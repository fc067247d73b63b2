"""Application tests for manual stock adjustments."""

import pytest
from protean import current_domain
from storefront.exceptions import ForbiddenError, InsufficientStockError, NotFoundError
from storefront.inventory.adjustment import AdjustStock


def _adjust(product_id, delta, by):
    return current_domain.process(
        AdjustStock(product_id=str(product_id), delta=delta, adjusted_by=str(by.id)),
        asynchronous=False,
    )


class TestAdjustStock:
    def test_admin_adds_stock(self, admin, add_product, stock_of):
        product_id = add_product(stock=3)
        assert _adjust(product_id, 7, admin) == 10
        assert stock_of(product_id) == 10

    def test_admin_removes_stock(self, admin, add_product, stock_of):
        product_id = add_product(stock=3)
        assert _adjust(product_id, -3, admin) == 0

    def test_cannot_remove_more_than_available(self, admin, add_product, stock_of):
        product_id = add_product(stock=3)
        with pytest.raises(InsufficientStockError):
            _adjust(product_id, -4, admin)
        assert stock_of(product_id) == 3

    def test_customer_is_forbidden(self, customer, add_product, stock_of):
        product_id = add_product(stock=3)
        with pytest.raises(ForbiddenError):
            _adjust(product_id, 5, customer)
        assert stock_of(product_id) == 3

    def test_unknown_product(self, admin):
        with pytest.raises(NotFoundError):
            _adjust("ghost", 1, admin)
