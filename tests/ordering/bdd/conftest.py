"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json

import pytest
from protean import current_domain
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from pytest_bdd import given, parsers, then, when
from storefront.inventory.adjustment import AdjustStock
from storefront.ordering.cancellation import CancelOrder, UpdateOrderStatus
from storefront.ordering.order import Order
from storefront.ordering.placement import PlaceOrder

_REFUSALS = (ValidationError, ObjectNotFoundError, InvalidOperationError)


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Product ids keyed by the label used in the feature file."""
    return {}


@pytest.fixture()
def outcome():
    """Container for the last order id and any refusal."""
    return {"order_id": None, "exc": None}


def _attempt(outcome, command):
    outcome["exc"] = None
    try:
        result = current_domain.process(command, asynchronous=False)
    except _REFUSALS as exc:
        outcome["exc"] = exc
        return None
    return result


def _place(customer, product_id, quantity, total):
    return PlaceOrder(
        customer_id=str(customer.id),
        items=json.dumps([{"product_id": product_id, "quantity": quantity, "price": total / quantity}]),
        total_amount=float(total),
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{label}" priced {price:d} with {stock:d} in stock'))
def _(products, add_product, label, price, stock):
    products[label] = add_product(name=f"Product {label}", price=float(price), stock=stock)


@given(parsers.cfparse('the stock of "{label}" is adjusted to {quantity:d}'))
def _(products, admin, stock_of, label, quantity):
    product_id = products[label]
    current_domain.process(
        AdjustStock(product_id=product_id, delta=quantity - stock_of(product_id), adjusted_by=str(admin.id)),
        asynchronous=False,
    )


@given(parsers.cfparse('the customer has ordered {quantity:d} of "{label}" totalling {total:d}'))
def _(products, outcome, customer, label, quantity, total):
    outcome["order_id"] = current_domain.process(_place(customer, products[label], quantity, total), asynchronous=False)


@given("the customer has cancelled the order")
def _(outcome, customer):
    current_domain.process(
        CancelOrder(order_id=outcome["order_id"], requested_by=str(customer.id)),
        asynchronous=False,
    )


@given(parsers.cfparse('the administrator has moved the order to "{status}"'))
def _(outcome, admin, status):
    current_domain.process(
        UpdateOrderStatus(order_id=outcome["order_id"], status=status, requested_by=str(admin.id)),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer orders {quantity:d} of "{label}" totalling {total:d}'))
def _(products, outcome, customer, label, quantity, total):
    outcome["order_id"] = _attempt(outcome, _place(customer, products[label], quantity, total))


@when("the customer orders nothing")
def _(outcome, customer):
    outcome["order_id"] = _attempt(
        outcome,
        PlaceOrder(customer_id=str(customer.id), items=json.dumps([]), total_amount=0.0),
    )


@when("the customer cancels the order")
def _(outcome, customer):
    _attempt(outcome, CancelOrder(order_id=outcome["order_id"], requested_by=str(customer.id)))


@when("another shopper cancels the order")
def _(outcome, register_account):
    stranger = register_account("Ravi Kumar", email="ravi@example.com")
    _attempt(outcome, CancelOrder(order_id=outcome["order_id"], requested_by=str(stranger.id)))


@when(parsers.cfparse('the administrator moves the order to "{status}"'))
def _(outcome, admin, status):
    _attempt(outcome, UpdateOrderStatus(order_id=outcome["order_id"], status=status, requested_by=str(admin.id)))


@when(parsers.cfparse('the customer moves the order to "{status}"'))
def _(outcome, customer, status):
    _attempt(outcome, UpdateOrderStatus(order_id=outcome["order_id"], status=status, requested_by=str(customer.id)))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the new order has status "{status}" and payment "{payment_status}"'))
def _(outcome, status, payment_status):
    assert outcome["exc"] is None
    order = current_domain.repository_for(Order).get(outcome["order_id"])
    assert order.status == status
    assert order.payment_status == payment_status


@then(parsers.cfparse('the order is "{status}"'))
def _(outcome, status):
    assert current_domain.repository_for(Order).get(outcome["order_id"]).status == status


@then(parsers.cfparse('the order is refused with "{error_name}"'))
def _(outcome, error_name):
    assert outcome["exc"] is not None
    assert type(outcome["exc"]).__name__ == error_name


@then(parsers.cfparse('the stock of "{label}" is {quantity:d}'))
def _(products, stock_of, label, quantity):
    assert stock_of(products[label]) == quantity


@then("no order is stored")
def _():
    assert current_domain.repository_for(Order).everything() == []


@then(parsers.cfparse('the customer receives an email about "{word}"'))
def _(email_adapter, customer, word):
    subjects = [email["subject"] for email in email_adapter.sent_to(customer.email)]
    assert any(word in subject for subject in subjects)


@then(parsers.cfparse('the customer is told the order moved from "{previous}" to "{new}"'))
def _(email_adapter, customer, outcome, previous, new):
    bodies = [email["body"] for email in email_adapter.sent_to(customer.email)]
    assert any(f"Order #{outcome['order_id']}: {previous} -> {new}" in body for body in bodies)
