"""Shared BDD fixtures and step definitions for order scenarios."""

import pytest
from protean import current_domain
from protean.exceptions import InvalidStateError
from pytest_bdd import given, parsers, then, when
from support.factories import make_product

from storefront.catalogue.product.product import Product
from storefront.ordering.cart.cart import ShoppingCart
from storefront.ordering.cart.items import AddToCart
from storefront.ordering.order.order import Order
from storefront.ordering.order.placement import PlaceOrder
from storefront.ordering.order.queries import track_customer_order
from storefront.ordering.order.status import UpdateOrderStatus

SELLER_ID = "seller-bdd"


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer_id():
    return "cust-bdd"


@pytest.fixture()
def products():
    """Products created by the scenario, keyed by name."""
    return {}


@pytest.fixture()
def outcome():
    """Container for the last command's result or captured error."""
    return {"result": None, "error": None}


def _run(outcome, command):
    try:
        outcome["result"] = current_domain.process(command, asynchronous=False)
        outcome["error"] = None
    except InvalidStateError as exc:
        outcome["error"] = exc
    return outcome["result"]


def _cart(customer_id):
    return current_domain.repository_for(ShoppingCart).find_for_customer(customer_id)


def _place(customer_id, payment_method, outcome):
    command = PlaceOrder(
        customer_id=customer_id,
        cart_id=str(_cart(customer_id).id),
        shipping_address="12 MG Road",
        payment_method=payment_method,
    )
    return _run(outcome, command)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def _(products, name, price, stock):
    products[name] = make_product(seller_id=SELLER_ID, name=name, price=price, stock=stock)


@given(parsers.cfparse('the customer has {quantity:d} of "{name}" in the cart'))
@given(parsers.cfparse('the customer has {quantity:d} more of "{name}" in the cart'))
def _(products, customer_id, quantity, name):
    current_domain.process(
        AddToCart(customer_id=customer_id, product_id=str(products[name].id), quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('the customer placed the order paying by "{payment_method}"'), target_fixture="order_id")
def _(customer_id, payment_method, outcome):
    return _place(customer_id, payment_method, outcome)["orderId"]


@given(parsers.cfparse('the seller moved the order to "{status}"'))
def _(order_id, status, outcome):
    _run(outcome, UpdateOrderStatus(seller_id=SELLER_ID, order_id=order_id, status=status))
    assert outcome["error"] is None


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer places the order paying by "{payment_method}"'), target_fixture="order_id")
def _(customer_id, payment_method, outcome):
    result = _place(customer_id, payment_method, outcome)
    return result["orderId"] if outcome["error"] is None else None


@when(parsers.cfparse('the seller moves the order to "{status}"'))
def _(order_id, status, outcome):
    _run(outcome, UpdateOrderStatus(seller_id=SELLER_ID, order_id=order_id, status=status))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the request is rejected as a conflict")
def _(outcome):
    assert isinstance(outcome["error"], InvalidStateError)


@then(parsers.cfparse("the order total is {total:f}"))
def _(order_id, total):
    assert current_domain.repository_for(Order).get(order_id).total_amount == total


@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).order_status == status


@then(parsers.cfparse('the payment status is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).payment_status == status


@then(parsers.cfparse('"{name}" has {stock:d} left in stock'))
def _(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name].id).stock == stock


@then("the cart is empty")
def _(customer_id):
    assert _cart(customer_id).is_empty


@then(parsers.cfparse("the cart holds {count:d} items"))
def _(customer_id, count):
    assert sum(item.quantity for item in _cart(customer_id).items) == count


@then(parsers.cfparse('the tracking steps are "{statuses}"'))
def _(customer_id, order_id, statuses):
    steps = track_customer_order(customer_id, order_id)["trackingSteps"]
    assert [step["status"] for step in steps] == [s.strip() for s in statuses.split(",")]
