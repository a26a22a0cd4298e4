"""Application tests for PlaceOrder and the stock ledger."""

import threading
import time

import pytest
from protean import UnitOfWork, current_domain
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from support.factories import make_cart, make_product

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.cart.cart import ShoppingCart
from storefront.ordering.order import placement
from storefront.ordering.order.order import Order
from storefront.ordering.order.placement import PlaceOrder
from storefront.ordering.order.stock import StockLedger, requested_quantities
from storefront.shared.errors import InsufficientStockError


def _place(customer_id, cart, payment_method="COD", address="X"):
    return current_domain.process(
        PlaceOrder(
            customer_id=customer_id,
            cart_id=str(cart.id),
            shipping_address=address,
            payment_method=payment_method,
        ),
        asynchronous=False,
    )


def _stock(product):
    return current_domain.repository_for(Product).get(product.id).stock


def _all_orders():
    return current_domain.repository_for(Order)._dao.query.all().items


class TestPlaceOrder:
    def test_cod_order_from_single_line_cart(self):
        product = make_product(price=10.0, stock=5)
        cart = make_cart("cust-001", (product, 2))

        result = _place("cust-001", cart)

        order = current_domain.repository_for(Order).get(result["orderId"])
        assert order.total_amount == 20.0
        assert order.order_status == "Placed"
        assert order.payment_status == "Pending"
        assert order.shipping_address == "X"
        assert _stock(product) == 3
        assert current_domain.repository_for(ShoppingCart).get(cart.id).is_empty

    def test_result_shape(self):
        cart = make_cart("cust-001", (make_product(price=3.0), 1))
        result = _place("cust-001", cart, payment_method="UPI")

        assert set(result) == {"orderId", "totalAmount", "paymentMethod", "paymentStatus", "orderStatus", "createdAt"}
        assert result["paymentMethod"] == "UPI"
        assert result["paymentStatus"] == "Pending"

    def test_total_uses_live_prices_across_lines(self):
        bottle = make_product(name="Bottle", price=10.0, stock=10)
        mug = make_product(name="Mug", price=4.25, stock=10)
        cart = make_cart("cust-001", (bottle, 3), (mug, 2))

        bottle.update_details(price=11.0)
        current_domain.repository_for(Product).add(bottle)

        result = _place("cust-001", cart)
        assert result["totalAmount"] == 11.0 * 3 + 4.25 * 2

    def test_snapshot_survives_catalogue_changes(self):
        product = make_product(name="Bottle", price=10.0)
        cart = make_cart("cust-001", (product, 1))
        order_id = _place("cust-001", cart)["orderId"]

        product = current_domain.repository_for(Product).get(product.id)
        product.update_details(name="Renamed", price=99.0)
        current_domain.repository_for(Product).add(product)

        item = current_domain.repository_for(Order).get(order_id).items[0]
        assert item.name == "Bottle"
        assert item.price == 10.0

    def test_insufficient_line_changes_nothing(self):
        plenty = make_product(name="Plenty", stock=10)
        scarce = make_product(name="Scarce", stock=1)
        cart = make_cart("cust-001", (plenty, 2), (scarce, 2))

        with pytest.raises(InsufficientStockError) as exc_info:
            _place("cust-001", cart)

        assert "Scarce" in exc_info.value.messages["stock"][0]
        assert _stock(plenty) == 10
        assert _stock(scarce) == 1
        assert _all_orders() == []
        assert len(current_domain.repository_for(ShoppingCart).get(cart.id).items) == 2

    def test_cart_of_another_customer_is_not_found(self):
        cart = make_cart("cust-001", (make_product(), 1))
        with pytest.raises(ObjectNotFoundError):
            _place("cust-002", cart)

    def test_unknown_cart_is_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                PlaceOrder(customer_id="cust-001", cart_id="missing", shipping_address="X", payment_method="COD"),
                asynchronous=False,
            )

    def test_empty_cart_is_invalid(self):
        cart = make_cart("cust-001")
        with pytest.raises(ValidationError):
            _place("cust-001", cart)

    def test_product_deleted_after_adding_is_not_found(self):
        product = make_product()
        cart = make_cart("cust-001", (product, 1))
        current_domain.repository_for(Product)._dao.delete(product)

        with pytest.raises(ObjectNotFoundError):
            _place("cust-001", cart)

    def test_invalid_payment_method(self):
        cart = make_cart("cust-001", (make_product(), 1))
        with pytest.raises(ValidationError):
            _place("cust-001", cart, payment_method="CHEQUE")

    def test_blank_address(self):
        cart = make_cart("cust-001", (make_product(), 1))
        with pytest.raises(ValidationError):
            _place("cust-001", cart, address="   ")

    def test_emptied_cart_is_reused_for_next_order(self):
        product = make_product(stock=10)
        cart = make_cart("cust-001", (product, 1))
        _place("cust-001", cart)

        cart = current_domain.repository_for(ShoppingCart).get(cart.id)
        cart.add_item(product_id=str(product.id), quantity=2)
        current_domain.repository_for(ShoppingCart).add(cart)
        _place("cust-001", cart)

        assert len(_all_orders()) == 2
        assert _stock(product) == 7


class TestStockLedger:
    def test_requested_quantities_aggregate_per_product(self):
        lines = [
            {"product_id": "a", "quantity": 1},
            {"product_id": "b", "quantity": 2},
            {"product_id": "a", "quantity": 3},
        ]
        assert requested_quantities(lines) == {"a": 4, "b": 2}
        assert list(requested_quantities(lines)) == ["a", "b"]

    def test_withdraws_every_line(self):
        first = make_product(name="First", stock=5)
        second = make_product(name="Second", stock=5)

        StockLedger().withdraw(
            [
                {"product_id": str(first.id), "quantity": 2},
                {"product_id": str(second.id), "quantity": 5},
            ]
        )

        assert _stock(first) == 3
        assert _stock(second) == 0

    def test_failure_compensates_applied_withdrawals(self):
        first = make_product(name="First", stock=5)
        second = make_product(name="Second", stock=1)

        with pytest.raises(InsufficientStockError):
            StockLedger().withdraw(
                [
                    {"product_id": str(first.id), "quantity": 2},
                    {"product_id": str(second.id), "quantity": 3},
                ]
            )

        assert _stock(first) == 5
        assert _stock(second) == 1


class TestConcurrentPlacement:
    def test_two_orders_for_the_last_units_cannot_both_succeed(self, monkeypatch):
        product = make_product(stock=3)
        carts = {customer_id: make_cart(customer_id, (product, 3)) for customer_id in ("cust-001", "cust-002")}

        # Hold each placement between reading stock and withdrawing it
        check_quantities = placement.requested_quantities

        def slow_check(lines):
            totals = check_quantities(lines)
            time.sleep(0.05)
            return totals

        monkeypatch.setattr(placement, "requested_quantities", slow_check)

        start = threading.Barrier(len(carts))
        outcomes = {}

        def place(customer_id):
            with storefront.domain_context():
                start.wait()
                try:
                    outcomes[customer_id] = _place(customer_id, carts[customer_id])
                except InsufficientStockError as exc:
                    outcomes[customer_id] = exc

        threads = [threading.Thread(target=place, args=(customer_id,)) for customer_id in carts]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        placed = [outcome for outcome in outcomes.values() if isinstance(outcome, dict)]
        rejected = [outcome for outcome in outcomes.values() if isinstance(outcome, InsufficientStockError)]
        assert len(placed) == 1
        assert len(rejected) == 1
        assert rejected[0].available == 0
        assert _stock(product) == 0
        assert len(_all_orders()) == 1

    def test_stale_product_write_is_rejected(self):
        product = make_product(stock=5)
        repo = current_domain.repository_for(Product)
        first = repo.get(product.id)
        stale = repo.get(product.id)

        first.withdraw_stock(2)
        repo.add(first)

        stale.withdraw_stock(4)
        with pytest.raises(ExpectedVersionError):
            with UnitOfWork():
                repo.add(stale)

        assert _stock(product) == 3
