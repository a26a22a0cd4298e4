"""Order read-side queries for customers and sellers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.ordering.order.order import Order, parse_status
from storefront.ordering.order.status import load_seller_order, seller_product_ids
from storefront.utils.queries import fetch_all, paginate


def load_customer_order(customer_id, order_id) -> Order:
    """Fetch an order owned by the customer; anyone else's order does not exist for them."""
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"_entity": "Order not found"}) from None
    if str(order.customer_id) != str(customer_id):
        raise ObjectNotFoundError({"_entity": "Order not found"})
    return order


def _live_products(product_ids) -> dict[str, Product]:
    repo = current_domain.repository_for(Product)
    found = {}
    for product_id in product_ids:
        try:
            found[product_id] = repo.get(product_id)
        except ObjectNotFoundError:
            continue
    return found


def _paged(orders, page, limit, render) -> dict:
    orders.sort(key=lambda o: o.created_at, reverse=True)
    items, total, total_pages = paginate(orders, page, limit)
    return {
        "page": max(page, 1),
        "limit": max(limit, 1),
        "totalOrders": total,
        "totalPages": total_pages,
        "orders": [render(o) for o in items],
    }


# ---------------------------------------------------------------------------
# Customer
# ---------------------------------------------------------------------------
def list_customer_orders(customer_id, page: int = 1, limit: int = 10, status: str | None = None) -> dict:
    query = current_domain.repository_for(Order)._dao.query.filter(customer_id=str(customer_id))
    if status:
        query = query.filter(order_status=parse_status(status).value)

    def render(order):
        return {**order.to_summary(), "itemCount": len(order.items)}

    return _paged(list(fetch_all(query)), page, limit, render)


def customer_order_detail(customer_id, order_id) -> dict:
    order = load_customer_order(customer_id, order_id)
    lines = order.item_lines()
    live = _live_products({line["productId"] for line in lines})
    for line in lines:
        product = live.get(line["productId"])
        line["images"] = product.image_urls if product else []
        line["stockLeft"] = product.stock if product else None
    return {**order.to_summary(), "items": lines}


def track_customer_order(customer_id, order_id) -> dict:
    order = load_customer_order(customer_id, order_id)
    return {
        "orderId": str(order.id),
        "currentStatus": order.order_status,
        "paymentStatus": order.payment_status,
        "paymentMethod": order.payment_method,
        "totalAmount": order.total_amount,
        "shippingAddress": order.shipping_address,
        "trackingSteps": order.tracking_steps(),
    }


# ---------------------------------------------------------------------------
# Seller
# ---------------------------------------------------------------------------
def _seller_view(order, product_ids) -> dict:
    lines = [line for line in order.item_lines() if line["productId"] in product_ids]
    return {
        **order.to_summary(),
        "items": lines,
        "sellerAmount": sum(line["lineTotal"] for line in lines),
    }


def list_seller_orders(
    seller_id, page: int = 1, limit: int = 10, status: str | None = None, search: str | None = None
) -> dict:
    product_ids = seller_product_ids(seller_id)
    if not product_ids:
        return _paged([], page, limit, None)

    query = current_domain.repository_for(Order)._dao.query
    if status:
        query = query.filter(order_status=parse_status(status).value)

    orders = [o for o in fetch_all(query) if o.contains_any(product_ids)]
    if search:
        needle = search.strip().lower()
        orders = [
            o
            for o in orders
            if needle in str(o.id).lower() or any(needle in (i.name or "").lower() for i in o.items)
        ]
    return _paged(orders, page, limit, lambda o: _seller_view(o, product_ids))


def seller_order_detail(seller_id, order_id) -> dict:
    order, product_ids = load_seller_order(seller_id, order_id)
    return _seller_view(order, product_ids)
