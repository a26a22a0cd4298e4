"""Read-side catalogue queries for the public storefront, sellers and admins."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import Product
from storefront.utils.queries import fetch_all, paginate


def _matches(product: Product, search: str | None) -> bool:
    if not search:
        return True
    needle = search.strip().lower()
    haystack = f"{product.name} {product.description or ''}".lower()
    return needle in haystack


def _page(products: list[Product], page: int, limit: int) -> dict:
    products.sort(key=lambda p: p.created_at, reverse=True)
    items, total, total_pages = paginate(products, page, limit)
    return {
        "page": max(page, 1),
        "limit": max(limit, 1),
        "totalProducts": total,
        "totalPages": total_pages,
        "products": [p.to_summary() for p in items],
    }


def list_products(
    search: str | None = None,
    category_id: str | None = None,
    seller_id: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> dict:
    query = current_domain.repository_for(Product)._dao.query
    if category_id:
        query = query.filter(category_id=category_id)
    if seller_id:
        query = query.filter(seller_id=seller_id)

    products = [p for p in fetch_all(query) if _matches(p, search)]
    return _page(products, page, limit)


def get_product(product_id: str) -> dict:
    return current_domain.repository_for(Product).get(product_id).to_summary()


def list_categories() -> list[dict]:
    categories = list(fetch_all(current_domain.repository_for(Category)._dao.query))
    categories.sort(key=lambda c: c.name.lower())
    return [c.to_dict_view() for c in categories]


def get_category(category_id: str) -> dict:
    """One category with its parent's name, direct sub-categories and product count."""
    repo = current_domain.repository_for(Category)
    category = repo.get(category_id)

    parent = None
    if category.parent_id:
        try:
            parent = repo.get(category.parent_id)
        except ObjectNotFoundError:
            parent = None

    children = repo._dao.query.filter(parent_id=str(category.id)).all().items
    product_count = current_domain.repository_for(Product)._dao.query.filter(category_id=str(category.id)).all().total
    return {
        **category.to_dict_view(),
        "parent": {"id": str(parent.id), "name": parent.name} if parent else None,
        "subCategories": sorted((c.to_dict_view() for c in children), key=lambda c: c["name"].lower()),
        "productCount": product_count,
    }


def products_by_category(category_id: str, page: int = 1, limit: int = 10) -> dict:
    category = current_domain.repository_for(Category).get(category_id)
    result = list_products(category_id=str(category.id), page=page, limit=limit)
    result["category"] = category.to_dict_view()
    return result
