"""HTTP tests for admin category management, seller products and the public catalogue."""

import pytest
from support.api import auth_header, data_of, make_client
from support.factories import make_account, make_category, make_product

from storefront.identity.account import AccountRole


@pytest.fixture()
def client():
    return make_client()


@pytest.fixture()
def admin():
    return make_account(AccountRole.ADMIN)


@pytest.fixture()
def seller():
    return make_account(AccountRole.SELLER)


class TestAdminCategories:
    def test_create_update_delete(self, client, admin):
        headers = auth_header(admin)
        created = client.post("/api/admin/categories", json={"name": "Kitchen"}, headers=headers)
        assert created.status_code == 201
        category_id = data_of(created)["categoryId"]

        updated = client.put(f"/api/admin/categories/{category_id}", json={"description": "Pots and pans"}, headers=headers)
        assert data_of(updated)["description"] == "Pots and pans"

        deleted = client.delete(f"/api/admin/categories/{category_id}", headers=headers)
        assert deleted.status_code == 200
        assert data_of(client.get("/api/public/categories")) == []

    def test_category_detail(self, client, admin):
        kitchen = make_category("Kitchen")
        headers = auth_header(admin)
        child = data_of(
            client.post("/api/admin/categories", json={"name": "Cookware", "parentId": str(kitchen.id)}, headers=headers)
        )["categoryId"]
        make_product(category_id=str(kitchen.id))

        parent_view = data_of(client.get(f"/api/admin/categories/{kitchen.id}", headers=headers))
        assert parent_view["name"] == "Kitchen"
        assert parent_view["parent"] is None
        assert [c["id"] for c in parent_view["subCategories"]] == [child]
        assert parent_view["productCount"] == 1

        child_view = data_of(client.get(f"/api/admin/categories/{child}", headers=headers))
        assert child_view["parent"] == {"id": str(kitchen.id), "name": "Kitchen"}

        listed = data_of(client.get("/api/admin/categories", headers=headers))
        assert [c["name"] for c in listed] == ["Cookware", "Kitchen"]

    def test_unknown_category_detail_is_404(self, client, admin):
        response = client.get("/api/admin/categories/missing", headers=auth_header(admin))
        assert response.status_code == 404
        assert response.json()["statusFlag"] == 0

    def test_duplicate_name_is_422(self, client, admin):
        make_category("Kitchen")
        response = client.post("/api/admin/categories", json={"name": "KITCHEN"}, headers=auth_header(admin))

        assert response.status_code == 422
        assert "name" in data_of(response)["errors"]

    def test_delete_category_in_use_is_409(self, client, admin):
        category = make_category("Kitchen")
        make_product(category_id=str(category.id))

        response = client.delete(f"/api/admin/categories/{category.id}", headers=auth_header(admin))
        assert response.status_code == 409

    def test_sellers_cannot_manage_categories(self, client, seller):
        response = client.post("/api/admin/categories", json={"name": "Kitchen"}, headers=auth_header(seller))
        assert response.status_code == 403


class TestSellerProducts:
    def test_create_and_list(self, client, seller):
        category = make_category("Kitchen")
        response = client.post(
            "/api/seller/products",
            json={
                "name": "Steel Bottle",
                "price": 499.0,
                "stock": 25,
                "categoryId": str(category.id),
                "images": ["https://cdn.example.com/bottle.jpg"],
            },
            headers=auth_header(seller),
        )

        assert response.status_code == 201
        product = data_of(response)
        assert product["sellerId"] == str(seller.id)
        assert product["images"] == ["https://cdn.example.com/bottle.jpg"]

        mine = data_of(client.get("/api/seller/products", headers=auth_header(seller)))
        assert mine["totalProducts"] == 1

    def test_patch_stock(self, client, seller):
        product = make_product(seller_id=str(seller.id), stock=5)
        response = client.patch(f"/api/seller/products/{product.id}/stock", json={"stock": 40}, headers=auth_header(seller))

        assert data_of(response)["stock"] == 40

    def test_too_many_images_is_422(self, client, seller):
        product = make_product(seller_id=str(seller.id))
        images = [f"https://cdn.example.com/{i}.jpg" for i in range(11)]
        response = client.put(f"/api/seller/products/{product.id}", json={"images": images}, headers=auth_header(seller))

        assert response.status_code == 422

    def test_foreign_product_is_404(self, client, seller):
        product = make_product(seller_id="someone-else")
        response = client.delete(f"/api/seller/products/{product.id}", headers=auth_header(seller))
        assert response.status_code == 404

    def test_admin_deletes_any_product(self, client, admin):
        product = make_product(seller_id="someone-else")
        response = client.delete(f"/api/admin/products/{product.id}", headers=auth_header(admin))

        assert response.status_code == 200
        assert client.get(f"/api/public/products/{product.id}").status_code == 404


class TestPublicCatalogue:
    def test_listing_and_search(self, client):
        kitchen = make_category("Kitchen")
        make_product(name="Steel Bottle", category_id=str(kitchen.id))
        make_product(name="Garden Hose", category_id="elsewhere")

        everything = data_of(client.get("/api/public/products"))
        assert everything["totalProducts"] == 2

        searched = data_of(client.get("/api/public/products", params={"search": "bottle"}))
        assert [p["name"] for p in searched["products"]] == ["Steel Bottle"]

        by_category = data_of(client.get(f"/api/public/categories/{kitchen.id}/products"))
        assert [p["name"] for p in by_category["products"]] == ["Steel Bottle"]

    def test_empty_listing_is_a_warning(self, client):
        response = client.get("/api/public/products")
        assert response.json()["statusFlag"] == 2

    def test_unknown_product_is_404(self, client):
        response = client.get("/api/public/products/missing")
        assert response.status_code == 404
        assert response.json()["errorCode"] == 302
