"""
Product catalog tests.

Verifies:
- Create validates required fields, money and stock, and rejects duplicate SKUs
- PATCH merges only the provided fields and keeps the SKU fixed
- Delete is a hard delete and leaves recorded sales in place
"""

from stockroom.models import Product, Sale


TOO_LARGE_ID = 2**63


VALID_PRODUCT = {
    "sku": "TS-001",
    "name": "Cotton T-Shirt",
    "category": "Clothing",
    "price": "19.99",
    "cost": "10.00",
    "stock": 42,
    "description": "Comfortable cotton t-shirt",
}


# =============================================================================
# CREATE
# =============================================================================


class TestCreateProduct:

    def test_create_returns_money_as_strings(self, client, admin_headers):
        resp = client.post("/api/products", json=VALID_PRODUCT, headers=admin_headers)
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["sku"] == "TS-001"
        assert data["price"] == "19.99"
        assert data["cost"] == "10.00"
        assert data["stock"] == 42
        assert data["created_at"].endswith("Z")

    def test_stock_defaults_to_zero(self, client, admin_headers):
        payload = {k: v for k, v in VALID_PRODUCT.items() if k != "stock"}
        resp = client.post("/api/products", json=payload, headers=admin_headers)
        assert resp.status_code == 201
        assert resp.get_json()["stock"] == 0

    def test_numeric_money_is_rounded_to_cents(self, client, admin_headers):
        payload = dict(VALID_PRODUCT, price=19.999, cost=10)
        resp = client.post("/api/products", json=payload, headers=admin_headers)
        assert resp.status_code == 201
        assert resp.get_json()["price"] == "20.00"
        assert resp.get_json()["cost"] == "10.00"

    def test_missing_required_fields(self, client, admin_headers):
        resp = client.post("/api/products", json={"sku": "X-1"}, headers=admin_headers)
        assert resp.status_code == 400
        assert "Missing required fields" in resp.get_json()["error"]

    def test_duplicate_sku_conflicts(self, client, admin_headers, db_session):
        created = client.post("/api/products", json=VALID_PRODUCT, headers=admin_headers)
        assert created.status_code == 201
        original = created.get_json()

        resp = client.post(
            "/api/products",
            json=dict(VALID_PRODUCT, name="Other", price="1.00", cost="0.50", stock=1),
            headers=admin_headers,
        )
        assert resp.status_code == 409

        assert db_session.query(Product).filter_by(sku="TS-001").count() == 1
        after = client.get(f"/api/products/{original['id']}", headers=admin_headers).get_json()
        for field in ("name", "price", "cost", "stock", "description"):
            assert after[field] == original[field], field

    def test_stock_above_integer_range_rejected(self, client, admin_headers):
        resp = client.post("/api/products", json=dict(VALID_PRODUCT, stock=TOO_LARGE_ID), headers=admin_headers)
        assert resp.status_code == 400

    def test_negative_price_rejected(self, client, admin_headers):
        resp = client.post("/api/products", json=dict(VALID_PRODUCT, price="-1.00"), headers=admin_headers)
        assert resp.status_code == 400

    def test_negative_stock_rejected(self, client, admin_headers):
        resp = client.post("/api/products", json=dict(VALID_PRODUCT, stock=-1), headers=admin_headers)
        assert resp.status_code == 400

    def test_fractional_stock_rejected(self, client, admin_headers):
        resp = client.post("/api/products", json=dict(VALID_PRODUCT, stock="1.5"), headers=admin_headers)
        assert resp.status_code == 400

    def test_non_numeric_price_rejected(self, client, admin_headers):
        resp = client.post("/api/products", json=dict(VALID_PRODUCT, price="abc"), headers=admin_headers)
        assert resp.status_code == 400

    def test_unknown_field_rejected(self, client, admin_headers):
        resp = client.post("/api/products", json=dict(VALID_PRODUCT, id=99), headers=admin_headers)
        assert resp.status_code == 400

    def test_blank_name_rejected(self, client, admin_headers):
        resp = client.post("/api/products", json=dict(VALID_PRODUCT, name="   "), headers=admin_headers)
        assert resp.status_code == 400


# =============================================================================
# READ
# =============================================================================


class TestReadProducts:

    def test_list_sorted_by_name(self, client, staff_headers, make_product):
        make_product(name="Zipper")
        make_product(name="Anchor")
        resp = client.get("/api/products", headers=staff_headers)
        assert resp.status_code == 200
        assert [p["name"] for p in resp.get_json()] == ["Anchor", "Zipper"]

    def test_get_one(self, client, staff_headers, make_product):
        product = make_product(name="Denim Jacket", price="89.99")
        resp = client.get(f"/api/products/{product.id}", headers=staff_headers)
        assert resp.status_code == 200
        assert resp.get_json()["price"] == "89.99"

    def test_get_missing(self, client, staff_headers):
        resp = client.get("/api/products/9999", headers=staff_headers)
        assert resp.status_code == 404

    def test_get_id_above_integer_range(self, client, staff_headers):
        resp = client.get(f"/api/products/{TOO_LARGE_ID}", headers=staff_headers)
        assert resp.status_code == 404


# =============================================================================
# UPDATE
# =============================================================================


class TestUpdateProduct:

    def test_patch_changes_only_given_fields(self, client, admin_headers, make_product):
        product = make_product(name="Old", price="10.00", stock=4)
        resp = client.patch(f"/api/products/{product.id}", json={"price": "12.50"}, headers=admin_headers)
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["price"] == "12.50"
        assert data["name"] == "Old"
        assert data["stock"] == 4

    def test_patch_sets_stock_directly(self, client, admin_headers, make_product):
        product = make_product(stock=4)
        resp = client.patch(f"/api/products/{product.id}", json={"stock": 25}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()["stock"] == 25

    def test_patch_rejects_sku_change(self, client, admin_headers, make_product):
        product = make_product(sku="KEEP-1")
        resp = client.patch(f"/api/products/{product.id}", json={"sku": "NEW-1"}, headers=admin_headers)
        assert resp.status_code == 400

    def test_patch_accepts_unchanged_sku(self, client, admin_headers, make_product):
        product = make_product(sku="KEEP-1")
        resp = client.patch(
            f"/api/products/{product.id}",
            json={"sku": "KEEP-1", "name": "Renamed"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.get_json()["name"] == "Renamed"

    def test_patch_ignores_unknown_fields(self, client, admin_headers, make_product):
        product = make_product(name="Same")
        resp = client.patch(
            f"/api/products/{product.id}",
            json={"id": 12345, "created_at": "2020-01-01", "name": "Changed"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["id"] == product.id
        assert data["name"] == "Changed"

    def test_patch_rejects_negative_stock(self, client, admin_headers, make_product):
        product = make_product(stock=3)
        resp = client.patch(f"/api/products/{product.id}", json={"stock": -1}, headers=admin_headers)
        assert resp.status_code == 400

    def test_patch_missing_product(self, client, admin_headers):
        resp = client.patch("/api/products/9999", json={"name": "x"}, headers=admin_headers)
        assert resp.status_code == 404

    def test_patch_id_above_integer_range(self, client, admin_headers):
        resp = client.patch(f"/api/products/{TOO_LARGE_ID}", json={"name": "x"}, headers=admin_headers)
        assert resp.status_code == 404


# =============================================================================
# DELETE
# =============================================================================


class TestDeleteProduct:

    def test_delete_then_missing(self, client, admin_headers, make_product):
        product = make_product()
        product_id = product.id
        resp = client.delete(f"/api/products/{product_id}", headers=admin_headers)
        assert resp.status_code == 204
        assert client.get(f"/api/products/{product_id}", headers=admin_headers).status_code == 404
        assert client.delete(f"/api/products/{product_id}", headers=admin_headers).status_code == 404

    def test_delete_id_above_integer_range(self, client, admin_headers):
        resp = client.delete(f"/api/products/{TOO_LARGE_ID}", headers=admin_headers)
        assert resp.status_code == 404

    def test_delete_keeps_sales(self, client, admin_headers, make_product, db_session):
        product = make_product(stock=5)
        product_id = product.id
        sale = client.post("/api/sales", json={"product_id": product_id, "quantity": 2}, headers=admin_headers)
        assert sale.status_code == 201

        assert client.delete(f"/api/products/{product_id}", headers=admin_headers).status_code == 204

        sales = db_session.query(Sale).filter_by(product_id=product_id).all()
        assert len(sales) == 1
        resp = client.get(f"/api/sales/{sales[0].id}", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()["product_id"] == product_id
