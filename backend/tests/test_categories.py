"""Category catalog tests."""

from stockroom.services import products_service


class TestCategories:

    def test_create_and_list(self, client, admin_headers, staff_headers):
        resp = client.post(
            "/api/categories",
            json={"name": "Footwear", "description": "Shoes and boots"},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        assert resp.get_json()["name"] == "Footwear"

        client.post("/api/categories", json={"name": "Accessories"}, headers=admin_headers)
        listed = client.get("/api/categories", headers=staff_headers).get_json()
        assert [c["name"] for c in listed] == ["Accessories", "Footwear"]

    def test_duplicate_name(self, client, admin_headers):
        client.post("/api/categories", json={"name": "Clothing"}, headers=admin_headers)
        resp = client.post("/api/categories", json={"name": "Clothing"}, headers=admin_headers)
        assert resp.status_code == 409

    def test_name_too_short(self, client, admin_headers):
        resp = client.post("/api/categories", json={"name": "X"}, headers=admin_headers)
        assert resp.status_code == 400

    def test_name_required(self, client, admin_headers):
        resp = client.post("/api/categories", json={"description": "nameless"}, headers=admin_headers)
        assert resp.status_code == 400

    def test_delete(self, client, admin_headers):
        created = client.post("/api/categories", json={"name": "Seasonal"}, headers=admin_headers).get_json()
        assert client.delete(f"/api/categories/{created['id']}", headers=admin_headers).status_code == 204
        assert client.delete(f"/api/categories/{created['id']}", headers=admin_headers).status_code == 404

    def test_delete_id_above_integer_range(self, client, admin_headers):
        assert client.delete(f"/api/categories/{2**63}", headers=admin_headers).status_code == 404

    def test_delete_leaves_product_labels(self, client, admin_headers, make_product):
        created = client.post("/api/categories", json={"name": "Clothing"}, headers=admin_headers).get_json()
        product = make_product(category="Clothing")
        product_id = product.id

        client.delete(f"/api/categories/{created['id']}", headers=admin_headers)

        assert products_service.get_product(product_id).category == "Clothing"

    def test_product_category_need_not_exist(self, client, admin_headers):
        resp = client.post(
            "/api/products",
            json={"sku": "FREE-1", "name": "Free Label", "category": "Not In Catalog", "price": "1.00", "cost": "0.50"},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        assert resp.get_json()["category"] == "Not In Catalog"
