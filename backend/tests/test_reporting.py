"""
Reporting tests.

Verifies:
- Totals are exact decimal sums and read "0.00" on an empty store
- Profit follows the product's current cost and skips sales of deleted products
- Low stock is inclusive of the threshold and follows the store setting
"""

from decimal import Decimal

from stockroom.services import products_service, reporting_service, sales_service, settings_service


# =============================================================================
# SERVICE
# =============================================================================


class TestReportingService:

    def test_empty_store(self, db_session):
        assert reporting_service.total_sales() == Decimal("0.00")
        assert reporting_service.total_profit() == Decimal("0.00")
        assert reporting_service.inventory_value() == Decimal("0.00")

    def test_inventory_value_is_cost_times_stock(self, make_product):
        make_product(cost="2.50", stock=4)
        make_product(cost="0.10", stock=3)
        make_product(cost="99.99", stock=0)
        assert reporting_service.inventory_value() == Decimal("10.30")

    def test_sums_have_no_float_drift(self, make_product):
        product = make_product(price="0.10", cost="0.00", stock=100)
        for _ in range(3):
            sales_service.record_sale(product_id=product.id, quantity=1)
        assert reporting_service.total_sales() == Decimal("0.30")

    def test_profit_uses_current_cost(self, make_product):
        product = make_product(price="10.00", cost="5.00", stock=10)
        sales_service.record_sale(product_id=product.id, quantity=2)
        assert reporting_service.total_profit() == Decimal("10.00")

        products_service.update_product(product_id=product.id, patch={"cost": Decimal("7.00")})
        assert reporting_service.total_profit() == Decimal("6.00")

    def test_deleted_product_drops_out_of_profit_only(self, make_product):
        kept = make_product(price="10.00", cost="4.00", stock=10)
        gone = make_product(price="20.00", cost="5.00", stock=10)
        sales_service.record_sale(product_id=kept.id, quantity=1)
        sales_service.record_sale(product_id=gone.id, quantity=1)

        products_service.delete_product(product_id=gone.id)

        assert reporting_service.total_sales() == Decimal("30.00")
        assert reporting_service.total_profit() == Decimal("6.00")

    def test_low_stock_threshold_is_inclusive(self, make_product):
        make_product(name="At", stock=5)
        make_product(name="Above", stock=6)
        make_product(name="Empty", stock=0)
        names = [p.name for p in products_service.low_stock_products(5)]
        assert names == ["Empty", "At"]

    def test_dashboard_summary(self, make_product):
        product = make_product(price="10.00", cost="5.00", stock=6)
        sales_service.record_sale(product_id=product.id, quantity=2)

        summary = reporting_service.dashboard_summary(threshold=5)
        assert summary["total_sales"] == "20.00"
        assert summary["total_profit"] == "10.00"
        assert summary["inventory_value"] == "20.00"
        assert summary["low_stock_count"] == 1
        assert len(summary["recent_sales"]) == 1


# =============================================================================
# HTTP
# =============================================================================


class TestReportRoutes:

    def test_dashboard_admin_sees_low_stock_list(self, client, admin_headers, make_product):
        make_product(stock=1)
        resp = client.get("/api/reports/dashboard", headers=admin_headers)
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["low_stock_count"] == 1
        assert len(data["low_stock_products"]) == 1

    def test_dashboard_staff_gets_count_only(self, client, staff_headers, make_product):
        make_product(stock=1)
        resp = client.get("/api/reports/dashboard", headers=staff_headers)
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["low_stock_count"] == 1
        assert "low_stock_products" not in data

    def test_low_stock_uses_store_setting(self, client, admin_headers, make_product):
        make_product(name="Two", stock=2)
        make_product(name="Four", stock=4)
        settings_service.update_settings({"inventory.low_stock_threshold": 2})

        resp = client.get("/api/reports/low-stock", headers=admin_headers)
        assert [p["name"] for p in resp.get_json()] == ["Two"]

    def test_low_stock_query_threshold(self, client, admin_headers, make_product):
        make_product(name="Two", stock=2)
        make_product(name="Four", stock=4)
        resp = client.get("/api/reports/low-stock?threshold=4", headers=admin_headers)
        assert [p["name"] for p in resp.get_json()] == ["Two", "Four"]

    def test_low_stock_bad_threshold(self, client, admin_headers):
        resp = client.get("/api/reports/low-stock?threshold=abc", headers=admin_headers)
        assert resp.status_code == 400

    def test_inventory_value_route(self, client, staff_headers, make_product):
        make_product(cost="3.00", stock=3)
        resp = client.get("/api/reports/inventory-value", headers=staff_headers)
        assert resp.get_json() == {"inventory_value": "9.00"}

    def test_profit_route_after_delete(self, client, admin_headers, make_product):
        product = make_product(price="10.00", cost="4.00", stock=3)
        client.post("/api/sales", json={"product_id": product.id, "quantity": 1}, headers=admin_headers)
        client.delete(f"/api/products/{product.id}", headers=admin_headers)

        assert client.get("/api/reports/profit", headers=admin_headers).get_json() == {"total_profit": "0.00"}
        assert client.get("/api/reports/sales", headers=admin_headers).get_json() == {"total_sales": "10.00"}
