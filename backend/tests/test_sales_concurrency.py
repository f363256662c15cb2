"""
Concurrent sale tests.

Runs against a file-backed SQLite database so each thread gets its own
connection. Two clerks selling the last unit at the same moment must end
with exactly one sale and stock 0, never -1.
"""

import threading
from decimal import Decimal

import pytest

from stockroom import create_app
from stockroom.extensions import db
from stockroom.models import Product, Sale
from stockroom.services import sales_service
from stockroom.services.sales_service import InsufficientStockError


@pytest.fixture
def file_app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'concurrency.sqlite3'}",
        'BCRYPT_ROUNDS': 4,
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()
        db.engine.dispose()


def _seed_product(app, stock: int) -> int:
    with app.app_context():
        product = Product(
            sku="LAST-1",
            name="Last One",
            category="General",
            price=Decimal("10.00"),
            cost=Decimal("4.00"),
            stock=stock,
        )
        db.session.add(product)
        db.session.commit()
        return product.id


def _sell_concurrently(app, product_id: int, quantity: int, workers: int):
    barrier = threading.Barrier(workers)
    outcomes = []
    lock = threading.Lock()

    def worker():
        with app.app_context():
            barrier.wait()
            try:
                sales_service.record_sale(product_id=product_id, quantity=quantity)
                result = "sold"
            except InsufficientStockError:
                result = "insufficient"
            except Exception as exc:  # surfaced in the assertion message
                result = f"error: {exc!r}"
            with lock:
                outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return outcomes


def _final_state(app, product_id: int):
    with app.app_context():
        stock = db.session.get(Product, product_id).stock
        sales = db.session.query(Sale).filter_by(product_id=product_id).count()
        return stock, sales


def test_two_sales_for_last_unit(file_app):
    product_id = _seed_product(file_app, stock=1)

    outcomes = _sell_concurrently(file_app, product_id, quantity=1, workers=2)

    assert sorted(outcomes) == ["insufficient", "sold"], outcomes
    assert _final_state(file_app, product_id) == (0, 1)


def test_many_sales_never_oversell(file_app):
    product_id = _seed_product(file_app, stock=3)

    outcomes = _sell_concurrently(file_app, product_id, quantity=1, workers=6)

    assert outcomes.count("sold") == 3, outcomes
    assert outcomes.count("insufficient") == 3, outcomes
    assert _final_state(file_app, product_id) == (0, 3)
