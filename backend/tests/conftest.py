"""
Pytest fixtures for inventory dashboard backend tests.

Provides test database setup, a test client, and small factories for
warehouses, products and stock levels.
"""

import itertools

import pytest
from inventory_dashboard import create_app
from inventory_dashboard.extensions import db
from inventory_dashboard.models import Location, Product, StockLevel


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_warehouse(db_session):
    """Factory: make_warehouse("Main", is_active=True, ...) -> Location."""
    def _make(name, **kwargs):
        kwargs.setdefault("address", "1 Dock Road")
        kwargs.setdefault("city", "Austin")
        kwargs.setdefault("state", "TX")
        kwargs.setdefault("zip_code", "78701")
        location = Location(name=name, **kwargs)
        db_session.add(location)
        db_session.commit()
        return location

    return _make


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: make_product("Widget", reorder_point=50, ...) -> Product with a unique SKU."""
    counter = itertools.count(1)

    def _make(name, **kwargs):
        kwargs.setdefault("sku", f"SKU-{next(counter):04d}")
        kwargs.setdefault("category", "General")
        kwargs.setdefault("cost_price_cents", 500)
        kwargs.setdefault("sale_price_cents", 1000)
        kwargs.setdefault("reorder_point", 10)
        product = Product(name=name, **kwargs)
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture(scope='function')
def make_stock(db_session):
    """Factory: make_stock(product, warehouse, 25, unit_cost_cents=...) -> StockLevel."""
    def _make(product, warehouse, quantity, **kwargs):
        kwargs.setdefault("unit_cost_cents", product.cost_price_cents)
        level = StockLevel(
            product_id=product.id,
            location_id=warehouse.id,
            quantity_on_hand=quantity,
            **kwargs,
        )
        db_session.add(level)
        db_session.commit()
        return level

    return _make


@pytest.fixture(scope='function')
def stocked_catalog(make_warehouse, make_product, make_stock):
    """
    Two warehouses and three products with reorder point 50:
    P1 out of stock (0), P2 low (30), P3 adequate (150).
    """
    main = make_warehouse("Main Warehouse")
    east = make_warehouse("East Depot")

    p1 = make_product("Alpha Cable", category="Accessories", sale_price_cents=1500, reorder_point=50)
    p2 = make_product("Bravo Hub", category="Accessories", sale_price_cents=4000, reorder_point=50)
    p3 = make_product("Charlie Monitor", category="Electronics", cost_price_cents=20000,
                      sale_price_cents=35000, reorder_point=50)

    make_stock(p1, main, 0)
    make_stock(p1, east, 0)
    make_stock(p2, main, 20)
    make_stock(p2, east, 10)
    make_stock(p3, main, 100)
    make_stock(p3, east, 50)

    return {"main": main, "east": east, "p1": p1, "p2": p2, "p3": p3}
