# Overview: Flask CLI command groups for schema bootstrap, demo data, and distribution inspection.

# backend/inventory_dashboard/cli.py
# Commands Legend (run from the repository root):
# Prereqs:
# - Activate your virtualenv and `pip install -e .`
# - Use: flask --app inventory_dashboard <group> <command> [options]
#
# System bootstrap/repair:
# - flask --app inventory_dashboard system init-db
#   Create any missing tables (idempotent).
# - flask --app inventory_dashboard system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Demo data:
# - flask --app inventory_dashboard seed demo [--seed 42] [--reset]
#   Insert demo warehouses, products and stock levels.
#
# Analytics:
# - flask --app inventory_dashboard analytics distribution [--warehouse-id 1]
#   Print per-warehouse totals, imbalance score and transfer suggestions.

import random

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Location, Product, StockLevel
from .services.distribution_service import get_warehouse_distribution
from .validation import DistributionFilters


DEMO_WAREHOUSES = [
    ("Main Warehouse", "1000 Distribution Center Drive", "Los Angeles", "CA", "90001", "main"),
    ("East Coast Distribution", "2000 Logistics Boulevard", "Atlanta", "GA", "30301", "distribution"),
    ("Midwest Storage Facility", "3000 Storage Way", "Kansas City", "MO", "64101", "storage"),
    ("Secondary Warehouse", "4000 Secondary Street", "Denver", "CO", "80201", "secondary"),
    ("Northwest Hub", "5000 Pacific Avenue", "Seattle", "WA", "98101", "distribution"),
]

# (sku, name, category, cost_cents, sale_cents, reorder_point)
DEMO_PRODUCTS = [
    ("LAP-PRO-15", 'Business Laptop Pro 15"', "Electronics", 89999, 129999, 25),
    ("MOU-WL-01", "Wireless Optical Mouse", "Electronics", 1299, 2999, 50),
    ("KEY-MECH-01", "Mechanical Keyboard", "Electronics", 4599, 8999, 30),
    ("MON-27-4K", '27" 4K Monitor', "Electronics", 24999, 39999, 15),
    ("CHR-ERG-01", "Ergonomic Office Chair", "Furniture", 15999, 29999, 10),
    ("DSK-STD-01", "Standing Desk", "Furniture", 29999, 49999, 8),
    ("LMP-LED-01", "LED Desk Lamp", "Furniture", 1899, 3999, 40),
    ("PPR-A4-500", "A4 Copy Paper (500 sheets)", "Office Supplies", 399, 899, 200),
    ("PEN-GEL-12", "Gel Pens (12 pack)", "Office Supplies", 499, 1199, 150),
    ("NTB-SPR-05", "Spiral Notebooks (5 pack)", "Office Supplies", 699, 1499, 100),
    ("CBL-USBC-2M", "USB-C Cable 2m", "Accessories", 599, 1599, 120),
    ("HUB-USB-7", "7-Port USB Hub", "Accessories", 1999, 3999, 35),
]


@click.group('system')
def system_group():
    """Schema bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'flask --app inventory_dashboard seed demo' to load data.")


@click.group('seed')
def seed_group():
    """Demo data commands."""


@seed_group.command('demo')
@click.option('--seed', 'seed_value', default=42, type=int, help='Random seed for stock quantities')
@click.option('--reset', is_flag=True, help='Delete existing inventory data first')
@with_appcontext
def seed_demo(seed_value, reset):
    """
    Insert demo warehouses, products and stock levels.

    Quantities are random but reproducible for a given --seed. Some rows are
    left empty or below their reorder point so every stock status shows up.
    """
    if reset:
        db.session.query(StockLevel).delete()
        db.session.query(Product).delete()
        db.session.query(Location).delete()
        db.session.commit()
        click.echo("DELETE  Cleared existing inventory data")

    if db.session.query(Product).count() > 0:
        click.echo("SKIP Products already exist. Use --reset to reseed.")
        return

    rng = random.Random(seed_value)

    warehouses = []
    for name, address, city, state, zip_code, warehouse_type in DEMO_WAREHOUSES:
        location = Location(
            name=name,
            address=address,
            city=city,
            state=state,
            zip_code=zip_code,
            warehouse_type=warehouse_type,
            is_active=True,
        )
        db.session.add(location)
        warehouses.append(location)

    products = []
    for sku, name, category, cost_cents, sale_cents, reorder_point in DEMO_PRODUCTS:
        product = Product(
            sku=sku,
            name=name,
            category=category,
            cost_price_cents=cost_cents,
            sale_price_cents=sale_cents,
            reorder_point=reorder_point,
            is_active=True,
        )
        db.session.add(product)
        products.append(product)

    db.session.flush()

    rows = 0
    for product in products:
        # Main warehouse carries everything; the others a random subset
        stocked = [warehouses[0]] + [w for w in warehouses[1:] if rng.random() < 0.6]
        for warehouse in stocked:
            on_hand = rng.choice([0, rng.randint(1, product.reorder_point), rng.randint(product.reorder_point, product.reorder_point * 4)])
            db.session.add(StockLevel(
                product_id=product.id,
                location_id=warehouse.id,
                quantity_on_hand=on_hand,
                quantity_reserved=rng.randint(0, on_hand // 10) if on_hand else 0,
                unit_cost_cents=product.cost_price_cents,
                reorder_point=max(product.reorder_point // 2, 1) if warehouse is not warehouses[0] else None,
            ))
            rows += 1

    db.session.commit()
    click.echo(f"PASS Seeded {len(warehouses)} warehouses, {len(products)} products, {rows} stock levels")


@click.group('analytics')
def analytics_group():
    """Read-only inventory analysis commands."""


@analytics_group.command('distribution')
@click.option('--warehouse-id', type=click.IntRange(min=1), default=None, help='Limit to one warehouse')
@with_appcontext
def distribution(warehouse_id):
    """Print the warehouse distribution analysis for the current data."""
    result = get_warehouse_distribution(DistributionFilters(warehouse_id=warehouse_id))

    if not result["warehouses"]:
        click.echo("No active warehouses found.")
        return

    click.echo(f"{'ID':<5} {'Warehouse':<30} {'Products':>8} {'Low':>5} {'Out':>5} {'Value':>14}")
    click.echo("-" * 72)
    for w in result["warehouses"]:
        value = f"${w['total_value_cents'] / 100:,.2f}"
        click.echo(
            f"{w['warehouse_id']:<5} {w['warehouse_name'][:30]:<30} {w['total_products']:>8} "
            f"{w['low_stock_count']:>5} {w['out_of_stock_count']:>5} {value:>14}"
        )

    imbalance = result["imbalance"]
    click.echo(f"\nImbalance: {imbalance['score']:.3f} ({imbalance['level']})")

    suggestions = result["transfer_suggestions"]
    if not suggestions:
        click.echo("No transfer suggestions.")
        return

    click.echo("\nTransfer suggestions:")
    for s in suggestions:
        click.echo(
            f"  [{s['priority'].upper():<6}] {s['from_warehouse_name']} -> {s['to_warehouse_name']}: "
            f"{s['suggested_quantity']} ({s['reason']})"
        )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(seed_group)
    app.cli.add_command(analytics_group)
