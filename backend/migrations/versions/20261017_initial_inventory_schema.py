"""initial inventory schema

Revision ID: inv001_initial
Revises:
Create Date: 2026-10-17 00:00:00.000000

Creates the inventory dashboard schema:
- locations: warehouses
- products: product master with SKU, category, pricing in cents
- stock_levels: quantity of one product at one location
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'inv001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ============================================================================
    # locations: Warehouses
    # ============================================================================
    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=50), nullable=True),
        sa.Column('zip_code', sa.String(length=20), nullable=True),
        sa.Column('warehouse_type', sa.String(length=32), nullable=False, server_default='main'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint(
            "warehouse_type IN ('main', 'secondary', 'distribution', 'storage')",
            name='ck_locations_warehouse_type',
        ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_locations_name', 'locations', ['name'])
    op.create_index('ix_locations_warehouse_type', 'locations', ['warehouse_type'])
    op.create_index('ix_locations_is_active', 'locations', ['is_active'])
    op.create_index('ix_locations_active_name', 'locations', ['is_active', 'name'])

    # ============================================================================
    # products: Product master (prices in integer cents)
    # ============================================================================
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('sku', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('cost_price_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('sale_price_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reorder_point', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint('sale_price_cents >= 0', name='ck_products_sale_price_nonneg'),
        sa.CheckConstraint('cost_price_cents >= 0', name='ck_products_cost_price_nonneg'),
        sa.CheckConstraint('cost_price_cents <= sale_price_cents', name='ck_products_cost_le_sale'),
        sa.CheckConstraint('reorder_point >= 0', name='ck_products_reorder_point_nonneg'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_products_sku', 'products', ['sku'], unique=True)
    op.create_index('ix_products_name', 'products', ['name'])
    op.create_index('ix_products_category', 'products', ['category'])
    op.create_index('ix_products_reorder_point', 'products', ['reorder_point'])
    op.create_index('ix_products_is_active', 'products', ['is_active'])
    op.create_index('ix_products_active_name', 'products', ['is_active', 'name'])

    # ============================================================================
    # stock_levels: One row per (product, location)
    # ============================================================================
    op.create_table(
        'stock_levels',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('location_id', sa.Integer(), nullable=False),
        sa.Column('quantity_on_hand', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('quantity_reserved', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unit_cost_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reorder_point', sa.Integer(), nullable=True),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('product_id', 'location_id', name='uq_stock_levels_product_location'),
        sa.CheckConstraint('quantity_on_hand >= 0', name='ck_stock_levels_on_hand_nonneg'),
        sa.CheckConstraint('quantity_reserved >= 0', name='ck_stock_levels_reserved_nonneg'),
        sa.CheckConstraint('unit_cost_cents >= 0', name='ck_stock_levels_unit_cost_nonneg'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_stock_levels_product_id', 'stock_levels', ['product_id'])
    op.create_index('ix_stock_levels_location_id', 'stock_levels', ['location_id'])
    op.create_index('ix_stock_levels_quantity_on_hand', 'stock_levels', ['quantity_on_hand'])
    op.create_index('ix_stock_levels_location_product', 'stock_levels', ['location_id', 'product_id'])


def downgrade():
    """Drop all tables (destructive operation)."""
    op.drop_table('stock_levels')
    op.drop_table('products')
    op.drop_table('locations')
