"""Initial schema - Marketplace engines

Revision ID: 0000_initial
Revises: 
Create Date: 2026-10-19

Tables used by the catalog, pricing and order engines:
- Catalog (products, product_variants, attributes, attribute_options,
  variant_attribute_values, product_migration_log)
- Pricing & logistics (b2b_margin_ranges, category_shipping_rates,
  destination_countries, transit_hubs, shipping_routes,
  route_logistics_costs, shipping_rates, departments, communes)
- Orders & tracking (orders_b2b, notifications, catalog_click_tracking)
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

revision = '0000_initial'
down_revision = None
branch_labels = None
depends_on = None


def _base_columns():
    return [
        sa.Column('id', UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade():
    # =========================================================================
    # CATALOG TABLES
    # =========================================================================

    op.create_table(
        'products',
        *_base_columns(),
        sa.Column('sku_interno', sa.String(120), nullable=False),
        sa.Column('nombre', sa.String(500), nullable=False),
        sa.Column('descripcion_corta', sa.Text(), nullable=True),
        sa.Column('descripcion_larga', sa.Text(), nullable=True),
        sa.Column('precio_mayorista', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('precio_sugerido_venta', sa.Numeric(12, 2), nullable=True),
        sa.Column('stock_fisico', sa.Integer(), server_default='0', nullable=False),
        sa.Column('moq', sa.Integer(), server_default='1', nullable=False),
        sa.Column('peso_kg', sa.Numeric(10, 3), nullable=True),
        sa.Column('imagen_principal', sa.Text(), nullable=True),
        sa.Column('galeria_imagenes', JSONB(), nullable=True),
        sa.Column('categoria_id', UUID(as_uuid=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('is_parent', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('parent_product_id', UUID(as_uuid=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['parent_product_id'], ['products.id'])
    )
    op.create_index('ix_products_sku_interno', 'products', ['sku_interno'])
    op.create_index('ix_products_categoria_id', 'products', ['categoria_id'])
    op.create_index('idx_products_active_parent_sku', 'products', ['is_active', 'is_parent', 'sku_interno'])

    op.create_table(
        'product_variants',
        *_base_columns(),
        sa.Column('product_id', UUID(as_uuid=True), nullable=False),
        sa.Column('sku', sa.String(120), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('option_type', sa.String(50), nullable=False),
        sa.Column('option_value', sa.String(120), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=True),
        sa.Column('stock', sa.Integer(), server_default='0', nullable=False),
        sa.Column('moq', sa.Integer(), server_default='1', nullable=False),
        sa.Column('images', JSONB(), server_default='[]', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('attribute_combination', JSONB(), server_default='{}', nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE')
    )
    op.create_index('ix_product_variants_product_id', 'product_variants', ['product_id'])
    op.create_index('ix_product_variants_sku', 'product_variants', ['sku'])

    op.create_table(
        'attributes',
        *_base_columns(),
        sa.Column('slug', sa.String(50), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('display_name', sa.String(100), nullable=False),
        sa.Column('attribute_type', sa.String(30), server_default='select', nullable=False),
        sa.Column('render_type', sa.String(30), server_default='chips', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug')
    )

    op.create_table(
        'attribute_options',
        *_base_columns(),
        sa.Column('attribute_id', UUID(as_uuid=True), nullable=False),
        sa.Column('value', sa.String(120), nullable=False),
        sa.Column('display_value', sa.String(120), nullable=False),
        sa.Column('color_hex', sa.String(7), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['attribute_id'], ['attributes.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('attribute_id', 'value', name='uq_attribute_options_attribute_value')
    )

    op.create_table(
        'variant_attribute_values',
        *_base_columns(),
        sa.Column('variant_id', UUID(as_uuid=True), nullable=False),
        sa.Column('attribute_id', UUID(as_uuid=True), nullable=False),
        sa.Column('attribute_option_id', UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['variant_id'], ['product_variants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['attribute_id'], ['attributes.id']),
        sa.ForeignKeyConstraint(['attribute_option_id'], ['attribute_options.id'])
    )
    op.create_index('ix_variant_attribute_values_variant_id', 'variant_attribute_values', ['variant_id'])

    op.create_table(
        'product_migration_log',
        *_base_columns(),
        sa.Column('original_product_id', UUID(as_uuid=True), nullable=True),
        sa.Column('new_variant_id', UUID(as_uuid=True), nullable=True),
        sa.Column('parent_sku', sa.String(120), nullable=False),
        sa.Column('status', sa.String(20), server_default='completed', nullable=False),
        sa.Column('migrated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_product_migration_log_parent_sku', 'product_migration_log', ['parent_sku'])

    # Attributes the SKU normalizer links variants to
    op.execute(
        "INSERT INTO attributes (slug, name, display_name, attribute_type, render_type) VALUES "
        "('color', 'color', 'Color', 'select', 'swatches'), "
        "('size', 'size', 'Talla', 'select', 'chips'), "
        "('age_group', 'age_group', 'Edad', 'select', 'chips')"
    )

    # =========================================================================
    # PRICING & LOGISTICS TABLES
    # =========================================================================

    op.create_table(
        'b2b_margin_ranges',
        *_base_columns(),
        sa.Column('min_cost', sa.Numeric(12, 2), nullable=False),
        sa.Column('max_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('margin_percent', sa.Numeric(6, 2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'category_shipping_rates',
        *_base_columns(),
        sa.Column('category_id', UUID(as_uuid=True), nullable=False),
        sa.Column('fixed_fee', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('percentage_fee', sa.Numeric(6, 2), server_default='0', nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_category_shipping_rates_category_id', 'category_shipping_rates', ['category_id'])

    op.create_table(
        'destination_countries',
        *_base_columns(),
        sa.Column('code', sa.String(3), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('currency', sa.String(3), server_default='USD', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )

    op.create_table(
        'transit_hubs',
        *_base_columns(),
        sa.Column('code', sa.String(10), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )

    op.create_table(
        'shipping_routes',
        *_base_columns(),
        sa.Column('destination_country_id', UUID(as_uuid=True), nullable=False),
        sa.Column('transit_hub_id', UUID(as_uuid=True), nullable=True),
        sa.Column('is_direct', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['destination_country_id'], ['destination_countries.id']),
        sa.ForeignKeyConstraint(['transit_hub_id'], ['transit_hubs.id'])
    )

    op.create_table(
        'route_logistics_costs',
        *_base_columns(),
        sa.Column('shipping_route_id', UUID(as_uuid=True), nullable=False),
        sa.Column('segment', sa.String(50), nullable=False),
        sa.Column('cost_per_kg', sa.Numeric(12, 4), server_default='0', nullable=False),
        sa.Column('cost_per_cbm', sa.Numeric(12, 4), server_default='0', nullable=False),
        sa.Column('min_cost', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('estimated_days_min', sa.Integer(), server_default='0', nullable=False),
        sa.Column('estimated_days_max', sa.Integer(), server_default='0', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['shipping_route_id'], ['shipping_routes.id'], ondelete='CASCADE')
    )
    op.create_index('ix_route_logistics_costs_shipping_route_id', 'route_logistics_costs', ['shipping_route_id'])

    op.create_table(
        'shipping_rates',
        *_base_columns(),
        sa.Column('key', sa.String(100), nullable=False),
        sa.Column('value', sa.Numeric(12, 4), server_default='0', nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('key')
    )

    op.create_table(
        'departments',
        *_base_columns(),
        sa.Column('code', sa.String(10), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )

    op.create_table(
        'communes',
        *_base_columns(),
        sa.Column('department_id', UUID(as_uuid=True), nullable=False),
        sa.Column('code', sa.String(10), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('rate_per_lb', sa.Numeric(10, 4), server_default='0', nullable=False),
        sa.Column('extra_department_fee', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('delivery_fee', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('operational_fee', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'])
    )
    op.create_index('ix_communes_department_id', 'communes', ['department_id'])

    # =========================================================================
    # ORDERS, NOTIFICATIONS & TRACKING
    # =========================================================================

    op.create_table(
        'orders_b2b',
        *_base_columns(),
        sa.Column('seller_id', UUID(as_uuid=True), nullable=False),
        sa.Column('buyer_id', UUID(as_uuid=True), nullable=True),
        sa.Column('status', sa.String(30), server_default='draft', nullable=False),
        sa.Column('payment_status', sa.String(30), server_default='draft', nullable=False),
        sa.Column('payment_method', sa.String(30), nullable=True),
        sa.Column('total_amount', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('total_quantity', sa.Integer(), server_default='0', nullable=False),
        sa.Column('currency', sa.String(3), server_default='USD', nullable=False),
        sa.Column('stock_reserved', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('reserved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reservation_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_orders_b2b_seller_id', 'orders_b2b', ['seller_id'])
    op.create_index('ix_orders_b2b_buyer_id', 'orders_b2b', ['buyer_id'])
    op.create_index('idx_orders_b2b_payment_expiry', 'orders_b2b', ['payment_status', 'reservation_expires_at'])

    op.create_table(
        'notifications',
        *_base_columns(),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('data', JSONB(), nullable=True),
        sa.Column('is_read', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_email_sent', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_whatsapp_sent', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    op.create_table(
        'catalog_click_tracking',
        *_base_columns(),
        sa.Column('seller_id', UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', UUID(as_uuid=True), nullable=True),
        sa.Column('variant_id', UUID(as_uuid=True), nullable=True),
        sa.Column('source_type', sa.String(30), server_default='direct_link', nullable=False),
        sa.Column('source_campaign', sa.String(120), nullable=True),
        sa.Column('device_type', sa.String(20), nullable=False),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('ip_hash', sa.String(16), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_catalog_click_tracking_seller_id', 'catalog_click_tracking', ['seller_id'])


def downgrade():
    # Orders & tracking
    op.drop_table('catalog_click_tracking')
    op.drop_table('notifications')
    op.drop_table('orders_b2b')

    # Pricing & logistics
    op.drop_table('communes')
    op.drop_table('departments')
    op.drop_table('shipping_rates')
    op.drop_table('route_logistics_costs')
    op.drop_table('shipping_routes')
    op.drop_table('transit_hubs')
    op.drop_table('destination_countries')
    op.drop_table('category_shipping_rates')
    op.drop_table('b2b_margin_ranges')

    # Catalog
    op.drop_table('product_migration_log')
    op.drop_table('variant_attribute_values')
    op.drop_table('attribute_options')
    op.drop_table('attributes')
    op.drop_table('product_variants')
    op.drop_table('products')
