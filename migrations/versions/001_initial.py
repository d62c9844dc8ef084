"""Initial migration - create all tables

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Serialized config values (SKU parameter blob lives here)
    op.create_table(
        'config_values',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('path', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('value', sa.Text, nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Flags (per-SKU forecast cooldown)
    op.create_table(
        'flags',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('flag_code', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('state', sa.SmallInteger, nullable=False, default=0),
        sa.Column('flag_data', sa.Text, nullable=True),
        sa.Column('last_update', sa.DateTime(timezone=True), nullable=False),
    )

    # Admin inbox notifications
    op.create_table(
        'admin_notifications',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('severity', sa.SmallInteger, nullable=False, default=4),
        sa.Column('date_added', sa.DateTime(timezone=True), nullable=False),
        sa.Column('title', sa.String(255), nullable=False, index=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('url', sa.String(255), nullable=True),
        sa.Column('is_read', sa.Boolean, nullable=False, default=False),
        sa.Column('is_removed', sa.Boolean, nullable=False, default=False),
    )

    # Historical order lines
    op.create_table(
        'sales_order_items',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('order_id', sa.Integer, nullable=False, index=True),
        sa.Column('product_id', sa.Integer, nullable=True),
        sa.Column('sku', sa.String(64), nullable=True, index=True),
        sa.Column('qty_ordered', sa.Numeric(12, 4), nullable=False, default=0),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
    )

    # Current stock levels
    op.create_table(
        'stock_items',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer, nullable=False, unique=True, index=True),
        sa.Column('qty', sa.Numeric(12, 4), nullable=False, default=0),
    )


def downgrade() -> None:
    op.drop_table('stock_items')
    op.drop_table('sales_order_items')
    op.drop_table('admin_notifications')
    op.drop_table('flags')
    op.drop_table('config_values')
