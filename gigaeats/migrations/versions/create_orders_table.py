"""create orders table

Revision ID: create_orders_table
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = 'create_orders_table'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'orders',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('order_number', sa.String(50), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='pending'),
        sa.Column('vendor_id', sa.String(36), nullable=False),
        sa.Column('customer_id', sa.String(36), nullable=False),
        sa.Column('sales_agent_id', sa.String(36), nullable=True),
        sa.Column('assigned_driver_id', sa.String(36), nullable=True),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('commission_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('actual_delivery_time', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_status', 'orders', ['status'], unique=False)
    # History lookups: owner + the timestamp that role's history is anchored to
    op.create_index('ix_orders_vendor_created', 'orders', ['vendor_id', 'created_at'], unique=False)
    op.create_index('ix_orders_customer_created', 'orders', ['customer_id', 'created_at'], unique=False)
    op.create_index('ix_orders_agent_created', 'orders', ['sales_agent_id', 'created_at'], unique=False)
    op.create_index('ix_orders_driver_delivered', 'orders', ['assigned_driver_id', 'actual_delivery_time'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_orders_driver_delivered', table_name='orders')
    op.drop_index('ix_orders_agent_created', table_name='orders')
    op.drop_index('ix_orders_customer_created', table_name='orders')
    op.drop_index('ix_orders_vendor_created', table_name='orders')
    op.drop_index('ix_orders_status', table_name='orders')
    op.drop_table('orders')
