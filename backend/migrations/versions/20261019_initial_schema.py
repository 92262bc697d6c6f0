"""Initial schema: users, sessions, reference data, journey plans, sales

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ==========================================================================
    # 1. USERS AND SESSIONS
    # ==========================================================================
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=120), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('employee_cnic', sa.String(length=32), nullable=True),
        sa.Column('cnic_number', sa.String(length=32), nullable=True),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table('session_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_revoked', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('revoked_reason', sa.String(length=120), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token_hash'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_session_tokens_user', 'session_tokens', ['user_id'])

    # ==========================================================================
    # 2. REFERENCE DATA
    # ==========================================================================
    op.create_table('cities',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sqlite_autoincrement=True,
    )

    op.create_table('locations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('mart_name', sa.String(length=255), nullable=False),
        sa.Column('area', sa.String(length=255), nullable=False),
        sa.Column('city_id', sa.String(length=64), nullable=True),
        sa.Column('city_name', sa.String(length=120), nullable=True),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lng', sa.Float(), nullable=True),
        sa.Column('radius_meters', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_locations_city_id', 'locations', ['city_id'])

    op.create_table('products',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('brand_name', sa.String(length=255), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )

    # ==========================================================================
    # 3. JOURNEY PLANS (one per supervisor)
    # ==========================================================================
    op.create_table('journey_plans',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('supervisor_id', sa.Integer(), nullable=False),
        sa.Column('period_type', sa.String(length=16), nullable=False),
        sa.Column('start_date', sa.String(length=10), nullable=False),
        sa.Column('end_date', sa.String(length=10), nullable=False),
        sa.Column('days', sa.JSON(), nullable=False),
        sa.Column('locations_snapshot', sa.JSON(), nullable=False),
        sa.Column('days_count', sa.Integer(), nullable=False),
        sa.Column('selected_days_count', sa.Integer(), nullable=False),
        sa.Column('copied_from', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['supervisor_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('supervisor_id', name='uq_journey_plans_supervisor'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_journey_plans_updated_at', 'journey_plans', ['updated_at'])

    # ==========================================================================
    # 4. SALES (append-only, snapshot fields)
    # ==========================================================================
    op.create_table('sales',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('employee_name', sa.String(length=255), nullable=True),
        sa.Column('location_id', sa.Integer(), nullable=False),
        sa.Column('location_name', sa.String(length=255), nullable=True),
        sa.Column('product_id', sa.String(length=64), nullable=False),
        sa.Column('product_name', sa.String(length=255), nullable=True),
        sa.Column('product_weight', sa.Float(), nullable=True),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('total_weight', sa.Float(), nullable=False),
        sa.Column('sale_date', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_sales_product_id', 'sales', ['product_id'])
    op.create_index('ix_sales_sale_date', 'sales', ['sale_date'])
    op.create_index('ix_sales_employee_date', 'sales', ['employee_id', 'sale_date'])
    op.create_index('ix_sales_location_date', 'sales', ['location_id', 'sale_date'])
    op.create_index('ix_sales_created_at', 'sales', ['created_at'])


def downgrade():
    op.drop_table('sales')
    op.drop_table('journey_plans')
    op.drop_table('products')
    op.drop_table('locations')
    op.drop_table('cities')
    op.drop_table('session_tokens')
    op.drop_table('users')
