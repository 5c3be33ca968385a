"""Master schema: subscription plans and tenant directory

Revision ID: 001_master_schema
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001_master_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create subscription_plans table
    op.create_table(
        'subscription_plans',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.Enum('BASIC', 'STANDARD', 'PREMIUM', name='planname'), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('max_users', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_subscription_plans_name', 'subscription_plans', ['name'], unique=True)
    op.create_index('ix_subscription_plans_is_active', 'subscription_plans', ['is_active'])

    # Create tenants table
    op.create_table(
        'tenants',
        sa.Column('tenant_id', sa.Integer(), primary_key=True),
        sa.Column('restaurant_name', sa.String(100), nullable=False),
        sa.Column('subdomain', sa.String(30), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('database_name', sa.String(63), nullable=False, unique=True),
        sa.Column(
            'plan_id',
            sa.Integer(),
            sa.ForeignKey('subscription_plans.id', ondelete='RESTRICT'),
            nullable=True,
        ),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_payment_done', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_provisioned', sa.Boolean(), nullable=False),
        sa.Column('is_first_login', sa.Boolean(), nullable=False),
        sa.Column('notified', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_tenants_subdomain', 'tenants', ['subdomain'], unique=True)
    op.create_index('ix_tenants_email', 'tenants', ['email'], unique=True)
    op.create_index('ix_tenants_plan_id', 'tenants', ['plan_id'])
    op.create_index('ix_tenants_is_active', 'tenants', ['is_active'])
    op.create_index('ix_tenants_deleted_at', 'tenants', ['deleted_at'])


def downgrade():
    op.drop_table('tenants')
    op.drop_table('subscription_plans')
    sa.Enum(name='planname').drop(op.get_bind(), checkfirst=True)
