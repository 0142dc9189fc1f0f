"""Create organizations, fleet, supplier and expense tables

Revision ID: 20261016_120000
Revises:
Create Date: 2026-10-16 12:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261016_120000'
down_revision = None
branch_labels = None
depends_on = None


def _organization_fk() -> sa.Column:
    return sa.Column(
        'organization_id',
        sa.String(36),
        sa.ForeignKey('organizations.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def _association_table(name: str, target_column: str, target_table: str) -> None:
    op.create_table(
        name,
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            target_column,
            sa.String(36),
            sa.ForeignKey(f'{target_table}.id', ondelete='CASCADE'),
            nullable=False,
            index=True,
        ),
        sa.Column(
            'expense_id',
            sa.String(36),
            sa.ForeignKey('expenses.id', ondelete='CASCADE'),
            nullable=False,
            index=True,
        ),
        sa.UniqueConstraint(target_column, 'expense_id', name=f'uq_{name}_pair'),
    )


def upgrade() -> None:
    """Create the expense schema."""
    op.create_table(
        'organizations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )

    # Fleet
    op.create_table(
        'trucks',
        sa.Column('id', sa.String(36), primary_key=True),
        _organization_fk(),
        sa.Column('registration_no', sa.String(50), nullable=False),
        sa.Column('make', sa.String(100), nullable=True),
        sa.Column('model', sa.String(100), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='available'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        'trips',
        sa.Column('id', sa.String(36), primary_key=True),
        _organization_fk(),
        sa.Column('origin_city', sa.String(100), nullable=False),
        sa.Column('destination_city', sa.String(100), nullable=False),
        sa.Column('scheduled_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='scheduled'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        'drivers',
        sa.Column('id', sa.String(36), primary_key=True),
        _organization_fk(),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'suppliers',
        sa.Column('id', sa.String(36), primary_key=True),
        _organization_fk(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('contact_person', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('payment_terms', sa.Integer(), nullable=False, server_default='30',
                  comment='Payment terms in days'),
        sa.Column('balance', sa.Numeric(14, 2), nullable=False, server_default='0',
                  comment='Sum of unpaid business expenses attributed to this supplier'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        *_timestamps(),
    )

    op.create_table(
        'expense_categories',
        sa.Column('id', sa.String(36), primary_key=True),
        _organization_fk(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(20), nullable=True, comment='Hex chart color'),
        sa.Column('icon', sa.String(50), nullable=True),
        sa.Column('is_truck', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_trip', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_driver', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint('organization_id', 'name', name='uq_expense_categories_org_name'),
    )

    op.create_table(
        'expenses',
        sa.Column('id', sa.String(36), primary_key=True),
        _organization_fk(),
        sa.Column(
            'category_id',
            sa.String(36),
            sa.ForeignKey('expense_categories.id', ondelete='RESTRICT'),
            nullable=False,
            index=True,
        ),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('expense_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_business_expense', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            'supplier_id',
            sa.String(36),
            sa.ForeignKey('suppliers.id', ondelete='SET NULL'),
            nullable=True,
            index=True,
        ),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('paid_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount > 0', name='ck_expenses_amount_positive'),
    )
    # WHERE organization_id = ? AND expense_date BETWEEN ? AND ?
    op.create_index('ix_expenses_org_date', 'expenses', ['organization_id', 'expense_date'])

    _association_table('truck_expenses', 'truck_id', 'trucks')
    _association_table('trip_expenses', 'trip_id', 'trips')
    _association_table('driver_expenses', 'driver_id', 'drivers')


def downgrade() -> None:
    """Drop the expense schema."""
    op.drop_table('driver_expenses')
    op.drop_table('trip_expenses')
    op.drop_table('truck_expenses')
    op.drop_index('ix_expenses_org_date', table_name='expenses')
    op.drop_table('expenses')
    op.drop_table('expense_categories')
    op.drop_table('suppliers')
    op.drop_table('drivers')
    op.drop_table('trips')
    op.drop_table('trucks')
    op.drop_table('organizations')
