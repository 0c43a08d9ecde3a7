"""initial

Revision ID: 001_initial
Revises:
Create Date: 2026-03-01 10:00:00.000000

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
    # Towers
    op.create_table('towers',
        sa.Column('id', sa.String(length=4), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Flats
    op.create_table('flats',
        sa.Column('id', sa.String(length=16), nullable=False),
        sa.Column('tower_id', sa.String(length=4), nullable=False),
        sa.Column('floor', sa.Integer(), nullable=False),
        sa.Column('flat_number', sa.Integer(), nullable=False),
        sa.Column('owner_name', sa.String(), nullable=True),
        sa.Column('maintenance_status', sa.String(), nullable=False),
        sa.CheckConstraint("substr(id, 1, length(tower_id) + 1) = tower_id || '-'", name='ck_flat_tower_prefix'),
        sa.ForeignKeyConstraint(['tower_id'], ['towers.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    # Users
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('flat_id', sa.String(length=16), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['flat_id'], ['flats.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    # Billing cycles (one per generated batch)
    op.create_table('billing_cycles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('label', sa.String(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('due_date', sa.DATE(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_billing_cycles_label'), 'billing_cycles', ['label'], unique=True)

    # Bills
    op.create_table('bills',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('flat_id', sa.String(length=16), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('cycle_label', sa.String(), nullable=False),
        sa.Column('cycle_id', sa.Integer(), nullable=True),
        sa.Column('due_date', sa.DATE(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('amount > 0', name='ck_bill_amount_positive'),
        sa.ForeignKeyConstraint(['cycle_id'], ['billing_cycles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['flat_id'], ['flats.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bills_flat_id'), 'bills', ['flat_id'], unique=False)
    op.create_index(op.f('ix_bills_cycle_label'), 'bills', ['cycle_label'], unique=False)

    # Complaints
    op.create_table('complaints',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('flat_id', sa.String(length=16), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['flat_id'], ['flats.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_complaints_flat_id'), 'complaints', ['flat_id'], unique=False)

    # Alerts
    op.create_table('alerts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tower', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('severity', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Events
    op.create_table('events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('date', sa.DATE(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Bookings
    op.create_table('bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('flat_id', sa.String(length=16), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('amenity', sa.String(), nullable=False),
        sa.Column('date', sa.DATE(), nullable=False),
        sa.Column('time_slot', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['flat_id'], ['flats.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bookings_flat_id'), 'bookings', ['flat_id'], unique=False)
    # Partial unique index: cancelled bookings release the slot
    op.create_index(
        'uq_booking_slot', 'bookings', ['amenity', 'date', 'time_slot'], unique=True,
        sqlite_where=sa.text("status != 'Cancelled'"),
        postgresql_where=sa.text("status != 'Cancelled'")
    )

    # Visitors
    op.create_table('visitors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('tower', sa.String(), nullable=False),
        sa.Column('flat_id', sa.String(length=16), nullable=False),
        sa.Column('entry_time', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('exit_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.CheckConstraint(
            "(status = 'In' AND exit_time IS NULL) OR (status = 'Out' AND exit_time IS NOT NULL)",
            name='ck_visitor_exit_matches_status'
        ),
        sa.ForeignKeyConstraint(['flat_id'], ['flats.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_visitors_flat_id'), 'visitors', ['flat_id'], unique=False)

    # Expenses
    op.create_table('expenses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('date', sa.DATE(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_expenses_date'), 'expenses', ['date'], unique=False)

    # Activity log
    op.create_table('activity_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    op.drop_table('activity_logs')
    op.drop_index(op.f('ix_expenses_date'), table_name='expenses')
    op.drop_table('expenses')
    op.drop_index(op.f('ix_visitors_flat_id'), table_name='visitors')
    op.drop_table('visitors')
    op.drop_index('uq_booking_slot', table_name='bookings')
    op.drop_index(op.f('ix_bookings_flat_id'), table_name='bookings')
    op.drop_table('bookings')
    op.drop_table('events')
    op.drop_table('alerts')
    op.drop_index(op.f('ix_complaints_flat_id'), table_name='complaints')
    op.drop_table('complaints')
    op.drop_index(op.f('ix_bills_cycle_label'), table_name='bills')
    op.drop_index(op.f('ix_bills_flat_id'), table_name='bills')
    op.drop_table('bills')
    op.drop_index(op.f('ix_billing_cycles_label'), table_name='billing_cycles')
    op.drop_table('billing_cycles')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_table('users')
    op.drop_table('flats')
    op.drop_table('towers')
