"""Initial migration

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create restaurants table
    op.create_table(
        'restaurants',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('owner_email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), unique=True),
        sa.Column('phone', sa.String(20)),
        sa.Column('address', sa.Text()),
        sa.Column('timezone', sa.String(50), default='America/Sao_Paulo'),
        sa.Column('total_capacity', sa.Integer()),
        sa.Column('public', sa.Boolean(), default=True),
        sa.Column('max_party_size', sa.Integer()),
        sa.Column('max_online_party_size', sa.Integer()),
        sa.Column('booking_cutoff_hours', sa.Float()),
        sa.Column('cancellation_cutoff_hours', sa.Float()),
        sa.Column('modification_cutoff_hours', sa.Float()),
        sa.Column('late_tolerance_minutes', sa.Integer()),
        sa.Column('enable_waitlist', sa.Boolean(), default=False),
        sa.Column('enable_table_joining', sa.Boolean(), default=True),
        sa.Column('enable_modifications', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create environments table
    op.create_table(
        'environments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('capacity', sa.Integer()),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create shifts table
    op.create_table(
        'shifts',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('slot_interval_minutes', sa.Integer(), default=15),
        sa.Column('default_dwell_minutes', sa.Integer(), default=90),
        sa.Column('default_buffer_minutes', sa.Integer(), default=10),
        sa.Column('max_capacity', sa.Integer()),
        sa.Column('days_of_week', postgresql.JSON(), default=[]),
        sa.Column('active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create tables table
    op.create_table(
        'tables',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('environment_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('environments.id')),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('seats', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('status', sa.String(20), default='AVAILABLE'),
        sa.Column('position_x', sa.Float()),
        sa.Column('position_y', sa.Float()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create customers table
    op.create_table(
        'customers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('phone_whatsapp', sa.String(20), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('birth_date', sa.Date()),
        sa.Column('total_reservations', sa.Integer(), default=0),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create reservations table
    op.create_table(
        'reservations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('customers.id')),
        sa.Column('shift_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('shifts.id'), nullable=False),
        sa.Column('reservation_code', sa.String(16), unique=True, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('slot_time', sa.String(5), nullable=False),
        sa.Column('party_size', sa.Integer(), nullable=False),
        sa.Column('table_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tables.id')),
        sa.Column('linked_tables', postgresql.JSON(), default=[]),
        sa.Column('dwell_minutes', sa.Integer()),
        sa.Column('buffer_minutes', sa.Integer()),
        sa.Column('status', sa.String(20), default='PENDING'),
        sa.Column('source', sa.String(20), default='PHONE'),
        sa.Column('notes', sa.Text()),
        sa.Column('tags', postgresql.JSON(), default=[]),
        sa.Column('modification_log', postgresql.JSON(), default=[]),
        sa.Column('cancelled_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create indexes
    op.create_index('ix_restaurants_owner_email', 'restaurants', ['owner_email'])
    op.create_index('ix_shifts_restaurant_id', 'shifts', ['restaurant_id'])
    op.create_index('ix_tables_restaurant_id', 'tables', ['restaurant_id'])
    op.create_index('ix_customers_phone_whatsapp', 'customers', ['phone_whatsapp'])
    op.create_index('ix_reservations_restaurant_id', 'reservations', ['restaurant_id'])
    op.create_index('ix_reservations_date', 'reservations', ['date'])


def downgrade() -> None:
    op.drop_table('reservations')
    op.drop_table('customers')
    op.drop_table('tables')
    op.drop_table('shifts')
    op.drop_table('environments')
    op.drop_table('restaurants')
