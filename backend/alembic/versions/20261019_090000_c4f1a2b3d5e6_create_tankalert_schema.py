"""create tank, reading and safety event tables

Revision ID: c4f1a2b3d5e6
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'c4f1a2b3d5e6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'tank_groups',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_tank_groups_id'), 'tank_groups', ['id'], unique=False)
    op.create_index(op.f('ix_tank_groups_name'), 'tank_groups', ['name'], unique=True)

    op.create_table(
        'fuel_tanks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('product_type', sa.String(length=100), nullable=True),
        sa.Column('safe_level', sa.Float(), nullable=True),
        sa.Column('min_level', sa.Float(), nullable=True),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('tank_groups.id'), nullable=True),
        sa.Column('subgroup', sa.String(length=255), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_fuel_tanks_id'), 'fuel_tanks', ['id'], unique=False)
    op.create_index(op.f('ix_fuel_tanks_location'), 'fuel_tanks', ['location'], unique=False)
    op.create_index(op.f('ix_fuel_tanks_group_id'), 'fuel_tanks', ['group_id'], unique=False)
    op.create_index(op.f('ix_fuel_tanks_subgroup'), 'fuel_tanks', ['subgroup'], unique=False)

    op.create_table(
        'dip_readings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tank_id', sa.Integer(), sa.ForeignKey('fuel_tanks.id'), nullable=False),
        sa.Column('value', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('recorded_by', sa.String(length=255), nullable=True),
    )
    op.create_index(op.f('ix_dip_readings_id'), 'dip_readings', ['id'], unique=False)
    op.create_index(op.f('ix_dip_readings_tank_id'), 'dip_readings', ['tank_id'], unique=False)
    op.create_index(op.f('ix_dip_readings_created_at'), 'dip_readings', ['created_at'], unique=False)
    op.create_index('ix_dip_readings_tank_created_at', 'dip_readings', ['tank_id', 'created_at'], unique=False)

    op.create_table(
        'drivers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('employee_id', sa.String(length=50), nullable=True, unique=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_drivers_id'), 'drivers', ['id'], unique=False)

    op.create_table(
        'vehicles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('registration', sa.String(length=50), nullable=False),
        sa.Column('fleet', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_vehicles_id'), 'vehicles', ['id'], unique=False)
    op.create_index(op.f('ix_vehicles_registration'), 'vehicles', ['registration'], unique=True)

    op.create_table(
        'safety_events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('external_id', sa.String(length=100), nullable=False),
        sa.Column('event_type', sa.String(length=100), nullable=True),
        sa.Column('occurred_at', sa.DateTime(), nullable=False),
        sa.Column('driver_name', sa.String(length=255), nullable=True),
        sa.Column('vehicle_registration', sa.String(length=50), nullable=True),
        sa.Column('driver_id', sa.Integer(), sa.ForeignKey('drivers.id'), nullable=True),
        sa.Column('driver_match_confidence', sa.Float(), nullable=True),
        sa.Column('vehicle_id', sa.Integer(), sa.ForeignKey('vehicles.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_safety_events_id'), 'safety_events', ['id'], unique=False)
    op.create_index(op.f('ix_safety_events_external_id'), 'safety_events', ['external_id'], unique=True)
    op.create_index(op.f('ix_safety_events_occurred_at'), 'safety_events', ['occurred_at'], unique=False)
    op.create_index(op.f('ix_safety_events_driver_id'), 'safety_events', ['driver_id'], unique=False)
    op.create_index(op.f('ix_safety_events_vehicle_id'), 'safety_events', ['vehicle_id'], unique=False)


def downgrade() -> None:
    op.drop_table('safety_events')
    op.drop_table('vehicles')
    op.drop_table('drivers')
    op.drop_index('ix_dip_readings_tank_created_at', table_name='dip_readings')
    op.drop_table('dip_readings')
    op.drop_table('fuel_tanks')
    op.drop_table('tank_groups')
