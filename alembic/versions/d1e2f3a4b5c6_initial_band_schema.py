"""initial_band_schema

Revision ID: d1e2f3a4b5c6
Revises:
Create Date: 2026-10-12 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = 'd1e2f3a4b5c6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_CONDITIONS = ('excellent', 'good', 'fair', 'poor', 'repair_needed')


def _ts_columns() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_ts_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'equipment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('qr_code', sa.String(length=64), nullable=False),
        sa.Column('serial_number', sa.String(length=128), nullable=True),
        sa.Column('make', sa.String(length=128), nullable=False),
        sa.Column('model', sa.String(length=128), nullable=False),
        sa.Column(
            'category',
            sa.Enum('brass', 'woodwind', 'percussion', 'string', 'electronic', 'accessory',
                    name='equipmentcategory'),
            nullable=False,
        ),
        sa.Column('condition', sa.Enum(*_CONDITIONS, name='equipmentcondition'), nullable=False),
        sa.Column(
            'status',
            sa.Enum('available', 'checked_out', 'in_maintenance', 'retired', 'missing',
                    name='equipmentstatus'),
            nullable=False,
        ),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('description', sa.String(length=2000), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('purchase_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('warranty_expiration', sa.Date(), nullable=True),
        sa.Column('last_maintenance_date', sa.Date(), nullable=True),
        sa.Column('next_maintenance_date', sa.Date(), nullable=True),
        sa.Column('maintenance_interval_months', sa.Integer(), nullable=False),
        sa.Column('assigned_to_id', sa.Integer(), nullable=True),
        sa.Column('assignment_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expected_return_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_ts_columns(),
        sa.ForeignKeyConstraint(['assigned_to_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_equipment_id'), 'equipment', ['id'], unique=False)
    op.create_index(op.f('ix_equipment_qr_code'), 'equipment', ['qr_code'], unique=True)
    op.create_index(op.f('ix_equipment_category'), 'equipment', ['category'], unique=False)
    op.create_index(op.f('ix_equipment_status'), 'equipment', ['status'], unique=False)
    op.create_index(op.f('ix_equipment_assigned_to_id'), 'equipment', ['assigned_to_id'], unique=False)

    op.create_table(
        'band_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column(
            'event_type',
            sa.Enum('concert', 'competition', 'parade', 'festival', 'practice', 'rehearsal',
                    'masterclass', 'recording', 'community_event', 'fundraiser', name='eventtype'),
            nullable=False,
        ),
        sa.Column(
            'status',
            sa.Enum('planned', 'approved', 'confirmed', 'in_progress', 'completed', 'cancelled',
                    name='eventstatus'),
            nullable=False,
        ),
        sa.Column('event_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('venue', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('director_id', sa.Integer(), nullable=True),
        *_ts_columns(),
        sa.ForeignKeyConstraint(['director_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_band_events_id'), 'band_events', ['id'], unique=False)
    op.create_index(op.f('ix_band_events_event_date'), 'band_events', ['event_date'], unique=False)

    op.create_table(
        'equipment_assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('equipment_id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending_checkout', 'checked_out', 'pending_return', 'returned', 'overdue',
                    'lost', 'damaged', name='assignmentstatus'),
            nullable=False,
        ),
        sa.Column('checkout_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expected_return_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('actual_return_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('checkout_condition', sa.Enum(*_CONDITIONS, name='equipmentcondition'), nullable=True),
        sa.Column('return_condition', sa.Enum(*_CONDITIONS, name='equipmentcondition'), nullable=True),
        sa.Column('checked_out_by', sa.Integer(), nullable=True),
        sa.Column('returned_to', sa.Integer(), nullable=True),
        sa.Column('peer_reviewer_id', sa.Integer(), nullable=True),
        sa.Column('supervisor_approved_by', sa.Integer(), nullable=True),
        sa.Column('assignment_purpose', sa.String(length=64), nullable=True),
        sa.Column('checkout_notes', sa.Text(), nullable=True),
        sa.Column('return_notes', sa.Text(), nullable=True),
        sa.Column('damage_notes', sa.Text(), nullable=True),
        *_ts_columns(),
        sa.ForeignKeyConstraint(['equipment_id'], ['equipment.id']),
        sa.ForeignKeyConstraint(['student_id'], ['users.id']),
        sa.ForeignKeyConstraint(['event_id'], ['band_events.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_equipment_assignments_id'), 'equipment_assignments', ['id'], unique=False)
    op.create_index(op.f('ix_equipment_assignments_equipment_id'), 'equipment_assignments', ['equipment_id'], unique=False)
    op.create_index(op.f('ix_equipment_assignments_student_id'), 'equipment_assignments', ['student_id'], unique=False)
    op.create_index(op.f('ix_equipment_assignments_event_id'), 'equipment_assignments', ['event_id'], unique=False)
    op.create_index(op.f('ix_equipment_assignments_status'), 'equipment_assignments', ['status'], unique=False)
    # Nejvýše jedna aktivní výpůjčka na kus
    op.create_index(
        'uq_active_assignment_per_equipment',
        'equipment_assignments',
        ['equipment_id'],
        unique=True,
        sqlite_where=sa.text("status = 'checked_out'"),
        postgresql_where=sa.text("status = 'checked_out'"),
    )

    op.create_table(
        'equipment_maintenance',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('equipment_id', sa.Integer(), nullable=False),
        sa.Column(
            'maintenance_type',
            sa.Enum('preventive', 'repair', 'cleaning', 'calibration', 'inspection', 'upgrade',
                    'replacement', name='maintenancetype'),
            nullable=False,
        ),
        sa.Column(
            'status',
            sa.Enum('scheduled', 'in_progress', 'completed', 'cancelled', 'postponed',
                    name='maintenancestatus'),
            nullable=False,
        ),
        sa.Column('priority', sa.Enum('low', 'medium', 'high', 'urgent', name='maintenancepriority'), nullable=False),
        sa.Column('scheduled_date', sa.Date(), nullable=True),
        sa.Column('completed_date', sa.Date(), nullable=True),
        sa.Column('condition_before', sa.Enum(*_CONDITIONS, name='equipmentcondition'), nullable=True),
        sa.Column('condition_after', sa.Enum(*_CONDITIONS, name='equipmentcondition'), nullable=True),
        sa.Column('estimated_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('actual_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('technician_name', sa.String(length=255), nullable=True),
        sa.Column('work_description', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('completed_by', sa.Integer(), nullable=True),
        *_ts_columns(),
        sa.ForeignKeyConstraint(['equipment_id'], ['equipment.id']),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.ForeignKeyConstraint(['completed_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_equipment_maintenance_id'), 'equipment_maintenance', ['id'], unique=False)
    op.create_index(op.f('ix_equipment_maintenance_equipment_id'), 'equipment_maintenance', ['equipment_id'], unique=False)
    op.create_index(op.f('ix_equipment_maintenance_status'), 'equipment_maintenance', ['status'], unique=False)


def downgrade() -> None:
    op.drop_table('equipment_maintenance')
    op.drop_index('uq_active_assignment_per_equipment', table_name='equipment_assignments')
    op.drop_table('equipment_assignments')
    op.drop_table('band_events')
    op.drop_table('equipment')
    op.drop_table('users')
    # Enum typy (PostgreSQL; no-op pro SQLite)
    for name in ('maintenancepriority', 'maintenancestatus', 'maintenancetype', 'assignmentstatus',
                 'eventstatus', 'eventtype', 'equipmentstatus', 'equipmentcondition', 'equipmentcategory'):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
