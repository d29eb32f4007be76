"""add_digital_signatures_table

Revision ID: e2f3a4b5c6d7
Revises: d1e2f3a4b5c6
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = 'e2f3a4b5c6d7'
down_revision: Union[str, None] = 'd1e2f3a4b5c6'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()
    if conn.dialect.has_table(conn, 'digital_signatures'):
        return
    op.create_table(
        'digital_signatures',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('signature_data', sa.Text(), nullable=False),
        sa.Column(
            'signature_type',
            sa.Enum(
                'general', 'equipment_checkout', 'equipment_return', 'performance_consent',
                'medical_waiver', 'photo_release',
                name='signaturetype',
            ),
            nullable=False,
        ),
        sa.Column('signature_name', sa.String(length=100), nullable=True),
        sa.Column('signature_format', sa.Enum('svg', 'png', 'json', name='signatureformat'), nullable=False),
        sa.Column('signature_width', sa.Integer(), nullable=True),
        sa.Column('signature_height', sa.Integer(), nullable=True),
        sa.Column('stroke_color', sa.String(length=16), nullable=False),
        sa.Column('background_color', sa.String(length=32), nullable=False),
        sa.Column('usage_count', sa.Integer(), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('signature_hash', sa.String(length=64), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('verification_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('verification_method', sa.String(length=64), nullable=True),
        sa.Column('legal_name', sa.String(length=255), nullable=True),
        sa.Column('intent_statement', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_digital_signatures_id'), 'digital_signatures', ['id'], unique=False)
    op.create_index(op.f('ix_digital_signatures_user_id'), 'digital_signatures', ['user_id'], unique=False)
    op.create_index(op.f('ix_digital_signatures_signature_type'), 'digital_signatures', ['signature_type'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_digital_signatures_signature_type'), table_name='digital_signatures')
    op.drop_index(op.f('ix_digital_signatures_user_id'), table_name='digital_signatures')
    op.drop_index(op.f('ix_digital_signatures_id'), table_name='digital_signatures')
    op.drop_table('digital_signatures')
    # Enum typy (PostgreSQL; no-op pro SQLite)
    sa.Enum(name='signatureformat').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='signaturetype').drop(op.get_bind(), checkfirst=True)
