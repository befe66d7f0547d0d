"""initial schema

Revision ID: a1c4e7f20b31
Revises:
Create Date: 2026-10-16 09:00:00.000000

Creates users with their volunteer/charity profiles, volunteer availability,
donations and pickup requests. Coordinates are stored as JSON [lat, lon]
pairs; distance filtering happens in the application.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a1c4e7f20b31'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('location', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )

    op.create_table(
        'volunteer_profiles',
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('transportation_mode', sa.String(30), nullable=True),
        sa.Column('verification_status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('skills', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('assigned_tasks_count', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('user_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )

    op.create_table(
        'charity_profiles',
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('charity_name', sa.String(255), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('registration_number', sa.String(100), nullable=True),
        sa.Column('verification_status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('needed_categories', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('user_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )

    op.create_table(
        'volunteer_availability',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('volunteer_id', sa.UUID(), nullable=False),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('recurring_schedule', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('specific_dates', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('date_range', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('general_time_slots', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('temporary_unavailability', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('preferences', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='{}'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['volunteer_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('volunteer_id', name='uq_volunteer_availability_volunteer_id'),
    )
    op.create_index('ix_volunteer_availability_type_active', 'volunteer_availability', ['type', 'is_active'])

    op.create_table(
        'donations',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('public_id', sa.String(50), nullable=False),
        sa.Column('donor_id', sa.UUID(), nullable=True),
        sa.Column('charity_id', sa.UUID(), nullable=False),
        sa.Column('donor_name', sa.String(255), nullable=False),
        sa.Column('donor_phone', sa.String(20), nullable=False),
        sa.Column('donor_email', sa.String(255), nullable=True),
        sa.Column('organization_name', sa.String(255), nullable=True),
        sa.Column('organization_type', sa.String(30), nullable=False, server_default='individual'),
        sa.Column('pickup_address', sa.Text(), nullable=False),
        sa.Column('pickup_coordinates', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('access_notes', sa.Text(), nullable=True),
        sa.Column('items', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('total_weight', sa.String(50), nullable=True),
        sa.Column('requires_refrigeration', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('fragile_items', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('delivery_instructions', sa.Text(), nullable=True),
        sa.Column('availability_type', sa.String(20), nullable=False, server_default='flexible'),
        sa.Column('preferred_date', sa.Date(), nullable=True),
        sa.Column('preferred_time_start', sa.String(5), nullable=True),
        sa.Column('preferred_time_end', sa.String(5), nullable=True),
        sa.Column('urgency_level', sa.String(10), nullable=False, server_default='medium'),
        sa.Column('additional_notes', sa.Text(), nullable=True),
        sa.Column('photo_consent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('contact_preference', sa.String(10), nullable=False, server_default='phone'),
        sa.Column('status', sa.String(20), nullable=False, server_default='submitted'),
        sa.Column('thank_you_note', sa.Text(), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['donor_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['charity_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('public_id', name='uq_donations_public_id'),
    )
    op.create_index('ix_donations_status', 'donations', ['status'])
    op.create_index('ix_donation_status_urgency', 'donations', ['status', 'urgency_level'])
    op.create_index('ix_donation_charity_id', 'donations', ['charity_id'])
    op.create_index('ix_donation_donor_id', 'donations', ['donor_id'])

    op.create_table(
        'pickup_requests',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('donation_id', sa.UUID(), nullable=False),
        sa.Column('charity_id', sa.UUID(), nullable=False),
        sa.Column('volunteer_id', sa.UUID(), nullable=True),
        sa.Column('pickup_address', sa.Text(), nullable=False),
        sa.Column('pickup_coordinates', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('delivery_address', sa.Text(), nullable=True),
        sa.Column('contact_person', sa.String(255), nullable=False),
        sa.Column('contact_phone', sa.String(20), nullable=False),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('items', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('priority', sa.String(10), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(20), nullable=False, server_default='available'),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('request_metadata', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='{}'),
        sa.Column('status_notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['donation_id'], ['donations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['charity_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['volunteer_id'], ['users.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('donation_id', name='uq_pickup_requests_donation_id'),
    )
    op.create_index('ix_pickup_status_priority', 'pickup_requests', ['status', 'priority'])
    op.create_index('ix_pickup_status_created_at', 'pickup_requests', ['status', 'created_at'])
    op.create_index('ix_pickup_volunteer_status', 'pickup_requests', ['volunteer_id', 'status'])
    op.create_index('ix_pickup_charity_id', 'pickup_requests', ['charity_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_pickup_charity_id', table_name='pickup_requests')
    op.drop_index('ix_pickup_volunteer_status', table_name='pickup_requests')
    op.drop_index('ix_pickup_status_created_at', table_name='pickup_requests')
    op.drop_index('ix_pickup_status_priority', table_name='pickup_requests')
    op.drop_table('pickup_requests')

    op.drop_index('ix_donation_donor_id', table_name='donations')
    op.drop_index('ix_donation_charity_id', table_name='donations')
    op.drop_index('ix_donation_status_urgency', table_name='donations')
    op.drop_index('ix_donations_status', table_name='donations')
    op.drop_table('donations')

    op.drop_index('ix_volunteer_availability_type_active', table_name='volunteer_availability')
    op.drop_table('volunteer_availability')

    op.drop_table('charity_profiles')
    op.drop_table('volunteer_profiles')
    op.drop_table('users')
