"""Initial HouseDirect schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

Profiles, agents, properties, verification requests, reports, leads with
activities and notes, messages, audit_log and jobs_outbox.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUMS = {
    'usertype': ('buyer', 'seller', 'agent', 'admin'),
    'entityverificationstatus': ('pending', 'verified', 'rejected'),
    'verificationentitytype': ('agent', 'property'),
    'verificationstatus': ('pending', 'approved', 'rejected'),
    'reportentitytype': ('property', 'agent', 'user'),
    'reportstatus': ('new', 'investigating', 'resolved', 'dismissed'),
    'leadstatus': (
        'new', 'contacted', 'viewing_scheduled', 'viewing_completed', 'offer_made',
        'negotiating', 'closed_won', 'closed_lost', 'nurturing',
    ),
    'leadpriority': ('low', 'medium', 'high', 'urgent'),
    'leadinteresttype': ('buy', 'rent', 'lease', 'sell'),
    'leadactivitytype': (
        'call', 'email', 'meeting', 'viewing', 'message', 'note', 'offer', 'contract', 'other',
    ),
    'leadactivitystatus': ('scheduled', 'completed'),
    'auditaction': (
        'verification_submitted', 'verification_approved', 'verification_rejected',
        'report_created', 'report_status_changed', 'user_updated', 'admin_message_emailed',
    ),
    'jobstatus': ('pending', 'processing', 'completed', 'failed', 'dead_letter'),
}


def enum(name: str) -> postgresql.ENUM:
    """Column type for an enum created up-front in upgrade()."""
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def upgrade() -> None:
    # === ENUMS ===
    for name, values in ENUMS.items():
        labels = ", ".join(f"'{value}'" for value in values)
        op.execute(f"CREATE TYPE {name} AS ENUM ({labels})")

    # === PROFILES ===
    op.create_table(
        'profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('firebase_uid', sa.String(128), unique=True, nullable=False, index=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('user_type', enum('usertype'), nullable=False, server_default='buyer', index=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    # === AGENTS ===
    op.create_table(
        'agents',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), unique=True, nullable=False, index=True),
        sa.Column('agency_name', sa.String(255), nullable=True),
        sa.Column('license_number', sa.String(100), nullable=True),
        sa.Column('verification_status', enum('entityverificationstatus'), nullable=False, server_default='pending', index=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    # === PROPERTIES ===
    op.create_table(
        'properties',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('agent_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('agents.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('price', sa.Numeric(14, 2), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False, server_default='NGN'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('verification_status', enum('entityverificationstatus'), nullable=False, server_default='pending', index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    # === VERIFICATIONS ===
    op.create_table(
        'verifications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('entity_type', enum('verificationentitytype'), nullable=False),
        sa.Column('entity_id', postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column('document_type', sa.String(100), nullable=False),
        sa.Column('document_url', sa.Text(), nullable=False),
        sa.Column('status', enum('verificationstatus'), nullable=False, server_default='pending', index=True),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('submitted_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    # === REPORTS ===
    op.create_table(
        'reports',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('entity_type', enum('reportentitytype'), nullable=False),
        sa.Column('entity_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('reporter_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('reason', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', enum('reportstatus'), nullable=False, server_default='new', index=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('reporter_id', 'entity_type', 'entity_id', name='uq_reports_reporter_target'),
    )
    op.create_index('ix_reports_target', 'reports', ['entity_type', 'entity_id'])

    # === LEADS ===
    op.create_table(
        'leads',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('agent_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('agents.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='SET NULL'), nullable=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, index=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('source', sa.String(50), nullable=False, server_default='property_inquiry'),
        sa.Column('status', enum('leadstatus'), nullable=False, server_default='new', index=True),
        sa.Column('interest_type', enum('leadinteresttype'), nullable=False, server_default='buy'),
        sa.Column('budget_min', sa.Numeric(14, 2), nullable=True),
        sa.Column('budget_max', sa.Numeric(14, 2), nullable=True),
        sa.Column('preferred_location', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('priority', enum('leadpriority'), nullable=False, server_default='medium'),
        sa.Column('lead_score', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('first_contact_at', sa.DateTime(), nullable=True),
        sa.Column('last_contact_at', sa.DateTime(), nullable=True),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('lead_score BETWEEN 0 AND 100', name='ck_leads_score_range'),
    )

    op.create_table(
        'lead_activities',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('lead_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('leads.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('agent_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('agents.id', ondelete='CASCADE'), nullable=False),
        sa.Column('activity_type', enum('leadactivitytype'), nullable=False),
        sa.Column('subject', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('scheduled_at', sa.DateTime(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('status', enum('leadactivitystatus'), nullable=False, server_default='completed'),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('message_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'lead_notes',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('lead_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('leads.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('agent_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('agents.id', ondelete='CASCADE'), nullable=False),
        sa.Column('note', sa.Text(), nullable=False),
        sa.Column('is_important', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_private', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    # === MESSAGES ===
    op.create_table(
        'messages',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('property_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('sender_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('recipient_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    # === AUDIT LOG ===
    op.create_table(
        'audit_log',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('action', enum('auditaction'), nullable=False, index=True),
        sa.Column('resource_type', sa.String(50), nullable=False),
        sa.Column('resource_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('details', postgresql.JSONB(), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    # === JOBS OUTBOX ===
    op.create_table(
        'jobs_outbox',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('type', sa.String(100), nullable=False, index=True),
        sa.Column('payload', postgresql.JSONB(), nullable=False),
        sa.Column('status', enum('jobstatus'), nullable=False, server_default='pending', index=True),
        sa.Column('unique_scope', sa.String(500), nullable=False, unique=True),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_attempts', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('last_error', sa.Text(), nullable=True),
        sa.Column('run_after', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_jobs_outbox_pending', 'jobs_outbox', ['status', 'run_after'])


def downgrade() -> None:
    op.drop_index('ix_jobs_outbox_pending', table_name='jobs_outbox')
    op.drop_table('jobs_outbox')
    op.drop_table('audit_log')
    op.drop_table('messages')
    op.drop_table('lead_notes')
    op.drop_table('lead_activities')
    op.drop_table('leads')
    op.drop_index('ix_reports_target', table_name='reports')
    op.drop_table('reports')
    op.drop_table('verifications')
    op.drop_table('properties')
    op.drop_table('agents')
    op.drop_table('profiles')

    for name in reversed(list(ENUMS)):
        op.execute(f'DROP TYPE IF EXISTS {name}')
