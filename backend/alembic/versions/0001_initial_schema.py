"""initial_schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUMS = {
    'userrole': ('STUDENT', 'ADMIN'),
    'requeststatus': (
        'CREATED', 'PAYMENT_SUBMITTED', 'PAYMENT_APPROVED', 'PAYMENT_REJECTED',
        'IN_PROGRESS', 'DELIVERED', 'CLOSED',
    ),
    'paymentstatus': ('PENDING', 'APPROVED', 'REJECTED', 'UNDER_REVIEW'),
    'disputestatus': ('PENDING', 'RESOLVED', 'REJECTED'),
    'ticketstatus': ('OPEN', 'IN_PROGRESS', 'RESOLVED', 'CLOSED'),
    'ticketpriority': ('LOW', 'MEDIUM', 'HIGH', 'URGENT'),
    'notificationtype': (
        'REQUEST_UPDATED', 'REQUEST_DELIVERED', 'PAYMENT_APPROVED', 'PAYMENT_REJECTED',
        'PAYMENT_DISPUTED', 'DISPUTE_RESOLVED', 'TICKET_CREATED', 'TICKET_UPDATED',
    ),
}


def _enum(name: str) -> sa.Enum:
    return sa.Enum(*ENUMS[name], name=name)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('role', _enum('userrole'), nullable=False),
        sa.Column('is_suspended', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('suspended_at', sa.DateTime(), nullable=True),
        sa.Column('suspended_reason', sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'services',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('long_description', sa.Text(), nullable=True),
        sa.Column('ideal_use_case', sa.String(), nullable=True),
        sa.Column('estimated_turnaround', sa.String(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('pricing_note', sa.String(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_services_slug', 'services', ['slug'], unique=True)

    op.create_table(
        'requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('instructions', sa.Text(), nullable=False),
        sa.Column('academic_level', sa.String(), nullable=True),
        sa.Column('deadline', sa.DateTime(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', _enum('requeststatus'), nullable=False),
        sa.Column('rejection_reason', sa.String(), nullable=True),
        sa.Column('delivered_at', sa.DateTime(), nullable=True),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_requests_user_id', 'requests', ['user_id'])
    op.create_index('ix_requests_service_id', 'requests', ['service_id'])
    op.create_index('ix_requests_status', 'requests', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('reference_number', sa.String(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('receipt_url', sa.String(), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('request_id', sa.Integer(), sa.ForeignKey('requests.id'), nullable=False),
        sa.Column('status', _enum('paymentstatus'), nullable=False),
        sa.Column('rejection_reason', sa.String(), nullable=True),
        sa.Column('fraud_flagged', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('fraud_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_payments_reference_number', 'payments', ['reference_number'], unique=True)
    op.create_index('ix_payments_user_id', 'payments', ['user_id'])
    op.create_index('ix_payments_request_id', 'payments', ['request_id'])
    op.create_index('ix_payments_status', 'payments', ['status'])

    op.create_table(
        'payment_disputes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('payment_id', sa.Integer(), sa.ForeignKey('payments.id'), nullable=False),
        sa.Column('explanation', sa.Text(), nullable=False),
        sa.Column('additional_files', sa.Text(), nullable=False, server_default=''),
        sa.Column('admin_response', sa.Text(), nullable=True),
        sa.Column('status', _enum('disputestatus'), nullable=False),
        sa.Column('resolved_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_payment_disputes_payment_id', 'payment_disputes', ['payment_id'], unique=True)

    op.create_table(
        'tickets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('status', _enum('ticketstatus'), nullable=False),
        sa.Column('priority', _enum('ticketpriority'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('request_id', sa.Integer(), sa.ForeignKey('requests.id'), nullable=True),
        sa.Column('resolved_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_tickets_user_id', 'tickets', ['user_id'])
    op.create_index('ix_tickets_status', 'tickets', ['status'])

    op.create_table(
        'ticket_replies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ticket_id', sa.Integer(), sa.ForeignKey('tickets.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('ix_ticket_replies_ticket_id', 'ticket_replies', ['ticket_id'])

    op.create_table(
        'files',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('file_url', sa.String(), nullable=False),
        sa.Column('file_type', sa.String(), nullable=True),
        sa.Column('file_size', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('request_id', sa.Integer(), sa.ForeignKey('requests.id'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_files_request_id', 'files', ['request_id'])

    op.create_table(
        'deliverables',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('file_url', sa.String(), nullable=False),
        sa.Column('file_type', sa.String(), nullable=True),
        sa.Column('file_size', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('request_id', sa.Integer(), sa.ForeignKey('requests.id'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_deliverables_request_id', 'deliverables', ['request_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('type', _enum('notificationtype'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('message', sa.String(), nullable=False),
        sa.Column('link', sa.String(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('entity_type', sa.String(), nullable=False),
        sa.Column('entity_id', sa.String(), nullable=False),
        sa.Column('changes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_entity_type', 'audit_logs', ['entity_type'])

    op.create_table(
        'system_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('key', sa.String(), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('category', sa.String(), nullable=False, server_default='general'),
        *_timestamps(),
    )
    op.create_index('ix_system_settings_key', 'system_settings', ['key'], unique=True)
    op.create_index('ix_system_settings_category', 'system_settings', ['category'])


def downgrade() -> None:
    for table in (
        'system_settings',
        'audit_logs',
        'notifications',
        'deliverables',
        'files',
        'ticket_replies',
        'tickets',
        'payment_disputes',
        'payments',
        'requests',
        'services',
        'users',
    ):
        op.drop_table(table)
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for name in ENUMS:
            op.execute(f"DROP TYPE IF EXISTS {name}")
