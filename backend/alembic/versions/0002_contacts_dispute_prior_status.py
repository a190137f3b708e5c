"""contact messages and dispute prior payment status

Revision ID: 0002_contacts
Revises: 0001_initial
Create Date: 2026-10-19 12:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '0002_contacts'
down_revision: Union[str, None] = '0001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_STATUSES = ('PENDING', 'APPROVED', 'REJECTED', 'UNDER_REVIEW')
CONTACT_STATUSES = ('PENDING', 'RESPONDED', 'ARCHIVED')


def upgrade() -> None:
    # The paymentstatus type already exists; add_column does not recreate it.
    with op.batch_alter_table('payment_disputes') as batch:
        batch.add_column(
            sa.Column(
                'payment_status_before',
                sa.Enum(*PAYMENT_STATUSES, name='paymentstatus'),
                nullable=True,
            )
        )

    op.create_table(
        'contact_messages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('subject', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.Enum(*CONTACT_STATUSES, name='contactstatus'), nullable=False),
        sa.Column('response', sa.Text(), nullable=True),
        sa.Column('admin_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_contact_messages_email', 'contact_messages', ['email'])
    op.create_index('ix_contact_messages_status', 'contact_messages', ['status'])


def downgrade() -> None:
    op.drop_table('contact_messages')
    with op.batch_alter_table('payment_disputes') as batch:
        batch.drop_column('payment_status_before')
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        op.execute("DROP TYPE IF EXISTS contactstatus")
