"""initial access control schema

Revision ID: 0001a7c3e2d1
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001a7c3e2d1'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def _owner(table: str) -> tuple[sa.Column, str]:
    return sa.Column('owner_admin_id', sa.String(100), nullable=True), f'ix_{table}_owner_admin_id'


def upgrade() -> None:
    owner, owner_ix = _owner('departments')
    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        owner,
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index(owner_ix, 'departments', ['owner_admin_id'])

    owner, owner_ix = _owner('employees')
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(50), nullable=False),
        sa.Column('last_name', sa.String(50), nullable=False),
        sa.Column('email', sa.String(100), nullable=False),
        sa.Column('department_id', sa.Integer(), nullable=True),
        sa.Column('employment_status', sa.String(20), nullable=False),
        sa.Column('termination_date', sa.DateTime(timezone=True), nullable=True),
        owner,
        *_timestamps(),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_employees_email', 'employees', ['email'], unique=True)
    op.create_index('ix_employees_department_id', 'employees', ['department_id'])
    op.create_index(owner_ix, 'employees', ['owner_admin_id'])

    owner, owner_ix = _owner('candidates')
    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(50), nullable=False),
        sa.Column('last_name', sa.String(50), nullable=False),
        sa.Column('email', sa.String(100), nullable=False),
        owner,
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_candidates_email', 'candidates', ['email'])
    op.create_index(owner_ix, 'candidates', ['owner_admin_id'])

    owner, owner_ix = _owner('job_applications')
    op.create_table(
        'job_applications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('candidate_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.String(100), nullable=False),
        sa.Column('status', sa.String(30), nullable=False),
        owner,
        *_timestamps(),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidates.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_job_applications_candidate_id', 'job_applications', ['candidate_id'])
    op.create_index(owner_ix, 'job_applications', ['owner_admin_id'])

    owner, owner_ix = _owner('leave_requests')
    op.create_table(
        'leave_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('leave_type', sa.String(50), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('approver_comments', sa.String(500), nullable=True),
        sa.Column('decided_at', sa.DateTime(timezone=True), nullable=True),
        owner,
        *_timestamps(),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leave_requests_employee_id', 'leave_requests', ['employee_id'])
    op.create_index('ix_leave_requests_status', 'leave_requests', ['status'])
    op.create_index(owner_ix, 'leave_requests', ['owner_admin_id'])

    op.create_table(
        'access_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('resource_type', sa.String(50), nullable=False),
        sa.Column('resource_id', sa.Integer(), nullable=False),
        sa.Column('owner_admin_id', sa.String(100), nullable=False),
        sa.Column('requester_admin_id', sa.String(100), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('requested_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('decided_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('allowed_until', sa.DateTime(timezone=True), nullable=True),
        sa.Column('note', sa.String(500), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_access_requests_owner_admin_id', 'access_requests', ['owner_admin_id'])
    op.create_index('ix_access_requests_requester_admin_id', 'access_requests', ['requester_admin_id'])
    op.create_index(
        'ix_access_requests_grant_lookup',
        'access_requests',
        ['requester_admin_id', 'resource_type', 'resource_id', 'status'],
    )
    # At most one Pending request per (lower(requester), type, id)
    op.create_index(
        'uq_access_requests_pending_triple',
        'access_requests',
        [sa.text('lower(requester_admin_id)'), 'resource_type', 'resource_id'],
        unique=True,
        postgresql_where=sa.text("status = 'Pending'"),
    )

    op.create_table(
        'admin_delegations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('from_admin_id', sa.String(100), nullable=False),
        sa.Column('to_admin_id', sa.String(100), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('reason', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_admin_delegations_from_admin_id', 'admin_delegations', ['from_admin_id'])
    op.create_index('ix_admin_delegations_to_admin_id', 'admin_delegations', ['to_admin_id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('actor_admin_id', sa.String(100), nullable=True),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('entity_type', sa.String(100), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('before_state', sa.Text(), nullable=True),
        sa.Column('after_state', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_logs_actor_admin_id', 'audit_logs', ['actor_admin_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_entity_type', 'audit_logs', ['entity_type'])
    op.create_index('ix_audit_logs_entity_id', 'audit_logs', ['entity_id'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('admin_delegations')
    op.drop_index('uq_access_requests_pending_triple', table_name='access_requests')
    op.drop_table('access_requests')
    op.drop_table('leave_requests')
    op.drop_table('job_applications')
    op.drop_table('candidates')
    op.drop_table('employees')
    op.drop_table('departments')
