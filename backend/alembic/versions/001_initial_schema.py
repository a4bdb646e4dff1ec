"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

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
    # Create risk_policies table
    op.create_table(
        'risk_policies',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('policy_type', sa.String(length=50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('priority', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('action_value', sa.String(length=255), nullable=True),
    )
    op.create_index('ix_risk_policies_policy_type', 'risk_policies', ['policy_type'])
    op.create_index('ix_risk_policies_is_active', 'risk_policies', ['is_active'])

    # Create policy_conditions table
    op.create_table(
        'policy_conditions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('policy_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('field', sa.String(length=50), nullable=False),
        sa.Column('operator', sa.String(length=50), nullable=False),
        sa.Column('value', sa.String(length=255), nullable=True),
        sa.Column('numeric_value', sa.Float(), nullable=True),
        sa.Column('boolean_value', sa.Boolean(), nullable=True),
        sa.Column('logical_operator', sa.String(length=10), nullable=True),
        sa.ForeignKeyConstraint(['policy_id'], ['risk_policies.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_policy_conditions_policy_id', 'policy_conditions', ['policy_id'])

    # Create scoring_requests table
    op.create_table(
        'scoring_requests',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('tax_id', sa.String(length=20), nullable=False),
        sa.Column('business_type', sa.String(length=100), nullable=True),
        sa.Column('years_in_business', sa.Integer(), nullable=False),
        sa.Column('annual_revenue', sa.Float(), nullable=False),
        sa.Column('employee_count', sa.Integer(), nullable=False),
        sa.Column('requested_amount', sa.Float(), nullable=False),
        sa.Column('has_existing_loans', sa.Boolean(), nullable=True),
        sa.Column('industry', sa.String(length=100), nullable=True),
        sa.Column('credit_history', sa.Integer(), nullable=True),
        sa.Column('score', sa.Float(), nullable=True),
        sa.Column('risk_level', sa.String(length=10), nullable=True),
        sa.Column('score_source', sa.String(length=20), nullable=True),
    )
    op.create_index('ix_scoring_requests_company_name', 'scoring_requests', ['company_name'])
    op.create_index('ix_scoring_requests_tax_id', 'scoring_requests', ['tax_id'])
    op.create_index('ix_scoring_requests_risk_level', 'scoring_requests', ['risk_level'])

    # Create scoring_decisions table
    op.create_table(
        'scoring_decisions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('scoring_request_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('decision', sa.String(length=50), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('applied_policy', sa.String(length=255), nullable=True),
        sa.Column('priority', sa.String(length=20), nullable=True),
        sa.Column('final_decision', sa.String(length=50), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column('manager_notes', sa.Text(), nullable=True),
        sa.Column('resolved_by', sa.String(length=255), nullable=True),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['scoring_request_id'], ['scoring_requests.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_scoring_decisions_scoring_request_id', 'scoring_decisions', ['scoring_request_id'])
    op.create_index('ix_scoring_decisions_priority', 'scoring_decisions', ['priority'])
    op.create_index('ix_scoring_decisions_final_decision', 'scoring_decisions', ['final_decision'])


def downgrade() -> None:
    # Drop tables in reverse order (respecting foreign key constraints)
    op.drop_index('ix_scoring_decisions_final_decision', table_name='scoring_decisions')
    op.drop_index('ix_scoring_decisions_priority', table_name='scoring_decisions')
    op.drop_index('ix_scoring_decisions_scoring_request_id', table_name='scoring_decisions')
    op.drop_table('scoring_decisions')

    op.drop_index('ix_scoring_requests_risk_level', table_name='scoring_requests')
    op.drop_index('ix_scoring_requests_tax_id', table_name='scoring_requests')
    op.drop_index('ix_scoring_requests_company_name', table_name='scoring_requests')
    op.drop_table('scoring_requests')

    op.drop_index('ix_policy_conditions_policy_id', table_name='policy_conditions')
    op.drop_table('policy_conditions')

    op.drop_index('ix_risk_policies_is_active', table_name='risk_policies')
    op.drop_index('ix_risk_policies_policy_type', table_name='risk_policies')
    op.drop_table('risk_policies')
