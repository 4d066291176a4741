"""Initial portfolio tables

Revision ID: 001_initial_portfolio
Revises:
Create Date: 2026-03-01

Creates the github_accounts, projects, link_resources, backlinks and expenses tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_portfolio'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'github_accounts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('token', sa.String(), nullable=False),
        sa.Column('token_expires_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('site_url', sa.String(), nullable=True),
        sa.Column('niche_category', sa.String(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column(
            'github_account_id', sa.Integer(),
            sa.ForeignKey('github_accounts.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('repo_owner', sa.String(), nullable=True),
        sa.Column('repo_name', sa.String(), nullable=True),
        sa.Column('last_github_push', sa.DateTime(), nullable=True),
        sa.Column('last_content_update', sa.DateTime(), nullable=True),
        sa.Column('last_manual_update', sa.DateTime(), nullable=True),
        sa.Column('domain_expiry', sa.DateTime(), nullable=True),
        sa.Column('domain_purchase_date', sa.DateTime(), nullable=True),
        sa.Column('domain_registrar', sa.String(), nullable=True),
        sa.Column('hosting_platform', sa.String(), nullable=True),
        sa.Column('hosting_account', sa.String(), nullable=True),
        sa.Column('monetization_type', sa.String(), nullable=True),
        sa.Column('adsense_status', sa.String(20), nullable=False, server_default='none'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('launched_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_projects_status', 'projects', ['status'])
    op.create_index('ix_projects_domain_expiry', 'projects', ['domain_expiry'])
    op.create_index('ix_projects_github_account_id', 'projects', ['github_account_id'])

    op.create_table(
        'link_resources',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='other'),
        sa.Column('da_score', sa.Integer(), nullable=True),
        sa.Column('dr_score', sa.Integer(), nullable=True),
        sa.Column('price', sa.Float(), nullable=True, server_default='0'),
        sa.Column('is_free', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_link_resources_status', 'link_resources', ['status'])

    op.create_table(
        'backlinks',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'project_id', sa.Integer(),
            sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'resource_id', sa.Integer(),
            sa.ForeignKey('link_resources.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('target_url', sa.String(), nullable=False),
        sa.Column('source_url', sa.String(), nullable=False),
        sa.Column('anchor_text', sa.String(), nullable=True),
        sa.Column('da_score', sa.Integer(), nullable=True),
        sa.Column('cost', sa.Float(), nullable=True, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='planned'),
        sa.Column('acquired_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_backlinks_project_id', 'backlinks', ['project_id'])
    op.create_index('ix_backlinks_resource_id', 'backlinks', ['resource_id'])
    op.create_index('ix_backlinks_status', 'backlinks', ['status'])
    op.create_index('ix_backlinks_created_at', 'backlinks', ['created_at'])
    op.create_index('ix_backlinks_project_status', 'backlinks', ['project_id', 'status'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column(
            'project_id', sa.Integer(),
            sa.ForeignKey('projects.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('paid_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_expenses_category', 'expenses', ['category'])
    op.create_index('ix_expenses_project_id', 'expenses', ['project_id'])
    op.create_index('ix_expenses_paid_at', 'expenses', ['paid_at'])
    op.create_index('ix_expenses_expires_at', 'expenses', ['expires_at'])
    op.create_index('ix_expenses_project_paid', 'expenses', ['project_id', 'paid_at'])


def downgrade() -> None:
    op.drop_table('expenses')
    op.drop_table('backlinks')
    op.drop_table('link_resources')
    op.drop_table('projects')
    op.drop_table('github_accounts')
