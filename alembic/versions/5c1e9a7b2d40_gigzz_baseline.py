"""gigzz baseline

Revision ID: 5c1e9a7b2d40
Revises: 
Create Date: 2026-10-18 09:12:44.118203

Creates every table that does not exist yet, so it can run against a database
that was bootstrapped with create_all.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '5c1e9a7b2d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NOW = sa.text('(CURRENT_TIMESTAMP)')


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('role', sa.String(), nullable=False),
            sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)

    if not table_exists('applicants'):
        op.create_table('applicants',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('full_name', sa.String(), nullable=False),
            sa.Column('phone', sa.String(), nullable=True),
            sa.Column('country', sa.String(), nullable=True),
            sa.Column('state', sa.String(), nullable=True),
            sa.Column('city', sa.String(), nullable=True),
            sa.Column('bio', sa.Text(), nullable=True),
            sa.Column('specialist', sa.String(), nullable=True),
            sa.Column('specialties', sa.JSON(), nullable=True),
            sa.Column('avatar_url', sa.String(), nullable=True),
            sa.Column('promoted_until', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_applicants_full_name'), 'applicants', ['full_name'], unique=False)
        op.create_index(op.f('ix_applicants_promoted_until'), 'applicants', ['promoted_until'], unique=False)
        op.create_index(op.f('ix_applicants_created_at'), 'applicants', ['created_at'], unique=False)

    if not table_exists('employers'):
        op.create_table('employers',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('company_name', sa.String(), nullable=True),
            sa.Column('country', sa.String(), nullable=True),
            sa.Column('state', sa.String(), nullable=True),
            sa.Column('city', sa.String(), nullable=True),
            sa.Column('bio', sa.Text(), nullable=True),
            sa.Column('website', sa.String(), nullable=True),
            sa.Column('avatar_url', sa.String(), nullable=True),
            sa.Column('id_card_url', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_employers_company_name'), 'employers', ['company_name'], unique=False)

    if not table_exists('jobs'):
        op.create_table('jobs',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('employer_id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('category', sa.String(), nullable=False),
            sa.Column('type', sa.String(), nullable=False),
            sa.Column('min_price', sa.Integer(), nullable=True),
            sa.Column('max_price', sa.Integer(), nullable=True),
            sa.Column('price_frequency', sa.String(), nullable=False),
            sa.Column('application_deadline', sa.Date(), nullable=True),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('responsibilities', sa.Text(), nullable=True),
            sa.Column('requirements', sa.Text(), nullable=True),
            sa.Column('location', sa.String(), nullable=True),
            sa.Column('tags', sa.JSON(), nullable=True),
            sa.Column('promotion_tag', sa.String(), nullable=True),
            sa.Column('promotion_expires_at', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['employer_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_jobs_id'), 'jobs', ['id'], unique=False)
        op.create_index(op.f('ix_jobs_employer_id'), 'jobs', ['employer_id'], unique=False)
        op.create_index(op.f('ix_jobs_title'), 'jobs', ['title'], unique=False)
        op.create_index(op.f('ix_jobs_category'), 'jobs', ['category'], unique=False)
        op.create_index(op.f('ix_jobs_promotion_tag'), 'jobs', ['promotion_tag'], unique=False)
        op.create_index(op.f('ix_jobs_created_at'), 'jobs', ['created_at'], unique=False)
        op.create_index('idx_jobs_promotion', 'jobs', ['promotion_tag', 'promotion_expires_at'], unique=False)

    if not table_exists('applications'):
        op.create_table('applications',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('job_id', sa.Integer(), nullable=False),
            sa.Column('applicant_id', sa.Integer(), nullable=False),
            sa.Column('cover_letter', sa.Text(), nullable=False),
            sa.Column('attachments', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['applicant_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('job_id', 'applicant_id', name='uq_application_job_applicant')
        )
        op.create_index(op.f('ix_applications_job_id'), 'applications', ['job_id'], unique=False)
        op.create_index(op.f('ix_applications_applicant_id'), 'applications', ['applicant_id'], unique=False)

    if not table_exists('token_wallets'):
        op.create_table('token_wallets',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('balance', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('last_action', sa.String(), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.CheckConstraint('balance >= 0', name='ck_token_wallets_balance_non_negative'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id')
        )
        op.create_index(op.f('ix_token_wallets_id'), 'token_wallets', ['id'], unique=False)

    if not table_exists('token_transactions'):
        op.create_table('token_transactions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('description', sa.String(), nullable=False),
            sa.Column('tokens_in', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('tokens_out', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('kind', sa.String(), nullable=False),
            sa.Column('reference', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('reference')
        )
        op.create_index(op.f('ix_token_transactions_id'), 'token_transactions', ['id'], unique=False)
        op.create_index(op.f('ix_token_transactions_user_id'), 'token_transactions', ['user_id'], unique=False)
        op.create_index(op.f('ix_token_transactions_kind'), 'token_transactions', ['kind'], unique=False)
        op.create_index(op.f('ix_token_transactions_created_at'), 'token_transactions', ['created_at'], unique=False)
        op.create_index('idx_token_tx_user_created', 'token_transactions', ['user_id', 'created_at'], unique=False)

    if not table_exists('chat_messages'):
        op.create_table('chat_messages',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('sender_id', sa.Integer(), nullable=False),
            sa.Column('receiver_id', sa.Integer(), nullable=False),
            sa.Column('body', sa.Text(), nullable=False),
            sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['receiver_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_chat_messages_id'), 'chat_messages', ['id'], unique=False)
        op.create_index(op.f('ix_chat_messages_sender_id'), 'chat_messages', ['sender_id'], unique=False)
        op.create_index(op.f('ix_chat_messages_receiver_id'), 'chat_messages', ['receiver_id'], unique=False)
        op.create_index(op.f('ix_chat_messages_created_at'), 'chat_messages', ['created_at'], unique=False)
        op.create_index('idx_chat_pair_created', 'chat_messages', ['sender_id', 'receiver_id', 'created_at'], unique=False)

    if not table_exists('projects'):
        op.create_table('projects',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('cover_url', sa.String(), nullable=True),
            sa.Column('link', sa.String(), nullable=True),
            sa.Column('promote', sa.String(), nullable=True),
            sa.Column('promote_expires_at', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_projects_id'), 'projects', ['id'], unique=False)
        op.create_index(op.f('ix_projects_user_id'), 'projects', ['user_id'], unique=False)

    if not table_exists('email_verifications'):
        op.create_table('email_verifications',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('token', sa.String(), nullable=False),
            sa.Column('purpose', sa.String(), nullable=False),
            sa.Column('expires_at', sa.DateTime(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_email_verifications_id'), 'email_verifications', ['id'], unique=False)
        op.create_index(op.f('ix_email_verifications_user_id'), 'email_verifications', ['user_id'], unique=False)
        op.create_index(op.f('ix_email_verifications_token'), 'email_verifications', ['token'], unique=True)

    if not table_exists('news'):
        op.create_table('news',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('body', sa.Text(), nullable=False),
            sa.Column('image_url', sa.String(), nullable=True),
            sa.Column('author_id', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['author_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_news_id'), 'news', ['id'], unique=False)
        op.create_index(op.f('ix_news_created_at'), 'news', ['created_at'], unique=False)

    if not table_exists('learn_more'):
        op.create_table('learn_more',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('category', sa.String(), nullable=True),
            sa.Column('body', sa.Text(), nullable=False),
            sa.Column('author_id', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=False),
            sa.ForeignKeyConstraint(['author_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_learn_more_id'), 'learn_more', ['id'], unique=False)
        op.create_index(op.f('ix_learn_more_category'), 'learn_more', ['category'], unique=False)
        op.create_index(op.f('ix_learn_more_created_at'), 'learn_more', ['created_at'], unique=False)


def downgrade() -> None:
    for table in (
        'learn_more', 'news', 'email_verifications', 'projects', 'chat_messages',
        'token_transactions', 'token_wallets', 'applications', 'jobs',
        'employers', 'applicants', 'users',
    ):
        if table_exists(table):
            op.drop_table(table)
