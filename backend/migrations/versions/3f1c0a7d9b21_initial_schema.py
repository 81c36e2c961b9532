"""initial schema

Revision ID: 3f1c0a7d9b21
Revises:
Create Date: 2026-10-17 09:12:31.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers, used by Alembic.
revision: str = '3f1c0a7d9b21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUMS = {
    'role': ('ADMIN', 'USER'),
    'postcategory': ('BLOG', 'PUBLICATION', 'IMPACT_STORY', 'TENDER', 'CAREER'),
    'poststatus': ('DRAFT', 'PUBLISHED'),
    'volunteerinterest': ('FIELDWORK', 'EDUCATION', 'RESEARCH'),
    'availability': ('WEEKDAYS', 'WEEKENDS', 'BOTH'),
    'partnershiptype': ('CORPORATE', 'COMMUNITY', 'RESEARCH'),
    'donationfrequency': ('ONE_TIME', 'MONTHLY', 'ANNUAL'),
    'donationstatus': ('PENDING', 'COMPLETED', 'FAILED'),
}


def _enum(name: str) -> sa.Enum:
    return sa.Enum(*ENUMS[name], name=name)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table('users',
        *_timestamps(),
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=21), nullable=False),
        sa.Column('username', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('password_hash', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('role', _enum('role'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('posts',
        *_timestamps(),
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=21), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('category', _enum('postcategory'), nullable=False),
        sa.Column('status', _enum('poststatus'), nullable=False),
        sa.Column('author_id', sqlmodel.sql.sqltypes.AutoString(length=21), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('featured_image', sqlmodel.sql.sqltypes.AutoString(length=2048), nullable=True),
        sa.Column('file_attachment', sqlmodel.sql.sqltypes.AutoString(length=2048), nullable=True),
        sa.Column('apply_url', sqlmodel.sql.sqltypes.AutoString(length=2048), nullable=True),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('deadline', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['author_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_posts_author_id'), 'posts', ['author_id'], unique=False)
    op.create_index(op.f('ix_posts_category'), 'posts', ['category'], unique=False)
    op.create_index(op.f('ix_posts_status'), 'posts', ['status'], unique=False)

    op.create_table('contact_submissions',
        *_timestamps(),
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=21), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('subject', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('preferred_contact', sqlmodel.sql.sqltypes.AutoString(length=10), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('volunteer_applications',
        *_timestamps(),
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=21), nullable=False),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('interest', _enum('volunteerinterest'), nullable=False),
        sa.Column('availability', _enum('availability'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('partnership_inquiries',
        *_timestamps(),
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=21), nullable=False),
        sa.Column('organization', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('contact_email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('partnership_type', _enum('partnershiptype'), nullable=False),
        sa.Column('proposal', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('donations',
        *_timestamps(),
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=21), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('frequency', _enum('donationfrequency'), nullable=False),
        sa.Column('donor_email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('status', _enum('donationstatus'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_donations_donor_email'), 'donations', ['donor_email'], unique=False)

    op.create_table('newsletter_subscriptions',
        *_timestamps(),
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=21), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('subscribed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('unsubscribed_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        op.f('ix_newsletter_subscriptions_email'), 'newsletter_subscriptions', ['email'], unique=True
    )


def downgrade() -> None:
    op.drop_index(op.f('ix_newsletter_subscriptions_email'), table_name='newsletter_subscriptions')
    op.drop_table('newsletter_subscriptions')
    op.drop_index(op.f('ix_donations_donor_email'), table_name='donations')
    op.drop_table('donations')
    op.drop_table('partnership_inquiries')
    op.drop_table('volunteer_applications')
    op.drop_table('contact_submissions')
    op.drop_index(op.f('ix_posts_status'), table_name='posts')
    op.drop_index(op.f('ix_posts_category'), table_name='posts')
    op.drop_index(op.f('ix_posts_author_id'), table_name='posts')
    op.drop_table('posts')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for name in ENUMS:
        sa.Enum(name=name).drop(bind, checkfirst=True)
