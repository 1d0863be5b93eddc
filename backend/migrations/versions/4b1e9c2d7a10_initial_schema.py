"""initial schema: users, authors, keywords, publications and associations

Revision ID: 4b1e9c2d7a10
Revises:
Create Date: 2025-01-20 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '4b1e9c2d7a10'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('profile_image_url', sa.String(length=255), nullable=True),
        sa.Column('biography', sa.Text(), nullable=True),
        sa.Column('institution', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.UniqueConstraint('username', name='uq_users_username'),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_username', 'users', ['username'])

    op.create_table(
        'authors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('institution', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('website_url', sa.String(length=255), nullable=True),
        sa.Column('biography', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_authors'),
    )
    op.create_index('ix_authors_name', 'authors', ['name'])

    op.create_table(
        'keywords',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(name) > 0', name='ck_keywords_name_not_empty'),
        sa.PrimaryKeyConstraint('id', name='pk_keywords'),
        sa.UniqueConstraint('name', name='uq_keywords_name'),
    )

    op.create_table(
        'publications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=512), nullable=False),
        sa.Column('abstract', sa.Text(), nullable=True),
        sa.Column('doi', sa.String(length=255), nullable=True),
        sa.Column('publication_date', sa.Date(), nullable=False),
        sa.Column('journal', sa.String(length=255), nullable=True),
        sa.Column('volume', sa.String(length=50), nullable=True),
        sa.Column('issue', sa.String(length=50), nullable=True),
        sa.Column('pages', sa.String(length=50), nullable=True),
        sa.Column('publisher', sa.String(length=255), nullable=True),
        sa.Column('citation_count', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(length=255), nullable=True),
        sa.Column('pdf_path', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('length(title) > 0', name='ck_publications_title_not_empty'),
        sa.CheckConstraint('citation_count >= 0', name='ck_publications_citation_count_nonneg'),
        sa.PrimaryKeyConstraint('id', name='pk_publications'),
        sa.UniqueConstraint('doi', name='uq_publications_doi'),
    )
    op.create_index('ix_publications_publication_date', 'publications', ['publication_date'])
    op.create_index('ix_publications_journal', 'publications', ['journal'])

    op.create_table(
        'publication_authors',
        sa.Column('publication_id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.CheckConstraint('position >= 0', name='ck_publication_authors_position_nonneg'),
        sa.ForeignKeyConstraint(['publication_id'], ['publications.id'], name='fk_publication_authors_publication_id_publications', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['author_id'], ['authors.id'], name='fk_publication_authors_author_id_authors', ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('publication_id', 'author_id', name='pk_publication_authors'),
        sa.UniqueConstraint('publication_id', 'position', name='uq_publication_authors_position'),
    )
    op.create_index('ix_publication_authors_author_id', 'publication_authors', ['author_id'])

    op.create_table(
        'publication_keywords',
        sa.Column('publication_id', sa.Integer(), nullable=False),
        sa.Column('keyword_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['publication_id'], ['publications.id'], name='fk_publication_keywords_publication_id_publications', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['keyword_id'], ['keywords.id'], name='fk_publication_keywords_keyword_id_keywords', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('publication_id', 'keyword_id', name='pk_publication_keywords'),
    )
    op.create_index('ix_publication_keywords_keyword_id', 'publication_keywords', ['keyword_id'])


def downgrade():
    op.drop_index('ix_publication_keywords_keyword_id', table_name='publication_keywords')
    op.drop_table('publication_keywords')
    op.drop_index('ix_publication_authors_author_id', table_name='publication_authors')
    op.drop_table('publication_authors')
    op.drop_index('ix_publications_journal', table_name='publications')
    op.drop_index('ix_publications_publication_date', table_name='publications')
    op.drop_table('publications')
    op.drop_table('keywords')
    op.drop_index('ix_authors_name', table_name='authors')
    op.drop_table('authors')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
