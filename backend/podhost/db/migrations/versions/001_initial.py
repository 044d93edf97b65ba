"""Initial migration - create channels and podcasts

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create channels table
    op.create_table(
        'channels',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('alias', sa.String(255), unique=True, nullable=True),
        sa.Column('title', sa.Text, nullable=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('cover', sa.Text, nullable=True),
        sa.Column('author', sa.Text, nullable=True),
    )

    # Create podcasts table; rows are removed explicitly with their channel
    op.create_table(
        'podcasts',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('channel', sa.Integer, nullable=False, index=True),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('published', sa.Integer, nullable=True),
        sa.Column('title', sa.Text, nullable=True),
        sa.Column('length', sa.BigInteger, nullable=True),
        sa.Column('guid', sa.String(255), nullable=True),
        sa.Column('pub_date', sa.String(64), nullable=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('duration', sa.Integer, nullable=True),
        sa.Column('artwork', sa.Text, nullable=True),
        sa.Column('explicit', sa.Integer, nullable=True),
        sa.Column('season', sa.Integer, nullable=True),
        sa.Column('episode', sa.Integer, nullable=True),
    )


def downgrade() -> None:
    op.drop_table('podcasts')
    op.drop_table('channels')
