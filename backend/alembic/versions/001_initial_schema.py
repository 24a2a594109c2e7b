"""Initial schema

Revision ID: 001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from pgvector.sqlalchemy import Vector

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS vector')

    # Create Website table
    op.create_table(
        'Website',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('keywords', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Create WebpageEmbedding table
    op.create_table(
        'WebpageEmbedding',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('websiteId', sa.Integer(), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('embedding', Vector(1536), nullable=False),
        sa.Column('createdAt', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updatedAt', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['websiteId'], ['Website.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('WebpageEmbedding_websiteId_idx', 'WebpageEmbedding', ['websiteId'])

    # Create message_history table
    op.create_table(
        'message_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('payload', postgresql.JSONB(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    op.drop_table('message_history')
    op.drop_index('WebpageEmbedding_websiteId_idx', table_name='WebpageEmbedding')
    op.drop_table('WebpageEmbedding')
    op.drop_table('Website')
