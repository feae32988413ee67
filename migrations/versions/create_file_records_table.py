"""Create file_records table

Revision ID: create_file_records_table
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'create_file_records_table'
down_revision = None
depends_on = None

def upgrade():
    op.create_table('file_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('size', sa.BigInteger(), nullable=False),
        sa.Column('bucket', sa.String(length=100), nullable=False),
        sa.Column('key', sa.String(length=1024), nullable=False),
        sa.Column('store_response', sa.JSON(), nullable=True),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['parent_id'], ['file_records.id'], ),
        sa.CheckConstraint('parent_id IS NULL OR parent_id != id', name='ck_file_records_valid_parent'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_file_records_key', 'file_records', ['key'], unique=False)
    op.create_index('ix_file_records_parent_id', 'file_records', ['parent_id'], unique=False)

def downgrade():
    op.drop_index('ix_file_records_parent_id', table_name='file_records')
    op.drop_index('ix_file_records_key', table_name='file_records')
    op.drop_table('file_records')
