"""add password history

Revision ID: b41e6d0a9c73
Revises: 7f3b1c9d2e41
Create Date: 2026-10-19 12:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = 'b41e6d0a9c73'
down_revision = '7f3b1c9d2e41'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'password_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('password_hash', sa.String(length=254), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_password_history_user_id_users'),
        sa.PrimaryKeyConstraint('id', name='pk_password_history'),
    )
    op.create_index('ix_password_history_user_id', 'password_history', ['user_id'])


def downgrade():
    op.drop_index('ix_password_history_user_id', table_name='password_history')
    op.drop_table('password_history')
