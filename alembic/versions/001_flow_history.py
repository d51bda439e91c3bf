"""flow history

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'flow_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('btc', sa.String(length=8), nullable=False),
        sa.Column('gold', sa.String(length=8), nullable=False),
        sa.Column('usdjpy', sa.String(length=8), nullable=False),
        sa.Column('eurusd', sa.String(length=8), nullable=False),
        sa.Column('scenario_id', sa.Integer(), nullable=False),
        sa.Column('scenario_name', sa.String(length=200), nullable=False),
        sa.Column('confidence', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_flow_history_date'), 'flow_history', ['date'], unique=True)
    op.create_index('ix_flow_history_timestamp', 'flow_history', ['timestamp'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_flow_history_timestamp', table_name='flow_history')
    op.drop_index(op.f('ix_flow_history_date'), table_name='flow_history')
    op.drop_table('flow_history')
