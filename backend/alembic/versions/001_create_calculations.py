"""create calculations table

Revision ID: 001
Revises:
Create Date: 2026-01-21 10:27:57.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'calculations',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('bill_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('tip_percentage', sa.Numeric(5, 2), nullable=False),
        sa.Column('tip_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('people_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('per_person_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_calculations_created_at', 'calculations', ['created_at'])
    op.create_index('ix_calculations_bill_amount', 'calculations', ['bill_amount'])
    op.create_index('ix_calculations_tip_percentage', 'calculations', ['tip_percentage'])


def downgrade() -> None:
    op.drop_index('ix_calculations_tip_percentage', table_name='calculations')
    op.drop_index('ix_calculations_bill_amount', table_name='calculations')
    op.drop_index('ix_calculations_created_at', table_name='calculations')
    op.drop_table('calculations')
