"""create products

Revision ID: 001
Revises: 
Create Date: 2026-10-19 12:00:00.000000

Seed rows are inserted only for the sample deployment:
    alembic -x deployment=sample upgrade head
"""
from typing import Sequence, Union

from alembic import context, op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    products = op.create_table(
        'products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('row_version', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    deployment = context.get_x_argument(as_dictionary=True).get('deployment', 'demo')
    if deployment == 'sample':
        op.bulk_insert(
            products,
            [
                {'id': 1, 'name': 'Chai', 'unit_price': 1, 'row_version': 1},
                {'id': 2, 'name': 'Chang', 'unit_price': 2, 'row_version': 1},
                {'id': 3, 'name': 'Cappuccino', 'unit_price': 3, 'row_version': 1},
            ]
        )


def downgrade() -> None:
    op.drop_table('products')
