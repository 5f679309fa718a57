"""add inventory requests

Revision ID: 8e41b7c05d3a
Revises: 3c1f0a9d2b7e
Create Date: 2026-10-19 15:47:02.110394

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '8e41b7c05d3a'
down_revision: Union[str, None] = '3c1f0a9d2b7e'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'inventory_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('worker_id', sa.String(), nullable=False),
        sa.Column('request_type', sa.Enum('UPDATE', 'DELETE', name='requesttype'), nullable=False),
        sa.Column('owner_role', postgresql.ENUM('BHW', 'BNS', name='ownerrole', create_type=False), nullable=False),
        sa.Column('target_record_id', sa.Integer(), nullable=False),
        sa.Column('request_data', sa.JSON(), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'APPROVED', 'DENIED', name='requeststatus'), nullable=False),
        sa.Column('reviewed_by', sa.String(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_inventory_requests_id'), 'inventory_requests', ['id'], unique=False)
    op.create_index(op.f('ix_inventory_requests_worker_id'), 'inventory_requests', ['worker_id'], unique=False)
    op.create_index(op.f('ix_inventory_requests_owner_role'), 'inventory_requests', ['owner_role'], unique=False)
    op.create_index(op.f('ix_inventory_requests_status'), 'inventory_requests', ['status'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_inventory_requests_status'), table_name='inventory_requests')
    op.drop_index(op.f('ix_inventory_requests_owner_role'), table_name='inventory_requests')
    op.drop_index(op.f('ix_inventory_requests_worker_id'), table_name='inventory_requests')
    op.drop_index(op.f('ix_inventory_requests_id'), table_name='inventory_requests')
    op.drop_table('inventory_requests')
    sa.Enum(name='requeststatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='requesttype').drop(op.get_bind(), checkfirst=True)
