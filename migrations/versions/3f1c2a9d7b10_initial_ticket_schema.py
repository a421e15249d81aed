"""initial ticket schema

Revision ID: 3f1c2a9d7b10
Revises: 
Create Date: 2026-09-14 19:22:05.411873

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c2a9d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('ticket_types',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=100), nullable=False),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_ticket_types')),
    sa.UniqueConstraint('name', name=op.f('uq_ticket_types_name'))
    )
    op.create_table('delivery_methods',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=100), nullable=False),
    sa.Column('surcharge', sa.Float(), nullable=False),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_delivery_methods')),
    sa.UniqueConstraint('name', name=op.f('uq_delivery_methods_name'))
    )
    op.create_table('buyer_groups',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=100), nullable=False),
    sa.Column('max_tickets', sa.Integer(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.Column('updated_by', sa.String(length=200), nullable=True),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_buyer_groups')),
    sa.UniqueConstraint('name', name=op.f('uq_buyer_groups_name'))
    )
    op.create_table('backend_groups',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=50), nullable=False),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_backend_groups')),
    sa.UniqueConstraint('name', name=op.f('uq_backend_groups_name'))
    )
    op.create_table('system_settings',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('sales_enabled', sa.Boolean(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.Column('updated_by', sa.String(length=200), nullable=True),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_system_settings'))
    )
    op.create_table('buyer_group_ticket_types',
    sa.Column('buyer_group_id', sa.Integer(), nullable=False),
    sa.Column('ticket_type_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['buyer_group_id'], ['buyer_groups.id'], name=op.f('fk_buyer_group_ticket_types_buyer_group_id_buyer_groups')),
    sa.ForeignKeyConstraint(['ticket_type_id'], ['ticket_types.id'], name=op.f('fk_buyer_group_ticket_types_ticket_type_id_ticket_types')),
    sa.PrimaryKeyConstraint('buyer_group_id', 'ticket_type_id', name=op.f('pk_buyer_group_ticket_types'))
    )
    op.create_table('ticket_reserves',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('amount', sa.Integer(), nullable=False),
    sa.Column('price', sa.Float(), nullable=False),
    sa.Column('type_id', sa.Integer(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.Column('updated_by', sa.String(length=200), nullable=True),
    sa.ForeignKeyConstraint(['type_id'], ['ticket_types.id'], name=op.f('fk_ticket_reserves_type_id_ticket_types')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_ticket_reserves'))
    )
    op.create_table('reserve_delivery_methods',
    sa.Column('reserve_id', sa.Integer(), nullable=False),
    sa.Column('delivery_method_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['delivery_method_id'], ['delivery_methods.id'], name=op.f('fk_reserve_delivery_methods_delivery_method_id_delivery_methods')),
    sa.ForeignKeyConstraint(['reserve_id'], ['ticket_reserves.id'], name=op.f('fk_reserve_delivery_methods_reserve_id_ticket_reserves')),
    sa.PrimaryKeyConstraint('reserve_id', 'delivery_method_id', name=op.f('pk_reserve_delivery_methods'))
    )
    op.create_table('buyers',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=200), nullable=True),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('phone', sa.String(length=50), nullable=True),
    sa.Column('address', sa.String(length=255), nullable=True),
    sa.Column('postal', sa.Integer(), nullable=True),
    sa.Column('city', sa.String(length=100), nullable=True),
    sa.Column('country', sa.String(length=2), nullable=True),
    sa.Column('verified', sa.Boolean(), nullable=False),
    sa.Column('last_login_at', sa.DateTime(), nullable=True),
    sa.Column('max_tickets', sa.Integer(), nullable=True),
    sa.Column('group_id', sa.Integer(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['group_id'], ['buyer_groups.id'], name=op.f('fk_buyers_group_id_buyer_groups')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_buyers'))
    )
    with op.batch_alter_table('buyers', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_buyers_email'), ['email'], unique=True)

    op.create_table('backend_users',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('first_name', sa.String(length=100), nullable=False),
    sa.Column('sur_name', sa.String(length=100), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('password_hash', sa.String(length=255), nullable=True),
    sa.Column('group_id', sa.Integer(), nullable=True),
    sa.ForeignKeyConstraint(['group_id'], ['backend_groups.id'], name=op.f('fk_backend_users_group_id_backend_groups')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_backend_users'))
    )
    with op.batch_alter_table('backend_users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_backend_users_email'), ['email'], unique=True)

    op.create_table('sold_tickets',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('delivery', sa.String(length=100), nullable=False),
    sa.Column('code', sa.String(length=20), nullable=False),
    sa.Column('quantity', sa.Integer(), nullable=False),
    sa.Column('paid', sa.Boolean(), nullable=False),
    sa.Column('sent', sa.Boolean(), nullable=False),
    sa.Column('payment_reference', sa.String(length=255), nullable=True),
    sa.Column('checkout_session_id', sa.String(length=255), nullable=True),
    sa.Column('timestamp', sa.DateTime(), nullable=True),
    sa.Column('sold_price', sa.Float(), nullable=True),
    sa.Column('buyer_id', sa.Integer(), nullable=False),
    sa.Column('reserve_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['buyer_id'], ['buyers.id'], name=op.f('fk_sold_tickets_buyer_id_buyers')),
    sa.ForeignKeyConstraint(['reserve_id'], ['ticket_reserves.id'], name=op.f('fk_sold_tickets_reserve_id_ticket_reserves')),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_sold_tickets'))
    )
    with op.batch_alter_table('sold_tickets', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_sold_tickets_code'), ['code'], unique=True)
        batch_op.create_index(batch_op.f('ix_sold_tickets_checkout_session_id'), ['checkout_session_id'], unique=False)


def downgrade():
    with op.batch_alter_table('sold_tickets', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_sold_tickets_checkout_session_id'))
        batch_op.drop_index(batch_op.f('ix_sold_tickets_code'))

    op.drop_table('sold_tickets')
    with op.batch_alter_table('backend_users', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_backend_users_email'))

    op.drop_table('backend_users')
    with op.batch_alter_table('buyers', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_buyers_email'))

    op.drop_table('buyers')
    op.drop_table('reserve_delivery_methods')
    op.drop_table('ticket_reserves')
    op.drop_table('buyer_group_ticket_types')
    op.drop_table('system_settings')
    op.drop_table('backend_groups')
    op.drop_table('buyer_groups')
    op.drop_table('delivery_methods')
    op.drop_table('ticket_types')
