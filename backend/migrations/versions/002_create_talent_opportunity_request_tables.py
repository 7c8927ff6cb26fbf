"""Create talent, opportunity and tenant_request tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 11:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'talent',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('desired_rate', sa.Integer(), nullable=True),
        sa.Column('prefecture', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_talent_tenant_id', 'talent', ['tenant_id'])

    op.create_table(
        'opportunity',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_opportunity_tenant_id', 'opportunity', ['tenant_id'])

    # to_tenant_id is written by the application from the subject's owner and
    # never changes afterwards, even if the subject is reassigned.
    op.create_table(
        'tenant_request',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('kind', sa.Text(), nullable=False),
        sa.Column('from_tenant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('from_user_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('to_tenant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('subject_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('offered_talent_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('title', sa.String(120), nullable=True),
        sa.Column('message_text', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), server_default='pending', nullable=False),
        sa.Column('response_message', sa.Text(), nullable=True),
        sa.Column('responded_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['from_tenant_id'], ['tenant.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['to_tenant_id'], ['tenant.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['from_user_id'], ['user.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['offered_talent_id'], ['talent.id'], ondelete='SET NULL'),
        sa.CheckConstraint("kind IN ('talent', 'opportunity')", name='ck_tenant_request_kind'),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'declined', 'expired')",
            name='ck_tenant_request_status'
        ),
        sa.CheckConstraint('from_tenant_id <> to_tenant_id', name='ck_tenant_request_distinct_tenants'),
    )
    op.create_index('ix_tenant_request_to_tenant_created', 'tenant_request', ['to_tenant_id', 'created_at'])
    op.create_index('ix_tenant_request_from_tenant_created', 'tenant_request', ['from_tenant_id', 'created_at'])

    for table in ('talent', 'opportunity', 'tenant_request'):
        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
            BEFORE UPDATE ON "{table}"
            FOR EACH ROW
            EXECUTE FUNCTION update_updated_at_column();
        """)


def downgrade():
    for table in ('tenant_request', 'opportunity', 'talent'):
        op.execute(f'DROP TRIGGER IF EXISTS update_{table}_updated_at ON "{table}"')

    op.drop_index('ix_tenant_request_from_tenant_created', table_name='tenant_request')
    op.drop_index('ix_tenant_request_to_tenant_created', table_name='tenant_request')
    op.drop_table('tenant_request')
    op.drop_index('ix_opportunity_tenant_id', table_name='opportunity')
    op.drop_table('opportunity')
    op.drop_index('ix_talent_tenant_id', table_name='talent')
    op.drop_table('talent')
