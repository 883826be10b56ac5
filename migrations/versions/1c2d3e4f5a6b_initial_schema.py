"""initial schema: brands, influencers, campaigns, campaign_influencers, payments

Revision ID: 1c2d3e4f5a6b
Revises:
Create Date: 2026-01-12 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1c2d3e4f5a6b'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'brands',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('invoice_email', sa.String(length=255), nullable=True),
        sa.Column('invoice_instructions', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'influencers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('handle', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('platform', sa.String(length=20), nullable=True),
        sa.Column('content_type', sa.String(length=255), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('rate', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('follower_count', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('performance_rating', sa.Numeric(precision=3, scale=1), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_influencers_name', 'influencers', ['name'])

    op.create_table(
        'campaigns',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('brand_id', sa.String(length=36), nullable=False),
        sa.Column('retailer', sa.String(length=255), nullable=True),
        sa.Column('region', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('quarter', sa.String(length=50), nullable=True),
        sa.Column('products', sa.Text(), nullable=True),
        sa.Column('budget', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('posting_deadline', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_campaigns_brand_id', 'campaigns', ['brand_id'])

    op.create_table(
        'campaign_influencers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('campaign_id', sa.String(length=36), nullable=False),
        sa.Column('influencer_id', sa.String(length=36), nullable=False),
        sa.Column('pipeline_stage', sa.String(length=50), nullable=False, server_default='contacted'),
        sa.Column('deliverable', sa.Text(), nullable=True),
        sa.Column('w9_status', sa.String(length=50), nullable=False, server_default='pending'),
        sa.Column('invoice_status', sa.String(length=50), nullable=False, server_default='pending'),
        sa.Column('payment_status', sa.String(length=50), nullable=False, server_default='unpaid'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['campaign_id'], ['campaigns.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['influencer_id'], ['influencers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('campaign_id', 'influencer_id', name='uq_campaign_influencer')
    )

    op.create_table(
        'payments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('campaign_influencer_id', sa.String(length=36), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('date_sent', sa.Date(), nullable=True),
        sa.Column('method', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['campaign_influencer_id'], ['campaign_influencers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade():
    op.drop_table('payments')
    op.drop_table('campaign_influencers')
    op.drop_index('ix_campaigns_brand_id', table_name='campaigns')
    op.drop_table('campaigns')
    op.drop_index('ix_influencers_name', table_name='influencers')
    op.drop_table('influencers')
    op.drop_table('brands')
