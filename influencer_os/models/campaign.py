from influencer_os.extensions import db
from datetime import datetime
import uuid

CAMPAIGN_STATUSES = ('active', 'completed')


class Campaign(db.Model):
    __tablename__ = 'campaigns'

    """
    Campaign Model - a brand-scoped push at one retailer for one quarter.
    The posting_deadline drives the overdue / chase list logic.
    """

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    brand_id = db.Column(db.String(36), db.ForeignKey('brands.id', ondelete='CASCADE'), nullable=False, index=True)
    retailer = db.Column(db.String(255))
    region = db.Column(db.String(255))
    name = db.Column(db.String(255), nullable=False)
    quarter = db.Column(db.String(50))  # free text, e.g. "Q4 2025"
    products = db.Column(db.Text)  # comma-joined
    budget = db.Column(db.Numeric(12, 2, asdecimal=False))
    posting_deadline = db.Column(db.Date)
    status = db.Column(db.String(50), nullable=False, default='active')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    assignments = db.relationship('CampaignInfluencer', backref='campaign', cascade='all, delete-orphan')

    def to_dict(self):
        return {
            "id": self.id,
            "brand_id": self.brand_id,
            "retailer": self.retailer,
            "region": self.region,
            "name": self.name,
            "quarter": self.quarter,
            "products": self.products,
            "budget": self.budget,
            "posting_deadline": self.posting_deadline.isoformat() if self.posting_deadline else None,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class CampaignInfluencer(db.Model):
    __tablename__ = 'campaign_influencers'
    __table_args__ = (
        db.UniqueConstraint('campaign_id', 'influencer_id', name='uq_campaign_influencer'),
    )

    """
    Junction table linking campaigns to influencers. Carries the pipeline
    stage plus the W9 / invoice / payment sub-statuses, which move
    independently of the stage.
    """

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    campaign_id = db.Column(db.String(36), db.ForeignKey('campaigns.id', ondelete='CASCADE'), nullable=False)
    influencer_id = db.Column(db.String(36), db.ForeignKey('influencers.id', ondelete='CASCADE'), nullable=False)
    pipeline_stage = db.Column(db.String(50), nullable=False, default='contacted')
    deliverable = db.Column(db.Text)
    w9_status = db.Column(db.String(50), nullable=False, default='pending')
    invoice_status = db.Column(db.String(50), nullable=False, default='pending')
    payment_status = db.Column(db.String(50), nullable=False, default='unpaid')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    payments = db.relationship('Payment', backref='assignment', cascade='all, delete-orphan',
                               order_by='Payment.created_at')

    @property
    def ready_to_pay(self):
        from influencer_os.services.pipeline import is_ready_to_pay
        return is_ready_to_pay(self.w9_status, self.invoice_status)

    def to_dict(self):
        return {
            "id": self.id,
            "campaign_id": self.campaign_id,
            "influencer_id": self.influencer_id,
            "pipeline_stage": self.pipeline_stage,
            "deliverable": self.deliverable,
            "w9_status": self.w9_status,
            "invoice_status": self.invoice_status,
            "payment_status": self.payment_status,
            "ready_to_pay": self.ready_to_pay,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
