from influencer_os.extensions import db
from datetime import datetime
import uuid


class Payment(db.Model):
    __tablename__ = 'payments'

    """
    Payment Model - append-only record of money sent for one assignment.
    Summed for the "paid out" figures on the dashboard and reports.
    """

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    campaign_influencer_id = db.Column(
        db.String(36), db.ForeignKey('campaign_influencers.id', ondelete='CASCADE'), nullable=False
    )
    amount = db.Column(db.Numeric(12, 2, asdecimal=False))
    date_sent = db.Column(db.Date)
    method = db.Column(db.String(100))
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "campaign_influencer_id": self.campaign_influencer_id,
            "amount": self.amount,
            "date_sent": self.date_sent.isoformat() if self.date_sent else None,
            "method": self.method,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
