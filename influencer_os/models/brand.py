from influencer_os.extensions import db
from datetime import datetime
import uuid


class Brand(db.Model):
    __tablename__ = 'brands'

    """
    Brand Model - the scope every campaign belongs to.

    Brands are created out of band. The dashboard lets the user pick one
    as the active filter and passes its id explicitly on each request.

    Attributes:
        id (str): Unique identifier (UUID)
        name (str): Display name (e.g., "Miss Jones")
        invoice_email (str): Where influencers send invoices
        invoice_instructions (str): Free-text invoicing notes
        created_at (datetime): When the brand was created
    """

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    invoice_email = db.Column(db.String(255))
    invoice_instructions = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    campaigns = db.relationship('Campaign', backref='brand')

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "invoice_email": self.invoice_email,
            "invoice_instructions": self.invoice_instructions,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
