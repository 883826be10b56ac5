from influencer_os.extensions import db
from datetime import datetime
import uuid

PLATFORMS = ('instagram', 'tiktok', 'youtube', 'twitter')


class Influencer(db.Model):
    __tablename__ = 'influencers'

    """
    Influencer Model - one row per creator in the roster ("rolodex").

    Rows come from manual entry or the spreadsheet migration and are
    edited through the profile panel. They are never hard-deleted.
    """

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False, index=True)
    handle = db.Column(db.String(255))
    email = db.Column(db.String(255))
    platform = db.Column(db.String(20))  # instagram, tiktok, youtube, twitter
    content_type = db.Column(db.String(255))
    location = db.Column(db.String(255))
    rate = db.Column(db.Numeric(12, 2, asdecimal=False))
    follower_count = db.Column(db.Integer)
    notes = db.Column(db.Text)
    performance_rating = db.Column(db.Numeric(3, 1, asdecimal=False))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    assignments = db.relationship('CampaignInfluencer', backref='influencer')

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "handle": self.handle,
            "email": self.email,
            "platform": self.platform,
            "content_type": self.content_type,
            "location": self.location,
            "rate": self.rate,
            "follower_count": self.follower_count,
            "notes": self.notes,
            "performance_rating": self.performance_rating,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
