from datetime import date, timedelta

import pytest
from flask_jwt_extended import create_access_token

from influencer_os import create_app
from influencer_os.config import TestConfig
from influencer_os.extensions import db
from influencer_os.models import Brand, Campaign, CampaignInfluencer, Influencer, Payment


# ---------------------- Fixtures ----------------------
@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def auth_headers(app):
    token = create_access_token(identity='user-1')
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def brand(app):
    brand = Brand(name='Miss Jones', invoice_email='invoices@missjones.example')
    db.session.add(brand)
    db.session.commit()
    return brand


def make_influencer(name, **kwargs):
    influencer = Influencer(name=name, **kwargs)
    db.session.add(influencer)
    db.session.commit()
    return influencer


def make_campaign(brand, name, **kwargs):
    kwargs.setdefault('status', 'active')
    campaign = Campaign(brand_id=brand.id, name=name, **kwargs)
    db.session.add(campaign)
    db.session.commit()
    return campaign


def assign(campaign, influencer, stage='contacted', **kwargs):
    assignment = CampaignInfluencer(
        campaign_id=campaign.id,
        influencer_id=influencer.id,
        pipeline_stage=stage,
        **kwargs
    )
    db.session.add(assignment)
    db.session.commit()
    return assignment


def pay(assignment, amount):
    payment = Payment(campaign_influencer_id=assignment.id, amount=amount, date_sent=date.today())
    db.session.add(payment)
    db.session.commit()
    return payment


@pytest.fixture
def seeded(brand):
    """
    One active campaign past its deadline with four influencers spread
    across the pipeline, plus one completed campaign.
    """
    yesterday = date.today() - timedelta(days=1)
    gina = make_influencer('Gina Foodie', handle='ginafoodie', platform='instagram', rate=500, follower_count=16200)
    tom = make_influencer('Tom Eats', handle='tomeats', platform='tiktok', rate=300, follower_count=218000)
    ana = make_influencer('Ana Bakes', handle='anabakes', platform='instagram', rate=800, follower_count=1100000)
    lee = make_influencer('Lee Cooks', handle='leecooks', platform='instagram', rate=250, follower_count=11000)

    holiday = make_campaign(brand, 'Whole Foods - Holiday', retailer='Whole Foods', quarter='Q1 2026',
                            budget=5000, posting_deadline=yesterday)
    fall = make_campaign(brand, 'Costco - Fall', retailer='Costco', quarter='Q4 2025',
                         budget=2000, status='completed')

    assignments = {
        'gina': assign(holiday, gina, 'brief_sent'),
        'tom': assign(holiday, tom, 'contacted'),
        'ana': assign(holiday, ana, 'invoice_received', w9_status='received', invoice_status='received'),
        'lee': assign(holiday, lee, 'content_received'),
        'gina_fall': assign(fall, gina, 'posted', payment_status='paid'),
    }
    pay(assignments['gina_fall'], 400)

    return {
        "brand": brand,
        "campaigns": {"holiday": holiday, "fall": fall},
        "influencers": {"gina": gina, "tom": tom, "ana": ana, "lee": lee},
        "assignments": assignments,
    }
