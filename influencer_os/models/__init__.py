from influencer_os.models.brand import Brand
from influencer_os.models.influencer import Influencer, PLATFORMS
from influencer_os.models.campaign import Campaign, CampaignInfluencer, CAMPAIGN_STATUSES
from influencer_os.models.payment import Payment

__all__ = [
    'Brand',
    'Influencer',
    'PLATFORMS',
    'Campaign',
    'CampaignInfluencer',
    'CAMPAIGN_STATUSES',
    'Payment',
]
