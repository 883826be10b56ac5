from datetime import date

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from influencer_os.extensions import db
from influencer_os.models.brand import Brand
from influencer_os.models.campaign import Campaign, CampaignInfluencer, CAMPAIGN_STATUSES
from influencer_os.models.influencer import Influencer
from influencer_os.schemas.campaign_schema import CreateCampaignSchema, UpdateCampaignSchema
from influencer_os.services.pipeline import PIPELINE_STAGES, STAGE_LABELS, PipelineBoard
from influencer_os.services.reporting import campaign_stats, pipeline_cards

bp = Blueprint('campaigns', __name__)

create_campaign_schema = CreateCampaignSchema()
update_campaign_schema = UpdateCampaignSchema()

OPTIONAL_TEXT_FIELDS = ('retailer', 'region', 'quarter', 'products')


def _optional_text(value):
    if value is None:
        return None
    return value.strip() or None


@bp.route('', methods=['GET'])
@jwt_required()
def list_campaigns():
    """
    Query Parameters:
        - brand_id: str (optional brand scope)
        - status: str (active, completed)
    """
    query = Campaign.query
    brand_id = request.args.get('brand_id')
    if brand_id:
        query = query.filter(Campaign.brand_id == brand_id)
    status_filter = request.args.get('status')
    if status_filter and status_filter in CAMPAIGN_STATUSES:
        query = query.filter(Campaign.status == status_filter)

    campaigns = query.order_by(Campaign.created_at.desc()).all()
    return jsonify({"campaigns": [c.to_dict() for c in campaigns], "total": len(campaigns)}), 200


@bp.route('', methods=['POST'])
@jwt_required()
def create_campaign():
    """
    Create a campaign and optionally assign influencers in one go.

    Request Body:
        {
            "brand_id": "brand-uuid",
            "name": "Whole Foods - Holiday",
            "retailer": "Whole Foods",
            "quarter": "Q1 2026",
            "budget": 5000,
            "posting_deadline": "2026-02-15",
            "influencers": [{"influencer_id": "...", "deliverable": "1 Reel"}]
        }

    Every assignment starts at "contacted" with W9 and invoice pending
    and payment unpaid.
    """
    payload = request.get_json() or {}
    try:
        data = create_campaign_schema.load(payload)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400

    if db.session.get(Brand, data['brand_id']) is None:
        return jsonify({"error": "Brand not found"}), 404

    assigned = data.pop('influencers')
    influencer_ids = [item['influencer_id'] for item in assigned]
    if influencer_ids:
        found = {i.id for i in Influencer.query.filter(Influencer.id.in_(influencer_ids)).all()}
        missing = set(influencer_ids) - found
        if missing:
            return jsonify({"error": f"Influencers not found: {sorted(missing)}"}), 404

    campaign = Campaign(
        brand_id=data['brand_id'],
        name=data['name'].strip(),
        retailer=_optional_text(data.get('retailer')),
        region=_optional_text(data.get('region')),
        quarter=_optional_text(data.get('quarter')),
        products=_optional_text(data.get('products')),
        budget=data.get('budget'),
        posting_deadline=data.get('posting_deadline'),
        status=data['status'],
    )
    try:
        db.session.add(campaign)
        db.session.flush()

        for item in assigned:
            db.session.add(CampaignInfluencer(
                campaign_id=campaign.id,
                influencer_id=item['influencer_id'],
                deliverable=_optional_text(item.get('deliverable')),
                pipeline_stage='contacted',
                w9_status='pending',
                invoice_status='pending',
                payment_status='unpaid',
            ))
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Create campaign failed: %s", exc)
        return jsonify({"error": "Failed to create campaign"}), 500

    current_app.logger.info("Created campaign %s with %d influencers", campaign.id, len(assigned))
    data = campaign.to_dict()
    data['influencer_count'] = len(assigned)
    return jsonify({"campaign": data}), 201


@bp.route('/<campaign_id>', methods=['GET'])
@jwt_required()
def get_campaign(campaign_id):
    campaign = db.session.get(Campaign, campaign_id)
    if not campaign:
        return jsonify({"error": "Campaign not found"}), 404

    data = campaign.to_dict()
    data['influencer_count'] = CampaignInfluencer.query.filter_by(campaign_id=campaign_id).count()
    return jsonify({"campaign": data}), 200


@bp.route('/<campaign_id>', methods=['PATCH'])
@jwt_required()
def update_campaign(campaign_id):
    campaign = db.session.get(Campaign, campaign_id)
    if not campaign:
        return jsonify({"error": "Campaign not found"}), 404

    payload = request.get_json() or {}
    try:
        data = update_campaign_schema.load(payload)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400

    if 'name' in data:
        data['name'] = data['name'].strip()
    for field in OPTIONAL_TEXT_FIELDS:
        if field in data:
            data[field] = _optional_text(data[field])
    for field, value in data.items():
        setattr(campaign, field, value)

    try:
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Update campaign %s failed: %s", campaign_id, exc)
        return jsonify({"error": "Failed to update campaign"}), 500

    return jsonify({"campaign": campaign.to_dict()}), 200


@bp.route('/<campaign_id>/pipeline', methods=['GET'])
@jwt_required()
def get_pipeline(campaign_id):
    """
    Kanban board for one campaign: cards grouped into the seven fixed
    stage columns, plus the header stats (influencer count, budget,
    content received, paid out, overdue).
    """
    campaign = db.session.get(Campaign, campaign_id)
    if not campaign:
        return jsonify({"error": "Campaign not found"}), 404

    board = PipelineBoard(pipeline_cards(campaign_id))
    columns = [
        {"key": stage, "label": STAGE_LABELS[stage], "items": items}
        for stage, items in board.columns().items()
    ]
    stats = campaign_stats(campaign, board.cards, today=date.today())

    return jsonify({
        "campaign": campaign.to_dict(),
        "stages": list(PIPELINE_STAGES),
        "columns": columns,
        "stats": stats,
    }), 200
