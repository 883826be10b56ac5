from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from sqlalchemy import func, or_

from influencer_os.extensions import db
from influencer_os.models.campaign import Campaign, CampaignInfluencer
from influencer_os.models.influencer import Influencer
from influencer_os.schemas.influencer_schema import InfluencerSchema

bp = Blueprint('influencers', __name__)

influencer_schema = InfluencerSchema()

VALID_SORT_FIELDS = {'name', 'followers', 'rate', 'campaigns', 'created_at'}


def _strip_blanks(data):
    """Empty strings from the form become NULLs."""
    return {k: (v.strip() or None) if isinstance(v, str) and k != 'name' else v for k, v in data.items()}


def _page_args():
    default_limit = current_app.config['DEFAULT_PAGE_SIZE']
    max_limit = current_app.config['MAX_PAGE_SIZE']
    try:
        page = max(1, int(request.args.get('page', 1)))
    except (ValueError, TypeError):
        page = 1
    try:
        limit = int(request.args.get('limit', default_limit))
        if limit < 1:
            limit = default_limit
        limit = min(limit, max_limit)
    except (ValueError, TypeError):
        limit = default_limit
    return page, limit


@bp.route('', methods=['GET'])
@jwt_required()
def list_influencers():
    """
    Roster ("rolodex") listing with search, filters, sorting and pagination.

    Query Parameters:
        - page: int (default: 1)
        - limit: int (default: DEFAULT_PAGE_SIZE)
        - search: str (name or handle, case-insensitive partial match)
        - platform: str (instagram, tiktok, youtube, twitter)
        - content_type: str (case-insensitive exact match)
        - sort: str (name, followers, rate, campaigns, created_at - default: name)
        - order: str (asc, desc - default: asc)

    Each row carries campaign_count, the number of campaigns the
    influencer is assigned to.
    """
    page, limit = _page_args()

    sort_field = request.args.get('sort', 'name').strip().lower()
    if sort_field not in VALID_SORT_FIELDS:
        current_app.logger.debug("List influencers: Invalid sort field %s, defaulting to name", sort_field)
        sort_field = 'name'
    sort_order = request.args.get('order', 'asc').strip().lower()
    if sort_order not in {'asc', 'desc'}:
        sort_order = 'asc'

    counts = (db.session.query(CampaignInfluencer.influencer_id,
                               func.count(CampaignInfluencer.id).label('campaign_count'))
              .group_by(CampaignInfluencer.influencer_id)
              .subquery())
    campaign_count = func.coalesce(counts.c.campaign_count, 0)
    query = (db.session.query(Influencer, campaign_count)
             .outerjoin(counts, counts.c.influencer_id == Influencer.id))

    search_term = request.args.get('search', '').strip()
    if search_term:
        pattern = f'%{search_term}%'
        query = query.filter(or_(Influencer.name.ilike(pattern), Influencer.handle.ilike(pattern)))

    platform = request.args.get('platform', '').strip()
    if platform and platform.lower() != 'all':
        query = query.filter(func.lower(Influencer.platform) == platform.lower())

    content_type = request.args.get('content_type', '').strip()
    if content_type and content_type.lower() != 'all':
        query = query.filter(func.lower(Influencer.content_type) == content_type.lower())

    total_count = query.count()

    sort_column = {
        'name': Influencer.name,
        'followers': Influencer.follower_count,
        'rate': Influencer.rate,
        'campaigns': campaign_count,
        'created_at': Influencer.created_at,
    }[sort_field]
    ordering = sort_column.desc() if sort_order == 'desc' else sort_column.asc()
    rows = query.order_by(ordering, Influencer.name.asc()).offset((page - 1) * limit).limit(limit).all()

    influencers = []
    for influencer, count in rows:
        data = influencer.to_dict()
        data['campaign_count'] = count
        influencers.append(data)

    current_app.logger.debug("List influencers: page=%d limit=%d total=%d returned=%d",
                             page, limit, total_count, len(influencers))

    return jsonify({
        "influencers": influencers,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total_count,
            "pages": (total_count + limit - 1) // limit if total_count > 0 else 0,
        }
    }), 200


@bp.route('', methods=['POST'])
@jwt_required()
def create_influencer():
    """Manual roster entry. Only name is required."""
    payload = request.get_json() or {}
    try:
        data = influencer_schema.load(payload)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400

    data = _strip_blanks(data)
    data['name'] = data['name'].strip()
    influencer = Influencer(**data)
    try:
        db.session.add(influencer)
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Create influencer failed: %s", exc)
        return jsonify({"error": "Failed to add influencer"}), 500

    current_app.logger.info("Created influencer %s (%s)", influencer.id, influencer.name)
    return jsonify({"influencer": influencer.to_dict()}), 201


@bp.route('/<influencer_id>', methods=['GET'])
@jwt_required()
def get_influencer(influencer_id):
    """
    Profile panel: the influencer plus every campaign assignment (newest
    first) with its payments.
    """
    influencer = db.session.get(Influencer, influencer_id)
    if not influencer:
        return jsonify({"error": "Influencer not found"}), 404

    assignments = (CampaignInfluencer.query
                   .filter_by(influencer_id=influencer_id)
                   .order_by(CampaignInfluencer.created_at.desc())
                   .all())
    campaign_ids = [a.campaign_id for a in assignments]
    campaigns = {}
    if campaign_ids:
        campaigns = {c.id: c for c in Campaign.query.filter(Campaign.id.in_(campaign_ids)).all()}

    history = []
    for assignment in assignments:
        item = assignment.to_dict()
        campaign = campaigns.get(assignment.campaign_id)
        item['campaign_name'] = campaign.name if campaign else None
        item['quarter'] = campaign.quarter if campaign else None
        item['payments'] = [p.to_dict() for p in assignment.payments]
        history.append(item)

    data = influencer.to_dict()
    data['assignments'] = history
    data['total_earned'] = sum(p['amount'] or 0 for item in history for p in item['payments'])
    return jsonify({"influencer": data}), 200


@bp.route('/<influencer_id>', methods=['PATCH'])
@jwt_required()
def update_influencer(influencer_id):
    """Profile edit, including notes and performance rating. Partial update."""
    influencer = db.session.get(Influencer, influencer_id)
    if not influencer:
        return jsonify({"error": "Influencer not found"}), 404

    payload = request.get_json() or {}
    try:
        data = influencer_schema.load(payload, partial=True)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400

    data = _strip_blanks(data)
    if 'name' in data:
        data['name'] = data['name'].strip()
    for field, value in data.items():
        setattr(influencer, field, value)

    try:
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Update influencer %s failed: %s", influencer_id, exc)
        return jsonify({"error": "Failed to update influencer"}), 500

    return jsonify({"influencer": influencer.to_dict()}), 200
