from flask import Blueprint, jsonify, current_app, request
from flask_jwt_extended import jwt_required

from influencer_os.services.reporting import dashboard_stats

bp = Blueprint('dashboard', __name__)


@bp.route('/stats', methods=['GET'])
@jwt_required()
def get_dashboard_stats():
    """
    Dashboard Statistics Endpoint

    Returns aggregated statistics for the selected brand:
    - Total influencers in the roster
    - Assignments on active campaigns
    - Budget allocated and paid out on active campaigns
    - Overdue count plus the "needs attention" list
    - Active campaigns with influencer counts
    """
    brand_id = request.args.get('brand_id') or None
    try:
        current_app.logger.debug("Dashboard: Fetching stats for brand_id=%s", brand_id)
        stats = dashboard_stats(brand_id=brand_id)
        current_app.logger.info("Dashboard: Stats successfully retrieved for brand_id=%s", brand_id)
        return jsonify({"stats": stats}), 200
    except Exception as exc:
        current_app.logger.exception("Dashboard: Error fetching stats for brand_id=%s: %s", brand_id, exc)
        return jsonify({"error": "Unable to fetch dashboard statistics"}), 500
