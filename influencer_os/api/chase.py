from flask import Blueprint, jsonify, current_app, request
from flask_jwt_extended import jwt_required

from influencer_os.services.reporting import chase_list

bp = Blueprint('chase', __name__)


@bp.route('', methods=['GET'])
@jwt_required()
def get_chase_list():
    """
    Chase list: contacted / brief_sent assignments whose campaign posting
    deadline has passed, most overdue first.

    Query Parameters:
        - brand_id: str (optional brand scope)
    """
    brand_id = request.args.get('brand_id') or None
    try:
        items = chase_list(brand_id=brand_id)
    except Exception as exc:
        current_app.logger.exception("Chase list: Error for brand_id=%s: %s", brand_id, exc)
        return jsonify({"error": "Unable to fetch chase list"}), 500

    current_app.logger.info("Chase list: %d overdue items for brand_id=%s", len(items), brand_id)
    return jsonify({"items": items, "total": len(items)}), 200
