from flask import Blueprint, jsonify, current_app, request
from flask_jwt_extended import jwt_required

from influencer_os.services.reporting import payment_queue

bp = Blueprint('payments', __name__)


@bp.route('/queue', methods=['GET'])
@jwt_required()
def get_payment_queue():
    """
    Payment queue: assignments in content_received, w9_done or
    invoice_received. Items with both W9 and invoice received are flagged
    ready_to_pay and listed first.

    Query Parameters:
        - brand_id: str (optional brand scope)
    """
    brand_id = request.args.get('brand_id') or None
    try:
        items = payment_queue(brand_id=brand_id)
    except Exception as exc:
        current_app.logger.exception("Payment queue: Error for brand_id=%s: %s", brand_id, exc)
        return jsonify({"error": "Unable to fetch payment queue"}), 500

    ready = sum(1 for item in items if item['ready_to_pay'])
    current_app.logger.debug("Payment queue: %d items, %d ready for brand_id=%s", len(items), ready, brand_id)
    return jsonify({"items": items, "total": len(items), "ready_to_pay": ready}), 200
