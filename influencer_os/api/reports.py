from flask import Blueprint, jsonify, current_app, request
from flask_jwt_extended import jwt_required

from influencer_os.extensions import db
from influencer_os.models.brand import Brand
from influencer_os.services.reporting import brand_report

bp = Blueprint('reports', __name__)


@bp.route('', methods=['GET'])
@jwt_required()
def get_report():
    """
    Brand report: summary totals, campaign performance rows, pipeline
    distribution for active campaigns and the top 10 influencers by
    number of campaigns.

    Query Parameters:
        - brand_id: str (required)
    """
    brand_id = request.args.get('brand_id')
    if not brand_id:
        return jsonify({"error": "brand_id is required"}), 400
    if db.session.get(Brand, brand_id) is None:
        return jsonify({"error": "Brand not found"}), 404

    try:
        report = brand_report(brand_id)
    except Exception as exc:
        current_app.logger.exception("Reports: Error building report for brand_id=%s: %s", brand_id, exc)
        return jsonify({"error": "Unable to build report"}), 500

    return jsonify({"report": report}), 200
