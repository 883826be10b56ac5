from flask import Blueprint, jsonify, current_app
from flask_jwt_extended import jwt_required

from influencer_os.models.brand import Brand

bp = Blueprint('brands', __name__)


@bp.route('', methods=['GET'])
@jwt_required()
def list_brands():
    """
    List brands for the brand switcher, ordered by name.

    The dashboard keeps the selected brand client-side and sends its id
    as ?brand_id= on every scoped request.
    """
    brands = Brand.query.order_by(Brand.name.asc()).all()
    current_app.logger.debug("List brands: returning %d brands", len(brands))
    return jsonify({"brands": [b.to_dict() for b in brands]}), 200
