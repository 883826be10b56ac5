from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from influencer_os.extensions import db
from influencer_os.models.campaign import Campaign, CampaignInfluencer
from influencer_os.models.influencer import Influencer
from influencer_os.models.payment import Payment
from influencer_os.schemas.assignment_schema import (
    CreateAssignmentSchema,
    PaymentSchema,
    StageUpdateSchema,
    StatusUpdateSchema,
)
from influencer_os.services.pipeline import set_pipeline_stage, set_statuses

bp = Blueprint('assignments', __name__)

create_assignment_schema = CreateAssignmentSchema()
stage_update_schema = StageUpdateSchema()
status_update_schema = StatusUpdateSchema()
payment_schema = PaymentSchema()


def _get_assignment(assignment_id):
    return db.session.get(CampaignInfluencer, assignment_id)


@bp.route('', methods=['POST'])
@jwt_required()
def add_to_campaign():
    """
    Add an influencer to a campaign (profile panel "Add to campaign").
    One assignment per (campaign, influencer) pair.
    """
    payload = request.get_json() or {}
    try:
        data = create_assignment_schema.load(payload)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400

    if db.session.get(Campaign, data['campaign_id']) is None:
        return jsonify({"error": "Campaign not found"}), 404
    if db.session.get(Influencer, data['influencer_id']) is None:
        return jsonify({"error": "Influencer not found"}), 404

    existing = CampaignInfluencer.query.filter_by(
        campaign_id=data['campaign_id'], influencer_id=data['influencer_id']
    ).first()
    if existing:
        return jsonify({"error": "Influencer already assigned to this campaign",
                        "assignment": existing.to_dict()}), 409

    deliverable = data.get('deliverable')
    assignment = CampaignInfluencer(
        campaign_id=data['campaign_id'],
        influencer_id=data['influencer_id'],
        deliverable=deliverable.strip() or None if deliverable else None,
    )
    try:
        db.session.add(assignment)
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Add to campaign failed: %s", exc)
        return jsonify({"error": "Failed to add to campaign"}), 500

    return jsonify({"assignment": assignment.to_dict()}), 201


@bp.route('/<assignment_id>', methods=['GET'])
@jwt_required()
def get_assignment(assignment_id):
    assignment = _get_assignment(assignment_id)
    if not assignment:
        return jsonify({"error": "Assignment not found"}), 404
    data = assignment.to_dict()
    data['payments'] = [p.to_dict() for p in assignment.payments]
    return jsonify({"assignment": data}), 200


@bp.route('/<assignment_id>/stage', methods=['PATCH'])
@jwt_required()
def update_stage(assignment_id):
    """
    Move an assignment to any pipeline stage (board drop or stepper click).
    Transitions are not restricted; the last write wins.
    """
    assignment = _get_assignment(assignment_id)
    if not assignment:
        return jsonify({"error": "Assignment not found"}), 404

    payload = request.get_json() or {}
    try:
        data = stage_update_schema.load(payload)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400

    try:
        set_pipeline_stage(assignment, data['pipeline_stage'])
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Failed to update pipeline stage for %s: %s", assignment_id, exc)
        return jsonify({"error": "Failed to update pipeline stage"}), 500

    return jsonify({"assignment": assignment.to_dict()}), 200


@bp.route('/<assignment_id>/status', methods=['PATCH'])
@jwt_required()
def update_status(assignment_id):
    """
    Update the W9 / invoice / payment sub-statuses (and optionally the
    deliverable). Each status is checked against its own closed set.
    """
    assignment = _get_assignment(assignment_id)
    if not assignment:
        return jsonify({"error": "Assignment not found"}), 404

    payload = request.get_json() or {}
    try:
        data = status_update_schema.load(payload)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400

    if 'deliverable' in data:
        deliverable = data.pop('deliverable')
        assignment.deliverable = deliverable.strip() or None if deliverable else None

    try:
        set_statuses(assignment, data)
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Failed to update statuses for %s: %s", assignment_id, exc)
        return jsonify({"error": "Failed to update status"}), 500

    return jsonify({"assignment": assignment.to_dict()}), 200


@bp.route('/<assignment_id>/request-invoice', methods=['POST'])
@jwt_required()
def request_invoice(assignment_id):
    """Payment queue "Request Invoice": moves a pending invoice to sent."""
    assignment = _get_assignment(assignment_id)
    if not assignment:
        return jsonify({"error": "Assignment not found"}), 404
    if assignment.invoice_status != 'pending':
        return jsonify({"error": f"Invoice is already {assignment.invoice_status}"}), 400

    try:
        set_statuses(assignment, {'invoice_status': 'sent'})
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Failed to request invoice for %s: %s", assignment_id, exc)
        return jsonify({"error": "Failed to request invoice"}), 500

    return jsonify({"assignment": assignment.to_dict()}), 200


@bp.route('/<assignment_id>/payments', methods=['GET'])
@jwt_required()
def list_payments(assignment_id):
    assignment = _get_assignment(assignment_id)
    if not assignment:
        return jsonify({"error": "Assignment not found"}), 404
    payments = [p.to_dict() for p in assignment.payments]
    return jsonify({
        "payments": payments,
        "total_paid": sum(p['amount'] or 0 for p in payments),
    }), 200


@bp.route('/<assignment_id>/payments', methods=['POST'])
@jwt_required()
def record_payment(assignment_id):
    """Append a payment record. Payments are never edited or deleted."""
    assignment = _get_assignment(assignment_id)
    if not assignment:
        return jsonify({"error": "Assignment not found"}), 404

    payload = request.get_json() or {}
    try:
        data = payment_schema.load(payload)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400

    payment = Payment(campaign_influencer_id=assignment.id, **data)
    try:
        db.session.add(payment)
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Failed to record payment for %s: %s", assignment_id, exc)
        return jsonify({"error": "Failed to record payment"}), 500

    current_app.logger.info("Recorded payment %s of %s for assignment %s", payment.id, payment.amount, assignment_id)
    return jsonify({"payment": payment.to_dict()}), 201
