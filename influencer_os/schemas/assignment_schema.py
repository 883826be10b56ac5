from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from influencer_os.services.pipeline import (
    INVOICE_STATUSES,
    PAYMENT_STATUSES,
    PIPELINE_STAGES,
    W9_STATUSES,
)


class CreateAssignmentSchema(Schema):
    campaign_id = fields.Str(required=True)
    influencer_id = fields.Str(required=True)
    deliverable = fields.Str(allow_none=True, load_default=None)


class StageUpdateSchema(Schema):
    pipeline_stage = fields.Str(required=True, validate=validate.OneOf(PIPELINE_STAGES))


class StatusUpdateSchema(Schema):
    w9_status = fields.Str(validate=validate.OneOf(W9_STATUSES))
    invoice_status = fields.Str(validate=validate.OneOf(INVOICE_STATUSES))
    payment_status = fields.Str(validate=validate.OneOf(PAYMENT_STATUSES))
    deliverable = fields.Str(allow_none=True)

    @validates_schema
    def validate_not_empty(self, data, **kwargs):
        if not data:
            raise ValidationError("At least one status field is required")


class PaymentSchema(Schema):
    amount = fields.Float(required=True, validate=validate.Range(min=0, min_inclusive=False))
    date_sent = fields.Date(allow_none=True, load_default=None)
    method = fields.Str(allow_none=True, load_default=None)
    notes = fields.Str(allow_none=True, load_default=None)
