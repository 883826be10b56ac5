from marshmallow import Schema, fields, validate, validates, ValidationError

from influencer_os.models.campaign import CAMPAIGN_STATUSES


class AssignedInfluencerSchema(Schema):
    influencer_id = fields.Str(required=True)
    deliverable = fields.Str(allow_none=True, load_default=None)


class CreateCampaignSchema(Schema):
    brand_id = fields.Str(required=True, error_messages={"required": "Please select a brand"})
    name = fields.Str(required=True)
    retailer = fields.Str(allow_none=True)
    region = fields.Str(allow_none=True)
    quarter = fields.Str(allow_none=True)
    products = fields.Str(allow_none=True)
    budget = fields.Float(allow_none=True, validate=validate.Range(min=0))
    posting_deadline = fields.Date(allow_none=True)
    status = fields.Str(load_default='active', validate=validate.OneOf(CAMPAIGN_STATUSES))
    influencers = fields.List(fields.Nested(AssignedInfluencerSchema), load_default=list)

    @validates('name')
    def validate_name(self, value, **kwargs):
        if not value or not value.strip():
            raise ValidationError("Campaign name is required")
        if len(value) > 255:
            raise ValidationError("Name must be less than 255 characters")

    @validates('influencers')
    def validate_influencers(self, value, **kwargs):
        ids = [item['influencer_id'] for item in value]
        if len(ids) != len(set(ids)):
            raise ValidationError("Each influencer can only be assigned once")


class UpdateCampaignSchema(Schema):
    name = fields.Str()
    retailer = fields.Str(allow_none=True)
    region = fields.Str(allow_none=True)
    quarter = fields.Str(allow_none=True)
    products = fields.Str(allow_none=True)
    budget = fields.Float(allow_none=True, validate=validate.Range(min=0))
    posting_deadline = fields.Date(allow_none=True)
    status = fields.Str(validate=validate.OneOf(CAMPAIGN_STATUSES))

    @validates('name')
    def validate_name(self, value, **kwargs):
        if not value or not value.strip():
            raise ValidationError("Campaign name cannot be blank")
        if len(value) > 255:
            raise ValidationError("Name must be less than 255 characters")
