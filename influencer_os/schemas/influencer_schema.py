from marshmallow import Schema, fields, validate, validates, ValidationError

from influencer_os.models.influencer import PLATFORMS


class InfluencerSchema(Schema):
    """
    Influencer create/update validation.

    Used with partial=True for profile edits, so only the fields sent are
    validated and written.
    """
    name = fields.Str(required=True, error_messages={"required": "Name is required"})
    handle = fields.Str(allow_none=True)
    email = fields.Email(allow_none=True, error_messages={"invalid": "Invalid email format"})
    platform = fields.Str(allow_none=True, validate=validate.OneOf(PLATFORMS))
    content_type = fields.Str(allow_none=True)
    location = fields.Str(allow_none=True)
    rate = fields.Float(allow_none=True, validate=validate.Range(min=0))
    follower_count = fields.Int(allow_none=True, validate=validate.Range(min=0))
    notes = fields.Str(allow_none=True)
    performance_rating = fields.Float(allow_none=True, validate=validate.Range(min=0, max=5))

    @validates('name')
    def validate_name(self, value, **kwargs):
        if not value or not value.strip():
            raise ValidationError("Name is required")
        if len(value) > 255:
            raise ValidationError("Name must be less than 255 characters")

    @validates('handle')
    def validate_handle(self, value, **kwargs):
        if value and value.strip().startswith('@'):
            raise ValidationError("Handle should not include the leading @")
