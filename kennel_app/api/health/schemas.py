# kennel_app/api/health/schemas.py
from marshmallow import Schema, fields, validate

from kennel_app.api.common.schemas import DogSummarySchema, RecordsQuerySchema
from kennel_app.models.health_record import HealthRecordType

class HealthRecordCreateSchema(Schema):
    """POST /api/health/records 요청 스키마."""
    dog_id = fields.Str(required=True)
    type = fields.Str(required=True, validate=validate.OneOf([e.value for e in HealthRecordType]))
    date = fields.Date(required=True, format="%Y-%m-%d")
    description = fields.Str(required=True, validate=validate.Length(min=1, max=500))
    document_url = fields.URL(allow_none=True)
    cost = fields.Float(allow_none=True, validate=validate.Range(min=0))

class HealthRecordResponseSchema(Schema):
    id = fields.Str()
    dog_id = fields.Str()
    type = fields.Str()
    date = fields.Date()
    description = fields.Str()
    document_url = fields.Str(allow_none=True)
    cost = fields.Float(allow_none=True)
    created_at = fields.DateTime()
    dog = fields.Nested(DogSummarySchema, allow_none=True)

class HealthQuerySchema(RecordsQuerySchema):
    type = fields.Str(validate=validate.OneOf([e.value for e in HealthRecordType]))

class HealthStatsSchema(Schema):
    total_records = fields.Int()
    recent_vaccinations = fields.Int()
    recent_checkups = fields.Int()
    treatment_count = fields.Int()
    dogs_needing_attention = fields.List(fields.Str())
