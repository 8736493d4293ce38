# kennel_app/api/growth/schemas.py
from marshmallow import Schema, fields

from kennel_app.api.common.schemas import DogSummarySchema

class GrowthEventCreateSchema(Schema):
    """POST /api/growth/events 성장 기록(사진/메모) 등록 스키마."""
    dog_id = fields.Str(required=True)
    event_date = fields.Date(required=True, format="%Y-%m-%d")
    photo_url = fields.URL(allow_none=True)
    notes = fields.Str(allow_none=True)

class GrowthEventResponseSchema(Schema):
    id = fields.Str()
    dog_id = fields.Str()
    event_date = fields.Date()
    photo_url = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    dog = fields.Nested(DogSummarySchema, allow_none=True)
