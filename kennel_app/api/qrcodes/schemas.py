# kennel_app/api/qrcodes/schemas.py
from marshmallow import Schema, fields

from kennel_app.api.common.schemas import DogSummarySchema

class QrCodeUpsertSchema(Schema):
    """PUT /api/qrcodes/<dog_id> 요청 스키마. 본문이 비어 있어도 됩니다."""
    qrcode_url = fields.URL(allow_none=True)

class QrCodeSchema(Schema):
    dog_id = fields.Str()
    qrcode_url = fields.Str()
    updated_at = fields.DateTime()
    dog = fields.Nested(DogSummarySchema, allow_none=True)

class QrPayloadSchema(Schema):
    id = fields.Str()
    name = fields.Str()
    breed = fields.Str()
    birth_date = fields.Str(allow_none=True)
    gender = fields.Str()
    contact = fields.Str()
    view_url = fields.Str()

class QrCodeDetailSchema(Schema):
    qrcode = fields.Nested(QrCodeSchema, allow_none=True)
    payload = fields.Nested(QrPayloadSchema)
