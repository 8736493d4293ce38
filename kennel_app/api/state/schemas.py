# kennel_app/api/state/schemas.py
from marshmallow import Schema, fields

class SelectDogSchema(Schema):
    """PUT /api/state/selected-dog 요청. dog_id 가 null 이면 선택 해제."""
    dog_id = fields.Str(required=True, allow_none=True)
