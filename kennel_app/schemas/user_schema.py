# kennel_app/schemas/user_schema.py
from marshmallow import Schema, fields, EXCLUDE

class UserSchema(Schema):
    """User 데이터의 직렬화/역직렬화를 위한 스키마"""
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    email = fields.Email(required=True)
    full_name = fields.Str(allow_none=True)
    avatar_url = fields.URL(allow_none=True)
    created_at = fields.DateTime()
