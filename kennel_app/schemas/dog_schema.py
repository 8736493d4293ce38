# kennel_app/schemas/dog_schema.py
from marshmallow import Schema, fields, validate, EXCLUDE

from kennel_app.models.dog import DogGender, DogStatus

class DogSchema(Schema):
    """
    Dog 레코드 전체의 직렬화/역직렬화 스키마.
    API 응답과 상태 저장소의 영속화 레코드가 같은 형식을 사용합니다.
    """
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    name = fields.Str(required=True)
    breed = fields.Str(required=True)
    gender = fields.Str(required=True, validate=validate.OneOf([e.value for e in DogGender]))
    birth_date = fields.Date(required=True, allow_none=True)
    color = fields.Str(required=True, allow_none=True)
    weight = fields.Float(allow_none=True)
    microchip_id = fields.Str(allow_none=True)
    registration_number = fields.Str(allow_none=True)
    owner_contact = fields.Str(allow_none=True)
    status = fields.Str(validate=validate.OneOf([e.value for e in DogStatus]), load_default=DogStatus.OWNED.value)
    photo_urls = fields.List(fields.Str(), load_default=list)
    sire_id = fields.Str(allow_none=True)
    dam_id = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(allow_none=True)
