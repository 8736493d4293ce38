# kennel_app/api/dogs/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE

from kennel_app.models.dog import DogGender, DogStatus

class DogCreateSchema(Schema):
    """POST /api/dogs/ 견 등록 요청 스키마."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    breed = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    gender = fields.Str(required=True, validate=validate.OneOf([e.value for e in DogGender]))
    birth_date = fields.Date(required=True, format="%Y-%m-%d")
    color = fields.Str(required=True, validate=validate.Length(min=1, max=30))
    weight = fields.Float(allow_none=True, validate=validate.Range(min=0.1, max=200.0))
    microchip_id = fields.Str(allow_none=True)
    registration_number = fields.Str(allow_none=True)
    owner_contact = fields.Str(allow_none=True)
    status = fields.Str(validate=validate.OneOf([e.value for e in DogStatus]), load_default=DogStatus.OWNED.value)
    photo_urls = fields.List(fields.URL(), load_default=list)
    sire_id = fields.Str(allow_none=True)
    dam_id = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)

    @validates_schema
    def validate_parents(self, data, **kwargs):
        sire_id, dam_id = data.get('sire_id'), data.get('dam_id')
        if sire_id and dam_id and sire_id == dam_id:
            raise ValidationError('부견과 모견은 같은 견일 수 없습니다.', 'dam_id')

class DogUpdateSchema(DogCreateSchema):
    """PATCH /api/dogs/<dog_id> 정보 수정을 위한 스키마 (부분 업데이트용)."""
    name = fields.Str(validate=validate.Length(min=1, max=50))
    breed = fields.Str(validate=validate.Length(min=1, max=50))
    gender = fields.Str(validate=validate.OneOf([e.value for e in DogGender]))
    birth_date = fields.Date(format="%Y-%m-%d")
    color = fields.Str(validate=validate.Length(min=1, max=30))
    status = fields.Str(validate=validate.OneOf([e.value for e in DogStatus]))
    photo_urls = fields.List(fields.URL())

class DogListQuerySchema(Schema):
    """GET /api/dogs/ 쿼리 파라미터."""
    class Meta:
        unknown = EXCLUDE

    status = fields.Str(validate=validate.OneOf([e.value for e in DogStatus]))
    breed = fields.Str()
    q = fields.Str(validate=validate.Length(min=1))

class PedigreeQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    depth = fields.Int(validate=validate.Range(min=1, max=5), load_default=3)
