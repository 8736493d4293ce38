# kennel_app/api/breeding/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE

from kennel_app.api.common.schemas import DogSummarySchema

class LitterCreateSchema(Schema):
    """
    POST /api/breeding/litters 교배/출산 기록 등록 스키마.
    birth_date 없이 등록하면 임신 중인 기록으로 취급됩니다.
    """
    sire_id = fields.Str(required=True)
    dam_id = fields.Str(required=True)
    mating_date = fields.Date(format="%Y-%m-%d", allow_none=True)
    expected_birth_date = fields.Date(format="%Y-%m-%d", allow_none=True)
    birth_date = fields.Date(format="%Y-%m-%d", allow_none=True)
    puppy_ids = fields.List(fields.Str(), load_default=list)
    puppy_count = fields.Int(allow_none=True, validate=validate.Range(min=0, max=30))
    notes = fields.Str(allow_none=True)

    @validates_schema
    def validate_pair(self, data, **kwargs):
        if data.get('sire_id') and data.get('sire_id') == data.get('dam_id'):
            raise ValidationError('부견과 모견은 같은 견일 수 없습니다.', 'dam_id')
        mating, expected = data.get('mating_date'), data.get('expected_birth_date')
        if mating and expected and expected < mating:
            raise ValidationError('예정일은 교배일보다 빠를 수 없습니다.', 'expected_birth_date')

class LitterBirthSchema(Schema):
    """PATCH /api/breeding/litters/<id> 출산 정보 기록 스키마."""
    birth_date = fields.Date(required=True, format="%Y-%m-%d")
    puppy_ids = fields.List(fields.Str())
    puppy_count = fields.Int(allow_none=True, validate=validate.Range(min=0, max=30))
    notes = fields.Str(allow_none=True)

    @validates_schema
    def validate_count(self, data, **kwargs):
        count, puppy_ids = data.get('puppy_count'), data.get('puppy_ids') or []
        if count is not None and count < len(puppy_ids):
            raise ValidationError('puppy_count 는 등록된 새끼 수보다 작을 수 없습니다.', 'puppy_count')

class LitterResponseSchema(Schema):
    id = fields.Str()
    sire_id = fields.Str()
    dam_id = fields.Str()
    mating_date = fields.Date(allow_none=True)
    expected_birth_date = fields.Date(allow_none=True)
    birth_date = fields.Date(allow_none=True)
    puppy_ids = fields.List(fields.Str())
    puppy_count = fields.Int(allow_none=True)
    notes = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    sire = fields.Nested(DogSummarySchema, allow_none=True)
    dam = fields.Nested(DogSummarySchema, allow_none=True)

class LitterQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    parent_id = fields.Str()
    born = fields.Bool()
