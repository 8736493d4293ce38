# kennel_app/api/common/schemas.py
from marshmallow import Schema, fields, validates_schema, ValidationError, EXCLUDE

class RecordsQuerySchema(Schema):
    """
    기록 목록 조회 공통 쿼리 파라미터.
    - dog_id: 특정 견의 기록만
    - start_date, end_date: 날짜 범위 (YYYY-MM-DD, 양 끝 포함)
    """
    class Meta:
        unknown = EXCLUDE

    dog_id = fields.Str()
    start_date = fields.Date(format="%Y-%m-%d")
    end_date = fields.Date(format="%Y-%m-%d")

    @validates_schema
    def validate_range(self, data, **kwargs):
        start, end = data.get('start_date'), data.get('end_date')
        if start and end and start > end:
            raise ValidationError('start_date 는 end_date 보다 늦을 수 없습니다.', 'start_date')

class DogSummarySchema(Schema):
    """기록에 붙는 견 요약 (조회 시 계산되는 값)."""
    name = fields.Str()
    breed = fields.Str()
    gender = fields.Str()

def error_body(error_code: str, message) -> dict:
    """오류 응답 본문. 검증 오류는 details, 그 외는 message 로 담습니다."""
    key = 'details' if isinstance(message, (dict, list)) else 'message'
    return {"error_code": error_code, key: message}
