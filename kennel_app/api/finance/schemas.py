# kennel_app/api/finance/schemas.py
from marshmallow import Schema, fields, validate

from kennel_app.api.common.schemas import DogSummarySchema, RecordsQuerySchema
from kennel_app.models.finance import ExpenseCategory

FINANCE_KINDS = ('purchases', 'sales', 'expenses')

class PurchaseCreateSchema(Schema):
    """POST /api/finance/purchases 요청 스키마."""
    dog_id = fields.Str(required=True)
    amount = fields.Float(required=True, validate=validate.Range(min=0))
    purchase_date = fields.Date(required=True, format="%Y-%m-%d")
    supplier = fields.Str(allow_none=True)
    supplier_contact = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)

class SaleCreateSchema(Schema):
    """POST /api/finance/sales 요청 스키마. 등록되면 해당 견은 sold 상태가 됩니다."""
    dog_id = fields.Str(required=True)
    amount = fields.Float(required=True, validate=validate.Range(min=0))
    sale_date = fields.Date(required=True, format="%Y-%m-%d")
    buyer_name = fields.Str(allow_none=True)
    buyer_contact = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)

class ExpenseCreateSchema(Schema):
    dog_id = fields.Str(required=True)
    category = fields.Str(required=True, validate=validate.OneOf([e.value for e in ExpenseCategory]))
    amount = fields.Float(required=True, validate=validate.Range(min=0))
    date = fields.Date(required=True, format="%Y-%m-%d")
    notes = fields.Str(allow_none=True)

class PurchaseResponseSchema(Schema):
    id = fields.Str()
    dog_id = fields.Str()
    amount = fields.Float()
    purchase_date = fields.Date()
    supplier = fields.Str(allow_none=True)
    supplier_contact = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    dog = fields.Nested(DogSummarySchema, allow_none=True)

class SaleResponseSchema(Schema):
    id = fields.Str()
    dog_id = fields.Str()
    amount = fields.Float()
    sale_date = fields.Date()
    buyer_name = fields.Str(allow_none=True)
    buyer_contact = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    dog = fields.Nested(DogSummarySchema, allow_none=True)

class ExpenseResponseSchema(Schema):
    id = fields.Str()
    dog_id = fields.Str()
    category = fields.Str()
    amount = fields.Float()
    date = fields.Date()
    notes = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    dog = fields.Nested(DogSummarySchema, allow_none=True)

class FinancialSummarySchema(Schema):
    total_purchases = fields.Float()
    total_sales = fields.Float()
    total_expenses = fields.Float()
    net_profit = fields.Float()
    dog_count = fields.Int()

class FinanceQuerySchema(RecordsQuerySchema):
    """목록 조회 쿼리. 지출은 category 로도 거를 수 있습니다."""
    category = fields.Str(validate=validate.OneOf([e.value for e in ExpenseCategory]))
