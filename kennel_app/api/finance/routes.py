# kennel_app/api/finance/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from kennel_app.api.common.schemas import error_body
from kennel_app.services.firestore_service import RecordNotFoundError
from .schemas import (
    FINANCE_KINDS, FinanceQuerySchema, FinancialSummarySchema,
    PurchaseCreateSchema, PurchaseResponseSchema,
    SaleCreateSchema, SaleResponseSchema,
    ExpenseCreateSchema, ExpenseResponseSchema,
)

finance_bp = Blueprint('finance_bp', __name__)

# kind -> (요청 스키마, 응답 스키마, 서비스 생성 메서드 이름)
KIND_HANDLERS = {
    'purchases': (PurchaseCreateSchema, PurchaseResponseSchema, 'create_purchase'),
    'sales': (SaleCreateSchema, SaleResponseSchema, 'create_sale'),
    'expenses': (ExpenseCreateSchema, ExpenseResponseSchema, 'create_expense'),
}

def _list(kind: str):
    finance_service = current_app.services['finance']
    _, response_schema, _ = KIND_HANDLERS[kind]
    try:
        params = FinanceQuerySchema().load(request.args)
        records = finance_service.list_records(kind, **params)
        return jsonify(response_schema(many=True).dump(records)), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except Exception as e:
        logging.error(f"List {kind} API error: {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "재무 기록 조회 중 오류가 발생했습니다.")), 500

def _create(kind: str):
    finance_service = current_app.services['finance']
    request_schema, response_schema, method_name = KIND_HANDLERS[kind]
    try:
        validated_data = request_schema().load(request.get_json() or {})
        record = getattr(finance_service, method_name)(validated_data)
        return jsonify(response_schema().dump(record)), 201
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Create {kind} API error: {e}", exc_info=True)
        return jsonify(error_body("CREATE_FAILED", "재무 기록 저장 중 오류가 발생했습니다.")), 500

@finance_bp.route('/purchases', methods=['GET'])
@jwt_required()
def list_purchases():
    """구매(입고) 기록 목록. dog_id, start_date, end_date 로 거를 수 있습니다."""
    return _list('purchases')

@finance_bp.route('/purchases', methods=['POST'])
@jwt_required()
def create_purchase():
    return _create('purchases')

@finance_bp.route('/sales', methods=['GET'])
@jwt_required()
def list_sales():
    """판매(분양) 기록 목록."""
    return _list('sales')

@finance_bp.route('/sales', methods=['POST'])
@jwt_required()
def create_sale():
    """판매 기록을 등록합니다. 해당 견은 sold 상태로 바뀝니다."""
    return _create('sales')

@finance_bp.route('/expenses', methods=['GET'])
@jwt_required()
def list_expenses():
    """지출 기록 목록. category 로도 거를 수 있습니다."""
    return _list('expenses')

@finance_bp.route('/expenses', methods=['POST'])
@jwt_required()
def create_expense():
    return _create('expenses')

@finance_bp.route('/<string:kind>/<string:record_id>', methods=['DELETE'])
@jwt_required()
def delete_record(kind: str, record_id: str):
    """재무 기록 삭제."""
    if kind not in FINANCE_KINDS:
        return jsonify(error_body("UNKNOWN_KIND", f"지원하지 않는 기록 종류입니다: {kind}")), 404
    finance_service = current_app.services['finance']
    try:
        finance_service.delete_record(kind, record_id)
        return '', 204
    except RecordNotFoundError as e:
        return jsonify(error_body("RECORD_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Delete {kind} API error (id: {record_id}): {e}", exc_info=True)
        return jsonify(error_body("DELETE_FAILED", "재무 기록 삭제 중 오류가 발생했습니다.")), 500

@finance_bp.route('/summary', methods=['GET'])
@jwt_required()
def get_summary():
    """구매/판매/지출 합계와 순이익, 보유 견 수를 반환합니다."""
    finance_service = current_app.services['finance']
    try:
        summary = finance_service.get_summary()
        return jsonify(FinancialSummarySchema().dump(summary.to_dict())), 200
    except Exception as e:
        logging.error(f"Financial summary API error: {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "재무 요약 계산 중 오류가 발생했습니다.")), 500
