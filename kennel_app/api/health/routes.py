# kennel_app/api/health/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from kennel_app.api.common.schemas import error_body
from kennel_app.services.firestore_service import RecordNotFoundError
from .schemas import HealthRecordCreateSchema, HealthRecordResponseSchema, HealthQuerySchema, HealthStatsSchema

health_bp = Blueprint('health_bp', __name__)

@health_bp.route('/records', methods=['GET'])
@jwt_required()
def list_records():
    """건강 기록 목록. dog_id, type, start_date, end_date 로 거를 수 있습니다."""
    health_service = current_app.services['health']
    try:
        params = HealthQuerySchema().load(request.args)
        records = health_service.list_records(**params)
        return jsonify(HealthRecordResponseSchema(many=True).dump(records)), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except Exception as e:
        logging.error(f"List health records API error: {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "건강 기록 조회 중 오류가 발생했습니다.")), 500

@health_bp.route('/records', methods=['POST'])
@jwt_required()
def create_record():
    health_service = current_app.services['health']
    try:
        validated_data = HealthRecordCreateSchema().load(request.get_json() or {})
        record = health_service.create_record(validated_data)
        return jsonify(HealthRecordResponseSchema().dump(record)), 201
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Create health record API error: {e}", exc_info=True)
        return jsonify(error_body("CREATE_FAILED", "건강 기록 저장 중 오류가 발생했습니다.")), 500

@health_bp.route('/records/<string:record_id>', methods=['DELETE'])
@jwt_required()
def delete_record(record_id: str):
    health_service = current_app.services['health']
    try:
        health_service.delete_record(record_id)
        return '', 204
    except RecordNotFoundError as e:
        return jsonify(error_body("RECORD_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Delete health record API error (id: {record_id}): {e}", exc_info=True)
        return jsonify(error_body("DELETE_FAILED", "건강 기록 삭제 중 오류가 발생했습니다.")), 500

@health_bp.route('/stats', methods=['GET'])
@jwt_required()
def get_stats():
    """건강 관리 현황 통계. dog_id 를 주면 해당 견만 계산합니다."""
    health_service = current_app.services['health']
    try:
        stats = health_service.get_stats(dog_id=request.args.get('dog_id'))
        return jsonify(HealthStatsSchema().dump(stats)), 200
    except Exception as e:
        logging.error(f"Health stats API error: {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "건강 통계 계산 중 오류가 발생했습니다.")), 500
