# kennel_app/api/breeding/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from kennel_app.api.common.schemas import error_body
from kennel_app.api.dogs.services import PedigreeCycleError
from kennel_app.services.firestore_service import RecordNotFoundError
from .schemas import LitterCreateSchema, LitterBirthSchema, LitterResponseSchema, LitterQuerySchema

breeding_bp = Blueprint('breeding_bp', __name__)

@breeding_bp.route('/litters', methods=['GET'])
@jwt_required()
def list_litters():
    """
    번식 기록 목록 조회.
    - parent_id: 부견 또는 모견으로 참여한 기록만
    - born: true 면 출산 완료, false 면 임신 중인 기록만
    """
    breeding_service = current_app.services['breeding']
    try:
        params = LitterQuerySchema().load(request.args)
        litters = breeding_service.list_litters(**params)
        return jsonify(LitterResponseSchema(many=True).dump(litters)), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except Exception as e:
        logging.error(f"List litters API error: {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "번식 기록 조회 중 오류가 발생했습니다.")), 500

@breeding_bp.route('/litters', methods=['POST'])
@jwt_required()
def create_litter():
    breeding_service = current_app.services['breeding']
    try:
        validated_data = LitterCreateSchema().load(request.get_json() or {})
        litter = breeding_service.create_litter(validated_data)
        return jsonify(LitterResponseSchema().dump(litter)), 201
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except PedigreeCycleError as e:
        return jsonify(error_body("PEDIGREE_CYCLE", str(e))), 400
    except ValueError as e:
        return jsonify(error_body("INVALID_PAIR", str(e))), 400
    except Exception as e:
        logging.error(f"Create litter API error: {e}", exc_info=True)
        return jsonify(error_body("CREATE_FAILED", "번식 기록 저장 중 오류가 발생했습니다.")), 500

@breeding_bp.route('/litters/<string:litter_id>', methods=['PATCH'])
@jwt_required()
def record_birth(litter_id: str):
    """출산일, 새끼 수, 새끼 견 ID 목록을 기록합니다."""
    breeding_service = current_app.services['breeding']
    try:
        validated_data = LitterBirthSchema().load(request.get_json() or {})
        litter = breeding_service.record_birth(litter_id, validated_data)
        return jsonify(LitterResponseSchema().dump(litter)), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except RecordNotFoundError as e:
        return jsonify(error_body("RECORD_NOT_FOUND", str(e))), 404
    except PedigreeCycleError as e:
        return jsonify(error_body("PEDIGREE_CYCLE", str(e))), 400
    except ValueError as e:
        return jsonify(error_body("UPDATE_FAILED", str(e))), 400
    except Exception as e:
        logging.error(f"Record birth API error (litter_id: {litter_id}): {e}", exc_info=True)
        return jsonify(error_body("UPDATE_FAILED", "출산 정보 저장 중 오류가 발생했습니다.")), 500

@breeding_bp.route('/litters/<string:litter_id>', methods=['DELETE'])
@jwt_required()
def delete_litter(litter_id: str):
    breeding_service = current_app.services['breeding']
    try:
        breeding_service.delete_litter(litter_id)
        return '', 204
    except RecordNotFoundError as e:
        return jsonify(error_body("RECORD_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Delete litter API error (litter_id: {litter_id}): {e}", exc_info=True)
        return jsonify(error_body("DELETE_FAILED", "번식 기록 삭제 중 오류가 발생했습니다.")), 500
