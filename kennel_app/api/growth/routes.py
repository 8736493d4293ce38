# kennel_app/api/growth/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from kennel_app.api.common.schemas import error_body, RecordsQuerySchema
from kennel_app.services.firestore_service import RecordNotFoundError
from .schemas import GrowthEventCreateSchema, GrowthEventResponseSchema

growth_bp = Blueprint('growth_bp', __name__)

@growth_bp.route('/events', methods=['GET'])
@jwt_required()
def list_events():
    growth_service = current_app.services['growth']
    try:
        params = RecordsQuerySchema().load(request.args)
        events = growth_service.list_events(**params)
        return jsonify(GrowthEventResponseSchema(many=True).dump(events)), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except Exception as e:
        logging.error(f"List growth events API error: {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "성장 기록 조회 중 오류가 발생했습니다.")), 500

@growth_bp.route('/events', methods=['POST'])
@jwt_required()
def create_event():
    growth_service = current_app.services['growth']
    try:
        validated_data = GrowthEventCreateSchema().load(request.get_json() or {})
        event = growth_service.create_event(validated_data)
        return jsonify(GrowthEventResponseSchema().dump(event)), 201
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Create growth event API error: {e}", exc_info=True)
        return jsonify(error_body("CREATE_FAILED", "성장 기록 저장 중 오류가 발생했습니다.")), 500

@growth_bp.route('/events/<string:event_id>', methods=['DELETE'])
@jwt_required()
def delete_event(event_id: str):
    growth_service = current_app.services['growth']
    try:
        growth_service.delete_event(event_id)
        return '', 204
    except RecordNotFoundError as e:
        return jsonify(error_body("RECORD_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Delete growth event API error (id: {event_id}): {e}", exc_info=True)
        return jsonify(error_body("DELETE_FAILED", "성장 기록 삭제 중 오류가 발생했습니다.")), 500
