# kennel_app/api/state/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from kennel_app.api.common.schemas import error_body
from kennel_app.schemas.user_schema import UserSchema
from kennel_app.services.firestore_service import RecordNotFoundError
from .schemas import SelectDogSchema

state_bp = Blueprint('state_bp', __name__)

@state_bp.route('/', methods=['GET'])
@jwt_required()
def get_state():
    """
    애플리케이션 상태 스냅샷.
    current_user, dogs(roster), selected_dog, is_loading, last_error 를 한 번에 반환합니다.
    """
    return jsonify(current_app.services['state_api'].get_snapshot()), 200

@state_bp.route('/user', methods=['PUT'])
@jwt_required()
def set_user():
    """현재 사용자 설정. 본문이 null 이면 사용자를 비웁니다."""
    state_service = current_app.services['state_api']
    try:
        payload = request.get_json(silent=True)
        user_data = UserSchema().load(payload) if payload else None
        return jsonify(state_service.set_user(user_data)), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except Exception as e:
        logging.error(f"Set user API error: {e}", exc_info=True)
        return jsonify(error_body("INTERNAL_SERVER_ERROR", "사용자 설정 중 오류가 발생했습니다.")), 500

@state_bp.route('/selected-dog', methods=['PUT'])
@jwt_required()
def select_dog():
    """선택된 견 변경. {"dog_id": "..."} 또는 {"dog_id": null}."""
    state_service = current_app.services['state_api']
    try:
        data = SelectDogSchema().load(request.get_json(silent=True) or {})
        return jsonify(state_service.select_dog(data['dog_id'])), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Select dog API error: {e}", exc_info=True)
        return jsonify(error_body("INTERNAL_SERVER_ERROR", "견 선택 중 오류가 발생했습니다.")), 500

@state_bp.route('/error', methods=['DELETE'])
@jwt_required()
def clear_error():
    return jsonify(current_app.services['state_api'].clear_error()), 200
