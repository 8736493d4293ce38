# kennel_app/api/dogs/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from kennel_app.api.common.schemas import error_body
from kennel_app.schemas.dog_schema import DogSchema
from kennel_app.services.firestore_service import RecordNotFoundError
from .schemas import DogCreateSchema, DogUpdateSchema, DogListQuerySchema, PedigreeQuerySchema
from .services import PedigreeCycleError

dogs_bp = Blueprint('dogs_bp', __name__)

@dogs_bp.route('/', methods=['GET'])
@jwt_required()
def list_dogs():
    """
    견 목록을 원격 저장소에서 다시 읽어 반환합니다.
    필터가 없으면 상태 저장소의 roster 도 함께 갱신됩니다.

    쿼리 파라미터:
    - status: owned | sold | deceased | returned
    - breed: 견종 정확히 일치
    - q: 이름 부분 검색 (대소문자 무시)
    """
    dog_service = current_app.services['dogs']
    try:
        params = DogListQuerySchema().load(request.args)
        dogs = dog_service.refresh_dogs(**params)
        return jsonify(DogSchema(many=True).dump([dog.to_dict() for dog in dogs])), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except Exception as e:
        logging.error(f"List dogs API error: {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "견 목록 조회 중 오류가 발생했습니다.")), 500

@dogs_bp.route('/', methods=['POST'])
@jwt_required()
def create_dog():
    """견 등록 API."""
    dog_service = current_app.services['dogs']
    try:
        validated_data = DogCreateSchema().load(request.get_json() or {})
        new_dog = dog_service.create_dog(validated_data)
        return jsonify(DogSchema().dump(new_dog.to_dict())), 201
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except PedigreeCycleError as e:
        return jsonify(error_body("PEDIGREE_CYCLE", str(e))), 400
    except ValueError as e:
        return jsonify(error_body("INVALID_PARENT", str(e))), 400
    except Exception as e:
        logging.error(f"Dog registration API error: {e}", exc_info=True)
        return jsonify(error_body("DOG_REGISTRATION_FAILED", "견 등록 중 오류가 발생했습니다.")), 500

@dogs_bp.route('/<string:dog_id>', methods=['GET'])
@jwt_required()
def get_dog(dog_id: str):
    """특정 견의 전체 프로필을 조회합니다."""
    dog_service = current_app.services['dogs']
    try:
        dog = dog_service.get_dog(dog_id)
        return jsonify(DogSchema().dump(dog.to_dict())), 200
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Get dog API error (dog_id: {dog_id}): {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "프로필 조회 중 오류가 발생했습니다.")), 500

@dogs_bp.route('/<string:dog_id>', methods=['PATCH'])
@jwt_required()
def update_dog(dog_id: str):
    """특정 견의 프로필을 수정합니다 (부분 업데이트)."""
    dog_service = current_app.services['dogs']
    try:
        update_data = DogUpdateSchema().load(request.get_json() or {})
        updated_dog = dog_service.update_dog(dog_id, update_data)
        return jsonify(DogSchema().dump(updated_dog.to_dict())), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except PedigreeCycleError as e:
        return jsonify(error_body("PEDIGREE_CYCLE", str(e))), 400
    except ValueError as e:
        return jsonify(error_body("UPDATE_FAILED", str(e))), 400
    except Exception as e:
        logging.error(f"Update dog API error (dog_id: {dog_id}): {e}", exc_info=True)
        return jsonify(error_body("INTERNAL_SERVER_ERROR", "프로필 수정 중 오류가 발생했습니다.")), 500

@dogs_bp.route('/<string:dog_id>', methods=['DELETE'])
@jwt_required()
def delete_dog(dog_id: str):
    """견을 삭제합니다. 선택된 견이었다면 선택도 해제됩니다."""
    dog_service = current_app.services['dogs']
    try:
        dog_service.delete_dog(dog_id)
        return '', 204
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Delete dog API error (dog_id: {dog_id}): {e}", exc_info=True)
        return jsonify(error_body("DELETE_FAILED", "견 삭제 중 오류가 발생했습니다.")), 500

@dogs_bp.route('/<string:dog_id>/pedigree', methods=['GET'])
@jwt_required()
def get_pedigree(dog_id: str):
    """견의 계보 트리(기본 3세대)를 조회합니다."""
    dog_service = current_app.services['dogs']
    try:
        params = PedigreeQuerySchema().load(request.args)
        tree = dog_service.get_pedigree(dog_id, depth=params['depth'])
        return jsonify(_dump_pedigree(tree)), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Pedigree API error (dog_id: {dog_id}): {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "계보 조회 중 오류가 발생했습니다.")), 500

def _dump_pedigree(node):
    if node is None:
        return None
    return {
        'dog': DogSchema().dump(node['dog']),
        'sire': _dump_pedigree(node['sire']),
        'dam': _dump_pedigree(node['dam']),
    }
