# kennel_app/api/qrcodes/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from kennel_app.api.common.schemas import error_body
from kennel_app.services.firestore_service import RecordNotFoundError
from .schemas import QrCodeUpsertSchema, QrCodeSchema, QrCodeDetailSchema

qrcodes_bp = Blueprint('qrcodes_bp', __name__)

@qrcodes_bp.route('/', methods=['GET'])
@jwt_required()
def list_qrcodes():
    """저장된 QR 코드 목록 (일괄 인쇄용)."""
    qrcode_service = current_app.services['qrcodes']
    try:
        codes = qrcode_service.list_qrcodes()
        return jsonify(QrCodeSchema(many=True).dump(codes)), 200
    except Exception as e:
        logging.error(f"List qrcodes API error: {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "QR 코드 목록 조회 중 오류가 발생했습니다.")), 500

@qrcodes_bp.route('/<string:dog_id>', methods=['GET'])
@jwt_required()
def get_qrcode(dog_id: str):
    qrcode_service = current_app.services['qrcodes']
    try:
        detail = qrcode_service.get_qrcode(dog_id)
        return jsonify(QrCodeDetailSchema().dump(detail)), 200
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Get qrcode API error (dog_id: {dog_id}): {e}", exc_info=True)
        return jsonify(error_body("FETCH_FAILED", "QR 코드 조회 중 오류가 발생했습니다.")), 500

@qrcodes_bp.route('/<string:dog_id>', methods=['PUT'])
@jwt_required()
def upsert_qrcode(dog_id: str):
    """QR 코드 생성/갱신. qrcode_url 이 없으면 SITE_URL/dog/<dog_id> 를 사용합니다."""
    qrcode_service = current_app.services['qrcodes']
    try:
        validated_data = QrCodeUpsertSchema().load(request.get_json(silent=True) or {})
        detail = qrcode_service.upsert_qrcode(dog_id, validated_data.get('qrcode_url'))
        return jsonify(QrCodeDetailSchema().dump(detail)), 200
    except ValidationError as err:
        return jsonify(error_body("VALIDATION_ERROR", err.messages)), 400
    except RecordNotFoundError as e:
        return jsonify(error_body("DOG_NOT_FOUND", str(e))), 404
    except Exception as e:
        logging.error(f"Upsert qrcode API error (dog_id: {dog_id}): {e}", exc_info=True)
        return jsonify(error_body("SAVE_FAILED", "QR 코드 저장 중 오류가 발생했습니다.")), 500
