# kennel_app/api/analysis/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required

from kennel_app.api.common.schemas import error_body
from kennel_app.services.openai_service import AnalysisServiceError
from kennel_app.utils.datetime_utils import DateTimeUtils
from .data_collector import DataCollectionError

analysis_bp = Blueprint('analysis_bp', __name__)

@analysis_bp.route('/', methods=['GET'])
def health_check():
    """분석 서비스 상태 확인용. 인증 없이 호출할 수 있습니다."""
    return jsonify({
        "message": "AI 분석 서비스가 정상 동작 중입니다.",
        "endpoints": {"POST": "/api/ai-analysis - AI 경영 분석 실행"}
    }), 200

@analysis_bp.route('/', methods=['POST'])
@jwt_required()
def run_analysis():
    """
    사업 지표를 수집하고 AI 경영 분석을 실행합니다.

    응답: {"success": true, "data": {"analysis", "business_data", "timestamp"}}
    """
    if not request.is_json:
        return jsonify(error_body("INVALID_REQUEST", "요청 형식이 올바르지 않습니다.")), 400

    collector = current_app.services['data_collector']
    analysis_service = current_app.services['analysis']
    try:
        logging.info("사업 데이터 수집 시작...")
        business_data = collector.collect_all()

        logging.info("AI 분석 시작...")
        analysis = analysis_service.analyze_business_data(business_data)

        return jsonify({
            "success": True,
            "data": {
                "analysis": analysis,
                "business_data": business_data,
                "timestamp": DateTimeUtils.to_iso_string(DateTimeUtils.now()),
            }
        }), 200
    except (AnalysisServiceError, RuntimeError) as e:
        logging.error(f"AI analysis API error: {e}")
        return jsonify(error_body("ANALYSIS_UNAVAILABLE", "AI 서비스를 일시적으로 사용할 수 없습니다. 잠시 후 다시 시도해주세요.")), 503
    except DataCollectionError as e:
        logging.error(f"Business data collection error: {e}")
        return jsonify(error_body("DATA_COLLECTION_FAILED", "데이터 수집에 실패했습니다. 데이터베이스 연결을 확인해주세요.")), 500
    except Exception as e:
        logging.error(f"AI analysis API unexpected error: {e}", exc_info=True)
        return jsonify(error_body("INTERNAL_SERVER_ERROR", "분석 서비스를 일시적으로 사용할 수 없습니다.")), 500
