# kennel_app/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from kennel_app.core.config import config_by_name

# - API 블루프린트
from kennel_app.api.dogs.routes import dogs_bp
from kennel_app.api.state.routes import state_bp
from kennel_app.api.finance.routes import finance_bp
from kennel_app.api.breeding.routes import breeding_bp
from kennel_app.api.health.routes import health_bp
from kennel_app.api.growth.routes import growth_bp
from kennel_app.api.qrcodes.routes import qrcodes_bp
from kennel_app.api.analysis.routes import analysis_bp

# - 상태 저장소 및 서비스 모듈
from kennel_app.store.state_store import AppStateStore, DuplicatePolicy, RequestGenerations
from kennel_app.store.persistence import JsonFileStatePersistence, MemoryStatePersistence
from kennel_app.services.firestore_service import build_tables
from kennel_app.services.openai_service import AnalysisService
from kennel_app.api.dogs.services import DogService
from kennel_app.api.state.services import StateService
from kennel_app.api.finance.services import FinanceService
from kennel_app.api.breeding.services import BreedingService
from kennel_app.api.health.services import HealthService
from kennel_app.api.growth.services import GrowthService
from kennel_app.api.qrcodes.services import QrCodeService
from kennel_app.api.analysis.data_collector import DataCollector

def create_app(config_name=None, db=None, analysis_service=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'production' | 'testing'. 없으면 FLASK_ENV 값
    :param db: Firestore 클라이언트. 없으면 서비스 계정 키로 firebase_admin 을 초기화합니다.
    :param analysis_service: 미리 만든 AnalysisService. 없으면 설정으로 새로 만듭니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    JWTManager(app)

    if db is None:
        if not firebase_admin._apps:
            cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path))
        db = firestore.client()

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 상태 저장소와 원격 테이블 클라이언트
    state_file = app.config.get('STATE_FILE_PATH')
    if state_file:
        os.makedirs(os.path.dirname(os.path.abspath(state_file)), exist_ok=True)
        persistence = JsonFileStatePersistence(state_file)
    else:
        persistence = MemoryStatePersistence()

    app.services['state'] = AppStateStore(
        persistence=persistence,
        duplicate_policy=DuplicatePolicy(app.config.get('DUPLICATE_DOG_POLICY', 'upsert')),
        strict_lookups=app.config.get('STRICT_STORE_LOOKUPS', False),
    )
    app.services['tables'] = build_tables(db)
    logging.info("State store and remote tables initialized successfully")

    try:
        if analysis_service is None:
            analysis_service = AnalysisService()
            analysis_service.init_app(app)
        app.services['analysis'] = analysis_service
        logging.info("Analysis service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize analysis service: {e}")
        raise

    # 5-2. 상태 저장소와 테이블을 주입받는 도메인 서비스
    state = app.services['state']
    tables = app.services['tables']

    app.services['dogs'] = DogService(state, tables, generations=RequestGenerations())
    app.services['state_api'] = StateService(state, dog_service=app.services['dogs'])
    app.services['finance'] = FinanceService(state, tables, dog_service=app.services['dogs'])
    app.services['breeding'] = BreedingService(state, tables, dog_service=app.services['dogs'])
    app.services['health'] = HealthService(state, tables)
    app.services['growth'] = GrowthService(state, tables)
    app.services['qrcodes'] = QrCodeService(state, tables, site_url=app.config.get('SITE_URL'))
    app.services['data_collector'] = DataCollector(tables)

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(dogs_bp, url_prefix='/api/dogs')
    app.register_blueprint(state_bp, url_prefix='/api/state')
    app.register_blueprint(finance_bp, url_prefix='/api/finance')
    app.register_blueprint(breeding_bp, url_prefix='/api/breeding')
    app.register_blueprint(health_bp, url_prefix='/api/health')
    app.register_blueprint(growth_bp, url_prefix='/api/growth')
    app.register_blueprint(qrcodes_bp, url_prefix='/api/qrcodes')
    app.register_blueprint(analysis_bp, url_prefix='/api/ai-analysis')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 404, 405 같은 HTTP 오류는 그대로 돌려줍니다.
        if isinstance(err, HTTPException):
            return err
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
