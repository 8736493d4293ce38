# kennel_app/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.

def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명 키. 토큰 발급은 외부 인증 서비스가 담당하고, 이 서버는 검증만 합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')

    # 원격 저장소(Firestore) 서비스 계정 키 파일 경로
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

    # 경영 분석용 chat-completion API (OpenAI 호환)
    ANALYSIS_API_KEY = os.getenv('ANALYSIS_API_KEY')
    ANALYSIS_BASE_URL = os.getenv('ANALYSIS_BASE_URL', 'https://api.deepseek.com/v1')
    ANALYSIS_MODEL = os.getenv('ANALYSIS_MODEL', 'deepseek-chat')
    ANALYSIS_TIMEOUT_SECONDS = float(os.getenv('ANALYSIS_TIMEOUT_SECONDS', '60'))

    # 상태 저장소의 영속 레코드(currentUser, selectedDog)를 기록할 파일
    STATE_FILE_PATH = os.getenv('STATE_FILE_PATH', os.path.join(os.getcwd(), 'instance', 'state.json'))
    # 같은 id 의 견을 다시 추가할 때의 정책: 'upsert' 또는 'reject'
    DUPLICATE_DOG_POLICY = os.getenv('DUPLICATE_DOG_POLICY', 'upsert')
    # True 면 없는 id 에 대한 수정/삭제를 경고 로그로 남깁니다.
    STRICT_STORE_LOOKUPS = _env_flag('STRICT_STORE_LOOKUPS')

    # QR 코드에 담길 견 상세 페이지의 기준 URL
    SITE_URL = os.getenv('SITE_URL', 'http://localhost:3000')

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    STRICT_STORE_LOOKUPS = _env_flag('STRICT_STORE_LOOKUPS', 'true')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다. 영속 파일은 메모리로 대체됩니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = 'testing-secret-key-with-enough-length-for-hs256'
    STATE_FILE_PATH = None
    ANALYSIS_API_KEY = None
    SITE_URL = 'https://kennel.example.com'

# FLASK_ENV 값에 따라 create_app 에서 설정 클래스를 고릅니다.
config_by_name = dict(
    development=DevelopmentConfig,
    production=ProductionConfig,
    testing=TestingConfig
)
