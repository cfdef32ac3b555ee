# app/core/config.py

import os # 'os' 모듈: 환경 변수를 읽기 위해 사용합니다.


def _optional_int(name: str):
    value = os.getenv(name)
    return int(value) if value else None


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # 인증 토큰 서명 키. 토큰의 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')

    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # AI 태그 추천 (키가 없으면 기능이 비활성화됩니다)
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_TAG_MODEL = os.getenv('OPENAI_TAG_MODEL', 'gpt-4o-mini')

    # 목록 기본 개수. 비워두면 공개 게시글 전체를 반환합니다.
    POSTS_PAGE_LIMIT = _optional_int('POSTS_PAGE_LIMIT')
    RECENT_IMAGES_LIMIT = int(os.getenv('RECENT_IMAGES_LIMIT', 12))

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'witwaves-testing-secret-key-0123456789')

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('PROD_FIREBASE_CREDENTIALS_PATH')

# config_by_name: FLASK_ENV 값과 해당 환경의 설정 클래스를 매핑합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
