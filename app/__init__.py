# app/__init__.py

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
from typing import Any, Dict, Optional
from flask import Flask, jsonify
from marshmallow import ValidationError
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from app.core.config import config_by_name

# - API 블루프린트
from app.api.posts.routes import posts_bp
from app.api.comments.routes import comments_bp
from app.api.users.routes import users_bp
from app.api.images.routes import images_bp

# - 서비스 모듈
from app.services.storage_service import StorageService
from app.services.openai_service import OpenAIService
from app.services.view_invalidation_service import ViewInvalidationService
from app.api.posts.services import PostService
from app.api.posts.actions import PostActions
from app.api.comments.services import CommentService
from app.api.comments.actions import CommentActions
from app.api.users.services import UserService
from app.api.users.actions import UserActions
from app.api.images.services import ImageService
from app.api.images.actions import ImageActions


def build_services(db, storage_service: StorageService,
                   openai_service: Optional[OpenAIService] = None) -> Dict[str, Any]:
    """
    저장소(Repository)와 변경 액션 인스턴스를 생성해 의존성을 연결합니다.
    create_app 과 테스트가 같은 배선을 사용합니다.
    """
    services: Dict[str, Any] = {}

    # 1. 다른 서비스의 기반이 되는 공용/핵심 서비스
    services['storage'] = storage_service
    services['openai'] = openai_service
    services['invalidation'] = ViewInvalidationService()

    # 2. 저장소
    services['posts'] = PostService(db=db)
    services['comments'] = CommentService(post_service=services['posts'], db=db)
    services['users'] = UserService(db=db)
    services['images'] = ImageService(db=db)

    # 3. 변경 액션
    services['post_actions'] = PostActions(
        post_service=services['posts'],
        comment_service=services['comments'],
        storage_service=storage_service,
        invalidation_service=services['invalidation'],
        openai_service=openai_service,
    )
    services['comment_actions'] = CommentActions(services['comments'], services['invalidation'])
    services['user_actions'] = UserActions(services['users'], services['invalidation'])
    services['image_actions'] = ImageActions(services['images'], storage_service, services['invalidation'])
    return services


def create_app(config_name: Optional[str] = None, services: Optional[Dict[str, Any]] = None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' / 'testing' / 'production' (기본값: FLASK_ENV)
    :param services: 미리 구성한 서비스 딕셔너리. 주어지면 Firebase 초기화를 건너뜁니다.
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

    if services is None:
        if not firebase_admin._apps:
            cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            cred = credentials.Certificate(cred_path)
            firebase_admin.initialize_app(cred, {
                'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
            })

        # =================================================================================
        # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
        # =================================================================================
        try:
            storage_instance = StorageService()
            storage_instance.init_app(app)
            logging.info("Storage service initialized successfully")
        except Exception as e:
            logging.error(f"Failed to initialize storage service: {e}")
            raise

        # AI 태그 추천은 선택 기능
        try:
            openai_instance = OpenAIService()
            openai_instance.init_app(app)
            logging.info("OpenAI service initialized successfully")
        except Exception as e:
            logging.warning(f"Failed to initialize OpenAI service, tag suggestions disabled: {e}")
            openai_instance = None

        services = build_services(firestore.client(), storage_instance, openai_instance)

    app.services = services

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(comments_bp, url_prefix='/api')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(images_bp, url_prefix='/api/users/me/images')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # HTTP 예외(404, 405 등)는 Flask 기본 처리를 따릅니다.
        if hasattr(err, 'code') and hasattr(err, 'get_response'):
            return err
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
