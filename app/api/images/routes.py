# app/api/images/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.api.images.schemas import ImageResponseSchema
from app.api.responses import action_response

# 이 블루프린트의 API는 '/api/users/me/images' 접두사 URL을 갖습니다.
images_bp = Blueprint('images_bp', __name__)


@images_bp.route('', methods=['GET'])
@jwt_required()
def get_my_images():
    """현재 사용자의 최근 업로드 이미지를 최신순으로 조회합니다."""
    image_service = current_app.services['images']
    count = request.args.get('count', current_app.config.get('RECENT_IMAGES_LIMIT', 12), type=int)
    images = image_service.get_recent_user_images(get_jwt_identity(), count)
    return jsonify({"images": ImageResponseSchema(many=True).dump(images)}), 200


@images_bp.route('', methods=['POST'])
@jwt_required()
def record_image():
    """
    클라이언트가 Storage 에 업로드를 마친 이미지의 메타데이터를 기록합니다.
    """
    image_actions = current_app.services['image_actions']
    result = image_actions.record_image_upload(get_jwt_identity(), request.get_json(silent=True) or {})
    return action_response(result, success_status=201)


@images_bp.route('/<string:image_id>', methods=['DELETE'])
@jwt_required()
def delete_image(image_id: str):
    """업로드한 이미지를 Storage 와 메타데이터에서 모두 삭제합니다. (업로드한 본인만 가능)"""
    image_actions = current_app.services['image_actions']
    return action_response(image_actions.delete_user_image(image_id, get_jwt_identity()))
