# app/api/users/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.api.comments.schemas import UserActivityCommentSchema
from app.api.posts.schemas import PostResponseSchema
from app.api.responses import action_response
from app.api.users.schemas import UserProfileResponseSchema

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/<string:user_id>/profile', methods=['GET'])
def get_user_profile(user_id: str):
    user_service = current_app.services['users']
    """특정 사용자의 공개 프로필 정보를 조회합니다."""
    user_profile = user_service.get_user_profile(user_id)
    if not user_profile:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserProfileResponseSchema().dump(user_profile)), 200


@users_bp.route('/me/profile', methods=['PUT'])
@jwt_required()
def update_my_profile():
    """
    현재 로그인된 사용자의 프로필(표시 이름, 사용자 이름, 소개, 소셜 링크, 관심사)을 수정합니다.
    """
    user_actions = current_app.services['user_actions']
    result = user_actions.update_user_profile(get_jwt_identity(), request.get_json(silent=True) or {})
    return action_response(result)


@users_bp.route('/<string:user_id>/posts', methods=['GET'])
def get_user_posts(user_id: str):
    """
    특정 사용자가 작성한 모든 게시글을 조회합니다.
    보관된 게시글도 포함되며, 공개/보관 구분은 is_archived 로 화면에서 나눕니다.
    """
    post_service = current_app.services['posts']
    posts = post_service.get_posts_by_user_id(user_id)
    return jsonify({"posts": PostResponseSchema(many=True).dump(posts)}), 200


@users_bp.route('/<string:user_id>/liked-posts', methods=['GET'])
def get_user_liked_posts(user_id: str):
    post_service = current_app.services['posts']
    posts = post_service.get_liked_posts_by_user(user_id)
    return jsonify({"posts": PostResponseSchema(many=True).dump(posts)}), 200


@users_bp.route('/<string:user_id>/comments', methods=['GET'])
def get_user_comments(user_id: str):
    """특정 사용자가 작성한 댓글을 최신순으로, 게시글 제목과 함께 조회합니다."""
    comment_service = current_app.services['comments']
    comments = comment_service.get_comments_by_user(user_id)
    return jsonify({"comments": UserActivityCommentSchema(many=True).dump(comments)}), 200
