# app/api/posts/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.api.posts.schemas import PostResponseSchema, ArchivePeriodSchema
from app.api.responses import action_response


posts_bp = Blueprint('posts_bp', __name__)

@posts_bp.route('/', methods=['GET'])
def get_posts():
    """
    공개 게시글 목록을 최신순으로 조회합니다.
    - limit 이 없으면 POSTS_PAGE_LIMIT 설정값(없으면 전체)을 사용합니다.
    """
    post_service = current_app.services['posts']
    limit = request.args.get('limit', current_app.config.get('POSTS_PAGE_LIMIT'), type=int)
    posts = post_service.get_posts(limit)
    return jsonify({"posts": PostResponseSchema(many=True).dump(posts)}), 200


@posts_bp.route('/<string:post_id>', methods=['GET'])
def get_post(post_id: str):
    """특정 게시글의 상세 정보를 조회합니다. (보관된 게시글 포함)"""
    post_service = current_app.services['posts']
    post = post_service.get_post(post_id)
    if not post:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": "게시물을 찾을 수 없습니다."}), 404
    return jsonify(PostResponseSchema().dump(post)), 200


@posts_bp.route('/tags', methods=['GET'])
def get_all_tags():
    post_service = current_app.services['posts']
    return jsonify({"tags": post_service.get_all_tags()}), 200


@posts_bp.route('/tags/<path:tag>', methods=['GET'])
def get_posts_by_tag(tag: str):
    post_service = current_app.services['posts']
    posts = post_service.get_posts_by_tag(tag)
    return jsonify({"tag": tag.strip().lower(), "posts": PostResponseSchema(many=True).dump(posts)}), 200


@posts_bp.route('/archive', methods=['GET'])
def get_archive_periods():
    post_service = current_app.services['posts']
    periods = post_service.get_archive_periods()
    return jsonify({"periods": ArchivePeriodSchema(many=True).dump(periods)}), 200


@posts_bp.route('/archive/<int:year>/<int:month>', methods=['GET'])
def get_posts_by_archive(year: int, month: int):
    """
    특정 연/월의 공개 게시글을 조회합니다. URL 의 month 는 1~12 입니다.
    """
    if not 1 <= month <= 12:
        return jsonify({"error_code": "INVALID_MONTH", "message": "월은 1~12 사이여야 합니다."}), 400
    post_service = current_app.services['posts']
    posts = post_service.get_posts_by_archive(year, month - 1)
    return jsonify({"year": year, "month": month, "posts": PostResponseSchema(many=True).dump(posts)}), 200


@posts_bp.route('/', methods=['POST'])
@jwt_required()
def create_post():
    """
    새로운 게시글을 생성합니다.
    - 성공 시, 생성된 게시글 ID(slug)를 201 Created 상태 코드와 함께 반환합니다.
    """
    post_actions = current_app.services['post_actions']
    result = post_actions.create_post(request.get_json(silent=True) or {}, get_jwt_identity())
    return action_response(result, success_status=201)


@posts_bp.route('/<string:post_id>', methods=['PUT'])
@jwt_required()
def update_post(post_id: str):
    """특정 게시글의 제목/본문/태그/이미지를 수정합니다. (작성자 본인만 가능)"""
    post_actions = current_app.services['post_actions']
    result = post_actions.update_post(post_id, request.get_json(silent=True) or {}, get_jwt_identity())
    return action_response(result)


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """특정 게시글과 하위 댓글, 대표 이미지를 삭제합니다. (작성자 본인만 가능)"""
    post_actions = current_app.services['post_actions']
    return action_response(post_actions.delete_post(post_id, get_jwt_identity()))


@posts_bp.route('/<string:post_id>/like', methods=['POST'])
@jwt_required()
def toggle_post_like(post_id: str):
    """게시글의 좋아요를 누르거나 취소합니다."""
    post_actions = current_app.services['post_actions']
    return action_response(post_actions.toggle_like(post_id, get_jwt_identity()))


@posts_bp.route('/<string:post_id>/archive', methods=['POST'])
@jwt_required()
def toggle_post_archive(post_id: str):
    """게시글을 보관하거나 다시 공개합니다. (작성자 본인만 가능)"""
    post_actions = current_app.services['post_actions']
    return action_response(post_actions.toggle_archive(post_id, get_jwt_identity()))


@posts_bp.route('/suggest-tags', methods=['POST'])
@jwt_required()
def suggest_tags():
    """게시글 본문으로 AI 추천 태그를 받아옵니다."""
    post_actions = current_app.services['post_actions']
    return action_response(post_actions.suggest_tags(request.get_json(silent=True) or {}))
