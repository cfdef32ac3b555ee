# app/api/comments/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.api.comments.schemas import CommentResponseSchema
from app.api.responses import action_response


comments_bp = Blueprint('comments_bp', __name__)

@comments_bp.route('/posts/<string:post_id>/comments', methods=['POST'])
@jwt_required()
def create_comment(post_id: str):
    comment_actions = current_app.services['comment_actions']
    """
    특정 게시글에 새로운 댓글을 작성합니다.
    - 성공 시, 생성된 댓글 정보를 201 Created 상태 코드와 함께 반환합니다.
    - 게시글의 댓글 수가 1 증가합니다.
    """
    result = comment_actions.add_comment(post_id, request.get_json(silent=True) or {}, get_jwt_identity())
    return action_response(result, success_status=201)

@comments_bp.route('/posts/<string:post_id>/comments', methods=['GET'])
def get_comments(post_id: str):
    comment_service = current_app.services['comments']
    """
    특정 게시글의 댓글 목록을 오래된 순으로 조회합니다.
    """
    comments = comment_service.get_comments_for_post(post_id)
    return jsonify({"comments": CommentResponseSchema(many=True).dump(comments)}), 200
