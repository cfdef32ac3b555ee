# app/api/comments/actions.py
from typing import Any, Mapping, Optional

from app.api.base_actions import BaseActions
from app.api.comments.schemas import CommentCreateSchema, CommentResponseSchema
from app.api.comments.services import CommentService
from app.models.action_result import ActionResult, ActionErrorCode
from app.services.view_invalidation_service import (
    ViewInvalidationService, POSTS_LIST, post_view, comments_view, activity_view,
)


class CommentActions(BaseActions):
    """댓글 변경 액션. 댓글은 생성 후 수정할 수 없고, 게시글 삭제 시에만 함께 삭제됩니다."""

    def __init__(self, comment_service: CommentService, invalidation_service: ViewInvalidationService):
        super().__init__(invalidation_service)
        self.comment_service = comment_service

    def add_comment(self, post_id: str, form: Mapping[str, Any], current_user_id: Optional[str]) -> ActionResult:
        """댓글을 작성하고 게시글의 댓글 수를 1 증가시킵니다."""
        data, failure = self._validate(CommentCreateSchema(), form, "댓글을 작성하지 못했습니다.")
        if failure:
            return failure

        errors = {}
        if not post_id:
            errors['post_id'] = ["게시글 ID가 필요합니다."]
        if not current_user_id:
            errors['user_id'] = ["사용자 인증이 필요합니다."]
        if errors:
            return ActionResult.fail("입력값 검증 오류: 댓글을 작성하지 못했습니다.",
                                     ActionErrorCode.VALIDATION_ERROR, errors=errors)

        try:
            comment = self.comment_service.add_comment(
                post_id=post_id,
                user_id=current_user_id,
                display_name=data['user_display_name'].strip(),
                text=data['text'].strip(),
                photo_url=data.get('user_photo_url') or None,
            )
        except ValueError as e:
            return self._not_found(str(e))
        except Exception as e:
            return self._store_failure("댓글을 저장하지 못했습니다", e)

        return self._succeed(
            "댓글이 등록되었습니다.",
            payload={'comment': CommentResponseSchema().dump(comment)},
            view_keys=[post_view(post_id), comments_view(post_id), POSTS_LIST, activity_view(current_user_id)],
        )
