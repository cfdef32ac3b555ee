# app/api/posts/actions.py
import logging
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional

from app.api.base_actions import BaseActions
from app.api.comments.services import CommentService
from app.api.posts.schemas import PostFormSchema, SuggestTagsSchema
from app.api.posts.services import PostService, SlugAllocationError
from app.models.action_result import ActionResult, ActionErrorCode
from app.models.post import Post
from app.services.openai_service import OpenAIService
from app.services.storage_service import StorageService
from app.services.view_invalidation_service import (
    ViewInvalidationService, POSTS_LIST, post_view, post_view_keys, liked_view, comments_view, merge_keys,
)
from app.utils.text_utils import generate_slug, is_valid_document_id

MIN_CONTENT_FOR_TAG_SUGGESTION = 20


class PostActions(BaseActions):
    """
    게시글 변경 액션 모음.
    각 메서드는 외부 요청 한 번에 대응하며, 재시도 없이 ActionResult 를 반환합니다.
    """
    def __init__(self, post_service: PostService, comment_service: CommentService,
                 storage_service: StorageService, invalidation_service: ViewInvalidationService,
                 openai_service: Optional[OpenAIService] = None):
        super().__init__(invalidation_service)
        self.post_service = post_service
        self.comment_service = comment_service
        self.storage_service = storage_service
        self.openai_service = openai_service

    def _load_owned_post(self, post_id: str, current_user_id: Optional[str], verb: str):
        """게시글을 조회하고 소유자를 확인합니다. (게시글, None) 또는 (None, 실패 결과)."""
        post = self.post_service.get_post(post_id)
        if post is None:
            return None, self._not_found("게시글을 찾을 수 없습니다.")
        if not current_user_id or not post.is_owned_by(current_user_id):
            return None, self._forbidden(f"이 게시글을 {verb}할 권한이 없습니다.")
        return post, None

    def create_post(self, form: Mapping[str, Any], current_user_id: Optional[str]) -> ActionResult:
        """slug 를 할당한 뒤 카운터 0, 공개 상태로 게시글을 생성합니다."""
        data, failure = self._validate(PostFormSchema(), form, "게시글을 생성하지 못했습니다.")
        if failure:
            return failure

        if not current_user_id:
            return ActionResult.fail(
                "오류: 로그인하지 않은 사용자는 게시글을 작성할 수 없습니다.",
                ActionErrorCode.VALIDATION_ERROR,
                errors={'user_id': ["사용자 인증이 필요합니다."]},
            )
        if not generate_slug(data['title']):
            return ActionResult.fail(
                "입력값 검증 오류: 게시글을 생성하지 못했습니다.",
                ActionErrorCode.VALIDATION_ERROR,
                errors={'title': ["제목에 영문자 또는 숫자가 하나 이상 필요합니다."]},
            )

        try:
            slug = self.post_service.allocate_slug(data['title'])
        except SlugAllocationError as e:
            logging.warning(f"slug 할당 실패 (title: {data['title']}): {e}")
            return ActionResult.fail(f"오류: {e}", ActionErrorCode.SLUG_EXHAUSTED)

        post = Post(
            post_id=slug,
            title=data['title'],
            content=data['content'],
            tags=data['tags'],
            user_id=current_user_id,
            image_url=data.get('image_url') or None,
        )
        try:
            self.post_service.create_post(post)
        except Exception as e:
            return self._store_failure("게시글을 저장하지 못했습니다", e)

        return self._succeed(
            f'게시글 "{post.title}"이(가) 생성되었습니다.',
            payload={'post_id': slug},
            view_keys=post_view_keys(post),
        )

    def update_post(self, post_id: str, form: Mapping[str, Any], current_user_id: Optional[str]) -> ActionResult:
        """제목/본문/태그/이미지만 덮어씁니다. 작성자 본인만 수정할 수 있습니다."""
        data, failure = self._validate(PostFormSchema(), form, "게시글을 수정하지 못했습니다.")
        if failure:
            return failure

        post, failure = self._load_owned_post(post_id, current_user_id, "수정")
        if failure:
            return failure

        remove_image = 'image_url' in data and not data['image_url']
        try:
            self.post_service.update_post_content(
                post_id, data['title'], data['content'], data['tags'],
                image_url=data.get('image_url'), remove_image=remove_image,
            )
        except Exception as e:
            return self._store_failure("게시글을 수정하지 못했습니다", e)

        updated = replace(post, title=data['title'], content=data['content'], tags=data['tags'])
        return self._succeed(
            f'게시글 "{updated.title}"이(가) 수정되었습니다.',
            payload={'post_id': post_id},
            view_keys=merge_keys(post_view_keys(post), post_view_keys(updated)),
        )

    def delete_post(self, post_id: str, current_user_id: Optional[str]) -> ActionResult:
        """
        대표 이미지(가능한 경우) -> 하위 댓글 -> 게시글 문서 순으로 삭제합니다.
        대표 이미지 정리는 부가 작업이므로 실패해도 삭제를 계속합니다.
        """
        post, failure = self._load_owned_post(post_id, current_user_id, "삭제")
        if failure:
            return failure

        image_path = StorageService.path_from_url(post.image_url)
        if image_path:
            try:
                self.storage_service.delete_file(image_path)
            except Exception as e:
                logging.warning(f"대표 이미지 삭제 실패, 게시글 삭제는 계속 진행 (post_id: {post_id}): {e}", exc_info=True)

        try:
            self.comment_service.delete_comments_for_post(post_id)
            self.post_service.delete_post(post_id)
        except Exception as e:
            return self._store_failure("게시글을 삭제하지 못했습니다", e)

        view_keys = post_view_keys(post) + [comments_view(post_id)]
        view_keys.extend(liked_view(user_id) for user_id in post.liked_by)
        return self._succeed(
            "게시글이 삭제되었습니다.",
            payload={'post_id': post_id},
            view_keys=view_keys,
        )

    def toggle_like(self, post_id: str, current_user_id: Optional[str]) -> ActionResult:
        """좋아요를 누르거나 취소합니다."""
        errors: Dict[str, list] = {}
        if not post_id:
            errors['post_id'] = ["게시글 ID가 필요합니다."]
        if not current_user_id:
            errors['user_id'] = ["사용자 인증이 필요합니다."]
        if errors:
            return ActionResult.fail("입력값 검증 오류: 좋아요를 처리하지 못했습니다.",
                                     ActionErrorCode.VALIDATION_ERROR, errors=errors)
        if not is_valid_document_id(post_id):
            return self._not_found("게시글을 찾을 수 없습니다.")

        try:
            liked, new_count = self.post_service.toggle_like(post_id, current_user_id)
        except ValueError as e:
            return self._not_found(str(e))
        except Exception as e:
            return self._store_failure("좋아요를 처리하지 못했습니다", e)

        return self._succeed(
            "좋아요를 눌렀습니다." if liked else "좋아요를 취소했습니다.",
            payload={'post_id': post_id, 'liked': liked, 'new_count': new_count},
            view_keys=[post_view(post_id), POSTS_LIST, liked_view(current_user_id)],
        )

    def toggle_archive(self, post_id: str, current_user_id: Optional[str]) -> ActionResult:
        """공개 <-> 보관 상태를 전환합니다. 작성자 본인만 가능합니다."""
        post, failure = self._load_owned_post(post_id, current_user_id, "보관/복원")
        if failure:
            return failure

        is_archived = not post.is_archived
        try:
            self.post_service.set_archived(post_id, is_archived)
        except Exception as e:
            return self._store_failure("게시글 보관 상태를 변경하지 못했습니다", e)

        view_keys = post_view_keys(post)
        view_keys.extend(liked_view(user_id) for user_id in post.liked_by)
        return self._succeed(
            "게시글을 보관했습니다." if is_archived else "게시글을 다시 공개했습니다.",
            payload={'post_id': post_id, 'is_archived': is_archived},
            view_keys=view_keys,
        )

    def suggest_tags(self, form: Mapping[str, Any]) -> ActionResult:
        """본문을 바탕으로 AI 태그를 추천합니다. 본문이 짧으면 모델을 호출하지 않습니다."""
        data, failure = self._validate(SuggestTagsSchema(), form, "태그를 추천하지 못했습니다.")
        if failure:
            return failure

        content = data['content'].strip()
        if len(content) < MIN_CONTENT_FOR_TAG_SUGGESTION:
            return ActionResult.ok("태그를 추천하기에는 본문이 너무 짧습니다.", payload={'tags': []})
        if self.openai_service is None:
            return ActionResult.fail("AI 태그 추천을 사용할 수 없습니다.", ActionErrorCode.SERVICE_UNAVAILABLE)

        try:
            tags = self.openai_service.suggest_tags(content)
        except Exception as e:
            logging.error(f"AI 태그 추천 실패: {e}", exc_info=True)
            return ActionResult.fail("AI 태그 추천 중 오류가 발생했습니다.", ActionErrorCode.SERVICE_UNAVAILABLE)
        return ActionResult.ok("추천 태그를 가져왔습니다.", payload={'tags': tags})
