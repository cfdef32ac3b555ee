# app/api/base_actions.py
"""
변경 액션 기본 클래스
모든 변경 액션이 상속받는 검증/결과 생성/뷰 무효화 공통 기능 제공
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from marshmallow import Schema, ValidationError

from app.models.action_result import ActionResult, ActionErrorCode
from app.services.view_invalidation_service import ViewInvalidationService

logger = logging.getLogger(__name__)


def flatten_errors(messages: Any, prefix: str = '') -> Dict[str, List[str]]:
    """marshmallow 오류 메시지를 '필드명 -> 메시지 목록' 형태로 평탄화합니다."""
    if isinstance(messages, dict):
        flat: Dict[str, List[str]] = {}
        for key, value in messages.items():
            name = str(key) if not prefix else f"{prefix}.{key}"
            for field_name, field_messages in flatten_errors(value, name).items():
                flat.setdefault(field_name, []).extend(field_messages)
        return flat
    if isinstance(messages, (list, tuple)):
        return {prefix or 'form': [str(m) for m in messages]}
    return {prefix or 'form': [str(messages)]}


class BaseActions:
    """
    변경 액션의 기본 클래스.
    - 입력 검증 실패는 필드별 오류 맵을 담은 실패 결과로 변환되고, 저장소 호출은 일어나지 않습니다.
    - 저장소/전송 오류는 액션 경계에서 기록 후 일반 실패 결과로 변환됩니다.
    """

    def __init__(self, invalidation_service: ViewInvalidationService):
        self.invalidation_service = invalidation_service

    @staticmethod
    def _validate(schema: Schema, form: Optional[Mapping[str, Any]],
                  failure_message: str) -> Tuple[Optional[Dict[str, Any]], Optional[ActionResult]]:
        """폼 데이터를 검증하고 (검증된 데이터, None) 또는 (None, 실패 결과)를 반환합니다."""
        try:
            return schema.load(dict(form or {})), None
        except ValidationError as err:
            return None, ActionResult.fail(
                f"입력값 검증 오류: {failure_message}",
                ActionErrorCode.VALIDATION_ERROR,
                errors=flatten_errors(err.messages),
            )

    def _succeed(self, message: str, payload: Optional[Dict[str, Any]] = None,
                 view_keys: Optional[List[str]] = None) -> ActionResult:
        """성공 결과를 만들고 영향받는 뷰 키를 발행합니다."""
        published = self.invalidation_service.publish(view_keys or [])
        return ActionResult.ok(message, payload=payload, affected_views=published)

    @staticmethod
    def _store_failure(context: str, error: Exception) -> ActionResult:
        logger.error(f"{context}: {error}", exc_info=True)
        return ActionResult.fail(f"오류: {context}. {error}", ActionErrorCode.STORE_ERROR)

    @staticmethod
    def _not_found(message: str) -> ActionResult:
        return ActionResult.fail(message, ActionErrorCode.NOT_FOUND)

    @staticmethod
    def _forbidden(message: str) -> ActionResult:
        return ActionResult.fail(message, ActionErrorCode.FORBIDDEN)
