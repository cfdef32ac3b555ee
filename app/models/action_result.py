# app/models/action_result.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

class ActionErrorCode(Enum):
    """변경 액션 실패 유형. HTTP 계층이 상태 코드를 고를 때 사용합니다."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    SLUG_EXHAUSTED = "SLUG_EXHAUSTED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    STORE_ERROR = "STORE_ERROR"

@dataclass
class ActionResult:
    """
    모든 변경 액션이 반환하는 결과 레코드.

    - errors: 필드명 -> 메시지 목록 (검증 실패 시)
    - payload: 액션별 데이터 (예: {'post_id': ...}, {'liked': True, 'new_count': 1})
    - affected_views: 이 변경으로 다시 조회해야 하는 뷰 키 목록
    """
    message: str
    success: bool
    errors: Dict[str, List[str]] = field(default_factory=dict)
    payload: Dict[str, Any] = field(default_factory=dict)
    affected_views: List[str] = field(default_factory=list)
    error_code: Optional[ActionErrorCode] = None

    @classmethod
    def ok(cls, message: str, payload: Optional[Dict[str, Any]] = None,
           affected_views: Optional[List[str]] = None) -> 'ActionResult':
        return cls(message=message, success=True, payload=payload or {},
                   affected_views=affected_views or [])

    @classmethod
    def fail(cls, message: str, error_code: ActionErrorCode,
             errors: Optional[Dict[str, List[str]]] = None) -> 'ActionResult':
        return cls(message=message, success=False, errors=errors or {}, error_code=error_code)
