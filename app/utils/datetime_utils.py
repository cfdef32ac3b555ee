# app/utils/datetime_utils.py
"""
블로그 전체에서 일관된 시간/날짜 처리를 위한 중앙화된 유틸리티 모듈

이 모듈의 목적:
1. 게시글/댓글/이미지 타임스탬프 표현을 한 곳에서 변환
2. Firestore 호환성 보장 (timezone-aware UTC datetime)
3. 아카이브(연/월) 구간 계산 통일
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Any, Optional, Tuple
from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00
        """
        try:
            if not iso_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)

            # timezone-naive인 경우 UTC로 가정
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)

            return dt.astimezone(timezone.utc)

        except Exception as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        elif isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        elif isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(value: Any) -> Optional[datetime]:
        """
        Firestore에서 읽은 타임스탬프 값을 timezone-aware UTC datetime으로 변환합니다.

        - Firestore Timestamp(DatetimeWithNanoseconds) / datetime -> UTC datetime
        - ISO 문자열 (레거시 문서) -> UTC datetime
        - 값이 없거나 해석할 수 없으면 None
        """
        if value is None:
            return None
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        if isinstance(value, str):
            try:
                return DateTimeUtils.parse_iso_datetime(value)
            except ValueError:
                return None
        if hasattr(value, 'timestamp'):
            return datetime.fromtimestamp(value.timestamp(), tz=timezone.utc)
        logger.warning(f"예상치 못한 타임스탬프 형식: {value!r} ({type(value)})")
        return None

    @staticmethod
    def get_month_range(year: int, month_zero_indexed: int) -> Tuple[datetime, datetime]:
        """
        특정 연/월(0부터 시작하는 월)의 [해당 월 1일, 다음 달 1일) 구간을 UTC로 반환합니다.
        """
        if not 0 <= month_zero_indexed <= 11:
            raise ValueError(f"월은 0~11 범위여야 합니다: {month_zero_indexed}")
        start = datetime(year, month_zero_indexed + 1, 1, tzinfo=timezone.utc)
        end = start + relativedelta(months=1)
        return start, end

    @staticmethod
    def month_name(month_zero_indexed: int) -> str:
        return MONTH_NAMES[month_zero_indexed]

