"""
시간/날짜 유틸리티 기능 테스트

사용법: python -m pytest app/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone
from app.utils.datetime_utils import DateTimeUtils, MONTH_NAMES

def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo is not None  # timezone-aware 여야 함
        assert dt.tzinfo == timezone.utc  # UTC로 정규화되어야 함

    assert DateTimeUtils.parse_iso_datetime("2024-01-15T10:30:00+09:00").hour == 1

def test_for_firestore():
    """Firestore 변환 테스트"""
    test_data = {
        'publishedOn': date(2020, 1, 15),
        'createdAt': datetime(2024, 1, 15, 10, 30),
        'nested': {
            'event_date': date(2023, 12, 25)
        },
        'list_data': [
            {'created_at': datetime(2024, 1, 1)}
        ]
    }

    converted = DateTimeUtils.for_firestore(test_data)

    # date는 datetime으로 변환되어야 함
    assert isinstance(converted['publishedOn'], datetime)
    assert isinstance(converted['nested']['event_date'], datetime)
    assert isinstance(converted['list_data'][0]['created_at'], datetime)

    # 모든 datetime은 timezone-aware여야 함
    assert converted['publishedOn'].tzinfo == timezone.utc
    assert converted['createdAt'].tzinfo == timezone.utc

def test_from_firestore():
    """Firestore 에서 읽은 다양한 타임스탬프 표현 변환"""
    aware = datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
    assert DateTimeUtils.from_firestore(aware) == aware
    assert DateTimeUtils.from_firestore(datetime(2024, 3, 1, 12)) == aware
    assert DateTimeUtils.from_firestore("2024-03-01T12:00:00Z") == aware
    assert DateTimeUtils.from_firestore(None) is None
    assert DateTimeUtils.from_firestore("not-a-date") is None

    class LegacyTimestamp:
        def timestamp(self):
            return aware.timestamp()

    assert DateTimeUtils.from_firestore(LegacyTimestamp()) == aware

def test_get_month_range():
    """월 구간은 [해당 월 1일, 다음 달 1일) UTC"""
    start, end = DateTimeUtils.get_month_range(2024, 4)
    assert start == datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert end == datetime(2024, 6, 1, tzinfo=timezone.utc)

    # 12월은 다음 해로 넘어감
    start, end = DateTimeUtils.get_month_range(2023, 11)
    assert end == datetime(2024, 1, 1, tzinfo=timezone.utc)

    with pytest.raises(ValueError):
        DateTimeUtils.get_month_range(2024, 12)

def test_month_name():
    assert DateTimeUtils.month_name(0) == "January"
    assert DateTimeUtils.month_name(11) == "December"
    assert len(MONTH_NAMES) == 12

def test_error_handling():
    """오류 처리 테스트"""
    # 잘못된 ISO 포맷
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    # 빈 문자열
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")
