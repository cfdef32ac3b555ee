# app/utils/text_utils.py
"""게시글 식별자(slug)와 태그 문자열 정규화 유틸리티"""

import re
from typing import Iterable, List, Optional, Union

_WHITESPACE_RE = re.compile(r'\s+')
_NON_SLUG_RE = re.compile(r'[^a-z0-9-]+')
_MULTI_HYPHEN_RE = re.compile(r'-{2,}')

# Firestore 문서 ID 제약: 비어 있지 않음, '/' 불가, '.'/'..' 불가, '__x__' 예약, 1500바이트 이하
_RESERVED_ID_RE = re.compile(r'^__.*__$')
MAX_DOCUMENT_ID_BYTES = 1500


def generate_slug(title: str) -> str:
    """
    제목으로부터 URL에 안전한 slug를 만듭니다.

    소문자화 -> 공백 묶음을 '-'로 -> [a-z0-9-] 외 문자 제거 -> 연속 '-' 축약 -> 앞뒤 '-' 제거
    """
    slug = (title or '').lower()
    slug = _WHITESPACE_RE.sub('-', slug)
    slug = _NON_SLUG_RE.sub('', slug)
    slug = _MULTI_HYPHEN_RE.sub('-', slug)
    return slug.strip('-')


def is_valid_document_id(doc_id: Optional[str]) -> bool:
    """Firestore 문서 키로 사용할 수 있는 문자열인지 확인합니다."""
    if not isinstance(doc_id, str) or not doc_id:
        return False
    if '/' in doc_id or doc_id in ('.', '..'):
        return False
    if _RESERVED_ID_RE.match(doc_id):
        return False
    return len(doc_id.encode('utf-8')) <= MAX_DOCUMENT_ID_BYTES


def normalize_tag(tag: str) -> str:
    return (tag or '').strip().lower()


def normalize_tags(raw: Union[str, Iterable[str], None]) -> List[str]:
    """
    콤마 구분 문자열 또는 문자열 목록을 태그 목록으로 정규화합니다.
    공백 제거, 소문자화, 빈 값 제거, 첫 등장 순서를 유지한 중복 제거.
    """
    if raw is None:
        return []
    items = raw.split(',') if isinstance(raw, str) else raw
    tags: List[str] = []
    for item in items:
        tag = normalize_tag(str(item))
        if tag and tag not in tags:
            tags.append(tag)
    return tags
