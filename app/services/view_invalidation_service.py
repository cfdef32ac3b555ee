# app/services/view_invalidation_service.py
import logging
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional

from app.models.post import Post

# 뷰 키 접두사
POSTS_LIST = "posts:list"
TAGS_ALL = "tags:all"
ARCHIVE_PERIODS = "archive:periods"


def post_view(post_id: str) -> str:
    return f"post:{post_id}"

def tag_view(tag: str) -> str:
    return f"tag:{tag}"

def archive_view(year: int, month_zero_indexed: int) -> str:
    return f"archive:{year:04d}-{month_zero_indexed + 1:02d}"

def profile_view(user_id: str) -> str:
    return f"profile:{user_id}"

def liked_view(user_id: str) -> str:
    return f"liked:{user_id}"

def comments_view(post_id: str) -> str:
    return f"comments:{post_id}"

def activity_view(user_id: str) -> str:
    return f"activity:{user_id}"

def images_view(user_id: str) -> str:
    return f"images:{user_id}"


def post_view_keys(post: Optional[Post]) -> List[str]:
    """게시글 한 건이 노출되는 모든 뷰의 키를 반환합니다."""
    if post is None:
        return []
    keys = [POSTS_LIST, TAGS_ALL, ARCHIVE_PERIODS, post_view(post.post_id)]
    keys.extend(tag_view(tag) for tag in post.tags)
    if post.created_at:
        keys.append(archive_view(post.created_at.year, post.created_at.month - 1))
    if post.user_id:
        keys.append(profile_view(post.user_id))
    return keys


def merge_keys(*groups: Iterable[str]) -> List[str]:
    """여러 키 묶음을 순서를 유지하며 합칩니다."""
    merged: List[str] = []
    for group in groups:
        for key in group:
            if key not in merged:
                merged.append(key)
    return merged


class ViewInvalidationService:
    """
    변경 액션이 발행한 뷰 키를 구독자에게 전달하는 공용 서비스 클래스.
    - 구독자는 키 접두사로 등록합니다. (예: 'tag:' 는 모든 태그 목록 뷰)
    - 구독자 콜백의 오류는 기록만 하고 변경 액션의 결과에는 영향을 주지 않습니다.
    """
    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[str], None]]] = defaultdict(list)

    def subscribe(self, prefix: str, callback: Callable[[str], None]) -> None:
        self._subscribers[prefix].append(callback)

    def publish(self, keys: Iterable[str]) -> List[str]:
        """
        뷰 키 목록을 발행하고, 발행된 키 목록을 그대로 반환합니다.

        :param keys: 무효화할 뷰 키
        :return: 중복을 제거한 키 목록
        """
        published = merge_keys(keys)
        for key in published:
            for prefix, callbacks in self._subscribers.items():
                if not key.startswith(prefix):
                    continue
                for callback in callbacks:
                    try:
                        callback(key)
                    except Exception as e:
                        logging.error(f"뷰 무효화 구독자 처리 실패 (key: {key}): {e}", exc_info=True)
        if published:
            logging.debug(f"뷰 무효화 발행: {published}")
        return published
