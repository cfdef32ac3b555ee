# app/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from app.utils.datetime_utils import DateTimeUtils

@dataclass
class Post:
    """
    Firestore 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    문서 ID가 곧 slug(post_id)이며 생성 후 변경되지 않습니다.

    like_count / comment_count 는 liked_by, comments 하위 컬렉션의 크기를 캐싱한 값입니다.
    """
    post_id: str
    title: str
    content: str
    tags: List[str] = field(default_factory=list)
    user_id: Optional[str] = None  # 레거시 데이터에서만 비어 있을 수 있음
    image_url: Optional[str] = None
    liked_by: List[str] = field(default_factory=list)
    like_count: int = 0
    comment_count: int = 0
    is_archived: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: Optional[datetime] = None

    def is_owned_by(self, user_id: Optional[str]) -> bool:
        return bool(self.user_id) and self.user_id == user_id


@dataclass
class ArchivePeriod:
    """아카이브 사이드바에 표시되는 (연, 월)별 게시글 수. month 는 0부터 시작합니다."""
    year: int
    month: int
    month_name: str
    count: int
