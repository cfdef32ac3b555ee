# app/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from app.utils.datetime_utils import DateTimeUtils

@dataclass
class Comment:
    """
    Firestore 'posts/{post_id}/comments' 하위 컬렉션의 문서 구조를 정의하는 데이터클래스.
    post_id 는 부모 게시글과 같아야 하며 작성자별 조회(collection group)가 이 필드에 의존합니다.
    """
    comment_id: str
    post_id: str
    user_id: str
    user_display_name: str
    text: str
    user_photo_url: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)


@dataclass
class UserActivityComment(Comment):
    """프로필 활동 목록용 댓글. 부모 게시글 제목이 함께 채워집니다."""
    post_title: Optional[str] = None
    post_slug: Optional[str] = None
