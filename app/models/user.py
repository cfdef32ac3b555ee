# app/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, List

SOCIAL_LINK_KINDS = ('twitter', 'linkedin', 'instagram', 'portfolio', 'github')

@dataclass
class UserProfile:
    """
    Firestore 'userProfiles' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    문서 ID는 인증 주체의 uid 와 같습니다.
    """
    uid: str
    display_name: Optional[str] = None
    username: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None
    social_links: Dict[str, str] = field(default_factory=dict)  # 키는 SOCIAL_LINK_KINDS 의 부분집합
    interests: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
