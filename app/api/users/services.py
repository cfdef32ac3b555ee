# app/api/users/services.py
import logging
from typing import Optional, Dict, Any
from firebase_admin import firestore

from app.models.user import UserProfile, SOCIAL_LINK_KINDS
from app.utils.datetime_utils import DateTimeUtils
from app.utils.text_utils import is_valid_document_id

class UserService:
    """사용자 프로필('userProfiles' 컬렉션) 관련 로직을 담당하는 서비스 클래스"""
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.profiles_ref = self.db.collection('userProfiles')

    @staticmethod
    def _profile_from_doc(doc) -> UserProfile:
        data = doc.to_dict() or {}
        links = data.get('socialLinks') or {}
        return UserProfile(
            uid=doc.id,
            display_name=data.get('displayName'),
            username=data.get('username'),
            bio=data.get('bio'),
            photo_url=data.get('photoURL'),
            social_links={k: v for k, v in links.items() if k in SOCIAL_LINK_KINDS and v},
            interests=list(data.get('interests') or []),
            created_at=DateTimeUtils.from_firestore(data.get('createdAt')),
            updated_at=DateTimeUtils.from_firestore(data.get('updatedAt')),
        )

    def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        """uid 로 프로필을 조회합니다. 없거나 조회 실패 시 None."""
        if not is_valid_document_id(user_id):
            return None
        try:
            doc = self.profiles_ref.document(user_id).get()
            if not doc.exists:
                return None
            return self._profile_from_doc(doc)
        except Exception as e:
            logging.error(f"사용자 프로필 조회 실패 (user_id: {user_id}): {e}", exc_info=True)
            return None

    def save_user_profile(self, user_id: str, fields: Dict[str, Any]) -> None:
        """
        프로필 필드를 덮어씁니다. 문서가 없으면 uid/createdAt 과 함께 새로 만듭니다.
        값이 None 인 선택 필드는 기존 문서에서 제거됩니다.

        :param fields: Firestore 필드명 기준의 값 (displayName, username, bio, ...)
        """
        if not user_id:
            raise ValueError("프로필을 저장하려면 사용자 ID가 필요합니다.")

        profile_ref = self.profiles_ref.document(user_id)
        now = DateTimeUtils.now()
        if profile_ref.get().exists:
            update_data = {k: (firestore.DELETE_FIELD if v is None else v) for k, v in fields.items()}
            update_data['updatedAt'] = now
            profile_ref.update(update_data)
        else:
            new_data = {k: v for k, v in fields.items() if v is not None}
            new_data.update({'uid': user_id, 'createdAt': now, 'updatedAt': now})
            profile_ref.set(new_data)
        logging.info(f"사용자 프로필 저장 완료 (user_id: {user_id})")
