# app/api/users/actions.py
from typing import Any, Mapping, Optional

from app.api.base_actions import BaseActions
from app.api.users.schemas import UserProfileUpdateSchema, UserProfileResponseSchema
from app.api.users.services import UserService
from app.models.action_result import ActionResult, ActionErrorCode
from app.models.user import UserProfile, SOCIAL_LINK_KINDS
from app.services.view_invalidation_service import ViewInvalidationService, profile_view


class UserActions(BaseActions):
    """사용자 프로필 변경 액션"""

    def __init__(self, user_service: UserService, invalidation_service: ViewInvalidationService):
        super().__init__(invalidation_service)
        self.user_service = user_service

    def update_user_profile(self, user_id: Optional[str], form: Mapping[str, Any]) -> ActionResult:
        """
        프로필 필드를 덮어씁니다.
        - 비워서 보낸 사용자 이름/소개/소셜 링크는 저장된 값에서 제거됩니다.
        - photo_url 은 폼에 있을 때만 바뀝니다.
        """
        data, failure = self._validate(UserProfileUpdateSchema(), form, "프로필을 수정하지 못했습니다.")
        if failure:
            return failure
        if not user_id:
            return ActionResult.fail("오류: 로그인이 필요합니다.", ActionErrorCode.VALIDATION_ERROR,
                                     errors={'user_id': ["사용자 인증이 필요합니다."]})

        social_links = {kind: data[kind] for kind in SOCIAL_LINK_KINDS if data.get(kind)}
        fields = {
            'displayName': data['display_name'].strip(),
            'username': data.get('username'),
            'bio': data.get('bio'),
            'socialLinks': social_links,
            'interests': data['interests'],
        }
        if data.get('photo_url'):
            fields['photoURL'] = data['photo_url']

        try:
            self.user_service.save_user_profile(user_id, fields)
        except Exception as e:
            return self._store_failure("프로필을 저장하지 못했습니다", e)

        profile = UserProfile(
            uid=user_id,
            display_name=fields['displayName'],
            username=fields['username'],
            bio=fields['bio'],
            photo_url=fields.get('photoURL'),
            social_links=social_links,
            interests=fields['interests'],
        )
        return self._succeed(
            "프로필이 수정되었습니다.",
            payload={'profile': UserProfileResponseSchema().dump(profile)},
            view_keys=[profile_view(user_id)],
        )
