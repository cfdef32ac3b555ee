# app/api/images/actions.py
from typing import Any, Mapping, Optional

from app.api.base_actions import BaseActions
from app.api.images.schemas import ImageRecordSchema, ImageResponseSchema
from app.api.images.services import ImageService
from app.models.action_result import ActionResult, ActionErrorCode
from app.services.storage_service import StorageService
from app.services.view_invalidation_service import ViewInvalidationService, images_view


class ImageActions(BaseActions):
    """사용자 업로드 이미지의 기록/삭제 액션"""

    def __init__(self, image_service: ImageService, storage_service: StorageService,
                 invalidation_service: ViewInvalidationService):
        super().__init__(invalidation_service)
        self.image_service = image_service
        self.storage_service = storage_service

    def record_image_upload(self, user_id: Optional[str], form: Mapping[str, Any]) -> ActionResult:
        """클라이언트가 Storage 에 올린 이미지의 메타데이터를 기록합니다."""
        data, failure = self._validate(ImageRecordSchema(), form, "이미지 정보를 기록하지 못했습니다.")
        if failure:
            return failure
        if not user_id:
            return ActionResult.fail("오류: 로그인이 필요합니다.", ActionErrorCode.VALIDATION_ERROR,
                                     errors={'user_id': ["사용자 인증이 필요합니다."]})

        try:
            image = self.image_service.record_upload(
                user_id=user_id,
                storage_path=data['storage_path'],
                download_url=data['download_url'],
                file_name=data['file_name'],
                mime_type=data['mime_type'],
            )
        except Exception as e:
            return self._store_failure("이미지 정보를 저장하지 못했습니다", e)

        return self._succeed(
            "이미지 정보가 기록되었습니다.",
            payload={'image_id': image.image_id, 'image': ImageResponseSchema().dump(image)},
            view_keys=[images_view(user_id)],
        )

    def delete_user_image(self, image_id: str, current_user_id: Optional[str]) -> ActionResult:
        """
        Storage 객체를 삭제한 뒤 메타데이터 문서를 삭제합니다.
        이미지가 이 작업의 주 대상이므로 '이미 없음' 이외의 Storage 오류는 실패로 반환하고
        메타데이터는 남겨둡니다.
        """
        image = self.image_service.get_image(image_id)
        if image is None:
            return self._not_found("이미지를 찾을 수 없습니다.")
        if not current_user_id or image.user_id != current_user_id:
            return self._forbidden("이 이미지를 삭제할 권한이 없습니다.")

        try:
            self.storage_service.delete_file(image.storage_path)
        except Exception as e:
            return self._store_failure("Storage 에서 이미지를 삭제하지 못했습니다", e)

        try:
            self.image_service.delete_image_record(image_id)
        except Exception as e:
            return self._store_failure("이미지 정보를 삭제하지 못했습니다", e)

        return self._succeed(
            "이미지가 삭제되었습니다.",
            payload={'image_id': image_id},
            view_keys=[images_view(current_user_id)],
        )
