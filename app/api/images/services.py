# app/api/images/services.py
import logging
from typing import Optional, List
from firebase_admin import firestore

from app.models.image_upload import UserUploadedImage
from app.utils.datetime_utils import DateTimeUtils
from app.utils.text_utils import is_valid_document_id

DEFAULT_RECENT_IMAGES = 12

class ImageService:
    """
    사용자가 업로드한 이미지의 메타데이터('userImageUploads' 컬렉션)를 관리하는 서비스 클래스.
    실제 파일 업로드는 클라이언트가 Storage 에 직접 수행하고, 여기서는 결과 경로/URL만 기록합니다.
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.images_ref = self.db.collection('userImageUploads')

    @staticmethod
    def _image_from_doc(doc) -> UserUploadedImage:
        data = doc.to_dict() or {}
        return UserUploadedImage(
            image_id=doc.id,
            user_id=data.get('userId'),
            storage_path=data.get('storagePath'),
            download_url=data.get('downloadURL'),
            file_name=data.get('fileName', ''),
            mime_type=data.get('mimeType', ''),
            uploaded_at=DateTimeUtils.from_firestore(data.get('uploadedAt')) or DateTimeUtils.now(),
        )

    def record_upload(self, user_id: str, storage_path: str, download_url: str,
                      file_name: str, mime_type: str) -> UserUploadedImage:
        """업로드된 이미지의 메타데이터를 새 문서로 기록합니다."""
        doc_ref = self.images_ref.document()
        image = UserUploadedImage(
            image_id=doc_ref.id,
            user_id=user_id,
            storage_path=storage_path,
            download_url=download_url,
            file_name=file_name,
            mime_type=mime_type,
        )
        doc_ref.set({
            'userId': user_id,
            'storagePath': storage_path,
            'downloadURL': download_url,
            'fileName': file_name,
            'mimeType': mime_type,
            'uploadedAt': image.uploaded_at,
        })
        logging.info(f"이미지 메타데이터 기록 완료 (image_id: {image.image_id})")
        return image

    def get_recent_user_images(self, user_id: str, count: int = DEFAULT_RECENT_IMAGES) -> List[UserUploadedImage]:
        """사용자의 최근 업로드 이미지를 최신순으로 최대 count 개 조회합니다."""
        if not user_id:
            return []
        try:
            query = (self.images_ref
                     .where('userId', '==', user_id)
                     .order_by('uploadedAt', direction=firestore.Query.DESCENDING)
                     .limit(count))
            return [self._image_from_doc(doc) for doc in query.stream()]
        except Exception as e:
            # 복합 색인(userId ASC, uploadedAt DESC) 누락 시에도 여기로 옵니다.
            logging.error(f"사용자 이미지 조회 실패 (user_id: {user_id}): {e}", exc_info=True)
            return []

    def get_image(self, image_id: str) -> Optional[UserUploadedImage]:
        if not is_valid_document_id(image_id):
            return None
        try:
            doc = self.images_ref.document(image_id).get()
            return self._image_from_doc(doc) if doc.exists else None
        except Exception as e:
            logging.error(f"이미지 메타데이터 조회 실패 (image_id: {image_id}): {e}", exc_info=True)
            return None

    def delete_image_record(self, image_id: str) -> None:
        self.images_ref.document(image_id).delete()
