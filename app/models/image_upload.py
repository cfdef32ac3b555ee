# app/models/image_upload.py
from dataclasses import dataclass, field
from datetime import datetime

from app.utils.datetime_utils import DateTimeUtils

@dataclass
class UserUploadedImage:
    """
    Firestore 'userImageUploads' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    storage_path 와 download_url 은 같은 Storage 객체를 가리킵니다.
    """
    image_id: str
    user_id: str
    storage_path: str
    download_url: str
    file_name: str
    mime_type: str
    uploaded_at: datetime = field(default_factory=DateTimeUtils.now)
