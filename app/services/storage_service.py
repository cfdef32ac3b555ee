# app/services/storage_service.py
import logging
from typing import Optional
from urllib.parse import unquote, urlparse
from flask import Flask
from firebase_admin import storage
from google.api_core.exceptions import NotFound

class StorageService:
    """
    Firebase Storage 관련 로직을 담당하는 범용 서비스 클래스입니다.
    업로드는 클라이언트가 직접 수행하며, 서버는 저장된 객체의 정리(삭제)만 담당합니다.
    """

    def __init__(self, bucket=None):
        """
        버킷은 init_app 메서드를 통해 주입되거나, 테스트에서 직접 전달됩니다.
        """
        self.bucket = bucket

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 Storage 버킷을 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")

        self.bucket = storage.bucket(bucket_name)
        logging.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    def delete_file(self, file_path: str) -> bool:
        """
        지정된 경로의 Storage 객체를 삭제합니다.

        :param file_path: 버킷 내부 객체 경로 (예: 'posts/uid/abc.png')
        :return: 삭제했으면 True, 이미 존재하지 않았으면 False
        :raises: 'NotFound' 이외의 Storage 오류는 그대로 전파됩니다.
        """
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        blob = self.bucket.blob(file_path)
        try:
            blob.delete()
        except NotFound:
            logging.warning(f"삭제할 Storage 객체가 이미 없습니다: {file_path}")
            return False
        logging.info(f"Storage 객체 삭제 완료: {file_path}")
        return True

    @staticmethod
    def path_from_url(url: Optional[str]) -> Optional[str]:
        """
        다운로드 URL에서 버킷 내부 객체 경로를 추출합니다.

        - https://firebasestorage.googleapis.com/v0/b/<bucket>/o/<인코딩된 경로>?alt=media&token=...
        - https://storage.googleapis.com/<bucket>/<경로>
        """
        if not url:
            return None
        parsed = urlparse(url)
        path = parsed.path
        if '/o/' in path:
            return unquote(path.split('/o/', 1)[1]) or None
        if parsed.netloc == 'storage.googleapis.com':
            parts = path.lstrip('/').split('/', 1)
            return unquote(parts[1]) if len(parts) == 2 and parts[1] else None
        return None
