# app/api/images/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

class ImageRecordSchema(Schema):
    """POST /api/users/me/images 업로드 완료 후 메타데이터 기록 요청."""
    class Meta:
        unknown = EXCLUDE

    storage_path = fields.Str(required=True, validate=validate.Length(min=1), error_messages={"required": "저장 경로는 필수입니다."})
    download_url = fields.URL(required=True, error_messages={"required": "다운로드 URL은 필수입니다."})
    file_name = fields.Str(required=True, validate=validate.Length(min=1))
    mime_type = fields.Str(required=True, validate=validate.Regexp(r'^image/[\w.+-]+$', error="이미지 파일만 기록할 수 있습니다."))


class ImageResponseSchema(Schema):
    image_id = fields.Str(dump_only=True)
    user_id = fields.Str()
    storage_path = fields.Str()
    download_url = fields.Str()
    file_name = fields.Str()
    mime_type = fields.Str()
    uploaded_at = fields.DateTime()
