# app/api/posts/schemas.py
from marshmallow import Schema, fields, validate, validates, EXCLUDE

from app.schemas.fields import TagList

# --- 요청 스키마 ---

class PostFormSchema(Schema):
    """
    게시글 작성/수정 폼의 유효성을 검사합니다.
    - image_url 을 빈 문자열로 보내면 기존 대표 이미지를 제거합니다.
    """
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=3, error="제목은 3자 이상이어야 합니다."))
    content = fields.Str(required=True, validate=validate.Length(min=10, error="본문은 10자 이상이어야 합니다."))
    tags = TagList(load_default=list)
    image_url = fields.Str(allow_none=True)

    @validates('image_url')
    def validate_image_url(self, value, **kwargs):
        if value:
            validate.URL(error="대표 이미지 URL 형식이 올바르지 않습니다.")(value)


class SuggestTagsSchema(Schema):
    """POST /api/posts/suggest-tags 요청 본문."""
    class Meta:
        unknown = EXCLUDE

    content = fields.Str(required=True)

# --- 응답 스키마 ---

class PostResponseSchema(Schema):
    """게시글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    post_id = fields.Str(dump_only=True)
    title = fields.Str(required=True)
    content = fields.Str(required=True)
    tags = TagList()
    user_id = fields.Str(allow_none=True)
    image_url = fields.Str(allow_none=True)
    liked_by = fields.List(fields.Str())
    like_count = fields.Int(required=True)
    comment_count = fields.Int(required=True)
    is_archived = fields.Bool(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(allow_none=True)


class ArchivePeriodSchema(Schema):
    """아카이브 구간 응답. month 는 0부터 시작합니다."""
    year = fields.Int()
    month = fields.Int()
    month_name = fields.Str()
    count = fields.Int()
