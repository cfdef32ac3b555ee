# app/api/comments/schemas.py
from marshmallow import Schema, fields, validate, validates, pre_load, ValidationError, EXCLUDE

class CommentCreateSchema(Schema):
    """
    POST /api/posts/{post_id}/comments
    댓글 생성을 요청할 때의 데이터 형식을 정의하고 유효성을 검사합니다.
    작성자 ID는 인증 토큰에서 가져오고, 표시 이름/사진은 폼으로 전달됩니다.
    """
    class Meta:
        unknown = EXCLUDE

    text = fields.Str(required=True, validate=validate.Length(min=1, max=1000, error="댓글은 1~1000자 사이여야 합니다."))
    user_display_name = fields.Str(required=True, validate=validate.Length(min=1, error="작성자 이름이 필요합니다."))
    user_photo_url = fields.Str(allow_none=True, load_default=None)

    @pre_load
    def strip_text_fields(self, data, **kwargs):
        # 길이 검사는 저장될 값(앞뒤 공백 제거) 기준
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key in ('text', 'user_display_name'):
            if isinstance(cleaned.get(key), str):
                cleaned[key] = cleaned[key].strip()
        return cleaned

    @validates('text')
    def validate_text(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("댓글 내용을 입력해주세요.")

    @validates('user_display_name')
    def validate_display_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("작성자 이름이 필요합니다.")


class CommentResponseSchema(Schema):
    """
    댓글 정보 응답을 위한 최종 JSON 형식을 정의합니다.
    """
    comment_id = fields.Str(required=True)
    post_id = fields.Str(required=True)
    user_id = fields.Str(required=True)
    user_display_name = fields.Str(required=True)
    user_photo_url = fields.Str(allow_none=True)
    text = fields.Str(required=True)
    created_at = fields.DateTime(required=True)


class UserActivityCommentSchema(CommentResponseSchema):
    """프로필 활동 목록용 댓글 응답 (부모 게시글 제목 포함)."""
    post_title = fields.Str(allow_none=True)
    post_slug = fields.Str(allow_none=True)
