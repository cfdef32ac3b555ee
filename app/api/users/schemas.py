# app/api/users/schemas.py
from marshmallow import Schema, fields, validate, validates, pre_load, ValidationError, EXCLUDE

from app.models.user import SOCIAL_LINK_KINDS
from app.schemas.fields import TagList

OPTIONAL_TEXT_FIELDS = ('username', 'bio', 'photo_url') + SOCIAL_LINK_KINDS


class UserProfileUpdateSchema(Schema):
    """
    PUT /api/users/me/profile
    프로필 수정 폼의 유효성을 검사합니다. 빈 문자열로 보낸 선택 항목은 값이 없는 것으로 취급합니다.
    """
    class Meta:
        unknown = EXCLUDE

    display_name = fields.Str(required=True, validate=validate.Length(min=1, error="표시 이름은 비워둘 수 없습니다."))
    username = fields.Str(validate=[
        validate.Length(min=3, error="사용자 이름은 3자 이상이어야 합니다."),
        validate.Regexp(r'^[A-Za-z0-9_.]+$', error="사용자 이름에는 영문, 숫자, 밑줄(_), 마침표(.)만 사용할 수 있습니다."),
    ])
    bio = fields.Str(validate=validate.Length(max=600, error="소개는 600자를 넘을 수 없습니다."))
    photo_url = fields.URL(error_messages={"invalid": "프로필 사진 URL 형식이 올바르지 않습니다."})
    twitter = fields.URL(error_messages={"invalid": "Twitter URL 형식이 올바르지 않습니다."})
    linkedin = fields.URL(error_messages={"invalid": "LinkedIn URL 형식이 올바르지 않습니다."})
    instagram = fields.URL(error_messages={"invalid": "Instagram URL 형식이 올바르지 않습니다."})
    portfolio = fields.URL(error_messages={"invalid": "Portfolio URL 형식이 올바르지 않습니다."})
    github = fields.URL(error_messages={"invalid": "GitHub URL 형식이 올바르지 않습니다."})
    interests = TagList(load_default=list)

    @pre_load
    def drop_blank_optionals(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key in OPTIONAL_TEXT_FIELDS:
            value = cleaned.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                cleaned.pop(key, None)
        return cleaned

    @validates('display_name')
    def validate_display_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("표시 이름은 비워둘 수 없습니다.")


class UserProfileResponseSchema(Schema):
    """GET /api/users/{user_id}/profile 응답 스키마."""
    uid = fields.Str(required=True, dump_only=True)
    display_name = fields.Str(allow_none=True)
    username = fields.Str(allow_none=True)
    bio = fields.Str(allow_none=True)
    photo_url = fields.Str(allow_none=True)
    social_links = fields.Dict(keys=fields.Str(), values=fields.Str())
    interests = fields.List(fields.Str())
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
