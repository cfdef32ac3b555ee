# app/schemas/fields.py
from marshmallow import fields, ValidationError

from app.utils.text_utils import normalize_tags

class TagList(fields.Field):
    """
    콤마로 구분된 문자열 또는 문자열 목록을 받아 정규화된 태그 목록으로 변환하는 필드.
    (공백 제거, 소문자화, 빈 값 및 중복 제거)
    """
    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, str):
            return normalize_tags(value)
        if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
            return normalize_tags(value)
        raise ValidationError("태그는 콤마로 구분된 문자열 또는 문자열 목록이어야 합니다.")

    def _serialize(self, value, attr, obj, **kwargs):
        return list(value or [])
