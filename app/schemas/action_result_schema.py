# app/schemas/action_result_schema.py
from marshmallow import Schema, fields

class ActionResultSchema(Schema):
    """변경 액션 결과(ActionResult)를 JSON 으로 직렬화하기 위한 스키마"""
    message = fields.Str(required=True)
    success = fields.Bool(required=True)
    errors = fields.Dict(keys=fields.Str(), values=fields.List(fields.Str()))
    payload = fields.Dict()
    affected_views = fields.List(fields.Str())
    error_code = fields.Function(lambda result: result.error_code.value if result.error_code else None)
