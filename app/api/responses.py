# app/api/responses.py
from flask import jsonify

from app.models.action_result import ActionResult, ActionErrorCode
from app.schemas.action_result_schema import ActionResultSchema

STATUS_BY_ERROR_CODE = {
    ActionErrorCode.VALIDATION_ERROR: 400,
    ActionErrorCode.FORBIDDEN: 403,
    ActionErrorCode.NOT_FOUND: 404,
    ActionErrorCode.SLUG_EXHAUSTED: 409,
    ActionErrorCode.SERVICE_UNAVAILABLE: 503,
    ActionErrorCode.STORE_ERROR: 500,
}


def action_response(result: ActionResult, success_status: int = 200):
    """ActionResult 를 (JSON, 상태 코드) 응답으로 변환합니다."""
    status = success_status if result.success else STATUS_BY_ERROR_CODE.get(result.error_code, 500)
    return jsonify(ActionResultSchema().dump(result)), status
