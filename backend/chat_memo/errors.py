"""API 错误定义

服务层抛出的所有业务错误都在这里定义，并映射到对应的 HTTP 状态码。
客户端根据响应中的 code 还原为同一套异常类型。
"""
from enum import Enum
from typing import Optional


class ApiErrorCode(str, Enum):
    """错误码"""

    # 认证 (401)
    E_UNAUTHENTICATED = "E_UNAUTHENTICATED"

    # 权限 (403)
    E_FORBIDDEN = "E_FORBIDDEN"
    E_DEFAULT_PROVIDER_FORBIDDEN = "E_DEFAULT_PROVIDER_FORBIDDEN"

    # 不存在 (404)，不区分“不存在”和“不属于当前用户”
    E_NOT_FOUND = "E_NOT_FOUND"

    # 校验 (400)
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_DUPLICATE_NAME = "E_DUPLICATE_NAME"
    E_LIMIT_EXCEEDED = "E_LIMIT_EXCEEDED"

    # 服务端 (500)
    E_INTERNAL = "E_INTERNAL"


ERROR_CODE_TO_STATUS: dict[ApiErrorCode, int] = {
    ApiErrorCode.E_UNAUTHENTICATED: 401,
    ApiErrorCode.E_FORBIDDEN: 403,
    ApiErrorCode.E_DEFAULT_PROVIDER_FORBIDDEN: 403,
    ApiErrorCode.E_NOT_FOUND: 404,
    ApiErrorCode.E_INVALID_REQUEST: 400,
    ApiErrorCode.E_DUPLICATE_NAME: 400,
    ApiErrorCode.E_LIMIT_EXCEEDED: 400,
    ApiErrorCode.E_INTERNAL: 500,
}


class ApiError(Exception):
    """API 错误基类

    Attributes:
        code: 错误码
        message: 可读的错误信息
        status_code: HTTP 状态码（由 code 推导）
    """

    def __init__(self, code: ApiErrorCode, message: str):
        self.code = code
        self.message = message
        self.status_code = ERROR_CODE_TO_STATUS.get(code, 500)
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code.value}


class UnauthenticatedError(ApiError):
    """未认证"""

    def __init__(self, message: str = "未认证或登录已过期"):
        super().__init__(ApiErrorCode.E_UNAUTHENTICATED, message)


class NotFoundError(ApiError):
    """资源不存在（或不属于当前用户）"""

    def __init__(self, message: str = "资源不存在"):
        super().__init__(ApiErrorCode.E_NOT_FOUND, message)


class ForbiddenError(ApiError):
    """无权操作"""

    def __init__(self, message: str = "无权执行该操作", code: ApiErrorCode = ApiErrorCode.E_FORBIDDEN):
        super().__init__(code, message)


class InvalidRequestError(ApiError):
    """校验失败"""

    def __init__(self, message: str = "请求参数无效", code: ApiErrorCode = ApiErrorCode.E_INVALID_REQUEST):
        super().__init__(code, message)


class DuplicateNameError(InvalidRequestError):
    """名称重复"""

    def __init__(self, message: str = "名称已存在"):
        super().__init__(message, ApiErrorCode.E_DUPLICATE_NAME)


class LimitExceededError(InvalidRequestError):
    """超出数量上限"""

    def __init__(self, message: str = "超出数量上限"):
        super().__init__(message, ApiErrorCode.E_LIMIT_EXCEEDED)


class InternalError(ApiError):
    """服务端异常"""

    def __init__(self, message: str = "服务器内部错误"):
        super().__init__(ApiErrorCode.E_INTERNAL, message)


_CODE_TO_CLASS = {
    ApiErrorCode.E_UNAUTHENTICATED: UnauthenticatedError,
    ApiErrorCode.E_NOT_FOUND: NotFoundError,
    ApiErrorCode.E_DUPLICATE_NAME: DuplicateNameError,
    ApiErrorCode.E_LIMIT_EXCEEDED: LimitExceededError,
    ApiErrorCode.E_INTERNAL: InternalError,
}


def error_from_response(status_code: int, payload: Optional[dict]) -> ApiError:
    """根据 HTTP 响应还原错误类型"""
    payload = payload or {}
    detail = payload.get("detail")
    message = detail if isinstance(detail, str) else "请求参数无效"

    try:
        code = ApiErrorCode(payload.get("code"))
    except ValueError:
        code = None

    if code in _CODE_TO_CLASS:
        return _CODE_TO_CLASS[code](message)
    if code is not None and ERROR_CODE_TO_STATUS[code] == 403:
        return ForbiddenError(message, code)
    if code is not None and ERROR_CODE_TO_STATUS[code] == 400:
        return InvalidRequestError(message, code)

    # 没有错误码的响应（如 FastAPI 的 422 校验错误）按状态码归类
    if status_code == 401:
        return UnauthenticatedError(message)
    if status_code == 403:
        return ForbiddenError(message)
    if status_code == 404:
        return NotFoundError(message)
    if status_code in (400, 422):
        return InvalidRequestError(message)
    return InternalError(message)
