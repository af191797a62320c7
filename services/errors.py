# services/errors.py


class ServiceError(Exception):
    """Base for failures that map onto an HTTP status and a public message."""

    status_code = 500
    error = "伺服器內部錯誤"

    def __init__(self, message: str = "請稍後再試", error: str = None):
        super().__init__(message)
        self.message = message
        if error:
            self.error = error

    def to_dict(self) -> dict:
        return {"success": False, "error": self.error, "message": self.message}


class ValidationError(ServiceError):
    status_code = 400
    error = "缺少必要參數"


class Unauthorized(ServiceError):
    status_code = 401
    error = "未授權的請求"


class Forbidden(ServiceError):
    status_code = 403
    error = "權限不足"


class NotFound(ServiceError):
    status_code = 404
    error = "找不到資料"


class InternalError(ServiceError):
    status_code = 500
