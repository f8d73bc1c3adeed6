from typing import Any

from fastapi import HTTPException, status


class ApiError(HTTPException):
    """HTTP error rendered as {"error": detail, **context} by the app's exception handler."""

    def __init__(self, status_code: int, message: str, **context: Any):
        super().__init__(status_code=status_code, detail=message)
        self.context = context

    def to_content(self) -> dict[str, Any]:
        return {"error": self.detail, **self.context}


class ProfileStoreError(Exception):
    """Profile store read or write failed."""

    def __init__(self, detail: str, code: str | None = None):
        super().__init__(detail)
        self.detail = detail
        self.code = code


class PushSendError(Exception):
    """Push delivery failed; code is the provider's error code when it reported one."""

    def __init__(self, detail: str, code: str | None = None):
        super().__init__(detail)
        self.detail = detail
        self.code = code


class InvalidTokenError(PushSendError):
    """The device token is no longer registered. Never retried; the client must re-register."""

    code_name = "TOKEN_INVALID"

    def __init__(self, detail: str = "Device token is not registered"):
        super().__init__(detail, code=self.code_name)


class AppException:
    """Class-based raisers for the HTTP status codes the relay returns."""

    @staticmethod
    def raise_400(message: str = "Bad Request", **context: Any):
        """Raise a 400 Bad Request error."""
        raise ApiError(status.HTTP_400_BAD_REQUEST, message, **context)

    @staticmethod
    def raise_404(message: str = "Not Found", **context: Any):
        """Raise a 404 Not Found error."""
        raise ApiError(status.HTTP_404_NOT_FOUND, message, **context)

    @staticmethod
    def raise_500(message: str = "Internal Server Error", **context: Any):
        """Raise a 500 Internal Server Error."""
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, message, **context)
