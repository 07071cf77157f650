from typing import Any, Optional

__all__ = [
    "PiException",
    "NetworkError",
    "ApiError",
    "AuthError",
    "RefreshError",
]


class PiException(Exception):
    """Base Pi Network client exception"""
    pass


class NetworkError(PiException):
    """Transport failure: no HTTP response was received"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ApiError(PiException):
    """Non-2xx HTTP response other than an unrecoverable 401"""

    def __init__(self, status_code: int, body: Any = None, message: Optional[str] = None):
        super().__init__(message or f"API request failed with status {status_code}")
        self.status_code = status_code
        self.body = body


class AuthError(PiException):
    """Authentication could not be established; the user must log in again"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RefreshError(PiException):
    """The token refresh call itself failed"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
