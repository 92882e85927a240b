"""Client-side exception taxonomy"""

from typing import Dict, List


class MySanviError(Exception):
    """Base exception for the client core"""

    pass


class NetworkError(MySanviError):
    """No response was received (connection failure, timeout)"""

    pass


class HttpError(MySanviError):
    """Backend answered with a non-2xx status"""

    def __init__(self, status: int, message: str):
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message


class AuthenticationRequired(MySanviError):
    """Operation attempted without a valid credential"""

    pass


class ValidationError(MySanviError):
    """Client-side form check failed before any network call"""

    def __init__(self, message: str, errors: Dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    @property
    def fields(self) -> List[str]:
        return sorted(self.errors)


class DecodeError(MySanviError):
    """Response body did not match the expected shape"""

    pass
