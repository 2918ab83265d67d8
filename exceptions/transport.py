"""
Remote API transport exceptions.
"""

from .base import StorefrontException


class TransportException(StorefrontException):
    """
    Raised when a call to the remote order API fails.

    Distinct from validation errors: the request never produced a usable
    response (connection error, timeout, non-2xx status, malformed body).
    """

    def __init__(self, operation: str, reason: str, status_code: int | None = None):
        super().__init__(
            f"Remote {operation} failed: {reason}",
            details={'operation': operation, 'reason': reason, 'status_code': status_code}
        )
        self.operation = operation
        self.reason = reason
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        # 4xx other than timeout/throttling means the request itself was rejected
        if self.status_code is None:
            return True
        return self.status_code >= 500 or self.status_code in (408, 429)
