from enum import Enum

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Optional


class SendStatus(str, Enum):
    """The outcome of an attempt to send an event."""

    UNKNOWN = "unknown"
    SKIPPED = "skipped"
    SUCCESS = "success"
    RATE_LIMIT = "rate_limit"
    INVALID = "invalid"
    FAILED = "failed"

    def __str__(self):
        # type: () -> str
        return self.value

    @classmethod
    def from_http_code(cls, code):
        # type: (Optional[int]) -> SendStatus
        """Classifies the HTTP status code returned by a backend."""
        if code is None:
            return cls.UNKNOWN

        if 200 <= code < 300:
            return cls.SUCCESS

        if code == 429:
            return cls.RATE_LIMIT

        if 400 <= code < 500:
            return cls.INVALID

        if code >= 500:
            return cls.FAILED

        return cls.UNKNOWN
