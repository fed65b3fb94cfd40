"""
core/errors.py -- Error taxonomy for the ranking pipeline.

Every error a caller can see carries its HTTP status and the exact message
returned in the {"success": false, "error": ...} envelope. api/main.py
registers a single exception handler for RankingAPIError, so route code and
auth dependencies raise these instead of building responses by hand.

All errors are terminal for the current request. Nothing here is retried.
"""

from typing import Optional

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class RankingAPIError(Exception):
    """Base class: an error with a fixed HTTP status and client-facing message."""

    status_code = 500
    default_message = UNKNOWN_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingApiKey(RankingAPIError):
    status_code = 401
    default_message = "API key is missing."


class InvalidApiKey(RankingAPIError):
    status_code = 403
    default_message = "Invalid API key."


class MissingParameter(RankingAPIError):
    status_code = 400
    default_message = "Missing 'userId' (as username) or 'rankId'."


class InvalidRankValue(RankingAPIError):
    status_code = 400
    default_message = "Invalid 'rankId'. Must be a number between 0 and 255."


class UpstreamFailure(RankingAPIError):
    """Wraps any failure from username resolution or the rank-set call.

    The message is the upstream error's own text, falling back to the generic
    unknown-error message when the upstream error has none. The original
    exception is chained as __cause__ for server-side logging.
    """

    status_code = 500

    @classmethod
    def from_exception(cls, exc: BaseException) -> "UpstreamFailure":
        failure = cls(str(exc) or None)
        failure.__cause__ = exc
        return failure


class RobloxAPIError(Exception):
    """Raised by core.roblox.RobloxClient for any upstream or network failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
