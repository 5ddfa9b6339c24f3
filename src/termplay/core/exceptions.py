"""Base exception shared by every termplay domain."""

from typing import Optional


class TermplayError(Exception):
    """Error that was handled and only needs to be shown to the user.

    May carry the underlying exception that caused it; it is appended to the
    message when rendered.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"
