"""Error taxonomy for fetching starred repositories and writing the output."""
from typing import Optional
from starsort.domain.models import RateLimitSnapshot


class FetchError(Exception):
    """Base class for errors raised while fetching starred repositories."""
    pass


class UserNotFoundError(FetchError):
    """Raised when the target user does not exist."""

    def __init__(self, username: str):
        super().__init__(f"User {username} not found")
        self.username = username


class QuotaExhaustedError(FetchError):
    """Raised by the client when the API refuses a request due to rate limiting."""

    def __init__(self, rate_limit: Optional[RateLimitSnapshot] = None):
        self.rate_limit = rate_limit or RateLimitSnapshot()
        super().__init__("Rate limit exceeded")


class ServerError(FetchError):
    """Raised by the client for 5xx responses."""

    def __init__(self, status: int, message: str = ""):
        super().__init__(f"GitHub API error: {message or 'server error'} (Status: {status})")
        self.status = status


class ApiError(FetchError):
    """Raised by the client for any other unsuccessful HTTP status."""

    def __init__(self, status: int, message: str = ""):
        super().__init__(f"GitHub API error: {message or 'request failed'} (Status: {status})")
        self.status = status


class RateLimitExceededError(FetchError):
    """Raised when waiting for the quota reset would exceed the wait cap."""
    pass


class DataValidationError(FetchError):
    """Raised when a page payload does not match the repository schema."""
    pass


class OutputWriteError(Exception):
    """Raised when the categorized output cannot be written."""
    pass
