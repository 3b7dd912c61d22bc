"""GitHub API interface (port) for fetching starred repositories.

This is the anti-corruption layer that shields the domain from GitHub API specifics.
"""
from abc import ABC, abstractmethod
from starsort.domain.models import StarredPage


class IGitHubClient(ABC):
    """Abstract interface for GitHub API operations."""

    @property
    @abstractmethod
    def authenticated(self) -> bool:
        """Whether requests carry an auth credential."""
        pass

    @abstractmethod
    async def get_starred_page(self, username: str, page: int, per_page: int) -> StarredPage:
        """Fetch one page of a user's starred repositories.

        Args:
            username: GitHub login of the user
            page: 1-based page number
            per_page: Number of items per page (max 100)

        Returns:
            The raw page items and the rate-limit snapshot of the response

        Raises:
            UserNotFoundError: When the user does not exist
            QuotaExhaustedError: When the request was throttled
            ServerError: On 5xx responses
            ApiError: On any other unsuccessful status
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass
