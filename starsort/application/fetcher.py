"""Paginated fetcher for starred repositories with rate-limit aware retries."""
import asyncio
import logging
import math
import time
from dataclasses import replace
from datetime import datetime
from typing import Awaitable, Callable, List, Optional
from pydantic import TypeAdapter, ValidationError
from starsort.domain.errors import (
    DataValidationError,
    QuotaExhaustedError,
    RateLimitExceededError,
    ServerError
)
from starsort.domain.github_interface import IGitHubClient
from starsort.domain.models import FetchState, RateLimitSnapshot, StarredRepository


logger = logging.getLogger(__name__)

_PAGE_ADAPTER = TypeAdapter(List[StarredRepository])


class StarredFetcher:
    """Fetches every page of a user's starred repositories.

    Pages are requested one at a time, in increasing order. Each request attempt
    is one call to :meth:`step`, which takes a :class:`FetchState` and returns the
    next one, so the loop can be driven and inspected attempt by attempt.

    Throttling and server errors are retried on the same page up to
    ``max_retries`` consecutive failures; once the budget is spent the
    repositories gathered so far are returned. Unauthenticated clients are
    never retried on throttling since waiting would not help them.
    """

    PER_PAGE = 100  # GitHub max

    def __init__(
        self,
        client: IGitHubClient,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
        max_retries: int = 3,
        page_delay: float = 1.0,
        server_retry_base: float = 2.0,
        low_quota_threshold: int = 10,
        low_quota_step: float = 1.0,
        low_quota_max_delay: float = 5.0,
        reset_wait_cap: float = 3600.0,
        default_reset_window: float = 3600.0,
        reset_buffer: float = 1.0
    ):
        """Initialize fetcher.

        Args:
            client: GitHub API client implementation
            sleep: Coroutine function used for every wait
            clock: Returns the current time in epoch seconds
            max_retries: Consecutive retryable failures that end pagination
            page_delay: Courtesy delay before every page after the first
            server_retry_base: Backoff unit for server errors (linear)
            low_quota_threshold: Remaining quota at or below which requests slow down
            low_quota_step: Extra delay per request below the threshold
            low_quota_max_delay: Cap for the low-quota delay
            reset_wait_cap: Longest acceptable wait for a quota reset
            default_reset_window: Assumed wait when the reset time is unknown
            reset_buffer: Added to every quota reset wait
        """
        self._client = client
        self._sleep = sleep
        self._clock = clock
        self._max_retries = max_retries
        self._page_delay = page_delay
        self._server_retry_base = server_retry_base
        self._low_quota_threshold = low_quota_threshold
        self._low_quota_step = low_quota_step
        self._low_quota_max_delay = low_quota_max_delay
        self._reset_wait_cap = reset_wait_cap
        self._default_reset_window = default_reset_window
        self._reset_buffer = reset_buffer

    async def fetch(self, username: str, page_limit: Optional[int] = None) -> List[StarredRepository]:
        """Fetch all starred repositories of a user.

        Args:
            username: GitHub login of the user
            page_limit: Maximum number of pages to fetch, None for no limit

        Returns:
            Repositories in the order the API returned them

        Raises:
            UserNotFoundError: When the user does not exist
            DataValidationError: When a page does not match the repository schema
            RateLimitExceededError: When the quota reset is already past or too far away to wait for
            ApiError: On any other unsuccessful HTTP status
        """
        if not username:
            raise ValueError("username must not be empty")

        logger.info(f"Starting to fetch starred repositories of {username}")

        state = FetchState(has_more=page_limit is None or page_limit >= 1)
        while state.has_more:
            state = await self.step(username, state, page_limit)

        logger.info(f"Successfully fetched {len(state.repositories)} repositories")
        return list(state.repositories)

    async def step(
        self,
        username: str,
        state: FetchState,
        page_limit: Optional[int] = None
    ) -> FetchState:
        """Perform a single request attempt for ``state.page``.

        Returns:
            The state after the attempt; ``has_more`` is False once pagination is over
        """
        if state.page > 1:
            await self._sleep(self._page_delay)

        logger.info(f"Fetching page {state.page} of starred repositories...")

        try:
            page = await self._client.get_starred_page(username, state.page, self.PER_PAGE)
        except QuotaExhaustedError as e:
            return await self._on_quota_exhausted(state, e)
        except ServerError as e:
            return await self._on_server_error(state, e)

        await self._slow_down_if_needed(page.rate_limit)

        repositories = self._validate(page.items)
        if not repositories:
            logger.info("No more repositories found.")
            return replace(state, has_more=False)

        accumulated = state.repositories + tuple(repositories)
        next_page = state.page + 1
        logger.info(
            f"Fetched page {state.page} with {len(repositories)} repositories. "
            f"Total: {len(accumulated)}"
        )

        has_more = page_limit is None or next_page <= page_limit
        if not has_more:
            logger.info(f"Reached maximum number of pages ({page_limit}). Stopping.")

        return FetchState(
            repositories=accumulated,
            page=next_page,
            failures=0,
            has_more=has_more
        )

    def _validate(self, items) -> List[StarredRepository]:
        try:
            return _PAGE_ADAPTER.validate_python(items)
        except ValidationError as e:
            raise DataValidationError(f"Data validation error: {e}") from e

    async def _slow_down_if_needed(self, rate_limit: RateLimitSnapshot) -> None:
        """Pace the next request when the remaining quota is nearly exhausted."""
        remaining = rate_limit.remaining
        if not 0 < remaining <= self._low_quota_threshold:
            return

        logger.warning(
            f"Rate limit almost reached ({remaining}/{rate_limit.limit} remaining). "
            f"Resets at {_format_reset(rate_limit.reset)}"
        )
        delay = min(
            self._low_quota_max_delay,
            (self._low_quota_threshold - remaining) * self._low_quota_step
        )
        if delay > 0:
            logger.info(f"Slowing down requests. Waiting {delay:.1f} seconds before next request...")
            await self._sleep(delay)

    async def _on_quota_exhausted(self, state: FetchState, error: QuotaExhaustedError) -> FetchState:
        reset = error.rate_limit.reset

        if not self._client.authenticated:
            logger.warning(f"Rate limit exceeded. Limit will reset at {_format_reset(reset)}.")
            logger.warning("Without a token, only a limited number of repositories can be fetched.")
            logger.warning("For better results, provide a GitHub token with --token.")
            return replace(state, has_more=False)

        failures = state.failures + 1
        if failures >= self._max_retries:
            logger.error("Maximum retry count exceeded. Stopping.")
            return replace(state, failures=failures, has_more=False)

        wait = reset - self._clock() if reset else self._default_reset_window
        if not 0 < wait < self._reset_wait_cap:
            raise RateLimitExceededError(
                f"Rate limit exceeded. Limit will reset at {_format_reset(reset)}."
            ) from error

        logger.warning(f"Rate limit exceeded. Waiting {math.ceil(wait)} seconds until reset...")
        await self._sleep(wait + self._reset_buffer)
        return replace(state, failures=failures)

    async def _on_server_error(self, state: FetchState, error: ServerError) -> FetchState:
        logger.error(str(error))

        failures = state.failures + 1
        if failures >= self._max_retries:
            logger.error("Maximum retry count exceeded. Stopping.")
            return replace(state, failures=failures, has_more=False)

        delay = failures * self._server_retry_base
        logger.info(
            f"Retrying in {delay:.0f} seconds... "
            f"(Attempt {failures} of {self._max_retries})"
        )
        await self._sleep(delay)
        return replace(state, failures=failures)


def _format_reset(reset: int) -> str:
    if not reset:
        return "unknown time"
    return datetime.fromtimestamp(reset).strftime("%Y-%m-%d %H:%M:%S")
