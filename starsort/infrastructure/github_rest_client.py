"""GitHub REST API client implementation with optional transport-level retry logic."""
import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple
from urllib.parse import quote
import aiohttp
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)
from starsort.domain.errors import (
    ApiError,
    QuotaExhaustedError,
    ServerError,
    UserNotFoundError
)
from starsort.domain.github_interface import IGitHubClient
from starsort.domain.models import RateLimitSnapshot, StarredPage


logger = logging.getLogger(__name__)


class GitHubRestClient(IGitHubClient):
    """GitHub REST API client.

    Implements the IGitHubClient port, providing an anti-corruption layer
    between the domain and GitHub's API. HTTP statuses are translated into
    the domain error taxonomy; pacing and page-level retries are left to
    the caller. Dropped connections and timeouts propagate on the first
    failure unless transport_attempts allows more tries.
    """

    DEFAULT_API_URL = "https://api.github.com"
    MEDIA_TYPE = "application/vnd.github.v3+json"

    def __init__(
        self,
        access_token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport_attempts: int = 1,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """Initialize GitHub client.

        Args:
            access_token: GitHub personal access token (optional, raises the rate limit)
            api_url: Base URL of the REST API
            timeout: Total timeout of a single request in seconds
            transport_attempts: Tries per request on connection errors and timeouts
            sleep: Coroutine function used for the backoff between tries
        """
        self._access_token = access_token
        self._api_url = api_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None
        self._transport_attempts = max(transport_attempts, 1)
        self._sleep = sleep

    @property
    def authenticated(self) -> bool:
        return bool(self._access_token)

    async def _init_session(self) -> aiohttp.ClientSession:
        """Initialize the HTTP session (lazy initialization)."""
        if self._session is None:
            headers = {"Accept": self.MEDIA_TYPE}
            if self._access_token:
                headers["Authorization"] = f"Bearer {self._access_token}"
            self._session = aiohttp.ClientSession(headers=headers, timeout=self._timeout)
        return self._session

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Tuple[int, Any, Any]:
        """Issue a GET request, retrying dropped connections up to transport_attempts times.

        Returns:
            Status code, response headers and the decoded JSON body (None if not JSON)
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception_type((aiohttp.ClientConnectionError, asyncio.TimeoutError)),
            stop=stop_after_attempt(self._transport_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            sleep=self._sleep,
            reraise=True
        )
        async for attempt in retrying:
            with attempt:
                result = await self._request(path, params)
        return result

    async def _request(self, path: str, params: Optional[Dict[str, Any]]) -> Tuple[int, Any, Any]:
        session = await self._init_session()
        url = f"{self._api_url}{path}"

        async with session.get(url, params=params) as response:
            text = await response.text()
            try:
                payload = json.loads(text) if text else None
            except ValueError:
                payload = None
            return response.status, response.headers, payload

    @staticmethod
    def _raise_for_status(
        status: int,
        payload: Any,
        rate_limit: RateLimitSnapshot,
        username: Optional[str] = None
    ) -> None:
        """Translate an unsuccessful status into a domain error."""
        if status < 400:
            return

        message = payload.get("message", "") if isinstance(payload, dict) else ""

        if status == 404 and username is not None:
            raise UserNotFoundError(username)
        if status in (403, 429):
            raise QuotaExhaustedError(rate_limit)
        if status >= 500:
            raise ServerError(status, message)
        raise ApiError(status, message)

    async def get_starred_page(self, username: str, page: int, per_page: int) -> StarredPage:
        """Fetch one page of a user's starred repositories.

        Args:
            username: GitHub login of the user
            page: 1-based page number
            per_page: Number of items per page (max 100)

        Returns:
            StarredPage with the raw items and the rate-limit snapshot
        """
        status, headers, payload = await self._get(
            f"/users/{quote(username, safe='')}/starred",
            params={"per_page": min(per_page, 100), "page": page}
        )
        rate_limit = RateLimitSnapshot.from_headers(headers)

        logger.debug(
            f"GET starred page {page}: status {status}, "
            f"rate limit remaining {rate_limit.remaining}/{rate_limit.limit}"
        )

        self._raise_for_status(status, payload, rate_limit, username)
        return StarredPage(items=payload, rate_limit=rate_limit)

    async def get_rate_limit(self) -> RateLimitSnapshot:
        """Fetch the current core rate limit status.

        This request does not count against the quota.
        """
        status, headers, payload = await self._get("/rate_limit")
        self._raise_for_status(status, payload, RateLimitSnapshot.from_headers(headers))

        rate = payload.get("rate") if isinstance(payload, dict) else None
        if not isinstance(rate, dict):
            rate = {}
        return RateLimitSnapshot(
            limit=int(rate.get("limit", 0)),
            remaining=int(rate.get("remaining", 0)),
            reset=int(rate.get("reset", 0))
        )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
