"""Domain models representing core business entities."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator


class Category(str, Enum):
    """Fixed set of categories, in matching priority order."""
    AI = "AI"
    PROGRAMMING = "Programming"
    DESIGN = "Design"
    GAME = "Game"
    UTILITY = "Utility Tools"
    OTHER = "Other"


def _check_http_url(value: str) -> str:
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"not an http(s) URL: {value!r}")
    return value


class StarredRepository(BaseModel):
    """Immutable repository record, validated from one item of a starred page.

    Unknown keys in the API payload are ignored.
    """
    model_config = ConfigDict(frozen=True)

    id: StrictInt
    name: StrictStr
    html_url: StrictStr
    description: Optional[str]
    language: Optional[str]
    topics: List[str] = Field(default_factory=list)
    stargazers_count: Optional[int] = None
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("html_url")
    @classmethod
    def _html_url_is_http(cls, value: str) -> str:
        return _check_http_url(value)


class CategorizedRepository(BaseModel):
    """Repository record as written to the output file."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    url: str
    description: Optional[str]
    language: Optional[str]
    topics: List[str] = Field(default_factory=list)
    category: Category
    stargazers_count: Optional[int] = None

    @field_validator("url")
    @classmethod
    def _url_is_http(cls, value: str) -> str:
        return _check_http_url(value)


@dataclass(frozen=True)
class RateLimitSnapshot:
    """Rate-limit telemetry read from one response's headers."""
    limit: int = 0
    remaining: int = 0
    reset: int = 0

    @classmethod
    def from_headers(cls, headers) -> 'RateLimitSnapshot':
        """Parse the X-RateLimit-* headers, reading missing or bad values as 0."""
        def _int(name: str) -> int:
            try:
                return int(headers.get(name) or 0)
            except (TypeError, ValueError):
                return 0

        return cls(
            limit=_int("X-RateLimit-Limit"),
            remaining=_int("X-RateLimit-Remaining"),
            reset=_int("X-RateLimit-Reset")
        )


@dataclass(frozen=True)
class StarredPage:
    """Raw page of starred repositories as returned by the API."""
    items: list
    rate_limit: RateLimitSnapshot = field(default_factory=RateLimitSnapshot)


@dataclass(frozen=True)
class FetchState:
    """State of one fetch session, replaced after every request attempt."""
    repositories: Tuple[StarredRepository, ...] = ()
    page: int = 1
    failures: int = 0
    has_more: bool = True


@dataclass(frozen=True)
class SortMetrics:
    """Metrics for a sort operation."""
    repositories_fetched: int
    category_counts: Dict[Category, int]
    duration_seconds: float
    output_path: str
