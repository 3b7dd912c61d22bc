"""Tests for domain models."""
import pytest
from pydantic import ValidationError
from starsort.domain.models import FetchState, RateLimitSnapshot, StarredRepository


def _payload(**overrides):
    payload = {
        "id": 1296269,
        "name": "Hello-World",
        "full_name": "octocat/Hello-World",
        "html_url": "https://github.com/octocat/Hello-World",
        "description": "This your first repo!",
        "language": None,
        "topics": ["octocat", "api"],
        "stargazers_count": 80,
        "created_at": "2011-01-26T19:01:12Z",
        "updated_at": "2011-01-26T19:14:43Z",
        "owner": {"login": "octocat"},
    }
    payload.update(overrides)
    return payload


def test_repository_from_api_payload():
    """Test validating a starred repository item, ignoring unknown keys."""
    repo = StarredRepository.model_validate(_payload())

    assert repo.id == 1296269
    assert repo.name == "Hello-World"
    assert repo.html_url == "https://github.com/octocat/Hello-World"
    assert repo.language is None
    assert repo.topics == ["octocat", "api"]
    assert repo.created_at.year == 2011


def test_repository_optional_fields():
    """Test topics, star count and timestamps may be missing."""
    payload = _payload()
    for key in ("topics", "stargazers_count", "full_name", "created_at", "updated_at"):
        del payload[key]

    repo = StarredRepository.model_validate(payload)

    assert repo.topics == []
    assert repo.stargazers_count is None


@pytest.mark.parametrize("overrides", [
    {"id": "1296269"},
    {"name": None},
    {"html_url": "not a url"},
    {"topics": "octocat"},
    {"created_at": "yesterday"},
])
def test_repository_rejects_invalid_payload(overrides):
    with pytest.raises(ValidationError):
        StarredRepository.model_validate(_payload(**overrides))


def test_repository_requires_nullable_keys():
    """Test description and language must be present even though they may be null."""
    payload = _payload()
    del payload["description"]

    with pytest.raises(ValidationError):
        StarredRepository.model_validate(payload)


def test_repository_is_immutable():
    repo = StarredRepository.model_validate(_payload())

    with pytest.raises(ValidationError):
        repo.name = "changed"


def test_rate_limit_from_headers():
    snapshot = RateLimitSnapshot.from_headers({
        "X-RateLimit-Limit": "60",
        "X-RateLimit-Remaining": "12",
        "X-RateLimit-Reset": "1700000000",
    })

    assert snapshot == RateLimitSnapshot(limit=60, remaining=12, reset=1700000000)


def test_rate_limit_defaults_to_zero():
    """Test missing or malformed headers read as 0."""
    snapshot = RateLimitSnapshot.from_headers({"X-RateLimit-Remaining": "lots"})

    assert snapshot == RateLimitSnapshot(limit=0, remaining=0, reset=0)


def test_fetch_state_initial_values():
    state = FetchState()

    assert state.repositories == ()
    assert state.page == 1
    assert state.failures == 0
    assert state.has_more is True
