"""Tests for command-line parsing and settings resolution."""
import pytest
import sort_stars
from starsort.domain.errors import UserNotFoundError
from starsort.domain.models import StarredPage
from test_fetcher import FakeGitHubClient


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GITHUB_TOKEN", "GITHUB_API_URL", "STARSORT_MAX_PAGES", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_missing_username_exits_with_usage(capsys):
    with pytest.raises(SystemExit) as exc_info:
        sort_stars.parse_args([])

    assert exc_info.value.code != 0
    assert "--username" in capsys.readouterr().err


def test_defaults_without_token_limit_pages():
    settings = sort_stars.load_settings(sort_stars.parse_args(["--username", "octocat"]))

    assert settings.username == "octocat"
    assert settings.token is None
    assert settings.output == "./output.json"
    assert settings.page_limit == sort_stars.UNAUTHENTICATED_PAGE_LIMIT
    assert settings.api_url == "https://api.github.com"
    assert settings.log_level == "INFO"


def test_token_removes_page_limit():
    args = sort_stars.parse_args(["--username", "octocat", "--token", "secret", "--output", "out/x.json"])

    settings = sort_stars.load_settings(args)

    assert settings.token == "secret"
    assert settings.page_limit is None
    assert settings.output == "out/x.json"


def test_environment_fallbacks(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "from-env")
    monkeypatch.setenv("STARSORT_MAX_PAGES", "5")
    monkeypatch.setenv("GITHUB_API_URL", "http://localhost:8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = sort_stars.load_settings(sort_stars.parse_args(["--username", "octocat"]))

    assert settings.token == "from-env"
    assert settings.page_limit == 5
    assert settings.api_url == "http://localhost:8080"
    assert settings.log_level == "DEBUG"


def test_max_pages_flag_wins():
    args = sort_stars.parse_args(["--username", "octocat", "--max-pages", "1"])

    assert sort_stars.load_settings(args).page_limit == 1


def test_invalid_max_pages_env_is_a_usage_error(monkeypatch, capsys):
    monkeypatch.setenv("STARSORT_MAX_PAGES", "many")

    with pytest.raises(SystemExit) as exc_info:
        sort_stars.parse_args(["--username", "octocat"])

    assert exc_info.value.code != 0
    assert "--max-pages" in capsys.readouterr().err


def _patch_client(monkeypatch, responses):
    client = FakeGitHubClient(responses)
    monkeypatch.setattr(sort_stars, "GitHubRestClient", lambda token, api_url: client)
    return client


@pytest.mark.asyncio
async def test_main_writes_output_and_returns_zero(monkeypatch, tmp_path):
    item = {
        "id": 7,
        "name": "backup",
        "html_url": "https://github.com/octocat/backup",
        "description": None,
        "language": None,
    }
    client = _patch_client(monkeypatch, [StarredPage(items=[item])])
    output = tmp_path / "output.json"

    code = await sort_stars.main(["--username", "octocat", "--output", str(output), "--max-pages", "1"])

    assert code == 0
    assert output.exists()
    assert client.closed is True


@pytest.mark.asyncio
async def test_main_returns_one_on_fatal_error(monkeypatch, tmp_path):
    client = _patch_client(monkeypatch, [UserNotFoundError("ghost")])

    code = await sort_stars.main(["--username", "ghost", "--output", str(tmp_path / "o.json")])

    assert code == 1
    assert client.closed is True
