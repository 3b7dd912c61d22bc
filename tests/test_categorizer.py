"""Tests for keyword based categorization."""
import pytest
from starsort.application.categorizer import CATEGORY_KEYWORDS, categorize, to_categorized
from starsort.domain.models import Category, StarredRepository


def _repo(name="xyz", description=None, language=None, topics=None, stars=None):
    return StarredRepository(
        id=1,
        name=name,
        html_url=f"https://github.com/octocat/{name}",
        description=description,
        language=language,
        topics=topics or [],
        stargazers_count=stars
    )


@pytest.mark.parametrize("repo, expected", [
    (_repo(topics=["machine-learning"]), Category.AI),
    (_repo(name="compiler-book"), Category.PROGRAMMING),
    (_repo(name="Thing", language="Rust"), Category.PROGRAMMING),
    (_repo(name="figma-export"), Category.DESIGN),
    (_repo(name="tetris", topics=["Puzzle"]), Category.GAME),
    (_repo(name="backup"), Category.UTILITY),
    (_repo(name="xyz"), Category.OTHER),
])
def test_categorize(repo, expected):
    """Test each category is reachable from name, language or topics."""
    assert categorize(repo) == expected


def test_dashless_topic_matches_hyphenated_keyword():
    """Test a "computervision" topic matches the "computer-vision" keyword."""
    assert categorize(_repo(name="x", topics=["computervision"])) == Category.AI


def test_earlier_category_wins():
    """Test AI keywords take priority over utility keywords."""
    repo = _repo(name="trainer", description="CLI tool for Machine-Learning")
    assert categorize(repo) == Category.AI


def test_keywords_match_as_substrings():
    """Test keywords match anywhere in the text, not only whole words."""
    assert categorize(_repo(name="email-client")) == Category.AI


def test_keyword_table_covers_all_but_fallback():
    assert list(CATEGORY_KEYWORDS) == [c for c in Category if c is not Category.OTHER]


def test_to_categorized():
    """Test conversion keeps the metadata and adds the category."""
    repo = _repo(name="backup", description="Backups", topics=["storage"], stars=42)

    categorized = to_categorized(repo)

    assert categorized.id == 1
    assert categorized.url == "https://github.com/octocat/backup"
    assert categorized.description == "Backups"
    assert categorized.language is None
    assert categorized.topics == ["storage"]
    assert categorized.category == Category.UTILITY
    assert categorized.stargazers_count == 42
