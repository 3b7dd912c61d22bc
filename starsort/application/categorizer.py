"""Keyword based categorization of starred repositories."""
from typing import Dict, List
from starsort.domain.models import CategorizedRepository, Category, StarredRepository


# Checked in insertion order; the first matching keyword wins
CATEGORY_KEYWORDS: Dict[Category, List[str]] = {
    Category.AI: [
        "ai", "artificial-intelligence", "machine-learning", "ml", "deep-learning",
        "neural-network", "nlp", "natural-language-processing", "gpt", "llm",
        "large-language-model", "openai", "tensorflow", "pytorch", "huggingface",
        "transformers", "bert", "chatbot", "computer-vision", "cv",
    ],
    Category.PROGRAMMING: [
        "programming", "language", "compiler", "interpreter", "framework",
        "library", "sdk", "api", "backend", "frontend", "fullstack",
        "web-development", "mobile-development", "development", "coding",
        "algorithm", "data-structure", "database", "sql", "nosql", "javascript",
        "typescript", "python", "java", "rust", "go", "c++", "c#", "php", "ruby",
    ],
    Category.DESIGN: [
        "design", "ui", "ux", "user-interface", "user-experience", "graphic",
        "css", "animation", "illustration", "figma", "sketch", "adobe",
        "photoshop", "illustrator", "typography", "color", "layout",
        "responsive", "web-design", "mobile-design",
    ],
    Category.GAME: [
        "game", "gaming", "gamedev", "game-development", "unity", "unreal",
        "godot", "engine", "game-engine", "3d", "2d", "arcade", "rpg", "fps",
        "mmorpg", "puzzle", "strategy", "simulation", "vr", "ar",
        "virtual-reality", "augmented-reality",
    ],
    Category.UTILITY: [
        "utility", "tool", "cli", "command-line", "automation", "productivity",
        "workflow", "devops", "ci-cd", "continuous-integration", "deployment",
        "monitoring", "logging", "testing", "security", "backup", "converter",
        "formatter", "linter", "analyzer",
    ],
}


def _matches(keyword: str, text: str, topics: List[str]) -> bool:
    if keyword in text or keyword in topics:
        return True
    # "machine-learning" also matches a "machinelearning" topic
    return "-" in keyword and keyword.replace("-", "") in topics


def categorize(repo: StarredRepository) -> Category:
    """Return the category of the first keyword found in the repository metadata."""
    topics = [topic.lower() for topic in repo.topics]
    text = " ".join([
        (repo.description or "").lower(),
        (repo.language or "").lower(),
        repo.name.lower(),
        " ".join(topics)
    ])

    for category, keywords in CATEGORY_KEYWORDS.items():
        for keyword in keywords:
            if _matches(keyword, text, topics):
                return category

    return Category.OTHER


def to_categorized(repo: StarredRepository) -> CategorizedRepository:
    """Convert a fetched repository to its output record."""
    return CategorizedRepository(
        id=repo.id,
        name=repo.name,
        url=repo.html_url,
        description=repo.description,
        language=repo.language,
        topics=list(repo.topics),
        category=categorize(repo),
        stargazers_count=repo.stargazers_count
    )
