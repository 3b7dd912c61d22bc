"""JSON file implementation of the output writer."""
import json
import logging
from pathlib import Path
from typing import Dict, List, Sequence
from pydantic import TypeAdapter
from starsort.domain.errors import OutputWriteError
from starsort.domain.models import CategorizedRepository, Category
from starsort.domain.output_interface import IOutputWriter


logger = logging.getLogger(__name__)

_OUTPUT_ADAPTER = TypeAdapter(Dict[Category, List[CategorizedRepository]])


class JsonFileWriter(IOutputWriter):
    """Writes categorized repositories to a JSON file, grouped by category.

    The file always holds one array per category, in Category order, even
    when a category is empty.
    """

    def __init__(self, indent: int = 2):
        self._indent = indent

    @staticmethod
    def group(repositories: Sequence[CategorizedRepository]) -> Dict[Category, List[CategorizedRepository]]:
        """Group repositories by category, preserving their order."""
        grouped: Dict[Category, List[CategorizedRepository]] = {category: [] for category in Category}
        for repo in repositories:
            grouped[repo.category].append(repo)
        return grouped

    @staticmethod
    def _serialize(repo: CategorizedRepository) -> dict:
        exclude = {"stargazers_count"} if repo.stargazers_count is None else None
        return repo.model_dump(mode="json", exclude=exclude)

    def write(self, repositories: Sequence[CategorizedRepository], path: str) -> None:
        """Group repositories by category and write them as JSON.

        Args:
            repositories: Categorized repositories, in fetch order
            path: Destination file; missing parent directories are created
        """
        try:
            grouped = _OUTPUT_ADAPTER.validate_python(self.group(repositories))
            output = {
                category.value: [self._serialize(repo) for repo in grouped[category]]
                for category in Category
            }

            destination = Path(path)
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(
                json.dumps(output, indent=self._indent, ensure_ascii=False),
                encoding="utf-8"
            )
        except Exception as e:
            raise OutputWriteError(f"Failed to write output: {e}") from e

        logger.info(f"Output written to {path}")
