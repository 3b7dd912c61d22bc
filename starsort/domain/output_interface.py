"""Output writer interface (port) for persisting categorized repositories.

This is the port in hexagonal architecture that the infrastructure layer implements.
"""
from abc import ABC, abstractmethod
from typing import Sequence
from starsort.domain.models import CategorizedRepository


class IOutputWriter(ABC):
    """Abstract interface for categorized output storage."""

    @abstractmethod
    def write(self, repositories: Sequence[CategorizedRepository], path: str) -> None:
        """Group repositories by category and persist them.

        Args:
            repositories: Categorized repositories, in fetch order
            path: Destination of the output

        Raises:
            OutputWriteError: When the output cannot be validated or written
        """
        pass
