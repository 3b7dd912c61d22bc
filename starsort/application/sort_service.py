"""Sort service orchestrating the fetch, categorize and write operation."""
import logging
import time
from collections import Counter
from typing import Optional
from starsort.application.categorizer import to_categorized
from starsort.application.fetcher import StarredFetcher
from starsort.domain.github_interface import IGitHubClient
from starsort.domain.output_interface import IOutputWriter
from starsort.domain.models import Category, SortMetrics


logger = logging.getLogger(__name__)


class SortService:
    """Application service for sorting a user's starred repositories.

    Orchestrates the interaction between the GitHub API and the output writer.
    Follows single responsibility principle - only coordinates the operation.
    """

    def __init__(
        self,
        github_client: IGitHubClient,
        writer: IOutputWriter,
        fetcher: Optional[StarredFetcher] = None
    ):
        """Initialize sort service.

        Args:
            github_client: GitHub API client implementation
            writer: Output writer implementation
            fetcher: Paginated fetcher, built around github_client when omitted
        """
        self._github_client = github_client
        self._writer = writer
        self._fetcher = fetcher or StarredFetcher(github_client)

    async def run(
        self,
        username: str,
        output_path: str,
        page_limit: Optional[int] = None
    ) -> SortMetrics:
        """Fetch, categorize and write the starred repositories of a user.

        Args:
            username: GitHub login of the user
            output_path: Destination of the categorized output
            page_limit: Maximum number of pages to fetch, None for no limit

        Returns:
            SortMetrics with operation statistics
        """
        start_time = time.time()

        logger.info(f"Fetching starred repositories for user: {username}")
        repositories = await self._fetcher.fetch(username, page_limit)
        logger.info(f"Found {len(repositories)} starred repositories")

        logger.info("Categorizing repositories...")
        categorized = [to_categorized(repo) for repo in repositories]

        logger.info(f"Writing output to {output_path}...")
        self._writer.write(categorized, output_path)

        counts = Counter(repo.category for repo in categorized)
        metrics = SortMetrics(
            repositories_fetched=len(repositories),
            category_counts={category: counts.get(category, 0) for category in Category},
            duration_seconds=time.time() - start_time,
            output_path=output_path
        )

        logger.info(
            f"Sort completed: {metrics.repositories_fetched} repositories in "
            f"{metrics.duration_seconds:.2f} seconds"
        )

        return metrics

    async def close(self) -> None:
        """Close connections."""
        await self._github_client.close()
