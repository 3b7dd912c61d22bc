"""Main entry point for the starred repository sorter.

This script orchestrates the sort operation using the application service.
"""
import argparse
import asyncio
import os
import sys
import logging
from dataclasses import dataclass
from typing import List, Optional
from dotenv import load_dotenv
from starsort.application.sort_service import SortService
from starsort.domain.errors import FetchError, OutputWriteError
from starsort.infrastructure.github_rest_client import GitHubRestClient
from starsort.infrastructure.json_file_writer import JsonFileWriter


logger = logging.getLogger(__name__)

# Pages fetched without a token unless --max-pages says otherwise
UNAUTHENTICATED_PAGE_LIMIT = 2
DEFAULT_API_URL = GitHubRestClient.DEFAULT_API_URL


@dataclass(frozen=True)
class Settings:
    """Resolved run configuration."""
    username: str
    token: Optional[str]
    output: str
    page_limit: Optional[int]
    api_url: str
    log_level: str


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; exits with usage on stderr when invalid."""
    parser = argparse.ArgumentParser(
        description="Fetch a GitHub user's starred repositories and group them by category."
    )
    parser.add_argument("--username", required=True, help="GitHub username")
    parser.add_argument(
        "--token",
        help="GitHub personal access token (optional, helps with rate limits; defaults to $GITHUB_TOKEN)"
    )
    parser.add_argument("--output", default="./output.json", help="Output file path (default: ./output.json)")
    parser.add_argument(
        "--max-pages",
        type=int,
        default=os.getenv("STARSORT_MAX_PAGES") or None,
        help="Maximum number of pages of 100 repositories to fetch (default: $STARSORT_MAX_PAGES)"
    )
    parser.add_argument("--log-level", help="Logging level (default: $LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    """Merge command-line arguments with environment variables."""
    token = args.token or os.getenv("GITHUB_TOKEN") or None

    page_limit = args.max_pages
    if page_limit is None and not token:
        page_limit = UNAUTHENTICATED_PAGE_LIMIT

    return Settings(
        username=args.username,
        token=token,
        output=args.output,
        page_limit=page_limit,
        api_url=os.getenv("GITHUB_API_URL", DEFAULT_API_URL),
        log_level=(args.log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    )


async def main(argv: Optional[List[str]] = None) -> int:
    """Execute the sort operation and return the process exit code."""
    # Load environment variables from .env or env file
    load_dotenv('.env') or load_dotenv('env')

    settings = load_settings(parse_args(argv))

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not settings.token:
        logger.warning(
            f"No GitHub token provided. Limiting to {settings.page_limit} pages "
            f"to avoid rate limits."
        )
        logger.warning("For better results, provide a GitHub token with --token or GITHUB_TOKEN.")

    github_client = GitHubRestClient(settings.token, api_url=settings.api_url)
    service = SortService(github_client=github_client, writer=JsonFileWriter())

    try:
        metrics = await service.run(settings.username, settings.output, settings.page_limit)

        logger.info("=" * 50)
        logger.info("Sort Metrics:")
        logger.info(f"  Repositories fetched: {metrics.repositories_fetched}")
        for category, count in metrics.category_counts.items():
            logger.info(f"  {category.value}: {count}")
        logger.info(f"  Duration: {metrics.duration_seconds:.2f} seconds")
        logger.info(f"  Output: {metrics.output_path}")
        logger.info("=" * 50)

    except (FetchError, OutputWriteError) as e:
        logger.error(f"Error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Sort failed: {e}", exc_info=True)
        return 1
    finally:
        await service.close()

    logger.info("Done!")
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
