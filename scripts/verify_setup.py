"""Verify that the setup is correct before running the sorter."""
import asyncio
import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from dotenv import load_dotenv
from starsort.infrastructure.github_rest_client import GitHubRestClient

# Load environment variables from .env or env file
load_dotenv('.env') or load_dotenv('env')


def check_github_token():
    """Check the GitHub token; a missing token is only a warning."""
    print("Checking GitHub token...")

    token = os.getenv("GITHUB_TOKEN")
    if not token:
        print("⚠️  GITHUB_TOKEN not set - only 2 pages (200 repositories) will be fetched")
        return True

    if token.startswith("ghp_") or token.startswith("github_pat_"):
        print("✅ GitHub token format looks valid")
    else:
        print("⚠️  Token format may be invalid (expected ghp_* or github_pat_*)")
    return True  # Don't fail, might be old format


async def _fetch_rate_limit():
    client = GitHubRestClient(
        os.getenv("GITHUB_TOKEN"),
        api_url=os.getenv("GITHUB_API_URL", GitHubRestClient.DEFAULT_API_URL),
        transport_attempts=3
    )
    try:
        return await client.get_rate_limit()
    finally:
        await client.close()


def check_api_reachable():
    """Check that the GitHub API answers and report the remaining quota."""
    print("\nChecking GitHub API...")

    try:
        rate_limit = asyncio.run(_fetch_rate_limit())
    except Exception as e:
        print(f"❌ Failed to reach the GitHub API: {e}")
        return False

    reset_at = datetime.fromtimestamp(rate_limit.reset) if rate_limit.reset else "unknown"
    print("✅ GitHub API reachable")
    print(f"   Rate limit: {rate_limit.remaining}/{rate_limit.limit}, resets at {reset_at}")
    if rate_limit.remaining == 0:
        print("⚠️  Quota exhausted - the sorter will stop early or wait for the reset")
    return True


def check_output_directory(output: str = "./output.json"):
    """Check that the output directory can be created and written to."""
    print("\nChecking output directory...")

    directory = Path(output).parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=directory):
            pass
    except OSError as e:
        print(f"❌ Cannot write to {directory.resolve()}: {e}")
        return False

    print(f"✅ Output directory writable: {directory.resolve()}")
    return True


def main():
    """Run all verification checks."""
    print("=" * 60)
    print("Starred Repository Sorter - Setup Verification")
    print("=" * 60)

    checks = [
        ("GitHub Token", check_github_token),
        ("GitHub API", check_api_reachable),
        ("Output Directory", check_output_directory),
    ]

    results = {}
    for name, check_func in checks:
        try:
            results[name] = check_func()
        except Exception as e:
            print(f"❌ {name} check failed with exception: {e}")
            results[name] = False

    print("\n" + "=" * 60)
    print("Verification Summary")
    print("=" * 60)

    for name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"{status}: {name}")

    if all(results.values()):
        print("\n✅ All checks passed! Ready to run the sorter.")
        print("\nNext steps:")
        print("  python sort_stars.py --username <github-username>")
        sys.exit(0)
    else:
        print("\n❌ Some checks failed. Please fix the issues above.")
        print("\nCommon solutions:")
        print("  - Set GITHUB_TOKEN: export GITHUB_TOKEN=your_token")
        print("  - Check network access to api.github.com")
        sys.exit(1)


if __name__ == "__main__":
    main()
