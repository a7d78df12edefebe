"""
Data Sources Module

Provides unified interfaces for the remote providers behind the site:
- GitHub JSON (index + per-company partitions of interview questions)
- GitHub CSV (legacy per-category interview question files)
- Google Sheets (job listings)
- Contributors leaderboard (contributors.json)

Each source exposes a strict fetch() that raises FetchError subclasses,
used by page-data assembly so retries and failure policies see real
failures, plus forgiving get_* helpers that log and return empty results.
"""

from abc import ABC, abstractmethod
from typing import Any

from community_hub.common.context import FetchContext
from community_hub.common.logger import get_logger
from community_hub.services.remote_fetcher import RemoteFetcher


class DataSource(ABC):
    """Abstract base class for remote data sources."""

    def __init__(self, context: FetchContext):
        self.context = context
        self.fetcher = RemoteFetcher(context, source=self.get_source_name())
        self.logger = get_logger(
            f"{self.__class__.__module__}.{self.__class__.__name__}",
            source=self.get_source_name(),
        )

    @property
    def settings(self):
        return self.context.settings

    @abstractmethod
    async def fetch(self) -> Any:
        """
        Fetch and parse everything this source provides.

        Raises:
            FetchError subclass on failure
        """
        pass

    @abstractmethod
    def get_source_name(self) -> str:
        """
        Get the unique identifier for this source.

        Returns:
            Source name (e.g., "github_json", "google_sheets")
        """
        pass

    def raw_url(self, path: str) -> str:
        """Absolute raw-host URL for a repository-relative path."""
        return f"{self.settings.raw_base_url}/{path.lstrip('/')}"


# Import concrete implementations for convenience
from .github_json_source import GitHubJsonSource, partition_coordinates
from .github_csv_source import GitHubCsvSource
from .google_sheets_source import GoogleSheetsJobSource
from .contributors_source import ContributorsSource, build_leaderboard

__all__ = [
    "DataSource",
    "GitHubJsonSource",
    "GitHubCsvSource",
    "GoogleSheetsJobSource",
    "ContributorsSource",
    "partition_coordinates",
    "build_leaderboard",
]
