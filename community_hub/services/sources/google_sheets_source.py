"""
Google Sheets Job Source

Job listings maintained in a spreadsheet and published as a CSV export.
The export URL answers with a redirect, so this is the one source that
follows redirects. It is not subject to the raw-host rate limiter.
"""

from typing import List

from community_hub.common.error_handling import ConfigurationError, source_boundary
from community_hub.common.types import Job
from community_hub.services.parsers import parse_jobs_csv
from community_hub.services.remote_fetcher import ACCEPT_CSV

from . import DataSource


class GoogleSheetsJobSource(DataSource):
    """Jobs from the published spreadsheet export."""

    def get_source_name(self) -> str:
        return "google_sheets"

    async def fetch(self) -> List[Job]:
        """
        Fetch and parse the jobs sheet.

        Raises:
            ConfigurationError: If no sheet URL is configured
            FetchError subclass on fetch/parse failure
        """
        url = self.settings.jobs_sheet_url
        if not url:
            raise ConfigurationError(
                "Jobs CSV URL is not configured. Please check your environment variables."
            )

        csv_text = await self.fetcher.fetch_text(
            url,
            accept=ACCEPT_CSV,
            rate_limited=False,
            follow_redirects=True,
        )
        jobs = parse_jobs_csv(csv_text)
        self.logger.info(f"Fetched {len(jobs)} jobs")
        return jobs

    @source_boundary("fetch jobs", source="google_sheets")
    async def get_jobs(self) -> List[Job]:
        """Job listings; empty list on failure."""
        return await self.fetch()
