"""
Contributors Leaderboard Source

Reads contributors.json from the questions repository. When it cannot be
loaded the leaderboard is rebuilt from whatever questions are already in
memory, so the page always has something to show.
"""

from collections import OrderedDict
from datetime import datetime, timezone
from typing import Iterable, Optional

from community_hub.common.error_handling import FetchError
from community_hub.common.types import (
    ContributorsData,
    ContributorStanding,
    InterviewQuestion,
    contributor_display_name,
    contributor_key,
)
from community_hub.services.parsers import parse_contributors

from . import DataSource

CONTRIBUTORS_PATH = "contributors.json"


def build_leaderboard(questions: Iterable[InterviewQuestion]) -> ContributorsData:
    """
    Count questions per contributor.

    Contributors are grouped by their key; the first display name seen wins.
    Ordered by count descending, then name.
    """
    standings: "OrderedDict[str, ContributorStanding]" = OrderedDict()
    for question in questions:
        key = contributor_key(question.contributor)
        standing = standings.get(key)
        if standing is None:
            standing = ContributorStanding(
                name=contributor_display_name(question.contributor),
                github=key,
                count=0,
            )
            standings[key] = standing
        standing.count += 1

    ranked = sorted(standings.values(), key=lambda s: (-s.count, s.name.lower()))
    return ContributorsData(
        version="derived",
        last_updated=datetime.now(timezone.utc).isoformat(),
        total_contributors=len(ranked),
        contributors=ranked,
    )


class ContributorsSource(DataSource):
    """contributors.json with an in-memory fallback."""

    def get_source_name(self) -> str:
        return "contributors"

    async def fetch(self) -> ContributorsData:
        """
        Raises:
            FetchError subclass on failure
        """
        payload = await self.fetcher.fetch_json(self.raw_url(CONTRIBUTORS_PATH))
        return parse_contributors(payload)

    async def get_contributors(
        self, questions: Optional[Iterable[InterviewQuestion]] = None
    ) -> ContributorsData:
        """Leaderboard from the repository, or derived from questions on failure."""
        try:
            return await self.fetch()
        except FetchError as e:
            self.logger.warning(f"Falling back to derived leaderboard: {e}")
            return build_leaderboard(questions or [])
