"""
GitHub CSV Source

Legacy interview questions stored as one CSV per category:

    <category>/interview-questions.csv

Header: company,year,contributor,role,experience,topic,question
(case- and order-insensitive). Missing fields get sentinel defaults.
"""

import asyncio
from typing import List

from community_hub.common.error_handling import source_boundary
from community_hub.common.types import InterviewQuestion
from community_hub.services.parsers import parse_questions_csv
from community_hub.services.remote_fetcher import ACCEPT_CSV

from . import DataSource


def category_path(category: str) -> str:
    return f"{category}/interview-questions.csv"


class GitHubCsvSource(DataSource):
    """Per-category CSV interview questions from the raw-file host."""

    def get_source_name(self) -> str:
        return "github_csv"

    async def get_category_questions(self, category: str) -> List[InterviewQuestion]:
        """
        Fetch and parse one category file.

        Raises:
            FetchError subclass on failure
        """
        url = self.raw_url(category_path(category))
        csv_text = await self.fetcher.fetch_text(url, accept=ACCEPT_CSV, rate_limited=True)
        questions = parse_questions_csv(csv_text)
        self.logger.info(f"Loaded {len(questions)} questions from {category} CSV")
        return questions

    async def _category_or_empty(self, category: str) -> List[InterviewQuestion]:
        try:
            return await self.get_category_questions(category)
        except Exception as e:
            self.logger.warning(f"Error fetching {category} questions: {e}")
            return []

    async def fetch(self) -> List[InterviewQuestion]:
        """
        Strict variant: every configured category must load.
        """
        results = await asyncio.gather(
            *(self.get_category_questions(c) for c in self.settings.csv_categories_list)
        )
        return [q for questions in results for q in questions]

    @source_boundary("fetch all CSV interview questions", source="github_csv")
    async def get_all_interview_questions(self) -> List[InterviewQuestion]:
        """
        Questions from every configured category; a failing category contributes nothing.
        """
        results = await asyncio.gather(
            *(self._category_or_empty(c) for c in self.settings.csv_categories_list)
        )
        return [q for questions in results for q in questions]
