"""
GitHub JSON Source

Interview questions stored as JSON in the questions repository:

    index.json                   manifest of every partition
    data/<year>/<company>.json   questions for one (company, year)

The index is fetched (and cached) first, then the selected partitions are
fetched concurrently and merged into one flat list. Filtering by year or
company narrows the partition list before any partition is fetched.
"""

import asyncio
from pathlib import PurePosixPath
from typing import Dict, List, Optional, Tuple

from community_hub.common.config import CountMismatchPolicy
from community_hub.common.error_handling import CountMismatchError, ParseError, source_boundary
from community_hub.common.types import IndexData, InterviewQuestion, QuestionFile
from community_hub.services.parsers import parse_index, parse_partition

from . import DataSource

INDEX_PATH = "index.json"


def partition_coordinates(file: QuestionFile) -> Tuple[str, str]:
    """
    Derive (year, company) from a partition path like data/2024/acme.json.

    Raises:
        ParseError: If the path does not follow data/<year>/<company>.json
    """
    path = PurePosixPath(file.path)
    if len(path.parts) < 3 or path.suffix != ".json":
        raise ParseError(f"Unexpected partition path: {file.path}")
    return path.parent.name, path.stem


def partition_path(year: str, company: str) -> str:
    return f"data/{year}/{company}.json"


class GitHubJsonSource(DataSource):
    """Index + partition interview questions from the raw-file host."""

    def get_source_name(self) -> str:
        return "github_json"

    async def get_index(self) -> IndexData:
        """Fetch (or serve from cache) and validate the index document."""
        payload = await self.fetcher.fetch_json(self.raw_url(INDEX_PATH))
        return parse_index(payload)

    async def get_company_questions(self, year: str, company: str) -> List[InterviewQuestion]:
        """
        Fetch one partition; each question carries the partition's company/year.

        Raises:
            FetchError subclass on failure
        """
        payload = await self.fetcher.fetch_json(self.raw_url(partition_path(year, company)))
        return parse_partition(payload)

    async def _fetch_partition(self, file: QuestionFile) -> List[InterviewQuestion]:
        year, company = partition_coordinates(file)
        return await self.get_company_questions(year, company)

    async def _fetch_partitions(self, files: List[QuestionFile]) -> List[InterviewQuestion]:
        """
        Fetch partitions concurrently and merge them in index order.

        A failed partition never cancels its siblings. It is logged and
        skipped, unless strict_partitions is set, in which case the first
        failure is raised after every fetch has settled. When every selected
        partition fails the first failure is raised regardless of strict mode,
        so an empty result is never reported as a success.
        """
        results = await asyncio.gather(
            *(self._fetch_partition(f) for f in files),
            return_exceptions=True,
        )

        merged: List[InterviewQuestion] = []
        fetched_counts: Dict[str, int] = {}
        failures: List[Exception] = []

        for file, result in zip(files, results):
            if isinstance(result, Exception):
                self.logger.warning(f"Error fetching partition {file.path}: {result}")
                failures.append(result)
                continue
            if isinstance(result, BaseException):
                raise result
            fetched_counts[file.path] = len(result)
            merged.extend(result)

        if failures and len(failures) == len(files):
            self.logger.error(f"All {len(files)} selected partitions failed")
            raise failures[0]
        if failures and self.settings.strict_partitions:
            raise failures[0]

        self._check_partition_counts(files, fetched_counts)
        return merged

    def _apply_count_policy(self, mismatches: List[str]) -> None:
        policy = self.settings.count_mismatch_policy
        if not mismatches or policy == CountMismatchPolicy.IGNORE:
            return
        if policy == CountMismatchPolicy.FAIL:
            raise CountMismatchError(mismatches)
        for mismatch in mismatches:
            self.logger.warning(f"Count mismatch: {mismatch}")

    def _check_partition_counts(self, files: List[QuestionFile], fetched_counts: Dict[str, int]) -> None:
        mismatches = [
            f"{f.path} lists {f.count}, fetched {fetched_counts[f.path]}"
            for f in files
            if f.path in fetched_counts and f.count != fetched_counts[f.path]
        ]
        self._apply_count_policy(mismatches)

    def _check_total(self, index: IndexData, fetched: int) -> None:
        listed = sum(f.count for f in index.files)
        mismatches = []
        if index.total_questions != listed:
            mismatches.append(f"index totalQuestions {index.total_questions} != sum of partition counts {listed}")
        if index.total_questions != fetched:
            mismatches.append(f"index totalQuestions {index.total_questions}, fetched {fetched}")
        self._apply_count_policy(mismatches)

    async def fetch(self, year: Optional[str] = None, company: Optional[str] = None) -> List[InterviewQuestion]:
        """
        Strict aggregation: index -> selected partitions -> merged list.

        Args:
            year: Only fetch partitions of this year
            company: Only fetch partitions of this company
        """
        index = await self.get_index()

        files = index.files
        if year is not None:
            files = [f for f in files if f.year == year]
        if company is not None:
            files = [f for f in files if f.company == company]

        self.logger.info(f"Fetching {len(files)} of {len(index.files)} partitions")
        questions = await self._fetch_partitions(files)

        if year is None and company is None:
            self._check_total(index, len(questions))

        return questions

    @source_boundary("fetch all interview questions", source="github_json")
    async def get_all_interview_questions(self) -> List[InterviewQuestion]:
        """All questions from every partition; empty list on failure."""
        return await self.fetch()

    @source_boundary("fetch questions by year", source="github_json")
    async def get_questions_by_year(self, year: str) -> List[InterviewQuestion]:
        """Questions for one year, fetching only that year's partitions."""
        return await self.fetch(year=year)

    @source_boundary("fetch questions by company", source="github_json")
    async def get_questions_by_company(self, company: str) -> List[InterviewQuestion]:
        """Questions for one company across all years."""
        return await self.fetch(company=company)

    @source_boundary(
        "fetch filter options",
        source="github_json",
        fallback_factory=lambda: {"companies": [], "years": [], "topics": [], "total_questions": 0},
    )
    async def get_filter_options_from_index(self) -> dict:
        """Facet values straight from the index, without loading any partition."""
        index = await self.get_index()
        return {
            "companies": sorted(index.metadata.companies),
            "years": sorted(index.metadata.years, reverse=True),
            "topics": sorted(index.metadata.topics),
            "total_questions": index.total_questions,
        }
