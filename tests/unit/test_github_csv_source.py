"""
Unit tests for community_hub/services/sources/github_csv_source.py
"""

import pytest

from community_hub.common.error_handling import NotFoundError
from community_hub.services.sources import GitHubCsvSource

from .builders import RAW_BASE

DEVOPS_CSV = (
    "company,year,contributor,role,experience,topic,question\n"
    "Acme,2024,alice,SRE,3 years,Linux,What is an inode?\n"
    ",,,,,,Explain DNS\n"
)
CLOUD_CSV = "question,topic\nWhat is a VPC?,Networking\n"


class TestGitHubCsvSource:
    """Tests for per-category CSV questions."""

    @pytest.mark.asyncio
    async def test_category_questions(self, context, routes):
        routes.add(f"{RAW_BASE}/devops/interview-questions.csv", text=DEVOPS_CSV)

        questions = await GitHubCsvSource(context).get_category_questions("devops")

        assert [q.question for q in questions] == ["What is an inode?", "Explain DNS"]
        assert questions[1].company == "Unknown"
        assert routes.requests[0].headers["Accept"] == "text/csv"

    @pytest.mark.asyncio
    async def test_category_consumes_rate_limit(self, context, routes):
        routes.add(f"{RAW_BASE}/devops/interview-questions.csv", text=DEVOPS_CSV)

        await GitHubCsvSource(context).get_category_questions("devops")

        assert context.rate_limiter.get_stats().total_requests == 1

    @pytest.mark.asyncio
    async def test_fetch_merges_categories_in_order(self, make_context, routes):
        context = make_context(csv_categories="devops,cloud")
        routes.add(f"{RAW_BASE}/devops/interview-questions.csv", text=DEVOPS_CSV)
        routes.add(f"{RAW_BASE}/cloud/interview-questions.csv", text=CLOUD_CSV)

        questions = await GitHubCsvSource(context).fetch()

        assert [q.question for q in questions] == [
            "What is an inode?",
            "Explain DNS",
            "What is a VPC?",
        ]

    @pytest.mark.asyncio
    async def test_fetch_is_strict(self, make_context, routes):
        context = make_context(csv_categories="devops,cloud")
        routes.add(f"{RAW_BASE}/devops/interview-questions.csv", text=DEVOPS_CSV)

        with pytest.raises(NotFoundError):
            await GitHubCsvSource(context).fetch()

    @pytest.mark.asyncio
    async def test_failing_category_contributes_nothing(self, make_context, routes):
        context = make_context(csv_categories="devops,cloud")
        routes.add(f"{RAW_BASE}/cloud/interview-questions.csv", text=CLOUD_CSV)

        questions = await GitHubCsvSource(context).get_all_interview_questions()

        assert [q.question for q in questions] == ["What is a VPC?"]
