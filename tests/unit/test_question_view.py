"""
Unit tests for community_hub/services/question_view.py

Tests:
- Conjunctive facet filtering (order preserving)
- Approximate search over question/topic/company/role
- Pagination clamping and reset on filter/query change
- Facet option extraction and CSV export
"""

import io

import pandas as pd
import pytest

from community_hub.common.types import AnonymousContributor, InterviewQuestion, NamedContributor
from community_hub.services.question_view import (
    EXPORT_COLUMNS,
    QuestionFilters,
    QuestionView,
    export_questions_csv,
    filter_questions,
    get_filter_options,
    paginate,
    search_questions,
)


def q(question, company="Acme", year="2024", role="SRE", topic="Linux", contributor=None, difficulty=None):
    return InterviewQuestion(
        company=company,
        year=year,
        role=role,
        experience="3 years",
        topic=topic,
        question=question,
        contributor=contributor or AnonymousContributor("anon"),
        difficulty=difficulty,
    )


@pytest.fixture
def questions():
    return [
        q("What is a Kubernetes pod?", topic="Kubernetes", difficulty="easy"),
        q("Explain Terraform state locking", company="Globex", topic="Terraform", year="2023"),
        q(
            "How do you debug a CrashLoopBackOff?",
            topic="Kubernetes",
            role="DevOps Engineer",
            contributor=NamedContributor("alice", display_name="Alice"),
            difficulty="hard",
        ),
        q("What does the sticky bit do?", company="Globex", year="2023"),
    ]


class TestFilterQuestions:
    """Tests for facet filtering."""

    def test_no_filters_returns_everything(self, questions):
        assert filter_questions(questions, QuestionFilters()) == questions

    def test_single_facet(self, questions):
        result = filter_questions(questions, QuestionFilters(company="Globex"))

        assert [r.question for r in result] == [
            "Explain Terraform state locking",
            "What does the sticky bit do?",
        ]

    def test_facets_are_conjunctive(self, questions):
        result = filter_questions(questions, QuestionFilters(company="Acme", topic="Kubernetes", role="SRE"))

        assert [r.question for r in result] == ["What is a Kubernetes pod?"]

    def test_company_and_year_subset_in_source_order(self):
        items = [
            q("one", company="Acme", year="2024"),
            q("two", company="Acme", year="2023"),
            q("three", company="Globex", year="2024"),
            q("four", company="Acme", year="2024"),
        ]

        result = filter_questions(items, QuestionFilters(company="Acme", year="2024"))

        assert [r.question for r in result] == ["one", "four"]

    def test_empty_string_means_unset(self, questions):
        assert len(filter_questions(questions, QuestionFilters(company="", year=""))) == 4

    def test_contributor_facet_uses_key(self, questions):
        result = filter_questions(questions, QuestionFilters(contributor="alice"))

        assert [r.question for r in result] == ["How do you debug a CrashLoopBackOff?"]

    def test_no_match(self, questions):
        assert filter_questions(questions, QuestionFilters(year="1999")) == []


class TestSearchQuestions:
    """Tests for approximate search."""

    def test_blank_query_returns_input(self, questions):
        assert search_questions(questions, "   ") == questions

    def test_exact_substring(self, questions):
        result = search_questions(questions, "terraform")

        assert [r.question for r in result] == ["Explain Terraform state locking"]

    def test_tolerates_typo(self, questions):
        """A one-letter typo still finds the question."""
        result = search_questions(questions, "kubernets")

        assert "What is a Kubernetes pod?" in [r.question for r in result]

    def test_searches_company_and_role(self, questions):
        assert len(search_questions(questions, "globex")) == 2
        assert [r.question for r in search_questions(questions, "devops engineer")] == [
            "How do you debug a CrashLoopBackOff?"
        ]

    def test_unrelated_query(self, questions):
        assert search_questions(questions, "zzzzqqqq") == []

    def test_exact_matches_rank_first(self):
        items = [q("Kubernetis basics"), q("Kubernetes basics")]

        result = search_questions(items, "kubernetes")

        assert [r.question for r in result] == ["Kubernetes basics", "Kubernetis basics"]


class TestPaginate:
    """Tests for paginate()."""

    def test_first_page(self, questions):
        page = paginate(questions, page=1, page_size=3)

        assert len(page.items) == 3
        assert page.total_pages == 2
        assert page.has_next is True
        assert page.has_previous is False

    def test_last_page(self, questions):
        page = paginate(questions, page=2, page_size=3)

        assert [i.question for i in page.items] == ["What does the sticky bit do?"]
        assert page.has_next is False

    def test_out_of_range_clamps(self, questions):
        assert paginate(questions, page=99, page_size=3).page == 2
        assert paginate(questions, page=0, page_size=3).page == 1

    def test_empty_input(self):
        page = paginate([], page=3)

        assert page.items == []
        assert page.page == 1
        assert page.total_pages == 1

    def test_invalid_page_size(self, questions):
        with pytest.raises(ValueError):
            paginate(questions, page_size=0)

    def test_default_page_size_is_ten(self):
        items = [q(f"Question {n}") for n in range(25)]

        page = paginate(items)

        assert len(page.items) == 10
        assert page.total_pages == 3


class TestQuestionView:
    """Tests for the stateful view."""

    def test_filter_change_resets_page(self, questions):
        view = QuestionView(questions, page_size=1)
        view.go_to_page(3)

        view.update_filter(company="Globex")

        assert view.page == 1
        assert view.current_page().items[0].question == "Explain Terraform state locking"

    def test_query_change_resets_page(self, questions):
        view = QuestionView(questions, page_size=1)
        view.go_to_page(2)

        view.set_query("kubernetes")

        assert view.page == 1

    def test_search_runs_on_filtered_subset(self, questions):
        view = QuestionView(questions)
        view.update_filter(company="Globex")
        view.set_query("kubernetes")

        assert view.results == []

    def test_go_to_page_clamps(self, questions):
        view = QuestionView(questions, page_size=3)

        page = view.go_to_page(10)

        assert page.page == 2
        assert view.page == 2

    def test_clear_filters(self, questions):
        view = QuestionView(questions)
        view.update_filter(year="2023")
        view.clear_filters()

        assert len(view.results) == 4


class TestFilterOptions:
    """Tests for get_filter_options()."""

    def test_options(self, questions):
        options = get_filter_options(questions)

        assert options["companies"] == ["Acme", "Globex"]
        assert options["years"] == ["2024", "2023"]
        assert options["topics"] == ["Kubernetes", "Linux", "Terraform"]
        assert options["contributors"] == ["alice", "anon"]
        assert options["difficulties"] == ["easy", "hard"]


class TestExportCsv:
    """Tests for export_questions_csv()."""

    def test_export(self, questions):
        text = export_questions_csv(questions[2:3])

        df = pd.read_csv(io.StringIO(text), dtype=str)
        assert list(df.columns) == EXPORT_COLUMNS
        assert df.iloc[0]["Question"] == "How do you debug a CrashLoopBackOff?"
        assert df.iloc[0]["Contributor"] == "Alice"

    def test_quotes_embedded_commas(self):
        text = export_questions_csv([q("Compare A, B and C")])

        assert '"Compare A, B and C"' in text

    def test_empty_export_has_header(self):
        assert export_questions_csv([]).strip() == ",".join(EXPORT_COLUMNS)
