"""
Question View

In-memory query helpers for the interview questions page:
- conjunctive exact-match facet filters
- approximate text search over question/topic/company/role
- fixed-size pagination that resets whenever filters or query change
- facet option extraction and CSV export of the current result
"""

import math
from dataclasses import dataclass, field, fields, replace
from difflib import SequenceMatcher
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from community_hub.common.types import (
    InterviewQuestion,
    contributor_display_name,
    contributor_key,
)

PAGE_SIZE = 10
SEARCH_THRESHOLD = 0.3  # 0.0 = exact, 1.0 = anything
SEARCH_KEYS = ("question", "topic", "company", "role")
EXPORT_COLUMNS = ["Company", "Year", "Role", "Experience", "Topic", "Question", "Contributor"]


@dataclass(frozen=True)
class QuestionFilters:
    """Selected facet values; None or "" means the facet is not applied."""
    company: Optional[str] = None
    year: Optional[str] = None
    role: Optional[str] = None
    experience: Optional[str] = None
    topic: Optional[str] = None
    contributor: Optional[str] = None
    difficulty: Optional[str] = None

    def active(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name)}

    def matches(self, question: InterviewQuestion) -> bool:
        for name, wanted in self.active().items():
            if name == "contributor":
                value = contributor_key(question.contributor)
            else:
                value = getattr(question, name)
            if value != wanted:
                return False
        return True


def filter_questions(
    questions: Sequence[InterviewQuestion], filters: QuestionFilters
) -> List[InterviewQuestion]:
    """Keep questions matching every active facet, in source order."""
    if not filters.active():
        return list(questions)
    return [q for q in questions if filters.matches(q)]


def _field_score(matcher: SequenceMatcher, query: str, text: str, cutoff: float) -> float:
    """
    Best approximate-substring score of the query inside text (0.0 = exact).

    Slides a query-sized window across the text, like a location-independent
    fuzzy match. matcher already holds the query as seq2.
    """
    text = text.lower()
    if not text:
        return 1.0
    if query in text:
        return 0.0

    width = len(query)
    if len(text) <= width:
        windows = [text]
    else:
        windows = [text[i:i + width] for i in range(len(text) - width + 1)]

    best = 0.0
    for window in windows:
        matcher.set_seq1(window)
        # Cheap upper bounds first, as difflib.get_close_matches does
        if matcher.real_quick_ratio() < cutoff or matcher.quick_ratio() < cutoff:
            continue
        best = max(best, matcher.ratio())
        if best == 1.0:
            break
    return 1.0 - best


def search_questions(
    questions: Sequence[InterviewQuestion],
    query: str,
    threshold: float = SEARCH_THRESHOLD,
) -> List[InterviewQuestion]:
    """
    Approximate search across SEARCH_KEYS.

    Returns questions whose best field score is within threshold, best
    matches first; equal scores keep their input order. A blank query
    returns the input unchanged.
    """
    query = query.strip().lower()
    if not query:
        return list(questions)

    matcher = SequenceMatcher(None)
    matcher.set_seq2(query)
    cutoff = 1.0 - threshold

    scored: List[Tuple[float, InterviewQuestion]] = []
    for question in questions:
        score = min(
            _field_score(matcher, query, str(getattr(question, key) or ""), cutoff)
            for key in SEARCH_KEYS
        )
        if score <= threshold:
            scored.append((score, question))

    scored.sort(key=lambda pair: pair[0])
    return [question for _, question in scored]


@dataclass
class Page:
    """One window of a result list."""
    items: List[InterviewQuestion]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def paginate(items: Sequence[InterviewQuestion], page: int = 1, page_size: int = PAGE_SIZE) -> Page:
    """Slice items into page (1-based); out-of-range pages clamp to the nearest valid one."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")

    total_items = len(items)
    total_pages = max(1, math.ceil(total_items / page_size))
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
    )


@dataclass
class QuestionView:
    """
    Filter + search + pagination state over a loaded question list.

    Filtering runs first; search only scores the filtered subset.
    """
    questions: List[InterviewQuestion]
    page_size: int = PAGE_SIZE
    filters: QuestionFilters = field(default_factory=QuestionFilters)
    query: str = ""
    page: int = 1

    def set_filters(self, filters: QuestionFilters) -> None:
        self.filters = filters
        self.page = 1

    def update_filter(self, **changes: Optional[str]) -> None:
        self.set_filters(replace(self.filters, **changes))

    def clear_filters(self) -> None:
        self.set_filters(QuestionFilters())

    def set_query(self, query: str) -> None:
        self.query = query
        self.page = 1

    def go_to_page(self, page: int) -> Page:
        self.page = page
        result = self.current_page()
        self.page = result.page
        return result

    @property
    def results(self) -> List[InterviewQuestion]:
        return search_questions(filter_questions(self.questions, self.filters), self.query)

    def current_page(self) -> Page:
        return paginate(self.results, self.page, self.page_size)


def get_filter_options(questions: Sequence[InterviewQuestion]) -> Dict[str, List[str]]:
    """Distinct facet values; years newest first, everything else ascending."""
    return {
        "companies": sorted({q.company for q in questions}),
        "years": sorted({q.year for q in questions}, reverse=True),
        "roles": sorted({q.role for q in questions}),
        "experiences": sorted({q.experience for q in questions}),
        "topics": sorted({q.topic for q in questions}),
        "contributors": sorted({contributor_key(q.contributor) for q in questions}),
        "difficulties": sorted({q.difficulty for q in questions if q.difficulty}),
    }


def export_questions_csv(questions: Sequence[InterviewQuestion]) -> str:
    """Render questions as CSV text (the page's "Export CSV" download)."""
    rows = [
        [
            q.company,
            q.year,
            q.role,
            q.experience,
            q.topic,
            q.question,
            contributor_display_name(q.contributor),
        ]
        for q in questions
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS).to_csv(index=False, lineterminator="\n")
