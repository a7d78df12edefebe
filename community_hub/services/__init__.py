"""
Services module: fetching, parsing, aggregation and view helpers.

Typical flow:
    async with FetchContext.from_settings() as ctx:
        data = await get_home_page_data(ctx)
        view = QuestionView(data.interview_questions)
"""

from community_hub.services.data_fetcher import get_home_page_data, retry_fetch
from community_hub.services.question_view import (
    QuestionFilters,
    QuestionView,
    export_questions_csv,
    get_filter_options,
    paginate,
    search_questions,
)
from community_hub.services.remote_fetcher import RemoteFetcher

__all__ = [
    "RemoteFetcher",
    "get_home_page_data",
    "retry_fetch",
    "QuestionFilters",
    "QuestionView",
    "export_questions_csv",
    "get_filter_options",
    "paginate",
    "search_questions",
]
