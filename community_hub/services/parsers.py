"""
Format parsers: CSV text and JSON documents -> typed records.

CSV rows are normalized (header trimmed + lowercased, values trimmed) and
the interview-question variant fills missing fields with sentinel
defaults. JSON documents are decoded strictly through the pydantic wire
models; any schema violation surfaces as ParseError.
"""

import io
import logging
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
from pydantic import ValidationError

from community_hub.common.error_handling import ParseError
from community_hub.common.types import (
    AnonymousContributor,
    Contributor,
    ContributorProfile,
    ContributorsData,
    IndexData,
    InterviewQuestion,
    Job,
    NamedContributor,
    PartitionDocument,
)

logger = logging.getLogger(__name__)

# Sentinels for unset CSV fields
QUESTION_DEFAULTS: Dict[str, str] = {
    "company": "Unknown",
    "year": "N/A",
    "contributor": "Anonymous",
    "role": "N/A",
    "experience": "N/A",
    "topic": "General",
}

JOB_COLUMNS = ["id", "title", "company", "location", "experience", "type", "posteddate", "applylink"]
JOB_REQUIRED = ("id", "title", "company")


def _bad_line_handler(width: int) -> Callable[[List[str]], Optional[List[str]]]:
    """
    on_bad_lines hook for rows with more fields than the header.

    Empty trailing fields (a trailing delimiter) are trimmed and the row is
    kept. A row whose extra fields carry values, usually an unquoted comma,
    is logged and skipped so the rest of the file still loads.
    """

    def handle(fields: List[str]) -> Optional[List[str]]:
        if not any(str(value).strip() for value in fields[width:]):
            return fields[:width]
        logger.warning(f"Skipping malformed CSV row ({len(fields)} fields, header has {width}): {fields}")
        return None

    return handle


def _read_csv_rows(csv_text: str) -> List[Dict[str, str]]:
    """Read CSV into row dicts with normalized headers and trimmed string values."""
    # header=None keeps pandas from turning a wider first data row into an
    # implicit index; the header row is applied by hand below
    options = dict(header=None, dtype=str, keep_default_na=False, skip_blank_lines=True, engine="python")
    try:
        width = pd.read_csv(io.StringIO(csv_text), nrows=1, **options).shape[1]
        df = pd.read_csv(io.StringIO(csv_text), on_bad_lines=_bad_line_handler(width), **options)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ParseError(f"Malformed CSV: {e}") from e

    headers = [str(col).strip().lower() for col in df.iloc[0].fillna("")]
    df = df.iloc[1:].copy()
    df.columns = headers
    df = df.loc[:, ~df.columns.duplicated()]
    # Short rows leave NaN in their missing cells even with keep_default_na=False
    df = df.fillna("")
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()

    if df.empty:
        return []

    # Rows where every cell is blank are skipped like empty lines
    df = df[(df != "").any(axis=1)]
    return df.to_dict(orient="records")


def parse_contributor(value: Any) -> Contributor:
    """
    Turn a source contributor (bare string or {name?, github, linkedin?}) into the variant.
    """
    if isinstance(value, ContributorProfile):
        return NamedContributor(
            identifier=value.github,
            display_name=value.name or None,
            profile_url=value.linkedin or None,
        )
    if isinstance(value, dict):
        try:
            profile = ContributorProfile.model_validate(value)
        except ValidationError as e:
            raise ParseError(f"Invalid contributor object: {e}") from e
        return parse_contributor(profile)
    if isinstance(value, str):
        return AnonymousContributor(identifier=value)
    raise ParseError(f"Unsupported contributor value: {value!r}")


def parse_questions_csv(csv_text: str) -> List[InterviewQuestion]:
    """
    Parse the legacy interview-questions CSV.

    Header is case- and order-insensitive. Rows whose question is blank are
    dropped; other blank fields get QUESTION_DEFAULTS.
    """
    questions = []
    for row in _read_csv_rows(csv_text):
        text = (row.get("question") or "").strip()
        if not text:
            continue

        values = {
            name: (row.get(name) or "").strip() or default
            for name, default in QUESTION_DEFAULTS.items()
        }
        questions.append(
            InterviewQuestion(
                company=values["company"],
                year=values["year"],
                role=values["role"],
                experience=values["experience"],
                topic=values["topic"],
                question=text,
                contributor=AnonymousContributor(identifier=values["contributor"]),
            )
        )

    return questions


def parse_jobs_csv(csv_text: str) -> List[Job]:
    """
    Parse the jobs spreadsheet export.

    Rows lacking id, title or company are discarded.
    """
    jobs = []
    discarded = 0
    for row in _read_csv_rows(csv_text):
        if not all(row.get(name) for name in JOB_REQUIRED):
            discarded += 1
            continue

        jobs.append(
            Job(
                id=row["id"],
                title=row["title"],
                company=row["company"],
                location=row.get("location") or None,
                experience=row.get("experience") or None,
                type=row.get("type") or None,
                posted_date=row.get("posteddate") or None,
                apply_link=row.get("applylink") or None,
            )
        )

    if discarded:
        logger.debug(f"Discarded {discarded} job rows missing id/title/company")
    return jobs


def parse_index(payload: Any) -> IndexData:
    """Validate a decoded index.json payload."""
    try:
        return IndexData.model_validate(payload)
    except ValidationError as e:
        raise ParseError(f"Invalid index document: {e}") from e


def parse_partition(payload: Any) -> List[InterviewQuestion]:
    """
    Validate a decoded partition payload and inject its company/year into every question.
    """
    try:
        document = PartitionDocument.model_validate(payload)
    except ValidationError as e:
        raise ParseError(f"Invalid partition document: {e}") from e

    questions = []
    for entry in document.questions:
        if not entry.question.strip():
            continue
        questions.append(
            InterviewQuestion(
                company=document.company,
                year=document.year,
                role=entry.role,
                experience=entry.experience,
                topic=entry.topic,
                question=entry.question,
                contributor=parse_contributor(entry.contributor),
                id=entry.id,
                difficulty=entry.difficulty,
                tags=list(entry.tags),
                contributed_at=entry.contributed_at,
            )
        )
    return questions


def parse_contributors(payload: Any) -> ContributorsData:
    """Validate a decoded contributors.json payload."""
    try:
        return ContributorsData.model_validate(payload)
    except ValidationError as e:
        raise ParseError(f"Invalid contributors document: {e}") from e
