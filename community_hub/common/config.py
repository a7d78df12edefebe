"""
Community Hub Configuration Module

Centralized configuration management with Pydantic validation.
Every setting has a hardcoded default and can be overridden by an
environment variable (or a .env file in the working directory).
"""

import logging
from enum import Enum
from functools import lru_cache
from typing import List, Tuple

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Published Google Sheet (jobs tab) exported as CSV
DEFAULT_JOBS_SHEET_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vTXG1tfJqAN5IqlJqpvPWnOMVlCEKCYIgSfddrb30wZndYyn4rl2KSznKhx8D1GvdJmG040p1KA983u"
    "/pub?output=csv"
)
DEFAULT_REPO_OWNER = "TrainWithShubham"
DEFAULT_REPO_NAME = "interview-questions"
DEFAULT_REPO_BRANCH = "main"

RAW_HOST = "https://raw.githubusercontent.com"


class PartialFailurePolicy(str, Enum):
    """How page-data assembly reacts when a data source fails."""
    TOLERATE_PARTIAL = "tolerate_partial"  # one source may fail, all failing is fatal
    REQUIRE_ALL = "require_all"            # any failure is fatal
    TOLERATE_ALL = "tolerate_all"          # never fatal, failures become empty lists


class CountMismatchPolicy(str, Enum):
    """What to do when fetched question counts disagree with the index."""
    IGNORE = "ignore"
    WARN = "warn"
    FAIL = "fail"


class HubSettings(BaseSettings):
    """
    Data layer configuration with validation.

    All settings can be overridden via environment variables.
    Repository settings also accept the NEXT_PUBLIC_* names used by the
    web front end so both can share a single .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # === Interview question repository ===
    interview_repo_owner: str = Field(
        default=DEFAULT_REPO_OWNER,
        validation_alias=AliasChoices(
            "INTERVIEW_REPO_OWNER", "NEXT_PUBLIC_INTERVIEW_REPO_OWNER", "interview_repo_owner"
        ),
        description="Owner of the interview-questions repository",
    )
    interview_repo_name: str = Field(
        default=DEFAULT_REPO_NAME,
        validation_alias=AliasChoices(
            "INTERVIEW_REPO_NAME", "NEXT_PUBLIC_INTERVIEW_REPO_NAME", "interview_repo_name"
        ),
        description="Name of the interview-questions repository",
    )
    interview_repo_branch: str = Field(
        default=DEFAULT_REPO_BRANCH,
        validation_alias=AliasChoices(
            "INTERVIEW_REPO_BRANCH", "NEXT_PUBLIC_INTERVIEW_REPO_BRANCH", "interview_repo_branch"
        ),
        description="Branch to read raw files from",
    )
    csv_categories: str = Field(
        default="devops",
        description="Comma-separated legacy CSV categories (<category>/interview-questions.csv)",
    )

    # === Jobs spreadsheet ===
    jobs_sheet_url: str = Field(
        default=DEFAULT_JOBS_SHEET_URL,
        description="Published spreadsheet CSV export URL for job listings",
    )

    # === Fetching ===
    request_timeout_seconds: float = Field(
        default=15.0, gt=0, le=120, description="Hard per-request timeout (seconds)"
    )
    cache_ttl_seconds: float = Field(
        default=3600.0, gt=0, description="In-memory cache time-to-live (seconds)"
    )
    rate_limit_max_requests: int = Field(
        default=60, ge=1, description="Max raw-host requests per rolling window"
    )
    rate_limit_window_seconds: float = Field(
        default=3600.0, gt=0, description="Rolling rate-limit window (seconds)"
    )
    retry_attempts: int = Field(
        default=3, ge=1, le=10, description="Attempts per source in page-data assembly"
    )
    retry_initial_delay_seconds: float = Field(
        default=1.0, ge=0, description="First backoff delay; doubles per attempt"
    )

    # === Policies ===
    partial_failure_policy: PartialFailurePolicy = Field(
        default=PartialFailurePolicy.TOLERATE_PARTIAL,
        description="Page-data assembly failure policy",
    )
    count_mismatch_policy: CountMismatchPolicy = Field(
        default=CountMismatchPolicy.WARN,
        description="Reaction to index count vs fetched count mismatches",
    )
    strict_partitions: bool = Field(
        default=False,
        description="Fail the whole aggregation when any partition fetch fails",
    )

    # === General ===
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="simple")

    @field_validator("environment")
    @classmethod
    def validate_environment_name(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "production", "test"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of: {', '.join(sorted(allowed))}")
        return v_lower

    @field_validator("jobs_sheet_url")
    @classmethod
    def validate_url_format(cls, v: str) -> str:
        """Basic URL format validation. Blank means "not configured"."""
        v = v.strip()
        if v and not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid URL format: {v}")
        return v

    @field_validator("interview_repo_owner", "interview_repo_name", "interview_repo_branch")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("repository coordinates must not be blank")
        return v

    @property
    def raw_base_url(self) -> str:
        """Raw-file base URL for the configured repository and branch."""
        return (
            f"{RAW_HOST}/{self.interview_repo_owner}/"
            f"{self.interview_repo_name}/{self.interview_repo_branch}"
        )

    @property
    def csv_categories_list(self) -> List[str]:
        """Parse CSV categories into a list."""
        return [c.strip() for c in self.csv_categories.split(",") if c.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache()
def get_settings() -> HubSettings:
    """
    Get cached settings instance.

    Settings are loaded once per process. Call get_settings.cache_clear()
    after changing the environment (tests do this).
    """
    return HubSettings()


def validate_environment() -> Tuple[bool, List[str], List[str]]:
    """
    Validate the environment configuration.

    Returns:
        (is_valid, errors, warnings). Warnings flag values that silently
        fell back to their hardcoded defaults.
    """
    warnings: List[str] = []

    try:
        settings = HubSettings()
    except Exception as e:
        return False, [str(e)], warnings

    if not settings.jobs_sheet_url:
        warnings.append("JOBS_SHEET_URL: empty, the jobs section will fail to load")
    elif settings.jobs_sheet_url == DEFAULT_JOBS_SHEET_URL:
        warnings.append("JOBS_SHEET_URL: not set, using the production default sheet")

    if settings.interview_repo_owner == DEFAULT_REPO_OWNER:
        warnings.append(f"INTERVIEW_REPO_OWNER: using default ({DEFAULT_REPO_OWNER})")

    for warning in warnings:
        logger.warning(warning)

    return True, [], warnings
