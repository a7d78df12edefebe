"""
Data Fetcher - Homepage Data Aggregation

Fetches data from multiple sources for the homepage:
- Interview Questions: GitHub JSON (index + partitions)
- Jobs: Google Sheets CSV export

Each source is retried with exponential backoff (1s, 2s, ...) and the two
sources run concurrently. What happens when one or both still fail is an
explicit PartialFailurePolicy; the default tolerates one failing source
(empty list + warning) and fails when every source fails.

Usage:
    async with FetchContext.from_settings() as ctx:
        data = await get_home_page_data(ctx)
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from tenacity import AsyncRetrying, before_sleep_log, stop_after_attempt, wait_exponential

from community_hub.common.config import PartialFailurePolicy
from community_hub.common.context import FetchContext
from community_hub.common.error_handling import DataAssemblyError, SourceFailure
from community_hub.common.types import HomePageData, InterviewQuestion, Job
from community_hub.services.sources import GitHubJsonSource, GoogleSheetsJobSource

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]


async def retry_fetch(
    fn: Callable[[], Awaitable[T]],
    attempts: int = 3,
    initial_delay: float = 1.0,
    sleep: Optional[SleepFn] = None,
) -> T:
    """
    Retry an async fetch with exponential backoff.

    Args:
        fn: Zero-argument coroutine function to call
        attempts: Total attempts, including the first
        initial_delay: Delay before the second attempt; doubles after that
        sleep: Awaitable sleep (injectable for tests, default asyncio.sleep)

    Returns:
        The first successful result

    Raises:
        The exception of the final attempt
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=initial_delay, exp_base=2),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        sleep=sleep or asyncio.sleep,
        reraise=True,
    )
    return await retrying(fn)


def apply_failure_policy(
    policy: PartialFailurePolicy,
    failures: Sequence[SourceFailure],
    source_count: int,
) -> None:
    """
    Decide whether source failures abort page-data assembly.

    Raises:
        DataAssemblyError: When the policy says these failures are fatal
    """
    if not failures:
        return

    if policy == PartialFailurePolicy.REQUIRE_ALL:
        raise DataAssemblyError(list(failures))
    if policy == PartialFailurePolicy.TOLERATE_PARTIAL and len(failures) >= source_count:
        raise DataAssemblyError(list(failures))

    logger.warning("Some data sources failed:")
    for failure in failures:
        logger.warning(f"  - {failure.source}: {failure.message}")


async def get_home_page_data(
    context: FetchContext,
    policy: Optional[PartialFailurePolicy] = None,
    questions_loader: Optional[Callable[[], Awaitable[List[InterviewQuestion]]]] = None,
    jobs_loader: Optional[Callable[[], Awaitable[List[Job]]]] = None,
    sleep: Optional[SleepFn] = None,
) -> HomePageData:
    """
    Fetch all data for the homepage.

    Args:
        context: Shared fetch context
        policy: Failure policy (default: settings.partial_failure_policy)
        questions_loader: Strict question fetch (default: GitHubJsonSource.fetch)
        jobs_loader: Strict jobs fetch (default: GoogleSheetsJobSource.fetch)
        sleep: Backoff sleep, forwarded to retry_fetch

    Raises:
        DataAssemblyError: When failures are fatal under the policy
    """
    settings = context.settings
    policy = policy or settings.partial_failure_policy
    questions_loader = questions_loader or GitHubJsonSource(context).fetch
    jobs_loader = jobs_loader or GoogleSheetsJobSource(context).fetch

    start = time.monotonic()
    logger.info("Fetching homepage data...")
    logger.info("  - Interview Questions: GitHub JSON")
    logger.info("  - Jobs: Google Sheets")

    sources: List[Tuple[str, Callable[[], Awaitable[list]]]] = [
        ("Interview Questions", questions_loader),
        ("Jobs", jobs_loader),
    ]
    results = await asyncio.gather(
        *(
            retry_fetch(
                loader,
                attempts=settings.retry_attempts,
                initial_delay=settings.retry_initial_delay_seconds,
                sleep=sleep,
            )
            for _, loader in sources
        ),
        return_exceptions=True,
    )

    duration_ms = int((time.monotonic() - start) * 1000)
    logger.info(f"Homepage data fetched in {duration_ms}ms")

    failures = []
    values = []
    for (name, _), result in zip(sources, results):
        if isinstance(result, Exception):
            failures.append(SourceFailure.from_exception(name, result))
            values.append([])
        elif isinstance(result, BaseException):
            raise result
        else:
            values.append(result)

    try:
        apply_failure_policy(policy, failures, len(sources))
    except DataAssemblyError as e:
        logger.error(f"Failed to fetch homepage data: {e}")
        raise

    interview_questions, jobs = values
    return HomePageData(interview_questions=interview_questions, jobs=jobs)
