#!/usr/bin/env python3
"""
Verify the remote data sources are reachable and well-formed.

Checks, using the configured settings (.env / environment):
1. index.json can be fetched and validated
2. One partition document can be fetched (first in the index, or --partition)
3. Contributor format of the first question in that partition
4. The jobs spreadsheet export parses into at least one job

Usage:
    python scripts/verify_sources.py

    # Check a specific partition
    python scripts/verify_sources.py --partition data/2024/amazon.json
"""

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

load_dotenv()

from community_hub.common.config import get_settings, validate_environment
from community_hub.common.context import FetchContext
from community_hub.common.logger import setup_logging
from community_hub.common.types import NamedContributor, QuestionFile
from community_hub.services.sources import (
    GitHubJsonSource,
    GoogleSheetsJobSource,
    partition_coordinates,
)

logger = logging.getLogger(__name__)


async def verify_index(source: GitHubJsonSource) -> dict:
    """Fetch and validate index.json."""
    logger.info("\n=== Step 1: Index document ===")
    try:
        index = await source.get_index()
        logger.info("  ✓ Index fetched successfully")
        logger.info(f"    Total Questions: {index.total_questions}")
        logger.info(f"    Partitions: {len(index.files)}")
        logger.info(f"    Years: {', '.join(index.metadata.years)}")
        return {"success": True, "index": index}
    except Exception as e:
        logger.error(f"  ✗ Index not accessible: {e}")
        return {"success": False, "error": str(e)}


async def verify_partition(source: GitHubJsonSource, file: QuestionFile) -> dict:
    """Fetch one partition and report its contributor format."""
    logger.info(f"\n=== Step 2: Partition {file.path} ===")
    try:
        year, company = partition_coordinates(file)
        questions = await source.get_company_questions(year, company)
        logger.info(f"  ✓ Partition fetched: {len(questions)} questions")
    except Exception as e:
        logger.error(f"  ✗ Partition not accessible: {e}")
        return {"success": False, "error": str(e)}

    logger.info("\n=== Step 3: Contributor format ===")
    if questions:
        contributor = questions[0].contributor
        if isinstance(contributor, NamedContributor):
            logger.info("  ✓ Contributor is object format")
            logger.info(f"    Name: {contributor.display_name or 'N/A'}")
            logger.info(f"    GitHub: {contributor.identifier}")
            logger.info(f"    LinkedIn: {contributor.profile_url or 'N/A'}")
        else:
            logger.info(f"  ⚠ Contributor is string format: {contributor.identifier}")
    return {"success": True, "count": len(questions)}


async def verify_jobs(source: GoogleSheetsJobSource) -> dict:
    """Fetch and parse the jobs sheet."""
    logger.info("\n=== Step 4: Jobs sheet ===")
    try:
        jobs = await source.fetch()
    except Exception as e:
        logger.error(f"  ✗ Jobs sheet not accessible: {e}")
        return {"success": False, "error": str(e)}
    if not jobs:
        logger.error("  ✗ Jobs sheet parsed to zero jobs")
        return {"success": False, "error": "no jobs"}
    logger.info(f"  ✓ {len(jobs)} jobs parsed")
    return {"success": True, "count": len(jobs)}


async def run_checks(partition: str = None) -> bool:
    settings = get_settings()
    is_valid, errors, _ = validate_environment()
    if not is_valid:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        return False

    async with FetchContext.from_settings(settings) as ctx:
        json_source = GitHubJsonSource(ctx)
        results = []

        index_result = await verify_index(json_source)
        results.append(index_result)

        if index_result["success"]:
            index = index_result["index"]
            if partition:
                file = next((f for f in index.files if f.path == partition), None)
                if file is None:
                    file = QuestionFile(path=partition, company="", year="")
            else:
                file = index.files[0] if index.files else None

            if file is not None:
                results.append(await verify_partition(json_source, file))

        results.append(await verify_jobs(GoogleSheetsJobSource(ctx)))

    return all(r["success"] for r in results)


def main():
    parser = argparse.ArgumentParser(description="Verify remote data sources")
    parser.add_argument("--partition", help="Partition path to check (data/<year>/<company>.json)")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"))
    parser.add_argument("--log-format", choices=["simple", "json"], default=os.getenv("LOG_FORMAT", "simple"))
    args = parser.parse_args()

    setup_logging(level=args.log_level, format=args.log_format)

    ok = asyncio.run(run_checks(args.partition))
    if ok:
        logger.info("\nAll checks passed!")
        sys.exit(0)
    logger.error("\nSome checks failed")
    sys.exit(1)


if __name__ == "__main__":
    main()
