"""
Pipeline orchestrator - runs the scraper stages and saves the result.

Stages run strictly one after the other:
    confirmation -> token -> catalog -> detail enrichment -> output file

Each stage must fully succeed before the next one starts. A failure in
any stage ends the run without writing anything.
"""

from typing import Optional
from datetime import datetime, timezone
import logging

import httpx

from .base import BaseScraper, RunResult, Colors
from .config import resolve_site_config
from .crawlers.static import StaticCrawler
from .scheduler import AdmissionGate
from .settings import Settings, settings as default_settings
from .sites.feec import FEECScraper
from .storage import JsonFileSink

logger = logging.getLogger(__name__)


class AlwaysProceed:
    """Confirmation collaborator that never asks."""

    def confirm_proceed(self) -> bool:
        return True


class ScrapePipeline:
    """
    Sequences the scraper stages and hands the records to the sink.

    Usage:
        pipeline = ScrapePipeline(scraper, JsonFileSink('out.json'), confirm=prompt)
        result = await pipeline.run()

    `confirm` is any object with a `confirm_proceed() -> bool` method. It
    is asked before any network request is made.
    """

    def __init__(self, scraper: BaseScraper, sink: JsonFileSink, confirm=None):
        """
        Initialize the pipeline.

        Args:
            scraper: Site scraper
            sink: Output sink with a write(records) method
            confirm: Confirmation collaborator (defaults to AlwaysProceed)
        """
        self.scraper = scraper
        self.sink = sink
        self.confirm = confirm or AlwaysProceed()

    async def run(self) -> RunResult:
        """
        Run the whole pipeline once.

        Returns:
            RunResult with statistics; proceeded is False when the
            operator declined to run

        Raises:
            ScraperError: Any failure, after it has been logged and
                recorded; no output is written in that case
        """
        result = RunResult(
            source=self.scraper.config.short_name,
            started_at=datetime.now(timezone.utc)
        )

        if not self.confirm.confirm_proceed():
            logger.info("Run declined, nothing fetched")
            result.proceeded = False
            result.completed_at = datetime.now(timezone.utc)
            return result

        logger.info(f"Starting scrape for {self.scraper.config.name}")

        try:
            token = await self.scraper.acquire_token()
            basic = await self.scraper.scrape_catalog(token)
            result.pages = getattr(self.scraper, 'total_pages', 0)
            result.total = len(basic)

            enriched = await self.scraper.enrich_all(basic)
            result.missing_geo = sum(1 for record in enriched if not (record.latitude and record.longitude))

            result.output_path = str(self.sink.write(enriched))

        except Exception as e:
            result.errors += 1
            result.error_details.append({'error': str(e), 'type': type(e).__name__})
            result.completed_at = datetime.now(timezone.utc)
            logger.error(f"{Colors.red('Scrape failed')}: {type(e).__name__}: {e}")
            raise

        result.completed_at = datetime.now(timezone.utc)
        duration = result.duration_seconds or 0
        logger.info(
            f"✅ Scrape complete in {duration:.1f}s: {result.total} mountains "
            f"from {result.pages} page(s), {result.missing_geo} without geolocation"
        )
        logger.debug(f"Run summary: {result.to_dict()}")
        return result


# Convenience function for standalone usage

async def run_pipeline(
    settings: Optional[Settings] = None,
    confirm=None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> RunResult:
    """
    Build the crawler, gate, scraper and sink from settings and run once.

    Args:
        settings: Settings to use (defaults to the global settings)
        confirm: Confirmation collaborator
        transport: Custom httpx transport, for tests against a fake site

    Returns:
        RunResult
    """
    settings = settings or default_settings
    crawler = StaticCrawler(
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
        transport=transport
    )
    gate = AdmissionGate(settings.max_concurrent_requests)
    scraper = FEECScraper(crawler, gate, resolve_site_config(settings))
    pipeline = ScrapePipeline(scraper, JsonFileSink(settings.output_path), confirm)

    async with crawler:
        return await pipeline.run()
