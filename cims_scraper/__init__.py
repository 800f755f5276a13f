"""
Scraper for the FEEC "Repte dels 100 Cims" mountain catalog.

This module provides:
- Token, catalog and detail-page scraping (httpx + BeautifulSoup)
- Bounded, order-preserving enrichment of catalog entries with geolocation
- A pipeline that writes the merged catalog to a JSON file
"""

from .base import (
    BaseScraper,
    BasicMountainRecord,
    EnrichedMountainRecord,
    GeoFields,
    RunResult,
    SiteConfig,
)
from .config import SITES, get_site_config, resolve_site_config
from .exceptions import (
    ScraperError,
    NetworkError,
    TokenNotFoundError,
    ParseError,
    PersistenceError,
)
from .pipeline import ScrapePipeline, run_pipeline
from .scheduler import AdmissionGate, gather_all
from .settings import Settings

__all__ = [
    'BaseScraper',
    'BasicMountainRecord',
    'EnrichedMountainRecord',
    'GeoFields',
    'RunResult',
    'SiteConfig',
    'SITES',
    'get_site_config',
    'resolve_site_config',
    'ScraperError',
    'NetworkError',
    'TokenNotFoundError',
    'ParseError',
    'PersistenceError',
    'ScrapePipeline',
    'run_pipeline',
    'AdmissionGate',
    'gather_all',
    'Settings',
]
