"""
Base classes for the 100 Cims scraper.

This module defines the abstract base class and data structures
shared by the site scraper, the pipeline and the output sink.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field, asdict
from datetime import datetime
import logging

from .scheduler import AdmissionGate, gather_all

logger = logging.getLogger(__name__)

# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    # Colors
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def yellow(text):
        return f"{Colors.YELLOW}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"

    @staticmethod
    def bold(text):
        return f"{Colors.BOLD}{text}{Colors.RESET}"


@dataclass(frozen=True)
class SiteConfig:
    """Configuration for the scraped source."""
    name: str                           # Full display name
    short_name: str                     # Logger suffix (e.g., 'FEEC')
    bootstrap_url: str                  # Page carrying the security token
    api_url: str                        # Catalog endpoint (form POST)
    api_action: str                     # 'action' form field
    catalog_query: str                  # 'cims_query' form field
    nonce_marker: str                   # Text identifying the token script
    essential_text: str                 # Marker label of an essential summit
    selectors: Dict[str, str] = field(default_factory=dict)  # CSS selectors


@dataclass(frozen=True)
class BasicMountainRecord:
    """A catalog entry as listed on the catalog pages."""
    id: str
    url: str
    image: str
    name: str
    height: int
    region: str
    essencial: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GeoFields:
    """Geolocation read from a detail page. Empty strings when missing."""
    latitude: str = ''
    longitude: str = ''

    @property
    def missing(self) -> List[str]:
        return [name for name, value in asdict(self).items() if not value]


@dataclass(frozen=True)
class EnrichedMountainRecord(BasicMountainRecord):
    """A catalog entry merged with the geolocation of its detail page."""
    latitude: str = ''
    longitude: str = ''

    @classmethod
    def merge(cls, record: BasicMountainRecord, geo: GeoFields) -> 'EnrichedMountainRecord':
        """Merge a basic record with its geo fields; record fields win on collision."""
        return cls(**{**asdict(geo), **asdict(record)})


@dataclass
class RunResult:
    """Result of a pipeline run."""
    source: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    proceeded: bool = True
    pages: int = 0
    total: int = 0
    missing_geo: int = 0
    output_path: Optional[str] = None
    errors: int = 0
    error_details: List[Dict] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.errors == 0

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at and self.started_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict:
        return {
            'source': self.source,
            'started_at': self.started_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'duration_seconds': self.duration_seconds,
            'proceeded': self.proceeded,
            'pages': self.pages,
            'total': self.total,
            'missing_geo': self.missing_geo,
            'output_path': self.output_path,
            'errors': self.errors,
            'error_details': self.error_details[:10],  # Limit error details
            'success': self.success,
        }


class BaseScraper(ABC):
    """
    Abstract base class for catalog scrapers.

    Subclasses must implement:
    - acquire_token(): Read the security token the catalog endpoint expects
    - scrape_catalog(): Fetch and parse every catalog page
    - scrape_detail(): Fetch and parse one detail page

    enrich_all() is shared: it runs one detail task per record behind the
    admission gate and merges results back by position.
    """

    # Log enrichment progress every N completed details
    PROGRESS_EVERY = 10

    def __init__(self, config: SiteConfig, gate: AdmissionGate):
        """
        Initialize the scraper.

        Args:
            config: Site configuration
            gate: Admission gate bounding concurrent detail requests
        """
        self.config = config
        self.gate = gate
        self.logger = logging.getLogger(f"scraper.{config.short_name}")

    @abstractmethod
    async def acquire_token(self) -> str:
        """
        Fetch the bootstrap page and return the anti-forgery token.

        Raises:
            TokenNotFoundError: If the page does not carry a token
        """
        pass

    @abstractmethod
    async def scrape_catalog(self, token: str) -> List[BasicMountainRecord]:
        """
        Fetch every catalog page and return the records in page order.

        Args:
            token: Anti-forgery token from acquire_token()
        """
        pass

    @abstractmethod
    async def scrape_detail(self, url: str) -> GeoFields:
        """
        Fetch a detail page and extract its geolocation.

        Args:
            url: Detail page URL, as listed in the catalog
        """
        pass

    def log_detail_extraction(self, record: BasicMountainRecord, geo: GeoFields):
        """Log which geo fields a detail page yielded."""
        missing = geo.missing
        if missing:
            self.logger.warning(f"   ✘ {record.id}: missing {', '.join(missing)}")
        else:
            self.logger.debug(f"   ➤ {record.id}: {geo.latitude}, {geo.longitude}")

    async def enrich_all(self, records: List[BasicMountainRecord]) -> List[EnrichedMountainRecord]:
        """
        Enrich every record with the geolocation of its detail page.

        Detail requests run concurrently behind the admission gate. The
        result keeps input order: result[i] is built from records[i].
        Any failing detail request fails the whole call.

        Args:
            records: Basic records from the catalog

        Returns:
            Enriched records, one per input record
        """
        total = len(records)
        completed = 0
        self.logger.info(
            f"Fetching {total} detail pages (max {self.gate.limit} concurrent requests)"
        )

        async def enrich(record: BasicMountainRecord) -> EnrichedMountainRecord:
            nonlocal completed
            geo = await self.gate.run(lambda: self.scrape_detail(record.url))
            self.log_detail_extraction(record, geo)

            completed += 1
            if completed % self.PROGRESS_EVERY == 0 or completed == total:
                self.logger.info(f"{Colors.bold('Progress')}: {completed}/{total} detail pages")

            return EnrichedMountainRecord.merge(record, geo)

        return await gather_all(enrich(record) for record in records)
