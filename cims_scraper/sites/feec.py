"""
FEEC "Repte dels 100 Cims" scraper.

Site structure:
- Bootstrap page: inline script `var ajaxcustom = {..."nonce":"..."}`
- Catalog: WordPress admin-ajax endpoint, form POST per page, returns an
  HTML fragment of `.item-100cims` links plus paging links carrying
  `data-page`
- Detail pages: label/value rows ("Latitud:", "Longitud:") inside a
  `.row.no-gutters.fw-light.lh-1-2` container
"""

from typing import List, Optional

from ..base import BaseScraper, BasicMountainRecord, GeoFields, SiteConfig
from ..config import get_site_config
from ..crawlers.static import StaticCrawler
from ..scheduler import AdmissionGate, gather_all
from ..utils.extractors import (
    ExtractMode,
    FieldRule,
    extract_fields,
    extract_items,
    extract_last_page,
    extract_nonce,
    extract_slug,
)


def catalog_rules(config: SiteConfig) -> List[FieldRule]:
    """Extraction rules for one catalog item (the item element is the link)."""
    selectors = config.selectors
    return [
        FieldRule('url', ExtractMode.ATTRIBUTE, attribute='href'),
        FieldRule('image', ExtractMode.ATTRIBUTE, selectors['image'], attribute='src'),
        FieldRule('name', ExtractMode.TEXT, selectors['name']),
        FieldRule('height', ExtractMode.INTEGER, selectors['facts']),
        FieldRule('region', ExtractMode.TEXT, selectors['facts'], last=True),
        FieldRule('essencial', ExtractMode.EQUALS, selectors['essential'], value=config.essential_text),
    ]


def detail_rules(config: SiteConfig) -> List[FieldRule]:
    """Extraction rules for the geolocation on a detail page."""
    container = config.selectors['detail_container']
    return [
        FieldRule('latitude', ExtractMode.LABELLED, container, value='Latitud:'),
        FieldRule('longitude', ExtractMode.LABELLED, container, value='Longitud:'),
    ]


class FEECScraper(BaseScraper):
    """
    Scraper for the FEEC 100 Cims catalog.

    Catalog pages are fetched all at once (there are only a handful);
    detail pages go through the admission gate.
    """

    def __init__(
        self,
        crawler: StaticCrawler,
        gate: AdmissionGate,
        config: Optional[SiteConfig] = None
    ):
        super().__init__(config or get_site_config('feec'), gate)
        self.crawler = crawler
        self._catalog_rules = catalog_rules(self.config)
        self._detail_rules = detail_rules(self.config)
        self.total_pages = 0

    async def acquire_token(self) -> str:
        """Read the anti-forgery nonce from the bootstrap page."""
        self.logger.info(f"Fetching security token from {self.config.bootstrap_url}")
        html = await self.crawler.fetch(self.config.bootstrap_url)
        token = extract_nonce(html, self.config.nonce_marker)
        self.logger.debug(f"Got token {token}")
        return token

    async def fetch_page(self, page: int, token: str) -> str:
        """
        Fetch one catalog page.

        Args:
            page: 1-based page index
            token: Anti-forgery token

        Returns:
            HTML fragment of the page
        """
        return await self.crawler.post_form(self.config.api_url, {
            'action': self.config.api_action,
            'nonce': token,
            'cims_query': self.config.catalog_query,
            'current_page': str(page),
        })

    async def fetch_total_pages(self, token: str) -> int:
        """
        Read the number of catalog pages from the paging controls of page 1.

        A fragment without paging controls holds a single page.
        """
        html = await self.fetch_page(1, token)
        total = extract_last_page(html, self.config.selectors['paging'])
        if total is None:
            self.logger.warning("No paging control found, assuming a single catalog page")
            return 1
        return max(total, 1)

    def parse_catalog_page(self, html: str) -> List[BasicMountainRecord]:
        """Parse a catalog fragment into basic records, in document order."""
        records = []
        for fields in extract_items(html, self.config.selectors['item'], self._catalog_rules):
            records.append(BasicMountainRecord(id=extract_slug(fields['url']), **fields))
        return records

    async def scrape_catalog(self, token: str) -> List[BasicMountainRecord]:
        """
        Fetch every catalog page concurrently and flatten the records.

        Pages are requested without a concurrency cap. One failing page
        fails the whole catalog.
        """
        self.total_pages = await self.fetch_total_pages(token)
        self.logger.info(f"Fetching {self.total_pages} catalog page(s)")

        pages = await gather_all(
            self.fetch_page(page, token) for page in range(1, self.total_pages + 1)
        )

        records = []
        for page, html in enumerate(pages, 1):
            page_records = self.parse_catalog_page(html)
            self.logger.debug(f"Page {page}: {len(page_records)} item(s)")
            records.extend(page_records)

        self.logger.info(f"Found {len(records)} mountains in the catalog")
        return records

    def parse_detail_page(self, html: str) -> GeoFields:
        """Parse the geolocation of a detail page; missing labels give ''."""
        return GeoFields(**extract_fields(html, self._detail_rules))

    async def scrape_detail(self, url: str) -> GeoFields:
        html = await self.crawler.fetch(url)
        return self.parse_detail_page(html)
