"""
Tests for the FEEC scraper against a fake site.
"""

import asyncio

import pytest

from cims_scraper.base import BasicMountainRecord, EnrichedMountainRecord, GeoFields
from cims_scraper.exceptions import NetworkError, ParseError, TokenNotFoundError

from .fakes import (
    FakeFEECSite,
    build_scraper,
    catalog_page_html,
    detail_url,
    item_html,
    make_mountains,
)


def run_with(site, coro_factory, limit=15):
    """Run coro_factory(scraper) against the site and close the client."""
    crawler, scraper = build_scraper(site, limit)

    async def main():
        async with crawler:
            return await coro_factory(scraper)

    return asyncio.run(main()), scraper


class TestAcquireToken:
    """Test token discovery."""

    def test_returns_nonce(self, site):
        token, _ = run_with(site, lambda s: s.acquire_token())
        assert token == "abc123"

    def test_missing_nonce(self):
        site = FakeFEECSite(make_mountains(3, 3), nonce=None)
        with pytest.raises(TokenNotFoundError):
            run_with(site, lambda s: s.acquire_token())


class TestCatalog:
    """Test pagination and catalog parsing."""

    def test_parse_catalog_page(self, site):
        _, scraper = build_scraper(site)
        html = catalog_page_html([
            item_html('puigmal', 'Puigmal', '2,913 m', 'Ripollès', essential=True),
            item_html('tossal', 'Tossal', '1.200 m', 'Berguedà'),
        ])
        records = scraper.parse_catalog_page(html)
        assert records == [
            BasicMountainRecord(
                id='puigmal',
                url=detail_url('puigmal'),
                image='https://www.feec.cat/wp-content/uploads/puigmal.jpg',
                name='Puigmal',
                height=2913,
                region='Ripollès',
                essencial=True,
            ),
            BasicMountainRecord(
                id='tossal',
                url=detail_url('tossal'),
                image='https://www.feec.cat/wp-content/uploads/tossal.jpg',
                name='Tossal',
                height=1200,
                region='Berguedà',
                essencial=False,
            ),
        ]

    def test_height_without_digits_fails(self, site):
        _, scraper = build_scraper(site)
        html = catalog_page_html([item_html('x', 'X', 'desconeguda', 'R')])
        with pytest.raises(ParseError):
            scraper.parse_catalog_page(html)

    def test_total_pages(self, site):
        total, _ = run_with(site, lambda s: s.fetch_total_pages("abc123"))
        assert total == 3

    def test_total_pages_without_paging_is_one(self):
        site = FakeFEECSite(make_mountains(4, 4), paging=False)
        total, _ = run_with(site, lambda s: s.fetch_total_pages("abc123"))
        assert total == 1

    def test_records_in_page_order(self, site):
        records, scraper = run_with(site, lambda s: s.scrape_catalog("abc123"))
        assert len(records) == 25
        assert [r.id for r in records] == [m['slug'] for m in site.mountains]
        assert scraper.total_pages == 3

    def test_form_fields(self, site):
        run_with(site, lambda s: s.scrape_catalog("abc123"))
        # Page 1 for the page count, then every page
        assert sorted(int(f['current_page']) for f in site.forms) == [1, 1, 2, 3]
        for form in site.forms:
            assert form['action'] == 'load_100cims'
            assert form['nonce'] == 'abc123'
            assert form['cims_query'] == 'cims_actius'

    def test_uneven_pages(self):
        site = FakeFEECSite(make_mountains(7, 3))
        records, _ = run_with(site, lambda s: s.scrape_catalog("abc123"))
        assert [r.id for r in records] == [f'cim-{n:03d}' for n in range(7)]

    def test_failing_page_fails_catalog(self):
        site = FakeFEECSite(make_mountains(25, 10), failing_pages={2})
        with pytest.raises(NetworkError) as exc_info:
            run_with(site, lambda s: s.scrape_catalog("abc123"))
        assert exc_info.value.status_code == 500

    def test_bad_token_is_network_error(self, site):
        with pytest.raises(NetworkError):
            run_with(site, lambda s: s.scrape_catalog("wrong"))


class TestDetails:
    """Test detail parsing and bounded enrichment."""

    def test_parse_detail_page_missing_labels(self, site):
        _, scraper = build_scraper(site)
        assert scraper.parse_detail_page('<html><body>res</body></html>') == GeoFields('', '')

    def test_enrich_all_keeps_input_order_under_jitter(self):
        # Later records answer first
        site = FakeFEECSite(make_mountains(12, 12), detail_delay=lambda i: 0.002 * (12 - i))

        async def scrape(scraper):
            records = await scraper.scrape_catalog("abc123")
            return records, await scraper.enrich_all(records)

        (records, enriched), _ = run_with(site, scrape, limit=5)

        assert len(enriched) == len(records)
        for record, result, mountain in zip(records, enriched, site.mountains):
            assert isinstance(result, EnrichedMountainRecord)
            assert result.id == record.id
            assert result.latitude == mountain['latitude']
            assert result.longitude == mountain['longitude']

    def test_peak_concurrency_bounded(self):
        limit = 4
        site = FakeFEECSite(make_mountains(limit * 3, 5), detail_delay=lambda i: 0.003)

        async def scrape(scraper):
            return await scraper.enrich_all(await scraper.scrape_catalog("abc123"))

        enriched, scraper = run_with(site, scrape, limit=limit)
        assert len(enriched) == limit * 3
        assert site.detail_peak == limit
        assert scraper.gate.peak == limit

    def test_dispatch_follows_input_order(self):
        site = FakeFEECSite(make_mountains(6, 6))

        async def scrape(scraper):
            return await scraper.enrich_all(await scraper.scrape_catalog("abc123"))

        run_with(site, scrape, limit=1)
        assert site.detail_requests() == [detail_url(m['slug']) for m in site.mountains]

    def test_one_failure_fails_enrichment(self):
        site = FakeFEECSite(make_mountains(10, 10), failing_details={'cim-004'})

        async def scrape(scraper):
            return await scraper.enrich_all(await scraper.scrape_catalog("abc123"))

        with pytest.raises(NetworkError):
            run_with(site, scrape, limit=3)

    def test_record_fields_win_on_merge(self):
        record = BasicMountainRecord('a', 'u', 'i', 'n', 1, 'r', False)
        merged = EnrichedMountainRecord.merge(record, GeoFields('41.0', '2.0'))
        assert merged.to_dict() == {
            'id': 'a', 'url': 'u', 'image': 'i', 'name': 'n', 'height': 1,
            'region': 'r', 'essencial': False, 'latitude': '41.0', 'longitude': '2.0',
        }
