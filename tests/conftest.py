"""
Pytest configuration and fixtures for the scraper tests.
"""

import pytest

from cims_scraper.settings import Settings

from .fakes import FakeFEECSite, make_mountains


@pytest.fixture
def site():
    """A three-page site with 25 mountains."""
    return FakeFEECSite(make_mountains(25, per_page=10))


@pytest.fixture
def test_settings(tmp_path):
    """Settings writing into a temporary directory."""
    return Settings(output_file=str(tmp_path / "cims.json"), max_concurrent_requests=4)
