"""Per-site scraper implementations."""

from .feec import FEECScraper

__all__ = ['FEECScraper']
