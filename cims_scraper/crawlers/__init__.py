"""Crawler implementations."""

from .static import StaticCrawler

__all__ = ['StaticCrawler']
