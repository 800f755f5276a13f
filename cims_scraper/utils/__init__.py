"""Shared utilities for scrapers."""

from .extractors import (
    ExtractMode,
    FieldRule,
    extract_fields,
    extract_items,
    extract_slug,
    extract_nonce,
    extract_last_page,
    find_labelled_value,
    parse_integer,
)

__all__ = [
    'ExtractMode',
    'FieldRule',
    'extract_fields',
    'extract_items',
    'extract_slug',
    'extract_nonce',
    'extract_last_page',
    'find_labelled_value',
    'parse_integer',
]
