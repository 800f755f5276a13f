"""
Data extraction utilities for scrapers.

Parsing is driven by FieldRule descriptions (field name, CSS selector and
extraction mode) so page layouts live in configuration and the functions
here stay generic. Everything in this module is pure.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from ..exceptions import ParseError, TokenNotFoundError

Markup = Union[str, bytes, Tag]

# Ordinal indicator (used by the FEEC site) and the real degree sign
DEGREE_SIGNS = 'º°'

NONCE_PATTERN = re.compile(r'"nonce":"([a-zA-Z0-9]+)"')


class ExtractMode(Enum):
    """How a FieldRule turns matched elements into a value."""
    ATTRIBUTE = "attribute"     # Attribute of the matched element
    TEXT = "text"               # Trimmed text of the matched element
    EQUALS = "equals"           # Text equals a constant -> bool
    INTEGER = "integer"         # Digits of the text -> int
    LABELLED = "labelled"       # Text next to a label inside a container


@dataclass(frozen=True)
class FieldRule:
    """
    Extraction rule for one field.

    Attributes:
        name: Key of the field in the extracted dict
        mode: Extraction mode
        selector: CSS selector relative to the scope; None for the scope itself
        attribute: Attribute name (ATTRIBUTE mode)
        value: Constant to compare with (EQUALS) or label text (LABELLED)
        last: Use the last matching element instead of the first
    """
    name: str
    mode: ExtractMode
    selector: Optional[str] = None
    attribute: Optional[str] = None
    value: Optional[str] = None
    last: bool = False


def to_soup(markup: Markup) -> Tag:
    """Parse markup unless it is already a BeautifulSoup tag."""
    if isinstance(markup, Tag):
        return markup
    return BeautifulSoup(markup, 'html.parser')


def _select(scope: Tag, rule: FieldRule) -> List[Tag]:
    if rule.selector is None:
        return [scope]
    return scope.select(rule.selector)


def _pick(elements: List[Tag], last: bool) -> Optional[Tag]:
    if not elements:
        return None
    return elements[-1] if last else elements[0]


def parse_integer(text: str) -> int:
    """
    Parse the first number in free text.

    Thousands separators (comma, dot, space or no-break space) are tolerated.

    Examples:
        "1,200 m" -> 1200
        "2.913 m" -> 2913
        "1 200 m" -> 1200
        "Alçada: 987m" -> 987

    Raises:
        ParseError: If the text contains no digits
    """
    match = re.search(r'\d+(?:[.,\s\u00a0]\d{3}(?!\d))*', text or '')
    if not match:
        raise ParseError(f"No digits found in {text!r}")
    return int(re.sub(r'\D', '', match.group(0)))


def strip_degree(text: str) -> str:
    """Trim text and drop a trailing degree sign: ' 42.1234º ' -> '42.1234'."""
    return text.strip().rstrip(DEGREE_SIGNS).strip()


def find_labelled_value(scope: Tag, label: str, tag: str = 'div') -> str:
    """
    Read the value displayed next to a label.

    Looks for the innermost `tag` element whose text contains `label`
    and returns the text of its next sibling element, trimmed and without
    a trailing degree sign.

    Args:
        scope: Element to search in
        label: Literal label text (e.g., 'Latitud:')
        tag: Tag name of the label element

    Returns:
        The value, or '' when the label or its sibling is missing
    """
    escaped = label.replace('\\', '\\\\').replace('"', '\\"')
    matches = scope.select(f'{tag}:-soup-contains("{escaped}")')
    if not matches:
        return ''

    # Ancestors of the label match too; the last match is the innermost one
    sibling = matches[-1].find_next_sibling()
    if sibling is None:
        return ''
    return strip_degree(sibling.get_text())


def extract_field(scope: Tag, rule: FieldRule) -> Any:
    """Apply one rule to a parsed element."""
    elements = _select(scope, rule)

    if rule.mode == ExtractMode.ATTRIBUTE:
        element = _pick(elements, rule.last)
        if element is None:
            return ''
        value = element.get(rule.attribute, '')
        if isinstance(value, list):  # multi-valued attributes such as class
            value = ' '.join(value)
        return value.strip()

    if rule.mode == ExtractMode.TEXT:
        element = _pick(elements, rule.last)
        return element.get_text().strip() if element is not None else ''

    if rule.mode == ExtractMode.EQUALS:
        text = ''.join(element.get_text() for element in elements).strip()
        return text == rule.value

    if rule.mode == ExtractMode.INTEGER:
        element = _pick(elements, rule.last)
        text = element.get_text() if element is not None else ''
        try:
            return parse_integer(text)
        except ParseError as e:
            raise ParseError(f"Field '{rule.name}': {e}") from e

    if rule.mode == ExtractMode.LABELLED:
        container = _pick(elements, rule.last)
        if container is None:
            return ''
        return find_labelled_value(container, rule.value)

    raise ValueError(f"Unsupported extraction mode: {rule.mode}")


def extract_fields(markup: Markup, rules: Sequence[FieldRule]) -> Dict[str, Any]:
    """
    Extract typed field values from markup.

    Args:
        markup: HTML string or already parsed element
        rules: One rule per field

    Returns:
        Dictionary mapping rule name to extracted value

    Raises:
        ParseError: If an INTEGER field holds no digits
    """
    scope = to_soup(markup)
    return {rule.name: extract_field(scope, rule) for rule in rules}


def extract_items(markup: Markup, item_selector: str, rules: Sequence[FieldRule]) -> List[Dict[str, Any]]:
    """
    Extract one dict per element matching item_selector, in document order.

    Returns an empty list when nothing matches.
    """
    scope = to_soup(markup)
    return [extract_fields(item, rules) for item in scope.select(item_selector)]


def extract_slug(url: str) -> str:
    """
    Get the last non-empty segment of a URL path.

    Examples:
        https://www.feec.cat/cims/puigmal/ -> puigmal
        /cims/pica-d-estats -> pica-d-estats

    Raises:
        ParseError: If the path has no segment
    """
    segments = [segment for segment in urlparse(url or '').path.split('/') if segment]
    if not segments:
        raise ParseError(f"Cannot derive an id from URL {url!r}")
    return segments[-1]


def extract_nonce(markup: Markup, marker: str) -> str:
    """
    Extract the anti-forgery token from an inline script.

    Uses the first <script> whose text contains `marker` and reads the
    alphanumeric value of its "nonce":"..." entry.

    Raises:
        TokenNotFoundError: If no script contains the marker or the
            script has no nonce entry
    """
    soup = to_soup(markup)
    script = next(
        (s for s in soup.find_all('script') if marker in (s.string or '')),
        None
    )
    if script is None:
        raise TokenNotFoundError(f"No inline script containing {marker!r}")

    match = NONCE_PATTERN.search(script.string)
    if not match:
        raise TokenNotFoundError(f"Script containing {marker!r} has no nonce")
    return match.group(1)


def extract_last_page(markup: Markup, selector: str = 'a', attribute: str = 'data-page') -> Optional[int]:
    """
    Read the highest page index from the last paging control.

    Returns:
        The page count, or None when the last control has no such attribute

    Raises:
        ParseError: If the attribute is present but not a number
    """
    soup = to_soup(markup)
    controls = soup.select(selector)
    if not controls:
        return None

    value = controls[-1].get(attribute)
    if value is None or not str(value).strip():
        return None
    try:
        return int(str(value).strip())
    except ValueError as e:
        raise ParseError(f"Invalid page index {value!r} in paging control") from e
