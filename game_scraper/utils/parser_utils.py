"""
Parser Utilities Module
Stateless field extractors shared by the HTML providers.
"""

import math
import re
from typing import List, Optional
from urllib.parse import urlsplit

from bs4 import Tag

from ..models import Platform, Price

CURRENCY = 'USD'

PRICE_PATTERN = re.compile(r'\$?\s*(\d[\d,]*(?:\.\d+)?)')
NUMBER_PATTERN = re.compile(r'\d[\d,]*')
DECIMAL_PATTERN = re.compile(r'\d+(?:\.\d+)?')
SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')

# Icon markers per platform, in the order they are reported
PLATFORM_ICONS = [
    (Platform.WINDOWS, '.icon-windows, .fa-windows'),
    (Platform.MAC, '.icon-apple, .fa-apple'),
    (Platform.LINUX, '.icon-linux, .fa-linux'),
    (Platform.ANDROID, '.icon-android, .fa-android'),
    (Platform.WEB, '.icon-html5, .fa-html5'),
]


def parse_price(text: Optional[str]) -> Optional[Price]:
    """
    Parse a price from free text.

    Returns None for empty text, for anything mentioning "free" and for
    text without a number (e.g. "Pay what you want").
    """
    if not text or 'free' in text.lower():
        return None

    match = PRICE_PATTERN.search(text)
    if not match:
        return None

    return Price(
        amount=float(match.group(1).replace(',', '')),
        currency=CURRENCY,
        formatted=text.strip(),
    )


def parse_platforms(element: Tag) -> List[Platform]:
    """Detect platforms from icon classes inside element"""
    return [platform for platform, selector in PLATFORM_ICONS if element.select_one(selector) is not None]


def parse_number(text: Optional[str]) -> Optional[int]:
    """Parse the first comma-formatted integer in text ("1,234 ratings" -> 1234)"""
    if not text:
        return None
    match = NUMBER_PATTERN.search(text)
    if not match:
        return None
    return int(match.group(0).replace(',', ''))


def parse_rating(text: Optional[str]) -> Optional[float]:
    """Parse a rating value; "N/A" and other non-numeric text give None"""
    if not text:
        return None
    match = DECIMAL_PATTERN.search(text)
    if not match:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace and trim"""
    return ' '.join(text.split()) if text else ''


def to_absolute_url(url: str, base_url: str) -> str:
    """Make url absolute against base_url, inserting exactly one slash between them"""
    if SCHEME_PATTERN.match(url):
        return url
    if url.startswith('//'):
        return 'https:' + url
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


def extract_id_from_url(url: str) -> str:
    """Return the last non-empty path segment of url, or url itself when it has none"""
    if '/' not in url:
        return url

    parts = urlsplit(url)
    path = parts.path if parts.scheme or parts.netloc else url.split('?', 1)[0].split('#', 1)[0]
    segments = [segment for segment in path.split('/') if segment]
    if segments:
        return segments[-1]
    # Bare origin such as https://example.io/
    return parts.netloc or url


def first_text(element: Tag, selector: str) -> Optional[str]:
    """Cleaned text of the first match of selector within element, None if missing or blank"""
    found = element.select_one(selector)
    if found is None:
        return None
    text = clean_text(found.get_text(' '))
    return text or None


def first_attr(element: Tag, selector: str, *attrs: str) -> Optional[str]:
    """First non-empty attribute (tried in order) of the first match of selector"""
    found = element.select_one(selector)
    if found is None:
        return None
    return element_attr(found, *attrs)


def element_attr(element: Tag, *attrs: str) -> Optional[str]:
    for attr in attrs:
        value = element.get(attr)
        if isinstance(value, list):
            value = ' '.join(value)
        if value and value.strip():
            return value.strip()
    return None
