"""
Utilities Package
Contains the stateless field extractors used by the HTML providers.
"""

# Import field extraction helpers from parser_utils module
from .parser_utils import (
    parse_price,
    parse_platforms,
    parse_number,
    parse_rating,
    clean_text,
    to_absolute_url,
    extract_id_from_url,
    first_text,
    first_attr,
)

# Define public interface for the package
__all__ = [
    "parse_price",          # Price from free text, None when free
    "parse_platforms",      # Platform icons inside an element
    "parse_number",         # Comma formatted integers
    "parse_rating",         # Rating values, None when not numeric
    "clean_text",
    "to_absolute_url",
    "extract_id_from_url",
    "first_text",
    "first_attr",
]
