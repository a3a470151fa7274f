"""Extraction sub-package: deterministic, pure functions over a parsed document."""

from .links import extract_images, extract_links, extract_navigation_links
from .metadata import extract_metadata, extract_structured_data
from .outline import build_content_outline
from .sections import build_section_blocks
from .stats import compute_stats
from .text import clean_paragraph_text, sanitize_plain_text, truncate_text
from .urlnorm import normalize_url, resolve_url

__all__ = [
    "build_content_outline",
    "build_section_blocks",
    "clean_paragraph_text",
    "compute_stats",
    "extract_images",
    "extract_links",
    "extract_metadata",
    "extract_navigation_links",
    "extract_structured_data",
    "normalize_url",
    "resolve_url",
    "sanitize_plain_text",
    "truncate_text",
]
