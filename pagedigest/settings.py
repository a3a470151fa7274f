"""Configuration constants for pagedigest.

Every value here can be overridden per call (keyword arguments), per
:class:`~pagedigest.parser.PageDigest` instance, or from the CLI.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------
DOWNLOAD_TIMEOUT = 30
MAX_REDIRECTS = 5

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)
ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
ACCEPT_LANGUAGE = "en-US,en;q=0.9"

# ---------------------------------------------------------------------------
# Raw extraction caps
# ---------------------------------------------------------------------------
RAW_LINK_LIMIT = 100
RAW_IMAGE_LIMIT = 50
MAIN_TEXT_LIMIT = 10_000
NAVIGATION_LIMIT = 40
NAVIGATION_TEXT_LIMIT = 160

# Outline (heading tree)
SIBLING_GUARD_LIMIT = 120
OUTLINE_LIMIT = 25
OUTLINE_TITLE_LIMIT = 200
OUTLINE_PARAGRAPH_LIMIT = 8
OUTLINE_PARAGRAPH_CHARS = 650
OUTLINE_BULLET_GROUPS = 6
OUTLINE_BULLET_ITEMS = 6
OUTLINE_BULLET_CHARS = 280
OUTLINE_LINK_LIMIT = 12
OUTLINE_IMAGE_LIMIT = 6

# Section blocks (container walk)
SECTION_LIMIT = 20
SECTION_PARAGRAPH_LIMIT = 10
SECTION_PARAGRAPH_CHARS = 700
SECTION_LIST_ITEM_LIMIT = 20
SECTION_LIST_ITEM_CHARS = 300
SECTION_LINK_LIMIT = 14
SECTION_IMAGE_LIMIT = 8
SECTION_CLASS_LIMIT = 6

LINK_TEXT_CHARS = 200
IMAGE_ALT_CHARS = 200

WORDS_PER_MINUTE = 200

# ---------------------------------------------------------------------------
# Refined document caps
# ---------------------------------------------------------------------------
REFINED_OUTLINE_LIMIT = 25
REFINED_SECTION_LIMIT = 20
REFINED_NAVIGATION_LIMIT = 40
REFINED_NAVIGATION_TEXT = 160
REFINED_LINK_LIMIT = 20
REFINED_LINK_TEXT = 100
REFINED_IMAGE_LIMIT = 5
REFINED_IMAGE_ALT = 200
TEXT_PREVIEW_CHARS = 2_000
FULL_TEXT_CHARS = 20_000
METADATA_KEY_LIMIT = 20
STRUCTURED_DATA_SAMPLES = 5
REFINED_PARAGRAPH_CHARS = 700
REFINED_LIST_ITEM_CHARS = 400
SECTION_BODY_CHARS = 5_000
TEXT_BLOCK_LIMIT = 18
TEXT_BLOCK_PARAGRAPHS = 12
MAIN_HEADINGS_H1 = 5
MAIN_HEADINGS_H2 = 10

# Fallback synthesis when the heading walk found nothing
FALLBACK_H1_LIMIT = 5
FALLBACK_H2_LIMIT = 8
FALLBACK_SECTION_LIMIT = 6

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
