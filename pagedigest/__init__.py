"""pagedigest - bounded, structured summaries of web pages.

Quick single-URL usage::

    from pagedigest import scrape, refine_scraped_data

    result = scrape("example.com")
    if result.success:
        doc = refine_scraped_data(result.data)
        print(doc.title)
        for node in doc.content_outline:
            print(node.level, node.title)

Re-scrape diffing::

    from pagedigest import PageDigest

    _, fresh, changes = PageDigest().rescrape(stored_document)
    print(changes.summary)
"""

from pagedigest.diff import ChangeSummary, compare_documents
from pagedigest.errors import ExtractionFailed, InvalidInput, PageDigestError, ParseFailed
from pagedigest.extractors.urlnorm import normalize_url
from pagedigest.items import RawExtraction, RefinedDocument, ScrapeResult
from pagedigest.parser import PageDigest
from pagedigest.query import extract, fetch_html, parse, parse_html, scrape
from pagedigest.refine import refine_scraped_data

__version__ = "0.1.0"
__all__ = [
    "ChangeSummary",
    "ExtractionFailed",
    "InvalidInput",
    "PageDigest",
    "PageDigestError",
    "ParseFailed",
    "RawExtraction",
    "RefinedDocument",
    "ScrapeResult",
    "compare_documents",
    "extract",
    "fetch_html",
    "normalize_url",
    "parse",
    "parse_html",
    "refine_scraped_data",
    "scrape",
]
