"""CLI entry point: python -m pagedigest URL [options]"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pagedigest import settings
from pagedigest.diff import ChangeSummary, compare_documents
from pagedigest.items import RefinedDocument, ScrapeResult
from pagedigest.parser import PageDigest

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagedigest",
        description=(
            "Scrape one web page and print a bounded structural summary:\n"
            "heading outline, section blocks, links, images, metadata and stats."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("url", metavar="URL",
                        help="Page to scrape (bare domains like example.com are accepted)")
    parser.add_argument("--out", default=None, metavar="FILE",
                        help="Write the refined document as JSON to FILE")
    parser.add_argument("--raw", action="store_true", default=False,
                        help="With --out, write the raw (uncapped) extraction instead")
    parser.add_argument("--compare", default=None, metavar="FILE",
                        help="Compare against a previously stored refined JSON document")
    parser.add_argument("--timeout", type=float, default=settings.DOWNLOAD_TIMEOUT,
                        metavar="SECONDS",
                        help=f"Fetch timeout (default: {settings.DOWNLOAD_TIMEOUT})")
    parser.add_argument("--max-redirects", type=int, default=settings.MAX_REDIRECTS, metavar="N",
                        help=f"Maximum redirects to follow (default: {settings.MAX_REDIRECTS})")
    parser.add_argument("--user-agent", default=None, metavar="UA",
                        help="Override the User-Agent header")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help=f"Logging level (default: {settings.LOG_LEVEL})")
    return parser


def _load_stored(path: Path) -> RefinedDocument | None:
    try:
        return RefinedDocument.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except Exception as exc:
        logger.error("Could not read stored document %s: %s", path, exc)
        return None


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def _print_summary(doc: RefinedDocument, changes: ChangeSummary | None) -> None:
    from rich import box
    from rich.console import Console
    from rich.table import Table

    console = Console()
    stats = doc.stats

    table = Table(title=doc.title or doc.url, box=box.SIMPLE_HEAVY, show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_row("URL", doc.url)
    table.add_row("Description", doc.description or "-")
    table.add_row("Outline roots", str(len(doc.content_outline)))
    table.add_row("Sections", str(len(doc.content_sections)))
    table.add_row("Links", f"{stats.total_links} ({stats.unique_link_hosts} hosts)")
    table.add_row("Images", str(doc.image_count))
    table.add_row("Words", f"{stats.word_count} (~{stats.reading_time_minutes} min)")
    table.add_row("Structured data", str(doc.structured_data_count))
    table.add_row("Metadata keys", ", ".join(doc.metadata) or "-")
    console.print(table)

    if doc.content_outline:
        outline = Table(title="Outline", box=box.MINIMAL)
        outline.add_column("Level", justify="right")
        outline.add_column("Title")
        outline.add_column("Words", justify="right")
        for root in doc.content_outline:
            for node in root.walk():
                indent = "  " * (node.level - 1)
                outline.add_row(str(node.level), f"{indent}{node.title}", str(node.word_count))
        console.print(outline)

    if changes is not None:
        style = "yellow" if changes.has_changes else "green"
        for line in changes.summary:
            console.print(f"[{style}]{line}[/{style}]")


def _report_failure(result: ScrapeResult) -> None:
    hint = " (retryable)" if result.retryable else ""
    print(f"ERROR: {result.error_type}: {result.error}{hint}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=settings.LOG_FORMAT)

    stored = None
    if args.compare:
        stored = _load_stored(Path(args.compare))
        if stored is None:
            return 1

    digest = PageDigest(
        timeout=args.timeout,
        max_redirects=args.max_redirects,
        user_agent=args.user_agent,
    )
    result, doc = digest.scrape_refined(args.url)
    if doc is None or result.data is None:
        _report_failure(result)
        return 1

    changes = compare_documents(stored, doc) if stored is not None else None

    if args.out:
        payload = result.data.to_json_dict() if args.raw else doc.to_json_dict()
        _write_json(Path(args.out), payload)
        logger.info("Wrote %s document to %s", "raw" if args.raw else "refined", args.out)

    _print_summary(doc, changes)
    return 0


if __name__ == "__main__":
    sys.exit(main())
