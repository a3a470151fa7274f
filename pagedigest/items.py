"""Pydantic models for raw extractions and refined (persisted) documents.

Attributes are snake_case in Python; ``model_dump(by_alias=True)`` produces
the camelCase JSON shape that is stored and later diffed.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Return the camelCase, JSON-serializable form of this model."""
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Leaf references
# ---------------------------------------------------------------------------

class LinkRef(_Model):
    text: str = ""
    href: str = ""


class NavLink(LinkRef):
    area: str | None = None  # navigation|header|footer


class ImageRef(_Model):
    src: str = ""
    alt: str = ""


class Headings(_Model):
    h1: list[str] = Field(default_factory=list)
    h2: list[str] = Field(default_factory=list)
    h3: list[str] = Field(default_factory=list)
    h4: list[str] = Field(default_factory=list)
    h5: list[str] = Field(default_factory=list)
    h6: list[str] = Field(default_factory=list)

    def total(self) -> int:
        return sum(len(getattr(self, f"h{level}")) for level in range(1, 7))


class MainHeadings(_Model):
    h1: list[str] = Field(default_factory=list)
    h2: list[str] = Field(default_factory=list)


class DomainInfo(_Model):
    domain: str = ""
    protocol: str = ""
    path: str = ""
    host: str = ""
    origin: str = ""


# ---------------------------------------------------------------------------
# Content structure
# ---------------------------------------------------------------------------

class OutlineNode(_Model):
    """Heading-anchored tree entry; children have a strictly deeper level."""

    id: str
    title: str
    level: int = Field(ge=1, le=3)
    summary: str = ""
    paragraphs: list[str] = Field(default_factory=list)
    bullets: list[list[str]] = Field(default_factory=list)
    links: list[LinkRef] = Field(default_factory=list)
    images: list[ImageRef] = Field(default_factory=list)
    word_count: int = 0
    body: str = ""
    sub_sections: list[OutlineNode] = Field(default_factory=list)

    def walk(self) -> list[OutlineNode]:
        """Return this node and all descendants in document order."""
        nodes = [self]
        for child in self.sub_sections:
            nodes.extend(child.walk())
        return nodes


class SectionBlock(_Model):
    """Container-anchored flat content record, independent of the outline."""

    id: str
    order: int = 0
    heading: str | None = None
    subheading: str | None = None
    summary: str = ""
    paragraphs: list[str] = Field(default_factory=list)
    list_items: list[str] = Field(default_factory=list)
    links: list[LinkRef] = Field(default_factory=list)
    images: list[ImageRef] = Field(default_factory=list)
    has_call_to_action: bool = False
    tag: str | None = None
    classes: list[str] = Field(default_factory=list)
    body: str = ""
    tone: str | None = None
    accent_color: str | None = None

    @field_validator("list_items", mode="before")
    @classmethod
    def flatten_list_items(cls, v: Any) -> Any:
        # Stored documents occasionally hold grouped items; flatten one level.
        if isinstance(v, list):
            flat: list[Any] = []
            for item in v:
                if isinstance(item, list):
                    flat.extend(item)
                else:
                    flat.append(item)
            return flat
        return v


class TextBlock(_Model):
    id: str
    heading: str = ""
    subheading: str = ""
    summary: str = ""
    body: str = ""
    paragraphs: list[str] = Field(default_factory=list)
    tag: str | None = None
    tone: str | None = None
    accent_color: str | None = None


class ExtractionStats(_Model):
    total_headings: int = 0
    total_links: int = 0
    total_images: int = 0
    total_keywords: int = 0
    text_length: int = 0
    has_title: bool = False
    has_description: bool = False
    has_keywords: bool = False
    has_open_graph: bool = False
    has_twitter_card: bool = False
    has_structured_data: bool = False
    has_canonical: bool = False
    has_robots: bool = False
    has_language: bool = False
    has_charset: bool = False
    has_viewport: bool = False
    section_count: int = 0
    paragraph_count: int = 0
    list_count: int = 0
    nav_link_count: int = 0
    word_count: int = 0
    reading_time_minutes: int = 0
    unique_link_hosts: int = 0


# ---------------------------------------------------------------------------
# Extraction results
# ---------------------------------------------------------------------------

class RawExtraction(_Model):
    """Unbounded result of a single scrape, before refinement."""

    url: str = ""
    domain_info: DomainInfo | None = None
    title: str = ""
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    headings: Headings = Field(default_factory=Headings)
    links: list[LinkRef] = Field(default_factory=list)
    images: list[ImageRef] = Field(default_factory=list)
    text: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)
    structured_data: list[Any] = Field(default_factory=list)
    stats: ExtractionStats = Field(default_factory=ExtractionStats)
    navigation: list[NavLink] = Field(default_factory=list)
    content_outline: list[OutlineNode] = Field(default_factory=list)
    content_sections: list[SectionBlock] = Field(default_factory=list)
    scraped_at: str = ""

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


class RefinedDocument(_Model):
    """Size-capped, persistence-ready condensation of a :class:`RawExtraction`."""

    url: str = ""
    title: str = ""
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    main_headings: MainHeadings = Field(default_factory=MainHeadings)
    important_links: list[LinkRef] = Field(default_factory=list)
    image_count: int = 0
    main_images: list[ImageRef] = Field(default_factory=list)
    text_preview: str = ""
    full_text: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)
    navigation_links: list[NavLink] = Field(default_factory=list)
    content_outline: list[OutlineNode] = Field(default_factory=list)
    content_sections: list[SectionBlock] = Field(default_factory=list)
    text_blocks: list[TextBlock] = Field(default_factory=list)
    stats: ExtractionStats = Field(default_factory=ExtractionStats)
    domain_info: DomainInfo | None = None
    structured_data_count: int = 0
    structured_data_samples: list[Any] = Field(default_factory=list)
    scraped_at: str = ""


class ScrapeResult(_Model):
    """Outcome of :func:`pagedigest.query.scrape`.

    ``success`` is False only for hard errors (bad input, fetch or parse
    failure); degraded extractions are still successful.
    """

    success: bool
    data: RawExtraction | None = None
    error: str | None = None
    error_type: str | None = None  # InvalidInput|ExtractionFailed|ParseFailed
    retryable: bool = False
