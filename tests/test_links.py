"""Tests for pagedigest.extractors.links."""

from __future__ import annotations

from bs4 import BeautifulSoup

from pagedigest.extractors.links import (
    dedupe_by_href,
    extract_images,
    extract_links,
    extract_navigation_links,
    scoped_images,
    scoped_links,
)
from pagedigest.items import ImageRef, LinkRef

BASE = "https://acme.example/"


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


class TestDedupeByHref:
    def test_first_occurrence_wins(self):
        links = [
            LinkRef(text="first", href="https://a.example/"),
            LinkRef(text="second", href="https://a.example/"),
            LinkRef(text="other", href="https://b.example/"),
        ]
        result = dedupe_by_href(links)
        assert [link.text for link in result] == ["first", "other"]

    def test_empty_href_dropped(self):
        assert dedupe_by_href([LinkRef(text="x", href="")]) == []

    def test_images_keyed_by_src(self):
        images = [ImageRef(src="/a.png", alt="one"), ImageRef(src="/a.png", alt="two")]
        result = dedupe_by_href(images)
        assert len(result) == 1
        assert result[0].alt == "one"


class TestExtractLinks:
    def test_resolved_and_deduplicated(self, landing_soup):
        links = extract_links(landing_soup, BASE)
        hrefs = [link.href for link in links]
        assert len(hrefs) == len(set(hrefs))
        assert "https://acme.example/services" in hrefs
        assert "https://twitter.example/acme" in hrefs

    def test_duplicate_keeps_first_text(self, landing_soup):
        links = extract_links(landing_soup, BASE)
        signup = [link for link in links if link.href == "https://acme.example/signup"]
        assert len(signup) == 1
        assert signup[0].text == "Sign up"

    def test_text_falls_back_to_href(self):
        links = extract_links(_soup('<a href="/x"><img src="/i.png"></a>'), BASE)
        assert links[0].text == "/x"

    def test_dedupe_before_cap(self):
        anchors = '<a href="/same">s</a>' * 150 + "".join(
            f'<a href="/p{i}">p</a>' for i in range(10)
        )
        links = extract_links(_soup(anchors), BASE)
        assert len(links) == 11

    def test_capped(self):
        anchors = "".join(f'<a href="/p{i}">p</a>' for i in range(150))
        assert len(extract_links(_soup(anchors), BASE)) == 100


class TestExtractImages:
    def test_images_resolved(self, landing_soup):
        images = extract_images(landing_soup, BASE)
        assert [img.src for img in images] == [
            "https://acme.example/img/audit.png",
            "https://acme.example/img/plans.png",
        ]
        assert images[0].alt == "Audit chart"

    def test_capped(self):
        tags = "".join(f'<img src="/i{i}.png">' for i in range(80))
        assert len(extract_images(_soup(tags), BASE)) == 50


class TestNavigationLinks:
    def test_areas_in_priority_order(self, landing_soup):
        nav = extract_navigation_links(landing_soup, BASE)
        assert [item.area for item in nav] == [
            "navigation", "navigation", "header", "header", "footer", "footer",
        ]

    def test_duplicate_href_dropped(self, landing_soup):
        nav = extract_navigation_links(landing_soup, BASE)
        texts = [item.text for item in nav]
        assert "Services" in texts
        assert "Services again" not in texts

    def test_text_whitespace_collapsed(self, landing_soup):
        nav = extract_navigation_links(landing_soup, BASE)
        assert "Our Work" in [item.text for item in nav]

    def test_capped(self):
        anchors = "".join(f'<a href="/n{i}">n{i}</a>' for i in range(60))
        nav = extract_navigation_links(_soup(f"<nav>{anchors}</nav>"), BASE)
        assert len(nav) == 40

    def test_no_chrome(self):
        assert extract_navigation_links(_soup("<p>plain</p>"), BASE) == []


class TestScopedCollectors:
    def test_anchor_node_itself(self):
        anchor = _soup('<a href="/x">X</a>').find("a")
        assert [link.href for link in scoped_links(anchor, BASE)] == ["https://acme.example/x"]

    def test_descendants(self):
        div = _soup('<div><a href="/a">A</a><p><a href="/b">B</a></p></div>').find("div")
        assert len(scoped_links(div, BASE)) == 2

    def test_image_node_itself(self):
        img = _soup('<img src="/i.png" alt="I">').find("img")
        assert scoped_images(img, BASE)[0].alt == "I"
