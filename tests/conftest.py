"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

FIXTURES_DIR = Path(__file__).parent / "fixtures"

LANDING_URL = "https://acme.example/"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


@pytest.fixture
def landing_html() -> str:
    return _read_fixture("landing.html")


@pytest.fixture
def containers_html() -> str:
    return _read_fixture("containers_only.html")


@pytest.fixture
def landing_soup(landing_html: str) -> BeautifulSoup:
    return make_soup(landing_html)
