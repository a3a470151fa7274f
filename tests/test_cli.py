"""Tests for the ``python -m pagedigest`` command line."""

from __future__ import annotations

import json
from unittest.mock import patch

from pagedigest.__main__ import main
from pagedigest.errors import ExtractionFailed
from pagedigest.query import parse
from pagedigest.refine import refine_scraped_data


class TestMain:
    def test_writes_refined_document(self, landing_html, tmp_path):
        out = tmp_path / "doc.json"
        with patch("pagedigest.query.fetch_html", return_value=landing_html):
            code = main(["acme.example", "--out", str(out)])
        assert code == 0
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert payload["title"] == "Acme Studio | Design and Development"
        assert "textBlocks" in payload

    def test_writes_raw_extraction(self, landing_html, tmp_path):
        out = tmp_path / "raw.json"
        with patch("pagedigest.query.fetch_html", return_value=landing_html):
            code = main(["acme.example", "--out", str(out), "--raw"])
        assert code == 0
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert "headings" in payload
        assert "textBlocks" not in payload

    def test_failure_exit_code(self, capsys):
        with patch("pagedigest.query.fetch_html", side_effect=ExtractionFailed("down")):
            code = main(["acme.example"])
        assert code == 1
        assert "ERROR: ExtractionFailed: down" in capsys.readouterr().err

    def test_compare_against_stored(self, landing_html, tmp_path, capsys):
        stored = tmp_path / "stored.json"
        doc = refine_scraped_data(parse(landing_html, url="https://acme.example"))
        doc.title = "Old title"
        stored.write_text(json.dumps(doc.to_json_dict()), encoding="utf-8")
        with patch("pagedigest.query.fetch_html", return_value=landing_html):
            code = main(["acme.example", "--compare", str(stored)])
        assert code == 0
        assert "Page title changed." in capsys.readouterr().out

    def test_unreadable_stored_document(self, tmp_path):
        stored = tmp_path / "broken.json"
        stored.write_text("{not json", encoding="utf-8")
        assert main(["acme.example", "--compare", str(stored)]) == 1
