"""Tests for the format classifier and its API."""
import pytest

from convertiq.formats.classifier import (
    ARCHIVE_MIME_TYPES,
    DEFAULT_FILE_TYPE,
    FILE_TYPES,
    category_for,
    classify,
    list_file_types,
)
from convertiq.formats.schemas import ConversionCategory


class TestClassify:
    """Tests for exact-match classification."""

    @pytest.mark.parametrize("mime_type", sorted(FILE_TYPES))
    def test_known_types_match_table(self, mime_type):
        descriptor = classify(mime_type)
        assert descriptor.label
        assert descriptor.conversions == FILE_TYPES[mime_type].conversions

    @pytest.mark.parametrize("mime_type", [
        "application/x-unknown",
        "text/x-python",
        "",
        "IMAGE/PNG",  # exact match only
    ])
    def test_unknown_types_get_default(self, mime_type):
        descriptor = classify(mime_type)
        assert descriptor.label == "Unknown"
        assert descriptor.conversions == []

    def test_none_is_unknown(self):
        assert classify(None).label == "Unknown"

    def test_pdf_targets_in_display_order(self):
        assert classify("application/pdf").conversions == ["DOCX", "JPG", "PNG", "TXT"]

    def test_text_plain(self):
        descriptor = classify("text/plain")
        assert descriptor.label == "TXT"
        assert "PDF" in descriptor.conversions

    def test_result_is_a_copy(self):
        descriptor = classify("image/png")
        descriptor.conversions.append("BOGUS")
        assert "BOGUS" not in classify("image/png").conversions

    def test_default_untouched_by_callers(self):
        classify("nope/nope").conversions.append("X")
        assert DEFAULT_FILE_TYPE.conversions == []


class TestCategoryFor:
    """Tests for coarse MIME-prefix routing."""

    @pytest.mark.parametrize("mime_type,expected", [
        ("application/pdf", ConversionCategory.DOCUMENT),
        ("application/msword", ConversionCategory.DOCUMENT),
        ("application/octet-stream", ConversionCategory.DOCUMENT),
        ("text/plain", ConversionCategory.DOCUMENT),
        ("image/png", ConversionCategory.IMAGE),
        ("image/svg+xml", ConversionCategory.IMAGE),
        ("audio/mpeg", ConversionCategory.MEDIA),
        ("video/mp4", ConversionCategory.MEDIA),
    ])
    def test_routing(self, mime_type, expected):
        assert category_for(mime_type) is expected

    @pytest.mark.parametrize("mime_type", [
        "text/html",
        "text/csv",
        "text/markdown",
        "font/woff2",
        "",
    ])
    def test_unrouted_types(self, mime_type):
        assert category_for(mime_type) is None

    @pytest.mark.parametrize("mime_type", ARCHIVE_MIME_TYPES)
    def test_archives_have_no_converter(self, mime_type):
        assert category_for(mime_type) is None
        assert classify(mime_type).label != "Unknown"


class TestFormatsApi:
    def test_list(self, api_client):
        resp = api_client.get("/api/formats")
        assert resp.status_code == 200
        entries = {e["mime_type"]: e for e in resp.json()}
        assert len(entries) == len(list_file_types())
        assert entries["video/mp4"]["label"] == "MP4"
        assert entries["video/mp4"]["icon"] == "orange"

    def test_classify_known(self, api_client):
        resp = api_client.get("/api/formats/classify", params={"mime_type": "image/jpeg"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["descriptor"]["label"] == "JPG"
        assert data["category"] == "image"

    def test_classify_unknown(self, api_client):
        resp = api_client.get("/api/formats/classify", params={"mime_type": "foo/bar"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["descriptor"] == {"label": "Unknown", "icon": "gray", "conversions": []}
        assert data["category"] is None
