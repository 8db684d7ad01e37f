"""
Tests for the category classifier and category table.
"""
import pytest

from morning_report.categories import CATEGORY_CONFIG, CATEGORY_TITLES
from morning_report.classifier import matches_category
from morning_report.models import Item


def _item(title, summary=None, source=None):
    return Item(title=title, url="https://example.com/x", summary=summary, source=source)


class TestCategoryTable:
    """Tests for the static category table."""

    def test_category_ids(self):
        """Test that all categories are present in report order."""
        assert [c.id for c in CATEGORY_CONFIG] == [
            "world_major_incidents",
            "norway_incidents",
            "key_reports",
            "cyberforsvaret_social",
            "milno_targeting",
            "cyberforsvaret_media",
            "mil_ops_analysis",
        ]

    def test_every_category_has_queries(self):
        """Test that each category carries at least one search query."""
        assert all(c.queries for c in CATEGORY_CONFIG)
        assert len(CATEGORY_CONFIG[0].queries) == 3

    def test_titles_are_read_only(self):
        """Test that the title map cannot be mutated."""
        assert CATEGORY_TITLES["key_reports"] == "Viktige rapporter"
        with pytest.raises(TypeError):
            CATEGORY_TITLES["key_reports"] = "changed"

    def test_configs_are_frozen(self):
        """Test that category records are immutable."""
        with pytest.raises(AttributeError):
            CATEGORY_CONFIG[0].title = "changed"


class TestMatchesCategory:
    """Tests for per-category predicates."""

    def test_cyberforsvaret_social(self):
        """Test the Cyber Defence phrase matches the social category only."""
        item = _item("Norwegian Armed Forces Cyber Defence statement")
        assert matches_category(item, "cyberforsvaret_social") is True
        assert matches_category(item, "milno_targeting") is False

    def test_case_insensitive(self):
        """Test that matching ignores case."""
        assert matches_category(_item("RANSOMWARE wave"), "world_major_incidents")

    def test_summary_is_searched(self):
        """Test that the summary participates in matching."""
        item = _item("Weekly roundup", summary="Phishing against mil.no accounts")
        assert matches_category(item, "milno_targeting")

    def test_norway_incidents(self):
        """Test the Norway keywords."""
        assert matches_category(_item("Attack on Stavanger utility"), "norway_incidents")
        assert not matches_category(_item("Attack on Berlin utility"), "norway_incidents")

    def test_key_reports(self):
        """Test the report keywords."""
        assert matches_category(_item("NSM publishes trusselvurdering"), "key_reports")

    def test_mil_ops_analysis(self):
        """Test the military operations keywords."""
        assert matches_category(_item("Electronic warfare in Ukraine"), "mil_ops_analysis")

    def test_default_keywords(self):
        """Test the default incident keywords."""
        for title in ("Ransomware gang", "DDoS on banks", "Ny sårbarhet i Citrix",
                      "Data breach at retailer", "CISA adds KEV entry"):
            assert matches_category(_item(title), "world_major_incidents"), title
        assert not matches_category(_item("Quarterly earnings"), "world_major_incidents")

    def test_unknown_id_uses_default(self):
        """Test that unrecognized ids use the default keywords."""
        assert matches_category(_item("Intrusion detected"), "something_else")
        assert not matches_category(_item("Cat pictures"), "something_else")

    def test_media_requires_source(self):
        """Test that Norwegian media needs both keyword and source."""
        assert matches_category(_item("Cyberforsvaret øver", source="nrk.no"), "cyberforsvaret_media")
        assert not matches_category(_item("Cyberforsvaret øver", source="example.com"), "cyberforsvaret_media")
        assert not matches_category(_item("Forsvaret øver", source="nrk.no"), "cyberforsvaret_media")

    def test_media_without_source(self):
        """Test that a missing source never matches the media category."""
        assert not matches_category(_item("Cyberforsvaret"), "cyberforsvaret_media")

    def test_not_exclusive(self):
        """Test that one item can match several categories."""
        item = _item("Cyberforsvaret: ransomware report from Oslo")
        matched = [c.id for c in CATEGORY_CONFIG if matches_category(item, c.id)]
        assert {"world_major_incidents", "norway_incidents", "key_reports",
                "cyberforsvaret_social"} <= set(matched)
