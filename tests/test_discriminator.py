"""Tests for root-level discriminator extraction."""

import pytest

from openehr_rm.adapters.json_codec import extract_discriminator


class TestExtractDiscriminator:
    """Test suite for extract_discriminator."""

    def test_reads_root_tag(self):
        """Test that the root _type is returned."""
        assert extract_discriminator(b'{"_type":"DV_TEXT","value":"x"}') == "DV_TEXT"

    def test_tag_after_other_fields(self):
        """Test that the tag is found when it is not the first key."""
        raw = b'{"value": 1.5, "units": "kg", "_type": "DV_QUANTITY"}'
        assert extract_discriminator(raw) == "DV_QUANTITY"

    def test_nested_tag_does_not_leak(self):
        """Test that a _type inside a child object is not mistaken for the root tag."""
        raw = b'{"value": {"_type": "DV_TEXT", "value": "x"}, "archetype_node_id": "at0001"}'
        assert extract_discriminator(raw) == ""

    def test_nested_tag_before_root_tag(self):
        """Test that the root tag wins even after a nested one."""
        raw = b'{"value": {"_type": "DV_TEXT"}, "items": [{"_type": "CLUSTER"}], "_type": "ELEMENT"}'
        assert extract_discriminator(raw) == "ELEMENT"

    def test_tag_text_inside_string_value(self):
        """Test that a quoted '_type' inside a string value is skipped."""
        raw = b'{"note": "has \\"_type\\": \\"X\\" in it", "_type": "DV_TEXT"}'
        assert extract_discriminator(raw) == "DV_TEXT"

    @pytest.mark.parametrize("raw", [
        b'{}',
        b'{"value": "x"}',
        b'{"_type": 5}',
        b'{"_type": null}',
        b'[{"_type": "DV_TEXT"}]',
        b'"DV_TEXT"',
        b'',
        b'{"_type": "DV_TE',
    ])
    def test_missing_or_malformed_tag_returns_empty(self, raw):
        """Test that a missing, non-string or unreadable tag yields the empty string."""
        assert extract_discriminator(raw) == ""

    def test_accepts_text_and_whitespace(self):
        """Test that str input and surrounding whitespace are accepted."""
        assert extract_discriminator('  {\n  "_type" :  "PARTY_SELF" }  ') == "PARTY_SELF"

    def test_accepts_parsed_mapping(self):
        """Test that an already parsed mapping is read directly."""
        assert extract_discriminator({"_type": "CLUSTER", "items": []}) == "CLUSTER"
        assert extract_discriminator({"_type": 3}) == ""
        assert extract_discriminator({}) == ""
