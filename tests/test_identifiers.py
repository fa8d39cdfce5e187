"""Tests for lexical grammars and identifier types."""

import pytest

from openehr_rm.domain import lexical
from openehr_rm.domain.models import ArchetypeId, HierObjectId, ObjectVersionId, VersionTreeId
from openehr_rm.domain.services import validate

from rm_documents import OVID


class TestLexical:
    """Test suite for the lexical predicates."""

    @pytest.mark.parametrize("value", [
        "8849182c-82ad-4088-a07f-48ead4180515",
        "1.2.840.113619",
        "openEHRSys.example.com",
    ])
    def test_valid_uids(self, value):
        """Test UUID, ISO OID and internet id roots."""
        assert lexical.is_uid(value)

    @pytest.mark.parametrize("value", ["", "-bad-.example", "has space", "a" * 256])
    def test_invalid_uids(self, value):
        """Test values that are none of the UID forms."""
        assert not lexical.is_uid(value)

    @pytest.mark.parametrize("value,expected", [
        ("2024-03-01T10:30:00Z", True),
        ("2024-03-01T10:30:00.123Z", True),
        ("2024-03-01T10:30:00+01:00", False),
        ("2024-02-30T10:30:00Z", False),
        ("2024-03-01", False),
    ])
    def test_rfc3339_utc(self, value, expected):
        """Test UTC date-time validation, including calendar checks."""
        assert lexical.is_rfc3339_utc(value) is expected

    @pytest.mark.parametrize("value,expected", [
        ("2024", True), ("2024-03", True), ("2024-03-01", True), ("2024-13-01", False), ("24-03-01", False),
    ])
    def test_dates(self, value, expected):
        """Test ISO 8601 dates with reduced precision."""
        assert lexical.is_iso8601_date(value) is expected

    @pytest.mark.parametrize("value,expected", [
        ("10:30:00", True), ("10:30", True), ("10:30:00.5Z", True), ("25:00:00", False), ("10h30", False),
    ])
    def test_times(self, value, expected):
        """Test ISO 8601 times."""
        assert lexical.is_iso8601_time(value) is expected

    @pytest.mark.parametrize("value,expected", [
        ("P1Y2M3DT4H5M6S", True), ("PT30M", True), ("P2W", True), ("P", False), ("PT", False), ("1D", False),
    ])
    def test_durations(self, value, expected):
        """Test ISO 8601 durations."""
        assert lexical.is_iso8601_duration(value) is expected

    def test_archetype_id(self):
        """Test the archetype id grammar."""
        assert lexical.is_archetype_id("openEHR-EHR-OBSERVATION.blood_pressure.v2")
        assert lexical.is_archetype_id("openEHR-EHR-CLUSTER.device-specialised.v1")
        assert not lexical.is_archetype_id("openEHR-EHR-OBSERVATION.blood_pressure")

    def test_split_object_version_id(self):
        """Test splitting a version id into its three parts."""
        assert lexical.split_object_version_id("a::b::1.2.3") == ("a", "b", "1.2.3")
        with pytest.raises(ValueError):
            lexical.split_object_version_id("a::b")


class TestVersionTreeId:
    """Test suite for the version tree value object."""

    def test_trunk(self):
        """Test a trunk version."""
        version = VersionTreeId.parse("1")
        assert version.is_first
        assert not version.is_branch
        assert str(version) == "1"

    def test_branch(self):
        """Test a branch version."""
        version = VersionTreeId.parse("2.1.3")
        assert version == VersionTreeId(2, 1, 3)
        assert version.is_branch
        assert not version.is_first

    def test_invalid(self):
        """Test that malformed version trees are rejected."""
        with pytest.raises(ValueError):
            VersionTreeId.parse("1.2")


class TestHierObjectId:
    """Test suite for HIER_OBJECT_ID."""

    def test_root_and_extension(self):
        """Test splitting root and extension."""
        node = HierObjectId(value="1.2.840.113619::patient-42")
        assert node.root == "1.2.840.113619"
        assert node.extension == "patient-42"
        assert validate(node) == []

    def test_bad_root(self):
        """Test that a root which is not a UID is reported at .value."""
        violations = validate(HierObjectId(value="not a uid"))
        assert [(v.path, v.message) for v in violations] == [
            ("$.value", "HIER_OBJECT_ID invalid root UID 'not a uid'"),
        ]

    def test_empty_extension(self):
        """Test that a trailing separator needs an extension."""
        violations = validate(HierObjectId(value="openEHRSys.example.com::"))
        assert [v.message for v in violations] == ["HIER_OBJECT_ID extension cannot be empty when '::' is present"]

    def test_too_many_separators(self):
        """Test that more than one separator is a format error."""
        violations = validate(HierObjectId(value="a::b::c"))
        assert len(violations) == 1
        assert "too many" in violations[0].message


class TestObjectVersionId:
    """Test suite for OBJECT_VERSION_ID."""

    def test_parts(self):
        """Test the accessor properties."""
        node = ObjectVersionId(value=OVID)
        assert node.object_id == "8849182c-82ad-4088-a07f-48ead4180515"
        assert node.creating_system_id == "openEHRSys.example.com"
        assert node.version_tree_id.is_first
        assert validate(node) == []

    def test_sub_paths(self):
        """Test that each malformed part is reported at its own sub-path."""
        violations = validate(ObjectVersionId(value="not a uid::::1.2"))
        assert [v.path for v in violations] == [
            "$.value.object_id",
            "$.value.creating_system_id",
            "$.value.version_tree_id",
        ]

    def test_wrong_part_count(self):
        """Test that a value without three parts is reported once."""
        violations = validate(ObjectVersionId(value="8849182c-82ad-4088-a07f-48ead4180515"))
        assert [v.path for v in violations] == ["$.value"]


class TestArchetypeId:
    """Test suite for ARCHETYPE_ID."""

    def test_invalid_archetype_id(self):
        """Test that a malformed archetype id is reported."""
        violations = validate(ArchetypeId(value="blood_pressure"))
        assert [(v.model, v.path) for v in violations] == [("ARCHETYPE_ID", "$.value")]
