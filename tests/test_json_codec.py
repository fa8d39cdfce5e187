"""Tests for the JSON codec adapter.

These tests verify that the codec:
- Round-trips documents without changing any _type
- Applies family defaults for a missing tag
- Decodes unknown discriminators to the unknown kind and refuses to encode them
- Reports malformed input as DecodeError
- Rejects abstract targets
"""

import json

import pytest

from openehr_rm.adapters.json_codec import decode, encode, extract_discriminator, to_wire, try_decode
from openehr_rm.domain.base import TYPE_TABLE
from openehr_rm.domain.models import (
    Composition,
    DvCodedText,
    DvQuantity,
    DvText,
    Element,
    Observation,
    OriginalVersion,
    Person,
)
from openehr_rm.domain.models.common import Locatable
from openehr_rm.domain.models.composition import Entry
from openehr_rm.domain.ports import AbstractTypeError, DecodeError, EncodeError
from openehr_rm.domain.services import canonicalize, validate
from openehr_rm.domain.union import ContentItem, DataValue, DvTextValue, Item, VersionData

from rm_documents import composition_document, element, person_version_document, text


class TestRoundTrip:
    """Test suite for decode/encode round trips."""

    def test_composition_round_trip(self, composition_doc):
        """Test that a fully tagged document survives decode and encode unchanged."""
        node = decode(json.dumps(composition_doc).encode(), Composition)
        assert isinstance(node, Composition)
        assert json.loads(encode(node)) == composition_doc

    def test_decode_from_mapping(self, composition_doc):
        """Test that decode accepts an already parsed object."""
        assert decode(composition_doc, Composition) == decode(json.dumps(composition_doc), Composition)

    def test_discriminator_fidelity(self, composition_doc):
        """Test that a coded text in a text slot stays a coded text."""
        composition_doc["name"] = {
            "_type": "DV_CODED_TEXT",
            "value": "Vital signs",
            "defining_code": {
                "_type": "CODE_PHRASE",
                "terminology_id": {"_type": "TERMINOLOGY_ID", "value": "local"},
                "code_string": "at0000",
            },
        }
        node = decode(json.dumps(composition_doc), Composition)
        assert node.name.kind == "DV_CODED_TEXT"
        assert isinstance(node.name.value, DvCodedText)
        assert json.loads(encode(node))["name"]["_type"] == "DV_CODED_TEXT"

    def test_content_variants_decoded(self, composition_doc):
        """Test that content items decode into their concrete entry types."""
        node = decode(json.dumps(composition_doc), Composition)
        observation = node.content[0].get(Observation)
        assert observation is not None
        element_node = observation.data.events[0].value.data.value.items[0].get(Element)
        assert element_node.value.get(DvQuantity).magnitude == 120.5

    def test_original_version_round_trip(self):
        """Test that a versioned PERSON survives decode and encode unchanged."""
        doc = person_version_document()
        node = decode(json.dumps(doc), OriginalVersion)
        assert validate(node) == []
        assert isinstance(node.data, VersionData)
        assert node.data.get(Person) is not None
        assert node.data.value.languages[0].kind == "DV_CODED_TEXT"
        assert json.loads(encode(node)) == doc

    def test_integral_magnitude_keeps_wire_form(self):
        """Test that integral and real magnitudes re-encode exactly as received."""
        for raw in (b'{"_type":"DV_QUANTITY","magnitude":3,"units":"kg"}',
                    b'{"_type":"DV_QUANTITY","magnitude":3.0,"units":"kg"}'):
            assert encode(decode(raw, DvQuantity)) == raw

    def test_encode_is_compact_utf8(self):
        """Test that encode writes compact UTF-8 JSON."""
        node = DvText(value="Blutdruck über normal")
        raw = encode(node)
        assert raw == '{"_type":"DV_TEXT","value":"Blutdruck über normal"}'.encode("utf-8")

    def test_encode_without_canonicalization(self):
        """Test that canonical=False writes only the tags that are set."""
        node = DvText(value="x")
        assert json.loads(encode(node, canonical=False)) == {"value": "x"}


class TestEveryType:
    """Test suite run over every registered concrete type."""

    @pytest.mark.parametrize("rm_type", sorted(TYPE_TABLE))
    def test_empty_node_round_trip(self, rm_type):
        """Test that a canonical node decodes back to an equal node with the same tag."""
        node_type = TYPE_TABLE[rm_type]
        node = canonicalize(node_type())
        raw = encode(node)

        assert extract_discriminator(raw) == rm_type
        assert decode(raw, node_type) == node


class TestUnionDecode:
    """Test suite for decoding straight into a union family."""

    def test_decode_union_from_bytes(self):
        """Test decoding a content item from bytes."""
        raw = json.dumps(composition_document()["content"][0]).encode()
        union = decode(raw, ContentItem)
        assert union.kind == "OBSERVATION"

    def test_missing_tag_uses_family_default(self):
        """Test that an untagged text decodes as DV_TEXT."""
        union = decode(b'{"value": "hello"}', DvTextValue)
        assert union.kind == "DV_TEXT"
        assert union.value.value == "hello"

    def test_missing_tag_without_default_is_unknown(self):
        """Test that an untagged data value has no variant."""
        union = decode(b'{"magnitude": 1}', DataValue)
        assert union.is_unknown
        assert union.unknown_type == ""

    def test_unknown_discriminator_is_not_an_error(self):
        """Test that an unknown tag yields the unknown kind without parsing the payload."""
        union = decode(b'{"_type": "DV_FANCY", "whatever": [1, 2, {"deep": true}]}', DataValue)
        assert union.is_unknown
        assert union.unknown_type == "DV_FANCY"

    def test_member_of_other_family_is_unknown(self):
        """Test that a real type outside the slot's family is unknown to that slot."""
        union = decode(b'{"_type": "DV_TEXT", "value": "x"}', Item)
        assert union.is_unknown
        assert union.unknown_type == "DV_TEXT"


class TestUnknownVariants:
    """Test suite for unknown variants nested in a tree."""

    def test_nested_unknown_decodes(self):
        """Test that decode succeeds with an unknown data value deep in the tree."""
        doc = composition_document(items=[element("Systolic", {"_type": "DV_FANCY", "level": 3})])
        node = decode(json.dumps(doc), Composition)
        element_node = node.content[0].value.data.events[0].value.data.value.items[0].value
        assert element_node.value.is_unknown
        assert element_node.value.unknown_type == "DV_FANCY"

    def test_encode_unknown_raises(self):
        """Test that a tree holding an unknown variant cannot be encoded."""
        doc = composition_document(items=[element("Systolic", {"_type": "DV_FANCY"})])
        node = decode(json.dumps(doc), Composition)
        with pytest.raises(EncodeError) as exc_info:
            encode(node)
        assert exc_info.value.family == "DATA_VALUE"
        assert exc_info.value.discriminator == "DV_FANCY"

    def test_encode_unknown_union_root_raises(self):
        """Test that encoding an unknown union directly raises."""
        with pytest.raises(EncodeError):
            encode(DataValue.unknown("DV_FANCY"))
        with pytest.raises(EncodeError):
            to_wire(DataValue.unknown("DV_FANCY"))


class TestDecodeErrors:
    """Test suite for malformed input."""

    def test_invalid_json(self):
        """Test that syntactically broken JSON raises DecodeError."""
        with pytest.raises(DecodeError):
            decode(b'{"_type": "DV_TEXT", "value": ', DvText)

    def test_wrong_field_shape(self):
        """Test that a field of the wrong JSON type raises DecodeError."""
        with pytest.raises(DecodeError) as exc_info:
            decode(b'{"_type": "DV_QUANTITY", "magnitude": "heavy", "units": "kg"}', DvQuantity)
        assert exc_info.value.discriminator == "DV_QUANTITY"

    def test_bad_variant_payload_names_family(self):
        """Test that a malformed member payload reports family and discriminator."""
        doc = {"_type": "ELEMENT", "name": text("x"), "archetype_node_id": "at0001",
               "value": {"_type": "DV_COUNT", "magnitude": {"not": "a number"}}}
        with pytest.raises(DecodeError) as exc_info:
            decode(json.dumps(doc), Element)
        assert exc_info.value.family == "DATA_VALUE"
        assert exc_info.value.discriminator == "DV_COUNT"
        assert "DATA_VALUE" in str(exc_info.value)

    def test_slot_requires_object(self):
        """Test that a union slot holding a scalar raises DecodeError."""
        with pytest.raises(DecodeError):
            decode(b'{"value": "not an object"}', Element)

    def test_non_object_root(self):
        """Test that a JSON array cannot decode into a node."""
        with pytest.raises(DecodeError):
            decode(b'[1, 2, 3]', DvText)

    @pytest.mark.parametrize("target", [Locatable, Entry])
    def test_abstract_target_rejected(self, target):
        """Test that decoding into an abstract type fails before parsing."""
        with pytest.raises(AbstractTypeError):
            decode(b'{"archetype_node_id": "at0001"}', target)

    def test_abstract_model_validate_rejected(self):
        """Test that abstract types cannot be built through pydantic either."""
        with pytest.raises(AbstractTypeError):
            Locatable.model_validate({"archetype_node_id": "at0001"})

    def test_unsupported_target(self):
        """Test that a non-model target is a programming error."""
        with pytest.raises(TypeError):
            decode(b'{}', dict)


class TestTryDecode:
    """Test suite for the non-raising entry point."""

    def test_success(self):
        """Test that a good document yields a success result."""
        result = try_decode(b'{"_type": "DV_TEXT", "value": "x"}', DvText)
        assert result.is_success()
        assert result.value.value == "x"

    def test_failure_carries_context(self):
        """Test that a bad document yields a failure with the error context."""
        result = try_decode(b'{"_type": "DV_QUANTITY", "magnitude": "heavy"}', DvQuantity)
        assert result.is_failure()
        assert result.error_type == "DecodeError"
        assert result.error_details["discriminator"] == "DV_QUANTITY"
        assert result.value is None
