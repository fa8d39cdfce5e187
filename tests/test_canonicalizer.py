"""Tests for the canonicalizer."""

import json

import pytest

from openehr_rm.adapters.json_codec import decode, encode, to_wire
from openehr_rm.domain.models import Composition, DvText, Element
from openehr_rm.domain.ports import MaxDepthExceededError
from openehr_rm.domain.services import Canonicalizer, canonicalize
from openehr_rm.domain.union import DataValue

from rm_documents import composition_document, element


def strip_tags(value):
    """Remove every _type except on union members that need one to resolve."""
    if isinstance(value, dict):
        return {k: strip_tags(v) for k, v in value.items() if k != "_type" or v in KEEP_TAGS}
    if isinstance(value, list):
        return [strip_tags(v) for v in value]
    return value


KEEP_TAGS = {
    "OBSERVATION", "POINT_EVENT", "ITEM_TREE", "ELEMENT", "DV_QUANTITY",
    "PARTY_IDENTIFIED", "PARTY_SELF", "OBJECT_VERSION_ID",
}


def all_tags(value, found=None):
    """Collect every dict in the wire tree as (has _type, _type) pairs."""
    found = [] if found is None else found
    if isinstance(value, dict):
        found.append(value.get("_type"))
        for child in value.values():
            all_tags(child, found)
    elif isinstance(value, list):
        for child in value:
            all_tags(child, found)
    return found


class TestCanonicalize:
    """Test suite for tag stamping."""

    def test_stamps_every_node(self):
        """Test that fixed-type children without a tag get one."""
        node = decode(json.dumps(strip_tags(composition_document())), Composition)
        assert node.type_ is None
        assert node.language.type_ is None

        stamped = canonicalize(node)
        assert stamped.type_ == "COMPOSITION"
        assert stamped.language.type_ == "CODE_PHRASE"
        assert stamped.language.terminology_id.type_ == "TERMINOLOGY_ID"
        assert None not in all_tags(to_wire(stamped))

    def test_restores_fully_tagged_document(self, composition_doc):
        """Test that stripping and restamping reproduces the tagged document."""
        node = decode(json.dumps(strip_tags(composition_doc)), Composition)
        assert json.loads(encode(node)) == composition_doc

    def test_idempotent(self):
        """Test that canonicalizing twice equals canonicalizing once."""
        node = decode(json.dumps(strip_tags(composition_document())), Composition)
        once = canonicalize(node)
        twice = canonicalize(once)
        assert twice == once
        assert twice is once

    def test_input_not_mutated(self):
        """Test that the input tree keeps its original tags."""
        node = DvText(value="x")
        stamped = canonicalize(node)
        assert node.type_ is None
        assert stamped.type_ == "DV_TEXT"

    def test_corrects_wrong_tag(self):
        """Test that a wrong tag on a fixed-type node is replaced."""
        node = DvText.model_validate({"_type": "DV_CODED_TEXT", "value": "x"})
        assert canonicalize(node).type_ == "DV_TEXT"

    def test_unknown_variant_passes_through(self):
        """Test that an unknown union member is left untouched."""
        node = Element.model_validate({
            "name": {"value": "x"}, "archetype_node_id": "at1", "value": {"_type": "DV_FANCY"},
        })
        stamped = canonicalize(node)
        assert stamped.value.is_unknown
        assert stamped.value.unknown_type == "DV_FANCY"
        assert stamped.name.value.type_ == "DV_TEXT"

    def test_union_members_rewrapped(self):
        """Test that a populated union slot keeps its family type after stamping."""
        node = Element(value=DataValue(DvText(value="x")))
        stamped = canonicalize(node)
        assert isinstance(stamped.value, DataValue)
        assert stamped.value.value.type_ == "DV_TEXT"

    def test_depth_bound(self):
        """Test that canonicalizing a too-deep tree raises."""
        doc = composition_document(items=[element("x", {"_type": "DV_TEXT", "value": "y"})])
        node = decode(json.dumps(doc), Composition)
        with pytest.raises(MaxDepthExceededError):
            Canonicalizer(max_depth=3).canonicalize(node)
