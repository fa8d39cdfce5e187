"""Tests for binding optional Reference Model values as query parameters."""

import json

import duckdb
import psycopg2.extensions
import pytest

from openehr_rm.adapters.db_binding import from_db_value, register_psycopg2_adapters, to_db_value
from openehr_rm.domain.models import Composition, DvQuantity, DvText
from openehr_rm.domain.ports import EncodeError
from openehr_rm.domain.union import DataValue


@pytest.fixture
def connection():
    conn = duckdb.connect(":memory:")
    conn.execute("CREATE TABLE documents (id INTEGER, body VARCHAR)")
    yield conn
    conn.close()


class TestToDbValue:
    """Test suite for to_db_value."""

    def test_absent_binds_null(self):
        """Test that an absent value binds as NULL."""
        assert to_db_value(None) is None

    def test_node_binds_canonical_json(self):
        """Test that a node binds its canonical JSON text."""
        assert json.loads(to_db_value(DvText(value="x"))) == {"_type": "DV_TEXT", "value": "x"}

    def test_union_binds_member(self):
        """Test that a populated union binds the member document."""
        value = DataValue(DvQuantity(magnitude=1.5, units="kg"))
        assert json.loads(to_db_value(value)) == {"_type": "DV_QUANTITY", "magnitude": 1.5, "units": "kg"}

    def test_unknown_union_fails(self):
        """Test that the unknown kind cannot be bound."""
        with pytest.raises(EncodeError):
            to_db_value(DataValue.unknown("DV_FANCY"))

    def test_primitives_pass_through(self):
        """Test that primitives bind as themselves."""
        assert to_db_value("text") == "text"
        assert to_db_value(3) == 3


class TestFromDbValue:
    """Test suite for from_db_value."""

    def test_null_reads_absent(self):
        """Test that NULL reads back as absent."""
        assert from_db_value(None, DvText) is None

    def test_bytes_and_memoryview(self):
        """Test decoding from binary column values."""
        raw = b'{"_type":"DV_TEXT","value":"x"}'
        assert from_db_value(raw, DvText).value == "x"
        assert from_db_value(memoryview(raw), DvText).value == "x"

    def test_union_target(self):
        """Test reading into a family."""
        value = from_db_value('{"_type":"DV_QUANTITY","magnitude":2,"units":"kg"}', DataValue)
        assert value.kind == "DV_QUANTITY"


class TestDuckDbRoundTrip:
    """Test suite for storing documents through DuckDB parameters."""

    def test_store_and_load(self, connection, composition_doc):
        """Test that a composition survives a VARCHAR column unchanged."""
        node = Composition.model_validate(composition_doc)
        connection.execute("INSERT INTO documents VALUES (?, ?)", [1, to_db_value(node)])

        (body,) = connection.execute("SELECT body FROM documents WHERE id = 1").fetchone()
        assert json.loads(body) == composition_doc
        assert from_db_value(body, Composition) == node

    def test_absent_stored_as_null(self, connection):
        """Test that an absent value is stored as SQL NULL."""
        connection.execute("INSERT INTO documents VALUES (?, ?)", [2, to_db_value(None)])

        (is_null,) = connection.execute("SELECT body IS NULL FROM documents WHERE id = 2").fetchone()
        assert is_null
        (body,) = connection.execute("SELECT body FROM documents WHERE id = 2").fetchone()
        assert from_db_value(body, Composition) is None


class TestPsycopg2Adapters:
    """Test suite for psycopg2 adaptation."""

    def test_node_adapts_to_json_literal(self):
        """Test that a registered node quotes as a JSON literal."""
        register_psycopg2_adapters()
        quoted = psycopg2.extensions.adapt(DvText(value="x")).getquoted()
        assert quoted == b"""'{"_type":"DV_TEXT","value":"x"}'"""

    def test_union_adapts_to_member(self):
        """Test that a union quotes as its member document."""
        register_psycopg2_adapters()
        quoted = psycopg2.extensions.adapt(DataValue(DvText(value="y"))).getquoted()
        assert quoted == b"""'{"_type":"DV_TEXT","value":"y"}'"""

    def test_none_adapts_to_null(self):
        """Test that absent values adapt to NULL."""
        assert psycopg2.extensions.adapt(None).getquoted() == b"NULL"
