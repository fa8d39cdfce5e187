"""Database Binding for Optional Reference Model Values.

Binds optional values as query parameters and reads them back:

    - absent (``None``) binds SQL NULL
    - a node or populated union binds its canonical JSON document
    - primitives bind as themselves

``to_db_value`` / ``from_db_value`` work with any DB-API driver (DuckDB
parameters included). ``register_psycopg2_adapters`` teaches psycopg2 to
adapt nodes directly, wrapping them in ``psycopg2.extras.Json`` as the
storage adapters do for JSON columns.
"""

import json
import logging
from typing import Any, Mapping, Optional, Union

import psycopg2.extensions
from psycopg2.extras import Json

from openehr_rm.adapters.json_codec import decode, encode, to_wire
from openehr_rm.domain.base import RMObject
from openehr_rm.domain.services.canonicalizer import canonicalize
from openehr_rm.domain.union import TaggedUnion

logger = logging.getLogger(__name__)


def to_db_value(value: Any) -> Any:
    """Return the driver value for an optional field.

    Parameters:
        value: ``None``, a node, a union, or a primitive

    Returns:
        ``None`` for absent, JSON text for nodes and unions, else ``value``

    Raises:
        EncodeError: If a union slot in the tree holds the unknown kind
    """
    if value is None:
        return None
    if isinstance(value, (RMObject, TaggedUnion)):
        return encode(value).decode("utf-8")
    return value


def from_db_value(raw: Optional[Union[str, bytes, Mapping[str, Any]]], target: type) -> Any:
    """Decode a column value back into ``target``; SQL NULL reads as absent.

    Raises:
        DecodeError: If the stored document is malformed
    """
    if raw is None:
        return None
    if isinstance(raw, memoryview):
        raw = raw.tobytes()
    return decode(raw, target)


def _adapt_node(value: Union[RMObject, TaggedUnion]) -> Json:
    if isinstance(value, RMObject):
        value = canonicalize(value)
    elif not value.is_unknown:
        value = type(value)(canonicalize(value.value))
    return Json(to_wire(value), dumps=lambda obj: json.dumps(obj, separators=(",", ":")))


def register_psycopg2_adapters() -> None:
    """Register psycopg2 adapters so nodes and unions bind as JSON parameters."""
    psycopg2.extensions.register_adapter(RMObject, _adapt_node)
    psycopg2.extensions.register_adapter(TaggedUnion, _adapt_node)
    logger.debug("Registered psycopg2 adapters for Reference Model nodes")
