"""JSON Codec Adapter.

This adapter converts Reference Model trees to and from their canonical JSON
wire form. Every polymorphic slot is an object carrying a ``_type`` string;
decode peeks that tag before parsing the payload, and encode writes it back
after canonicalization.

Error Handling:
    - Malformed JSON, wrong field shapes and bad variant payloads raise
      ``DecodeError`` naming the family and the discriminator
    - Nesting past the configured limit raises ``MaxDepthExceededError``
    - Decoding into an abstract type raises ``AbstractTypeError``
    - An unknown discriminator is not an error: the slot decodes to the
      unknown kind, which the validator reports and encode refuses
    - ``try_decode`` wraps all of the above in a ``Result``

Architecture:
    - Field names, aliases and null policies come from the type descriptors;
      there is no per-type encode or decode code
    - Decode runs through pydantic with a ``DepthGuard`` in the validation
      context; encode is a bounded walk over ``model_fields``
"""

import json
import logging
from typing import Any, Mapping, Optional, TypeVar, Union

from pydantic import ValidationError

from openehr_rm.domain.base import DEPTH_GUARD_KEY, DepthGuard, RMObject, default_max_depth
from openehr_rm.domain.discriminator import extract_discriminator
from openehr_rm.domain.optional import NullPolicy, null_policy
from openehr_rm.domain.ports import (
    AbstractTypeError,
    CodecError,
    DecodeError,
    EncodeError,
    MaxDepthExceededError,
    Result,
)
from openehr_rm.domain.services.canonicalizer import canonicalize
from openehr_rm.domain.union import TaggedUnion

logger = logging.getLogger(__name__)

N = TypeVar('N', bound=RMObject)
U = TypeVar('U', bound=TaggedUnion)

RawInput = Union[bytes, bytearray, str, Mapping[str, Any]]

__all__ = ["decode", "encode", "to_wire", "try_decode", "extract_discriminator"]


def decode(raw: RawInput, target: type, max_depth: Optional[int] = None) -> Any:
    """Decode serialized bytes (or a parsed mapping) into a node or union.

    Parameters:
        raw: JSON bytes/text, or an already parsed JSON object
        target: A concrete ``RMObject`` subclass or a ``TaggedUnion`` family
        max_depth: Optional override of the configured nesting limit

    Returns:
        An instance of ``target``. For a union target whose discriminator is
        not a family member, the unknown kind.

    Raises:
        AbstractTypeError: If ``target`` is an abstract type
        MaxDepthExceededError: If the input nests deeper than ``max_depth``
        DecodeError: If the input is malformed
    """
    limit = max_depth if max_depth is not None else default_max_depth()
    context = {DEPTH_GUARD_KEY: DepthGuard(limit)}

    if isinstance(target, type) and issubclass(target, TaggedUnion):
        return _decode_union(raw, target, context)
    if not (isinstance(target, type) and issubclass(target, RMObject)):
        raise TypeError(f"cannot decode into {target!r}: not a Reference Model type or family")
    if target.is_abstract():
        raise AbstractTypeError(f"cannot decode into abstract type {target.__name__}", discriminator=target.__name__)
    return _decode_node(raw, target, context)


def _decode_union(raw: RawInput, target: type[U], context: dict) -> U:
    if isinstance(raw, Mapping):
        return target.decode_mapping(raw, context)

    discriminator = extract_discriminator(raw)
    node_type = target.family.resolve(discriminator)
    if node_type is None:
        logger.debug("Unknown %s discriminator %r", target.family.name, discriminator)
        return target.unknown(discriminator)
    return target(_decode_node(raw, node_type, context, family=target.family.name))


def _decode_node(raw: RawInput, target: type[N], context: dict, family: Optional[str] = None) -> N:
    try:
        if isinstance(raw, Mapping):
            return target.model_validate(raw, context=context)
        return target.model_validate_json(raw, context=context)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_input=False)
        if any(e["type"] == "json_invalid" and "recursion" in str(e.get("ctx", "")) for e in errors):
            raise MaxDepthExceededError(context[DEPTH_GUARD_KEY].max_depth, path=target.rm_type, family=family) from exc
        logger.warning("Failed to decode %s: %d error(s)", target.rm_type, exc.error_count())
        raise DecodeError(
            f"cannot decode {family or target.rm_type} variant {target.rm_type}: {exc}",
            family=family,
            discriminator=target.rm_type,
            details={"errors": errors},
        ) from exc


def to_wire(node: Any, max_depth: Optional[int] = None) -> Any:
    """Convert a node, union or list into plain JSON-ready Python values.

    Absent fields are omitted unless their null policy is ``EMIT_NULL``.
    No canonicalization is applied; ``_type`` is written only where set.

    Raises:
        EncodeError: On an unknown union kind or nesting past ``max_depth``
    """
    limit = max_depth if max_depth is not None else default_max_depth()
    return _wire_value(node, 0, limit)


def _wire_node(node: RMObject, depth: int, limit: int) -> dict:
    if depth > limit:
        raise EncodeError(f"max depth exceeded: nesting deeper than {limit} levels at {node.rm_type}",
                          discriminator=node.rm_type, details={"max_depth": limit})
    out: dict[str, Any] = {}
    for name, field in type(node).model_fields.items():
        key = field.alias or name
        value = getattr(node, name)
        if value is None:
            if null_policy(field) is NullPolicy.EMIT_NULL:
                out[key] = None
            continue
        out[key] = _wire_value(value, depth, limit)
    return out


def _wire_value(value: Any, depth: int, limit: int) -> Any:
    if isinstance(value, RMObject):
        return _wire_node(value, depth + 1, limit)
    if isinstance(value, TaggedUnion):
        if value.is_unknown:
            raise EncodeError(
                f"cannot serialize unrecognized subtype {value.unknown_type!r} of family {value.family.name}",
                family=value.family.name,
                discriminator=value.unknown_type,
            )
        return _wire_node(value.value, depth + 1, limit)
    if isinstance(value, list):
        return [_wire_value(item, depth, limit) for item in value]
    return value


def encode(node: Any, canonical: bool = True, max_depth: Optional[int] = None) -> bytes:
    """Encode a node (or a populated union) as compact UTF-8 JSON.

    Parameters:
        node: Root node or union
        canonical: Stamp every ``_type`` before writing (default True)
        max_depth: Optional override of the configured nesting limit

    Returns:
        bytes: The encoded document

    Raises:
        EncodeError: If any union slot holds the unknown kind
        MaxDepthExceededError: If canonicalization meets a too-deep tree
    """
    if canonical:
        if isinstance(node, TaggedUnion) and not node.is_unknown:
            node = type(node)(canonicalize(node.value, max_depth))
        elif isinstance(node, RMObject):
            node = canonicalize(node, max_depth)
    wire = to_wire(node, max_depth)
    return json.dumps(wire, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def try_decode(raw: RawInput, target: type, max_depth: Optional[int] = None) -> Result[Any]:
    """Non-raising ``decode``: returns a ``Result`` instead of raising codec errors."""
    try:
        return Result.success_result(decode(raw, target, max_depth))
    except CodecError as exc:
        return Result.failure_result(exc)
