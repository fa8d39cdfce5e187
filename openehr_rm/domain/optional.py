"""Optional field semantics.

Optional fields are native ``Optional[T] = None``: ``None`` means absent,
any other value (including ``""``, ``0`` or ``[]``) means present. What an
absent field looks like on the wire is a per-field null policy:

    - ``OMIT`` (default): the key is left out of the encoded object
    - ``EMIT_NULL``: the key is written with an explicit ``null``

Decoding maps a literal ``null`` back to absent under either policy, so
wrapping never adds nesting or loses information. Database binding of
optional values lives in ``openehr_rm.adapters.db_binding``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic.fields import FieldInfo


class NullPolicy(str, Enum):
    """How an absent optional field is written on encode."""
    OMIT = "omit"
    EMIT_NULL = "emit_null"


@dataclass(frozen=True)
class NullHandling:
    """``Annotated`` marker carrying a field's null policy."""
    policy: NullPolicy


EmitNull = NullHandling(NullPolicy.EMIT_NULL)


def null_policy(field: FieldInfo) -> NullPolicy:
    """Return the null policy declared on a model field (``OMIT`` if none)."""
    for marker in field.metadata:
        if isinstance(marker, NullHandling):
            return marker.policy
    return NullPolicy.OMIT


def is_present(value: Optional[Any]) -> bool:
    return value is not None
