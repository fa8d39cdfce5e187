"""Tagged unions for polymorphic slots.

A ``TaggedUnion`` holds exactly one member of its family together with the
member's kind, or the unknown kind when decode met a discriminator outside
the family. Each family gets one subclass; model fields are typed with that
subclass and pydantic routes their validation through ``decode_mapping``.

Decode is two-phase: peek the discriminator, resolve it in the family
registry, then fully decode the payload into the resolved class. An
unresolved discriminator yields the unknown kind without touching the
payload.
"""

import logging
from typing import Any, ClassVar, Mapping, Optional, TypeVar

from pydantic import ValidationError
from pydantic_core import core_schema

from openehr_rm.domain import families
from openehr_rm.domain.base import RMObject
from openehr_rm.domain.discriminator import extract_discriminator
from openehr_rm.domain.families import Family
from openehr_rm.domain.ports import DecodeError

logger = logging.getLogger(__name__)

N = TypeVar('N', bound=RMObject)


class TaggedUnion:
    """One member of a closed family, stored as (kind, value).

    Construct with a member node; the kind is stamped from the node's
    ``rm_type``. ``unknown()`` builds the unknown state, which has no value.
    """

    family: ClassVar[Family]

    __slots__ = ("kind", "value", "unknown_type")

    def __init__(self, value: RMObject):
        if not isinstance(value, RMObject) or type(value).rm_type not in self.family:
            raise TypeError(f"{type(value).__name__} is not a member of family {self.family.name}")
        self.kind: Optional[str] = type(value).rm_type
        self.value: Optional[RMObject] = value
        self.unknown_type: Optional[str] = None

    @classmethod
    def unknown(cls, discriminator: str = "") -> 'TaggedUnion':
        """Build the unknown state for a discriminator outside the family."""
        instance = cls.__new__(cls)
        instance.kind = None
        instance.value = None
        instance.unknown_type = discriminator
        return instance

    @property
    def is_unknown(self) -> bool:
        return self.kind is None

    def get(self, node_type: type[N]) -> Optional[N]:
        """Return the value if the active variant is exactly ``node_type``, else None."""
        if self.value is not None and type(self.value) is node_type:
            return self.value
        return None

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self.kind, self.value, self.unknown_type) == (other.kind, other.value, other.unknown_type)

    def __hash__(self) -> int:
        return hash((type(self), self.kind, self.value, self.unknown_type))

    def __repr__(self) -> str:
        if self.is_unknown:
            return f"{type(self).__name__}(unknown={self.unknown_type!r})"
        return f"{type(self).__name__}({self.value!r})"

    @classmethod
    def decode_mapping(cls, data: Mapping[str, Any], context: Optional[dict] = None) -> 'TaggedUnion':
        """Decode one parsed JSON object into this family.

        Raises:
            DecodeError: If the payload of a resolved variant is malformed
        """
        discriminator = extract_discriminator(data)
        target = cls.family.resolve(discriminator)
        if target is None:
            logger.debug("Unknown %s discriminator %r", cls.family.name, discriminator)
            return cls.unknown(discriminator)
        try:
            node = target.model_validate(data, context=context)
        except ValidationError as exc:
            logger.warning("Failed to decode %s as %s: %d error(s)", cls.family.name, target.rm_type, exc.error_count())
            raise DecodeError(
                f"cannot decode {cls.family.name} variant {target.rm_type}: {exc}",
                family=cls.family.name,
                discriminator=target.rm_type,
                details={"errors": exc.errors(include_url=False, include_input=False)},
            ) from exc
        return cls(node)

    @classmethod
    def _validate(cls, data: Any, info: core_schema.ValidationInfo) -> 'TaggedUnion':
        if isinstance(data, cls):
            return data
        if isinstance(data, TaggedUnion):
            if data.is_unknown:
                return cls.unknown(data.unknown_type or "")
            data = data.value
        if isinstance(data, RMObject):
            if type(data).rm_type not in cls.family:
                raise ValueError(f"{type(data).rm_type} is not a member of family {cls.family.name}")
            return cls(data)
        if isinstance(data, Mapping):
            return cls.decode_mapping(data, info.context)
        raise DecodeError(
            f"cannot decode {cls.family.name}: expected a JSON object, got {type(data).__name__}",
            family=cls.family.name,
        )

    @classmethod
    def _serialize(cls, union: 'TaggedUnion') -> Any:
        return union.value

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.with_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(cls._serialize),
        )


class DataValue(TaggedUnion):
    family = families.DATA_VALUE


class DvTextValue(TaggedUnion):
    family = families.DV_TEXT


class DvOrderedValue(TaggedUnion):
    family = families.DV_ORDERED


class DvEncapsulatedValue(TaggedUnion):
    family = families.DV_ENCAPSULATED


class Item(TaggedUnion):
    family = families.ITEM


class ItemStructure(TaggedUnion):
    family = families.ITEM_STRUCTURE


class Event(TaggedUnion):
    family = families.EVENT


class ContentItem(TaggedUnion):
    family = families.CONTENT_ITEM


class ObjectId(TaggedUnion):
    family = families.OBJECT_ID


class PartyProxy(TaggedUnion):
    family = families.PARTY_PROXY


class UidBasedId(TaggedUnion):
    family = families.UID_BASED_ID


class VersionData(TaggedUnion):
    family = families.VERSION_DATA
