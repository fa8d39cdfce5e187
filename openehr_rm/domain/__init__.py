"""Domain layer for the openEHR Reference Model codec.

This package contains the node base class, the tagged unions and their
family registries, the declarative rules and the per-type descriptors.
Domain code depends on pydantic only.
"""

from .base import RMObject, Violation
from .union import (
    ContentItem,
    DataValue,
    DvEncapsulatedValue,
    DvOrderedValue,
    DvTextValue,
    Event,
    Item,
    ItemStructure,
    ObjectId,
    PartyProxy,
    TaggedUnion,
    UidBasedId,
    VersionData,
)

__all__ = [
    "RMObject",
    "Violation",
    "TaggedUnion",
    "ContentItem",
    "DataValue",
    "DvEncapsulatedValue",
    "DvOrderedValue",
    "DvTextValue",
    "Event",
    "Item",
    "ItemStructure",
    "ObjectId",
    "PartyProxy",
    "UidBasedId",
    "VersionData",
]
