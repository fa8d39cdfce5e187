"""Variant registries for the closed union families.

A ``Family`` is an explicit, closed list of member type names. The mapping
from discriminator to concrete class is resolved lazily from the type table
on first use and then frozen; building it twice yields the same mapping, so
concurrent first use needs no lock.
"""

import importlib
import logging
from types import MappingProxyType
from typing import Mapping, Optional

from openehr_rm.domain.base import TYPE_TABLE, RMObject

logger = logging.getLogger(__name__)

_MODELS_PACKAGE = "openehr_rm.domain.models"


class Family:
    """A named closed set of concrete types that may occupy a union slot.

    Parameters:
        name: Family name used in violations and errors (e.g. ``DATA_VALUE``)
        members: Member type names
        default: Member used when a node carries no ``_type`` at all
    """

    def __init__(self, name: str, members: tuple[str, ...], default: Optional[str] = None):
        if default is not None and default not in members:
            raise ValueError(f"default {default} is not a member of family {name}")
        self.name = name
        self.members = frozenset(members)
        self.default = default
        self._registry: Optional[Mapping[str, type[RMObject]]] = None

    def __contains__(self, rm_type: str) -> bool:
        return rm_type in self.members

    def __repr__(self) -> str:
        return f"Family({self.name}, {len(self.members)} members)"

    @property
    def registry(self) -> Mapping[str, type[RMObject]]:
        """Frozen discriminator to class mapping."""
        if self._registry is None:
            self._registry = self._build()
        return self._registry

    def _build(self) -> Mapping[str, type[RMObject]]:
        importlib.import_module(_MODELS_PACKAGE)
        missing = sorted(m for m in self.members if m not in TYPE_TABLE)
        if missing:
            raise RuntimeError(f"family {self.name} names unregistered types: {', '.join(missing)}")
        logger.debug("Built variant registry for %s with %d members", self.name, len(self.members))
        return MappingProxyType({m: TYPE_TABLE[m] for m in sorted(self.members)})

    def resolve(self, discriminator: str) -> Optional[type[RMObject]]:
        """Return the class for a discriminator, or None if it is not a member.

        An empty discriminator resolves to the family default, if any.
        """
        if not discriminator:
            if self.default is None:
                return None
            discriminator = self.default
        return self.registry.get(discriminator)


DATA_VALUE = Family("DATA_VALUE", (
    "DV_BOOLEAN", "DV_STATE", "DV_IDENTIFIER", "DV_TEXT", "DV_CODED_TEXT", "DV_PARAGRAPH",
    "DV_INTERVAL", "DV_ORDINAL", "DV_SCALE", "DV_QUANTITY", "DV_COUNT", "DV_PROPORTION",
    "DV_DATE", "DV_TIME", "DV_DATE_TIME", "DV_DURATION", "DV_PERIODIC_TIME_SPECIFICATION",
    "DV_GENERAL_TIME_SPECIFICATION", "DV_MULTIMEDIA", "DV_PARSABLE", "DV_URI", "DV_EHR_URI",
))

DV_TEXT = Family("DV_TEXT", ("DV_TEXT", "DV_CODED_TEXT"), default="DV_TEXT")

DV_ORDERED = Family("DV_ORDERED", (
    "DV_ORDINAL", "DV_SCALE", "DV_QUANTITY", "DV_COUNT", "DV_PROPORTION",
    "DV_DATE", "DV_TIME", "DV_DATE_TIME", "DV_DURATION",
))

DV_ENCAPSULATED = Family("DV_ENCAPSULATED", ("DV_MULTIMEDIA", "DV_PARSABLE"))

ITEM = Family("ITEM", ("CLUSTER", "ELEMENT"))

ITEM_STRUCTURE = Family("ITEM_STRUCTURE", ("ITEM_SINGLE", "ITEM_LIST", "ITEM_TABLE", "ITEM_TREE"))

EVENT = Family("EVENT", ("POINT_EVENT", "INTERVAL_EVENT"))

CONTENT_ITEM = Family("CONTENT_ITEM", (
    "SECTION", "ADMIN_ENTRY", "OBSERVATION", "EVALUATION", "INSTRUCTION",
    "ACTIVITY", "ACTION", "GENERIC_ENTRY",
))

OBJECT_ID = Family("OBJECT_ID", (
    "HIER_OBJECT_ID", "OBJECT_VERSION_ID", "ARCHETYPE_ID", "TEMPLATE_ID", "GENERIC_ID",
))

PARTY_PROXY = Family("PARTY_PROXY", ("PARTY_SELF", "PARTY_IDENTIFIED", "PARTY_RELATED"))

UID_BASED_ID = Family("UID_BASED_ID", ("HIER_OBJECT_ID", "OBJECT_VERSION_ID"))

VERSION_DATA = Family("VERSION_DATA", (
    "EHR_STATUS", "EHR_ACCESS", "COMPOSITION", "FOLDER", "ROLE",
    "PERSON", "AGENT", "GROUP", "ORGANISATION",
))

ALL_FAMILIES = (
    DATA_VALUE, DV_TEXT, DV_ORDERED, DV_ENCAPSULATED, ITEM, ITEM_STRUCTURE, EVENT,
    CONTENT_ITEM, OBJECT_ID, PARTY_PROXY, UID_BASED_ID, VERSION_DATA,
)
