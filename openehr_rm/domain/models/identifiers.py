"""Identifier and reference types.

OBJECT_ID variants (HIER_OBJECT_ID, OBJECT_VERSION_ID, ARCHETYPE_ID,
TEMPLATE_ID, GENERIC_ID), TERMINOLOGY_ID and the reference types that embed
them (OBJECT_REF, PARTY_REF, LOCATABLE_REF).

A reference's ``type`` constrains which identifier variant it may carry:
references to root-level or versioned containers need a HIER_OBJECT_ID,
references to a specific version of an entity need an OBJECT_VERSION_ID.
This is checked by the validator, never during decode.
"""

from dataclasses import dataclass
from typing import Annotated, Iterator, Optional

from openehr_rm.domain import lexical
from openehr_rm.domain.base import RMObject, Violation
from openehr_rm.domain.rules import Matches, NonEmpty, Required
from openehr_rm.domain.union import ObjectId, UidBasedId

HIER_OBJECT_ID_TARGETS = frozenset({
    "EHR", "CONTRIBUTION", "VERSIONED_EHR_STATUS", "VERSIONED_EHR_ACCESS",
    "VERSIONED_COMPOSITION", "VERSIONED_FOLDER", "VERSIONED_PARTY",
})

OBJECT_VERSION_ID_TARGETS = frozenset({
    "EHR_STATUS", "EHR_ACCESS", "COMPOSITION", "FOLDER",
    "PERSON", "AGENT", "GROUP", "ORGANISATION",
})


@dataclass(frozen=True)
class VersionTreeId:
    """Parsed ``trunk_version [ '.' branch_number '.' branch_version ]``."""

    trunk_version: int
    branch_number: Optional[int] = None
    branch_version: Optional[int] = None

    @classmethod
    def parse(cls, value: str) -> 'VersionTreeId':
        if not lexical.is_version_tree_id(value):
            raise ValueError(f"invalid version tree id: {value!r}")
        parts = [int(p) for p in value.split(".")]
        if len(parts) == 1:
            return cls(parts[0])
        return cls(parts[0], parts[1], parts[2])

    @property
    def is_branch(self) -> bool:
        return self.branch_number is not None

    @property
    def is_first(self) -> bool:
        return self.trunk_version == 1 and not self.is_branch

    def __str__(self) -> str:
        if self.is_branch:
            return f"{self.trunk_version}.{self.branch_number}.{self.branch_version}"
        return str(self.trunk_version)


class TerminologyId(RMObject):
    rm_type = "TERMINOLOGY_ID"

    value: Annotated[Optional[str], Required()] = None


class HierObjectId(RMObject):
    """Hierarchical identifier of the form ``root['::'extension]``.

    The root must be a UUID, an ISO OID or an internet id.
    """

    rm_type = "HIER_OBJECT_ID"

    value: Annotated[Optional[str], Required()] = None

    @property
    def root(self) -> str:
        return lexical.split_hier_object_id(self.value or "")[0]

    @property
    def extension(self) -> Optional[str]:
        return lexical.split_hier_object_id(self.value or "")[1]

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        if not self.value:
            return
        value_path = f"{path}.value"
        try:
            root, extension = lexical.split_hier_object_id(self.value)
        except ValueError:
            yield self.violation(value_path, f"{self.rm_type} invalid format: too many '::'",
                                 f"Ensure {self.rm_type} value is in the format 'root::extension'")
            return
        if not root:
            yield self.violation(value_path, f"{self.rm_type} root part cannot be empty in '{self.value}'",
                                 f"Ensure {self.rm_type} value has a non-empty root part")
        elif not lexical.is_uid(root):
            yield self.violation(value_path, f"{self.rm_type} invalid root UID '{root}'",
                                 f"Ensure {self.rm_type} root part is a valid UUID, ISO_OID, or INTERNET_ID")
        if extension is not None and not extension:
            yield self.violation(value_path, f"{self.rm_type} extension cannot be empty when '::' is present",
                                 f"Ensure {self.rm_type} value has a non-empty extension part")


class ObjectVersionId(RMObject):
    """Version identifier ``object_id::creating_system_id::version_tree_id``."""

    rm_type = "OBJECT_VERSION_ID"

    value: Annotated[Optional[str], Required()] = None

    def split(self) -> tuple[str, str, str]:
        return lexical.split_object_version_id(self.value or "")

    @property
    def object_id(self) -> str:
        return self.split()[0]

    @property
    def creating_system_id(self) -> str:
        return self.split()[1]

    @property
    def version_tree_id(self) -> VersionTreeId:
        return VersionTreeId.parse(self.split()[2])

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        if not self.value:
            return
        value_path = f"{path}.value"
        try:
            object_id, creating_system_id, version_tree_id = lexical.split_object_version_id(self.value)
        except ValueError:
            yield self.violation(
                value_path, f"invalid value format: {self.value}",
                "Ensure value field follows the lexical form: object_id '::' creating_system_id '::' version_tree_id",
            )
            return
        if not lexical.is_uid(object_id):
            yield self.violation(f"{value_path}.object_id", f"invalid object_id format: {object_id}",
                                 "Ensure object_id follows a valid UID format")
        if not creating_system_id:
            yield self.violation(f"{value_path}.creating_system_id", "creating_system_id cannot be empty",
                                 "Ensure creating_system_id is not empty")
        if not version_tree_id:
            yield self.violation(f"{value_path}.version_tree_id", "version_tree_id cannot be empty",
                                 "Ensure version_tree_id is not empty")
        elif not lexical.is_version_tree_id(version_tree_id):
            yield self.violation(
                f"{value_path}.version_tree_id", f"invalid version_tree_id format: {version_tree_id}",
                "Ensure version_tree_id follows the lexical form: trunk_version [ '.' branch_number '.' branch_version ]",
            )


class ArchetypeId(RMObject):
    rm_type = "ARCHETYPE_ID"

    value: Annotated[
        Optional[str],
        Required(),
        Matches(lexical.is_archetype_id, "archetype id (rm_originator-rm_name-rm_entity.concept_name.vN)"),
    ] = None


class TemplateId(RMObject):
    rm_type = "TEMPLATE_ID"

    value: Annotated[Optional[str], Required()] = None


class GenericId(RMObject):
    rm_type = "GENERIC_ID"

    value: Annotated[Optional[str], Required()] = None
    scheme: Annotated[Optional[str], Required()] = None


def check_reference_id(ref: RMObject, path: str) -> Iterator[Violation]:
    """Check that a reference's identifier variant suits its target type."""
    if not ref.type or ref.id is None or ref.id.is_unknown:
        return
    if ref.type in HIER_OBJECT_ID_TARGETS:
        expected = HierObjectId
    elif ref.type in OBJECT_VERSION_ID_TARGETS:
        expected = ObjectVersionId
    else:
        return
    if ref.id.get(expected) is None:
        yield Violation(
            ref.rm_type,
            f"{path}.id",
            f"invalid id type for object ref type {ref.type}: expected {expected.rm_type}",
            f"Ensure id is of type {expected.rm_type} for object ref type {ref.type}",
        )


class ObjectRef(RMObject):
    """Reference to an object held in another service or repository."""

    rm_type = "OBJECT_REF"

    namespace: Annotated[Optional[str], Required(), Matches(lexical.is_namespace, "namespace")] = None
    type: Annotated[Optional[str], Required()] = None
    id: Annotated[Optional[ObjectId], Required()] = None

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        yield from check_reference_id(self, path)


class PartyRef(ObjectRef):
    rm_type = "PARTY_REF"


class LocatableRef(ObjectRef):
    """Reference to a LOCATABLE inside a versioned object, optionally with a path."""

    rm_type = "LOCATABLE_REF"

    id: Annotated[Optional[UidBasedId], Required()] = None
    path: Annotated[Optional[str], NonEmpty()] = None
