"""EHR, versioning and change-control types.

The EHR root refers to its parts through OBJECT_REFs; each reference field
is restricted to the entity types it may point at (``RefTarget``), and
every OBJECT_REF additionally checks that its identifier variant suits its
own ``type``.
"""

from typing import Annotated, ClassVar, Iterator, Optional

from openehr_rm.domain.base import RMObject, Violation
from openehr_rm.domain.models.common import Attestation, AuditDetails, ItemTag, Locatable, PartySelf
from openehr_rm.domain.models.data_values import DvCodedText, DvDateTime
from openehr_rm.domain.models.identifiers import HierObjectId, ObjectRef, ObjectVersionId
from openehr_rm.domain.rules import NonEmpty, RefTarget, Required
from openehr_rm.domain.union import ItemStructure, VersionData


class EhrStatus(Locatable):
    rm_type = "EHR_STATUS"

    subject: Annotated[Optional[PartySelf], Required()] = None
    is_queryable: Annotated[Optional[bool], Required()] = None
    is_modifiable: Annotated[Optional[bool], Required()] = None
    other_details: Optional[ItemStructure] = None


class EhrAccess(Locatable):
    rm_type = "EHR_ACCESS"


class Folder(Locatable):
    rm_type = "FOLDER"

    items: Annotated[Optional[list[ObjectRef]], NonEmpty("OBJECT_REF")] = None
    folders: Annotated[Optional[list["Folder"]], NonEmpty("FOLDER")] = None
    details: Optional[ItemStructure] = None


class Ehr(RMObject):
    """Root of one subject's health record."""

    rm_type = "EHR"

    system_id: Annotated[Optional[HierObjectId], Required()] = None
    ehr_id: Annotated[Optional[HierObjectId], Required()] = None
    contributions: Annotated[Optional[list[ObjectRef]], RefTarget("CONTRIBUTION")] = None
    ehr_status: Annotated[Optional[ObjectRef], Required(), RefTarget("EHR_STATUS", "VERSIONED_EHR_STATUS")] = None
    ehr_access: Annotated[Optional[ObjectRef], Required(), RefTarget("EHR_ACCESS", "VERSIONED_EHR_ACCESS")] = None
    compositions: Annotated[Optional[list[ObjectRef]], RefTarget("VERSIONED_COMPOSITION")] = None
    directory: Annotated[Optional[ObjectRef], RefTarget("FOLDER", "VERSIONED_FOLDER")] = None
    time_created: Annotated[Optional[DvDateTime], Required()] = None
    folders: Annotated[Optional[list[ObjectRef]], NonEmpty("OBJECT_REF"), RefTarget("FOLDER", "VERSIONED_FOLDER")] = None
    tags: Optional[list[ItemTag]] = None


class VersionedObject(RMObject):
    """Abstract: version container identified by a HIER_OBJECT_ID."""

    owner_types: ClassVar[frozenset] = frozenset({"EHR"})

    uid: Annotated[Optional[HierObjectId], Required()] = None
    owner_id: Annotated[Optional[ObjectRef], Required()] = None
    time_created: Annotated[Optional[DvDateTime], Required()] = None

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        if self.owner_id is not None and self.owner_id.type and self.owner_id.type not in self.owner_types:
            allowed = " or ".join(sorted(self.owner_types))
            yield self.violation(f"{path}.owner_id.type", f"invalid owner_id reference type: {self.owner_id.type}",
                                 f"Ensure owner_id refers to {allowed}")


class VersionedEhrStatus(VersionedObject):
    rm_type = "VERSIONED_EHR_STATUS"


class VersionedEhrAccess(VersionedObject):
    rm_type = "VERSIONED_EHR_ACCESS"


class VersionedComposition(VersionedObject):
    rm_type = "VERSIONED_COMPOSITION"


class VersionedFolder(VersionedObject):
    rm_type = "VERSIONED_FOLDER"


class VersionedParty(VersionedObject):
    rm_type = "VERSIONED_PARTY"
    owner_types = frozenset({"PERSON", "AGENT", "GROUP", "ORGANISATION", "ROLE", "VERSIONED_PARTY"})


class Contribution(RMObject):
    """Change-set recording the versions committed together."""

    rm_type = "CONTRIBUTION"

    uid: Annotated[Optional[HierObjectId], Required()] = None
    versions: Annotated[Optional[list[ObjectRef]], Required(), NonEmpty("OBJECT_REF")] = None
    audit: Annotated[Optional[AuditDetails], Required()] = None


class OriginalVersion(RMObject):
    rm_type = "ORIGINAL_VERSION"

    uid: Annotated[Optional[ObjectVersionId], Required()] = None
    preceding_version_uid: Optional[ObjectVersionId] = None
    other_input_version_uids: Annotated[Optional[list[ObjectVersionId]], NonEmpty("OBJECT_VERSION_ID")] = None
    lifecycle_state: Annotated[Optional[DvCodedText], Required()] = None
    attestations: Annotated[Optional[list[Attestation]], NonEmpty("ATTESTATION")] = None
    data: Annotated[Optional[VersionData], Required()] = None
    contribution: Annotated[Optional[ObjectRef], RefTarget("CONTRIBUTION")] = None
    commit_audit: Optional[AuditDetails] = None
    signature: Annotated[Optional[str], NonEmpty()] = None

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        if self.uid is None or self.preceding_version_uid is not None:
            return
        try:
            first = self.uid.version_tree_id.is_first
        except ValueError:
            # malformed uid is reported by OBJECT_VERSION_ID itself
            return
        if not first:
            yield self.violation(f"{path}.preceding_version_uid",
                                 "preceding_version_uid is required for any version after the first",
                                 "Set preceding_version_uid to the uid of the version this one replaces")
