"""Common types: LOCATABLE, archetyping, feeder audit, party proxies,
participations, audit details and revision history."""

from typing import Annotated, Iterator, Optional

from openehr_rm.domain.base import RMObject, Violation
from openehr_rm.domain.models.data_values import DvCodedText, DvDateTime, DvEhrUri, DvIdentifier, DvInterval, DvMultimedia
from openehr_rm.domain.models.identifiers import ArchetypeId, ObjectRef, ObjectVersionId, PartyRef, TemplateId
from openehr_rm.domain.rules import AUDIT_CHANGE_TYPE, NonEmpty, Required, Terminology
from openehr_rm.domain.union import DvEncapsulatedValue, DvTextValue, ItemStructure, PartyProxy, UidBasedId


class Archetyped(RMObject):
    rm_type = "ARCHETYPED"

    archetype_id: Annotated[Optional[ArchetypeId], Required()] = None
    template_id: Optional[TemplateId] = None
    rm_version: Annotated[Optional[str], Required()] = None


class Link(RMObject):
    rm_type = "LINK"

    meaning: Annotated[Optional[DvTextValue], Required()] = None
    type: Annotated[Optional[DvTextValue], Required()] = None
    target: Annotated[Optional[DvEhrUri], Required()] = None


class BasePartyProxy(RMObject):
    """Abstract: reference to a party, optionally with an external PARTY_REF."""

    external_ref: Optional[PartyRef] = None


class PartySelf(BasePartyProxy):
    rm_type = "PARTY_SELF"


class PartyIdentified(BasePartyProxy):
    rm_type = "PARTY_IDENTIFIED"

    name: Annotated[Optional[str], NonEmpty()] = None
    identifiers: Annotated[Optional[list[DvIdentifier]], NonEmpty("DV_IDENTIFIER")] = None

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        if self.name is None and self.identifiers is None and self.external_ref is None:
            yield self.violation(path, f"{self.rm_type} requires at least one of name, identifiers or external_ref",
                                 "Set name, identifiers or external_ref")


class PartyRelated(PartyIdentified):
    rm_type = "PARTY_RELATED"

    relationship: Annotated[Optional[DvCodedText], Required()] = None


class Participation(RMObject):
    rm_type = "PARTICIPATION"

    function: Annotated[Optional[DvTextValue], Required()] = None
    mode: Optional[DvCodedText] = None
    performer: Annotated[Optional[PartyProxy], Required()] = None
    time: Optional[DvInterval] = None


class FeederAuditDetails(RMObject):
    rm_type = "FEEDER_AUDIT_DETAILS"

    system_id: Annotated[Optional[str], Required()] = None
    location: Optional[PartyIdentified] = None
    subject: Optional[PartyProxy] = None
    provider: Optional[PartyIdentified] = None
    time: Optional[DvDateTime] = None
    version_id: Annotated[Optional[str], NonEmpty()] = None
    other_details: Optional[ItemStructure] = None


class FeederAudit(RMObject):
    rm_type = "FEEDER_AUDIT"

    originating_system_item_ids: Optional[list[DvIdentifier]] = None
    feeder_system_item_ids: Optional[list[DvIdentifier]] = None
    original_content: Optional[DvEncapsulatedValue] = None
    originating_system_audit: Annotated[Optional[FeederAuditDetails], Required()] = None
    feeder_system_audit: Optional[FeederAuditDetails] = None


class Locatable(RMObject):
    """Abstract root of every archetypable node."""

    name: Annotated[Optional[DvTextValue], Required()] = None
    archetype_node_id: Annotated[Optional[str], Required()] = None
    uid: Optional[UidBasedId] = None
    links: Annotated[Optional[list[Link]], NonEmpty("LINK")] = None
    archetype_details: Optional[Archetyped] = None
    feeder_audit: Optional[FeederAudit] = None


class AuditDetails(RMObject):
    rm_type = "AUDIT_DETAILS"

    system_id: Annotated[Optional[str], Required()] = None
    time_committed: Annotated[Optional[DvDateTime], Required()] = None
    change_type: Annotated[Optional[DvCodedText], Required(), Terminology(AUDIT_CHANGE_TYPE)] = None
    description: Optional[DvTextValue] = None
    committer: Annotated[Optional[PartyProxy], Required()] = None


class Attestation(AuditDetails):
    rm_type = "ATTESTATION"

    attested_view: Optional[DvMultimedia] = None
    proof: Annotated[Optional[str], NonEmpty()] = None
    items: Annotated[Optional[list[DvEhrUri]], NonEmpty("DV_EHR_URI")] = None
    reason: Annotated[Optional[DvTextValue], Required()] = None
    is_pending: Annotated[Optional[bool], Required()] = None


class RevisionHistoryItem(RMObject):
    rm_type = "REVISION_HISTORY_ITEM"

    version_id: Annotated[Optional[ObjectVersionId], Required()] = None
    audits: Annotated[Optional[list[AuditDetails]], Required(), NonEmpty("AUDIT_DETAILS")] = None


class RevisionHistory(RMObject):
    rm_type = "REVISION_HISTORY"

    items: Annotated[Optional[list[RevisionHistoryItem]], Required(), NonEmpty("REVISION_HISTORY_ITEM")] = None


class ItemTag(RMObject):
    """Key/value tag attached to a versioned object or a node inside one."""

    rm_type = "ITEM_TAG"

    key: Annotated[Optional[str], Required()] = None
    value: Annotated[Optional[str], NonEmpty()] = None
    target: Annotated[Optional[UidBasedId], Required()] = None
    target_path: Annotated[Optional[str], NonEmpty()] = None
    owner_id: Annotated[Optional[ObjectRef], Required()] = None
