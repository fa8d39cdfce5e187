"""Composition and content types.

COMPOSITION with its EVENT_CONTEXT, navigational SECTIONs and the ENTRY
hierarchy (ADMIN_ENTRY, OBSERVATION, EVALUATION, INSTRUCTION, ACTION,
GENERIC_ENTRY) plus their supporting ACTIVITY, ISM_TRANSITION and
INSTRUCTION_DETAILS types.
"""

from typing import Annotated, Optional

from openehr_rm.domain.base import RMObject
from openehr_rm.domain.models.common import Locatable, Participation, PartyIdentified
from openehr_rm.domain.models.data_values import CodePhrase, DvCodedText, DvDateTime, DvParsable
from openehr_rm.domain.models.identifiers import LocatableRef, ObjectRef
from openehr_rm.domain.models.structures import History
from openehr_rm.domain.rules import CHARSET, LANGUAGE, NonEmpty, Required, Terminology
from openehr_rm.domain.union import ContentItem, DvTextValue, Item, ItemStructure, PartyProxy


class EventContext(RMObject):
    rm_type = "EVENT_CONTEXT"

    start_time: Annotated[Optional[DvDateTime], Required()] = None
    end_time: Optional[DvDateTime] = None
    location: Annotated[Optional[str], NonEmpty()] = None
    setting: Annotated[Optional[DvCodedText], Required()] = None
    other_context: Optional[ItemStructure] = None
    health_care_facility: Optional[PartyIdentified] = None
    participations: Annotated[Optional[list[Participation]], NonEmpty("PARTICIPATION")] = None


class Composition(Locatable):
    """Top-level clinical document committed as one version."""

    rm_type = "COMPOSITION"

    language: Annotated[Optional[CodePhrase], Required(), Terminology(LANGUAGE)] = None
    territory: Annotated[Optional[CodePhrase], Required()] = None
    category: Annotated[Optional[DvCodedText], Required()] = None
    context: Optional[EventContext] = None
    composer: Annotated[Optional[PartyProxy], Required()] = None
    content: Optional[list[ContentItem]] = None


class Section(Locatable):
    rm_type = "SECTION"

    items: Annotated[Optional[list[ContentItem]], NonEmpty("CONTENT_ITEM")] = None


class Entry(Locatable):
    """Abstract: a single clinical statement about a subject."""

    language: Annotated[Optional[CodePhrase], Required(), Terminology(LANGUAGE)] = None
    encoding: Annotated[Optional[CodePhrase], Required(), Terminology(CHARSET)] = None
    other_participations: Annotated[Optional[list[Participation]], NonEmpty("PARTICIPATION")] = None
    workflow_id: Optional[ObjectRef] = None
    subject: Annotated[Optional[PartyProxy], Required()] = None
    provider: Optional[PartyProxy] = None


class CareEntry(Entry):
    protocol: Optional[ItemStructure] = None
    guideline_id: Optional[ObjectRef] = None


class AdminEntry(Entry):
    rm_type = "ADMIN_ENTRY"

    data: Annotated[Optional[ItemStructure], Required()] = None


class Observation(CareEntry):
    rm_type = "OBSERVATION"

    data: Annotated[Optional[History], Required()] = None
    state: Optional[History] = None


class Evaluation(CareEntry):
    rm_type = "EVALUATION"

    data: Annotated[Optional[ItemStructure], Required()] = None


class Activity(Locatable):
    rm_type = "ACTIVITY"

    timing: Optional[DvParsable] = None
    action_archetype_id: Annotated[Optional[str], Required()] = None
    description: Annotated[Optional[ItemStructure], Required()] = None


class Instruction(CareEntry):
    rm_type = "INSTRUCTION"

    narrative: Annotated[Optional[DvTextValue], Required()] = None
    expiry_time: Optional[DvDateTime] = None
    wf_definition: Optional[DvParsable] = None
    activities: Annotated[Optional[list[Activity]], NonEmpty("ACTIVITY")] = None


class IsmTransition(RMObject):
    rm_type = "ISM_TRANSITION"

    current_state: Annotated[Optional[DvCodedText], Required()] = None
    transition: Optional[DvCodedText] = None
    careflow_step: Optional[DvCodedText] = None
    reason: Optional[DvTextValue] = None


class InstructionDetails(RMObject):
    rm_type = "INSTRUCTION_DETAILS"

    instruction_id: Annotated[Optional[LocatableRef], Required()] = None
    activity: Annotated[Optional[str], Required()] = None
    wf_details: Optional[ItemStructure] = None


class Action(CareEntry):
    rm_type = "ACTION"

    time: Annotated[Optional[DvDateTime], Required()] = None
    ism_transition: Annotated[Optional[IsmTransition], Required()] = None
    instruction_details: Optional[InstructionDetails] = None
    description: Annotated[Optional[ItemStructure], Required()] = None


class GenericEntry(Locatable):
    """Entry for data converted from legacy systems without clinical semantics."""

    rm_type = "GENERIC_ENTRY"

    data: Annotated[Optional[Item], Required()] = None
