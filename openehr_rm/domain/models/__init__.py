"""Reference Model type descriptors.

Importing this package registers every concrete type in the type table.
"""

from openehr_rm.domain.models.identifiers import (
    ArchetypeId,
    GenericId,
    HierObjectId,
    LocatableRef,
    ObjectRef,
    ObjectVersionId,
    PartyRef,
    TemplateId,
    TerminologyId,
    VersionTreeId,
)
from openehr_rm.domain.models.data_values import (
    CodePhrase,
    DvBoolean,
    DvCodedText,
    DvCount,
    DvDate,
    DvDateTime,
    DvDuration,
    DvEhrUri,
    DvGeneralTimeSpecification,
    DvIdentifier,
    DvInterval,
    DvMultimedia,
    DvOrdinal,
    DvParagraph,
    DvParsable,
    DvPeriodicTimeSpecification,
    DvProportion,
    DvQuantity,
    DvScale,
    DvState,
    DvText,
    DvTime,
    DvUri,
    ReferenceRange,
    TermMapping,
)
from openehr_rm.domain.models.common import (
    Archetyped,
    Attestation,
    AuditDetails,
    FeederAudit,
    FeederAuditDetails,
    ItemTag,
    Link,
    Locatable,
    Participation,
    PartyIdentified,
    PartyRelated,
    PartySelf,
    RevisionHistory,
    RevisionHistoryItem,
)
from openehr_rm.domain.models.structures import (
    Cluster,
    Element,
    History,
    IntervalEvent,
    ItemList,
    ItemSingle,
    ItemTable,
    ItemTree,
    PointEvent,
)
from openehr_rm.domain.models.composition import (
    Action,
    Activity,
    AdminEntry,
    Composition,
    Evaluation,
    EventContext,
    GenericEntry,
    Instruction,
    InstructionDetails,
    IsmTransition,
    Observation,
    Section,
)
from openehr_rm.domain.models.ehr import (
    Contribution,
    Ehr,
    EhrAccess,
    EhrStatus,
    Folder,
    OriginalVersion,
    VersionedComposition,
    VersionedEhrAccess,
    VersionedEhrStatus,
    VersionedFolder,
    VersionedParty,
)
from openehr_rm.domain.models.demographic import (
    Address,
    Agent,
    Contact,
    Group,
    Organisation,
    PartyIdentity,
    PartyRelationship,
    Person,
    Role,
)

__all__ = [
    'ArchetypeId', 'GenericId', 'HierObjectId', 'LocatableRef', 'ObjectRef', 'ObjectVersionId',
    'PartyRef', 'TemplateId', 'TerminologyId', 'VersionTreeId',
    'CodePhrase', 'DvBoolean', 'DvCodedText', 'DvCount', 'DvDate', 'DvDateTime', 'DvDuration',
    'DvEhrUri', 'DvGeneralTimeSpecification', 'DvIdentifier', 'DvInterval', 'DvMultimedia',
    'DvOrdinal', 'DvParagraph', 'DvParsable', 'DvPeriodicTimeSpecification', 'DvProportion',
    'DvQuantity', 'DvScale', 'DvState', 'DvText', 'DvTime', 'DvUri', 'ReferenceRange', 'TermMapping',
    'Archetyped', 'Attestation', 'AuditDetails', 'FeederAudit', 'FeederAuditDetails', 'ItemTag',
    'Link', 'Locatable', 'Participation', 'PartyIdentified', 'PartyRelated', 'PartySelf',
    'RevisionHistory', 'RevisionHistoryItem',
    'Cluster', 'Element', 'History', 'IntervalEvent', 'ItemList', 'ItemSingle', 'ItemTable',
    'ItemTree', 'PointEvent',
    'Action', 'Activity', 'AdminEntry', 'Composition', 'Evaluation', 'EventContext',
    'GenericEntry', 'Instruction', 'InstructionDetails', 'IsmTransition', 'Observation', 'Section',
    'Contribution', 'Ehr', 'EhrAccess', 'EhrStatus', 'Folder', 'OriginalVersion',
    'VersionedComposition', 'VersionedEhrAccess', 'VersionedEhrStatus', 'VersionedFolder',
    'VersionedParty',
    'Address', 'Agent', 'Contact', 'Group', 'Organisation', 'PartyIdentity', 'PartyRelationship',
    'Person', 'Role',
]
