"""Demographic types: parties, their identities, contacts and relationships."""

from typing import Annotated, Optional

from openehr_rm.domain.models.common import Locatable
from openehr_rm.domain.models.data_values import DvInterval
from openehr_rm.domain.models.identifiers import LocatableRef, PartyRef
from openehr_rm.domain.rules import NonEmpty, Required
from openehr_rm.domain.union import DvTextValue, ItemStructure


class PartyIdentity(Locatable):
    rm_type = "PARTY_IDENTITY"

    details: Annotated[Optional[ItemStructure], Required()] = None


class Address(Locatable):
    rm_type = "ADDRESS"

    details: Annotated[Optional[ItemStructure], Required()] = None


class Contact(Locatable):
    rm_type = "CONTACT"

    addresses: Annotated[Optional[list[Address]], Required(), NonEmpty("ADDRESS")] = None
    time_validity: Optional[DvInterval] = None


class PartyRelationship(Locatable):
    rm_type = "PARTY_RELATIONSHIP"

    details: Optional[ItemStructure] = None
    target: Annotated[Optional[PartyRef], Required()] = None
    time_validity: Optional[DvInterval] = None
    source: Annotated[Optional[PartyRef], Required()] = None


class BaseParty(Locatable):
    """Abstract: an actor or role with at least one identity."""

    identities: Annotated[Optional[list[PartyIdentity]], Required(), NonEmpty("PARTY_IDENTITY")] = None
    contacts: Annotated[Optional[list[Contact]], NonEmpty("CONTACT")] = None
    details: Optional[ItemStructure] = None
    reverse_relationships: Annotated[Optional[list[LocatableRef]], NonEmpty("LOCATABLE_REF")] = None
    relationships: Annotated[Optional[list[PartyRelationship]], NonEmpty("PARTY_RELATIONSHIP")] = None


class Actor(BaseParty):
    languages: Annotated[Optional[list[DvTextValue]], NonEmpty("DV_TEXT")] = None
    roles: Annotated[Optional[list[PartyRef]], NonEmpty("PARTY_REF")] = None


class Person(Actor):
    rm_type = "PERSON"


class Agent(Actor):
    rm_type = "AGENT"


class Group(Actor):
    rm_type = "GROUP"


class Organisation(Actor):
    rm_type = "ORGANISATION"


class Role(BaseParty):
    """A party's function, performed by an actor."""

    rm_type = "ROLE"

    time_validity: Optional[DvInterval] = None
    performer: Annotated[Optional[PartyRef], Required()] = None
