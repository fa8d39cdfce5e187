"""Data structures: items, item structures and event histories."""

from typing import Annotated, Iterator, Optional

from openehr_rm.domain.base import Violation
from openehr_rm.domain.models.common import Locatable
from openehr_rm.domain.models.data_values import DvCodedText, DvDateTime, DvDuration
from openehr_rm.domain.rules import NonEmpty, NonNegative, Required
from openehr_rm.domain.union import DataValue, DvTextValue, Event, Item, ItemStructure


class Cluster(Locatable):
    rm_type = "CLUSTER"

    items: Annotated[Optional[list[Item]], Required(), NonEmpty("ITEM")] = None


class Element(Locatable):
    """Leaf node holding a single data value, or a reason why it is missing."""

    rm_type = "ELEMENT"

    null_flavour: Optional[DvCodedText] = None
    value: Optional[DataValue] = None
    null_reason: Optional[DvTextValue] = None

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        if self.value is None and self.null_flavour is None:
            yield self.violation(f"{path}.null_flavour", "null_flavour is required when value is absent",
                                 "Set value, or set null_flavour to explain why it is missing")
        if self.value is not None and self.null_flavour is not None:
            yield self.violation(f"{path}.null_flavour", "null_flavour must be absent when value is present",
                                 "Remove null_flavour or remove value")
        if self.value is not None and self.null_reason is not None:
            yield self.violation(f"{path}.null_reason", "null_reason must be absent when value is present",
                                 "Remove null_reason or remove value")


class ItemSingle(Locatable):
    rm_type = "ITEM_SINGLE"

    item: Annotated[Optional[Element], Required()] = None


class ItemList(Locatable):
    rm_type = "ITEM_LIST"

    items: Optional[list[Element]] = None


class ItemTable(Locatable):
    rm_type = "ITEM_TABLE"

    rows: Optional[list[Cluster]] = None


class ItemTree(Locatable):
    rm_type = "ITEM_TREE"

    items: Optional[list[Item]] = None


class PointEvent(Locatable):
    rm_type = "POINT_EVENT"

    time: Annotated[Optional[DvDateTime], Required()] = None
    state: Optional[ItemStructure] = None
    data: Annotated[Optional[ItemStructure], Required()] = None


class IntervalEvent(PointEvent):
    rm_type = "INTERVAL_EVENT"

    width: Annotated[Optional[DvDuration], Required()] = None
    sample_count: Annotated[Optional[int], NonNegative()] = None
    math_function: Annotated[Optional[DvCodedText], Required()] = None


class History(Locatable):
    rm_type = "HISTORY"

    origin: Annotated[Optional[DvDateTime], Required()] = None
    period: Optional[DvDuration] = None
    duration: Optional[DvDuration] = None
    summary: Optional[ItemStructure] = None
    events: Optional[list[Event]] = None
