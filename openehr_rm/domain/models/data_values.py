"""Data value types (the DATA_VALUE family and its supporting types).

Text, coded text, quantities, temporal values, intervals, encapsulated
media and URIs. Abstract intermediates (DV_ORDERED, DV_QUANTIFIED,
DV_AMOUNT, DV_TEMPORAL, DV_ENCAPSULATED, DV_TIME_SPECIFICATION) carry shared
fields and never appear on the wire as a ``_type``.
"""

from typing import Annotated, ClassVar, Iterator, Optional, Union

from openehr_rm.domain import lexical
from openehr_rm.domain.base import RMObject, Violation
from openehr_rm.domain.models.identifiers import TerminologyId
from openehr_rm.domain.optional import EmitNull
from openehr_rm.domain.rules import (
    CHARSET,
    LANGUAGE,
    Matches,
    MaxLength,
    NonEmpty,
    NonNegative,
    OneOf,
    Required,
    Terminology,
)
from openehr_rm.domain.union import DvOrderedValue, DvTextValue

TEXT_FORMATTING = ("plain", "plain_no_newlines", "markdown")
TERM_MAPPING_MATCH = ("=", ">", "<", "?")
MAGNITUDE_STATUS = ("<", ">", "<=", ">=", "=", "~")

PROPORTION_RATIO = 0
PROPORTION_UNITARY = 1
PROPORTION_PERCENT = 2
PROPORTION_FRACTION = 3
PROPORTION_INTEGER_FRACTION = 4

# integral wire numbers stay int so 3 re-encodes as 3, not 3.0
Number = Union[int, float]


class CodePhrase(RMObject):
    rm_type = "CODE_PHRASE"

    terminology_id: Annotated[Optional[TerminologyId], Required()] = None
    code_string: Annotated[Optional[str], Required()] = None
    preferred_term: Optional[str] = None


class DvUri(RMObject):
    rm_type = "DV_URI"

    value: Annotated[Optional[str], Required(), Matches(lexical.is_uri, "RFC 3986 URI")] = None


class DvEhrUri(DvUri):
    rm_type = "DV_EHR_URI"

    value: Annotated[
        Optional[str], Required(), Matches(lexical.is_ehr_uri, "EHR URI starting with 'ehr://'")
    ] = None


class TermMapping(RMObject):
    rm_type = "TERM_MAPPING"

    match: Annotated[Optional[str], Required(), OneOf(*TERM_MAPPING_MATCH)] = None
    purpose: Optional["DvCodedText"] = None
    target: Annotated[Optional[CodePhrase], Required()] = None


class DvText(RMObject):
    """Plain or formatted text, optionally mapped to terminology codes."""

    rm_type = "DV_TEXT"

    value: Annotated[Optional[str], Required(), MaxLength()] = None
    hyperlink: Optional[DvUri] = None
    formatting: Annotated[Optional[str], OneOf(*TEXT_FORMATTING)] = None
    mappings: Optional[list[TermMapping]] = None
    language: Annotated[Optional[CodePhrase], Terminology(LANGUAGE)] = None
    encoding: Annotated[Optional[CodePhrase], Terminology(CHARSET)] = None

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        if self.formatting == "plain_no_newlines" and self.value and ("\n" in self.value or "\r" in self.value):
            yield self.violation(
                f"{path}.value",
                "value field contains newlines but formatting is 'plain_no_newlines'",
                "Ensure value field does not contain newlines when formatting is 'plain_no_newlines'",
            )


class DvCodedText(DvText):
    rm_type = "DV_CODED_TEXT"

    defining_code: Annotated[Optional[CodePhrase], Required()] = None


for _model in (TermMapping, DvText, DvCodedText):
    _model.model_rebuild()


class DvParagraph(RMObject):
    rm_type = "DV_PARAGRAPH"

    items: Annotated[Optional[list[DvTextValue]], Required(), NonEmpty("DV_TEXT")] = None


class DvBoolean(RMObject):
    rm_type = "DV_BOOLEAN"

    value: Annotated[Optional[bool], Required()] = None


class DvState(RMObject):
    rm_type = "DV_STATE"

    value: Annotated[Optional[DvCodedText], Required()] = None
    is_terminal: Annotated[Optional[bool], Required()] = None


class DvIdentifier(RMObject):
    rm_type = "DV_IDENTIFIER"

    issuer: Annotated[Optional[str], NonEmpty()] = None
    assigner: Annotated[Optional[str], NonEmpty()] = None
    id: Annotated[Optional[str], Required()] = None
    type: Annotated[Optional[str], NonEmpty()] = None


class DvInterval(RMObject):
    """Interval of ordered values; either bound may be open.

    Absent bounds are written as explicit ``null`` so that an unbounded
    side stays visible on the wire.
    """

    rm_type = "DV_INTERVAL"

    lower: Annotated[Optional[DvOrderedValue], EmitNull] = None
    upper: Annotated[Optional[DvOrderedValue], EmitNull] = None
    lower_unbounded: Annotated[Optional[bool], Required()] = None
    upper_unbounded: Annotated[Optional[bool], Required()] = None
    lower_included: Optional[bool] = None
    upper_included: Optional[bool] = None

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        for side in ("lower", "upper"):
            bound = getattr(self, side)
            unbounded = getattr(self, f"{side}_unbounded")
            included = getattr(self, f"{side}_included")
            if unbounded is True and bound is not None:
                yield self.violation(f"{path}.{side}", f"{side} must be absent when {side}_unbounded is true",
                                     f"Remove {side} or set {side}_unbounded to false")
            if unbounded is False and bound is None:
                yield self.violation(f"{path}.{side}", f"{side} is required when {side}_unbounded is false",
                                     f"Set {side} or set {side}_unbounded to true")
            if unbounded is True and included is True:
                yield self.violation(f"{path}.{side}_included", f"{side}_included must be false for an unbounded {side}",
                                     f"Set {side}_included to false")
        if (self.lower is not None and self.upper is not None
                and not self.lower.is_unknown and not self.upper.is_unknown
                and self.lower.kind != self.upper.kind):
            yield self.violation(f"{path}.upper", f"interval bounds differ in type: {self.lower.kind} and {self.upper.kind}",
                                 "Ensure lower and upper are of the same type")


class ReferenceRange(RMObject):
    rm_type = "REFERENCE_RANGE"

    meaning: Annotated[Optional[DvTextValue], Required()] = None
    range: Annotated[Optional[DvInterval], Required()] = None


class DvOrdered(RMObject):
    """Abstract: values with a natural order and optional reference ranges."""

    normal_status: Optional[CodePhrase] = None
    normal_range: Optional[DvInterval] = None
    other_reference_ranges: Annotated[Optional[list[ReferenceRange]], NonEmpty("REFERENCE_RANGE")] = None


class DvQuantified(DvOrdered):
    magnitude_status: Annotated[Optional[str], OneOf(*MAGNITUDE_STATUS)] = None


class DvAmount(DvQuantified):
    accuracy_is_percent: Optional[bool] = None
    accuracy: Annotated[Optional[Number], NonNegative()] = None


class DvCount(DvAmount):
    rm_type = "DV_COUNT"

    magnitude: Annotated[Optional[int], Required()] = None


class DvQuantity(DvAmount):
    rm_type = "DV_QUANTITY"

    magnitude: Annotated[Optional[Number], Required()] = None
    precision: Optional[int] = None
    units: Annotated[Optional[str], Required()] = None
    units_system: Annotated[Optional[str], NonEmpty()] = None
    units_display_name: Annotated[Optional[str], NonEmpty()] = None

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        if self.precision is not None and self.precision < -1:
            yield self.violation(f"{path}.precision", f"invalid precision: {self.precision}",
                                 "Ensure precision is -1 (no limit), 0 (integral) or a positive number of places")


class DvProportion(DvAmount):
    """Ratio, unitary, percent or fraction, selected by ``type``."""

    rm_type = "DV_PROPORTION"

    numerator: Annotated[Optional[Number], Required()] = None
    denominator: Annotated[Optional[Number], Required()] = None
    type: Annotated[
        Optional[int],
        Required(),
        OneOf(PROPORTION_RATIO, PROPORTION_UNITARY, PROPORTION_PERCENT, PROPORTION_FRACTION, PROPORTION_INTEGER_FRACTION),
    ] = None
    precision: Optional[int] = None

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        if self.denominator is None:
            return
        if self.type == PROPORTION_UNITARY and self.denominator != 1:
            yield self.violation(f"{path}.denominator", "denominator must be 1 for a unitary proportion",
                                 "Set denominator to 1 or change type")
        elif self.type == PROPORTION_PERCENT and self.denominator != 100:
            yield self.violation(f"{path}.denominator", "denominator must be 100 for a percent proportion",
                                 "Set denominator to 100 or change type")
        elif self.type in (PROPORTION_FRACTION, PROPORTION_INTEGER_FRACTION):
            if not float(self.denominator).is_integer() or (self.numerator is not None and not float(self.numerator).is_integer()):
                yield self.violation(f"{path}.numerator", "fraction numerator and denominator must be integral",
                                     "Use whole numbers for a fraction proportion")
        if self.type != PROPORTION_RATIO and self.denominator == 0:
            yield self.violation(f"{path}.denominator", "denominator must not be zero",
                                 "Set a non-zero denominator")


class DvDuration(DvAmount):
    rm_type = "DV_DURATION"

    value: Annotated[Optional[str], Required(), Matches(lexical.is_iso8601_duration, "ISO 8601 duration (e.g. P1DT2H)")] = None


class DvTemporal(DvQuantified):
    accuracy: Optional[DvDuration] = None


class DvDate(DvTemporal):
    rm_type = "DV_DATE"

    value: Annotated[Optional[str], Required(), Matches(lexical.is_iso8601_date, "ISO 8601 date (YYYY-MM-DD)")] = None


class DvTime(DvTemporal):
    rm_type = "DV_TIME"

    value: Annotated[Optional[str], Required(), Matches(lexical.is_iso8601_time, "ISO 8601 time (hh:mm:ss)")] = None


class DvDateTime(DvTemporal):
    rm_type = "DV_DATE_TIME"

    value: Annotated[
        Optional[str], Required(), Matches(lexical.is_rfc3339_utc, "UTC date-time of format YYYY-MM-DDTHH:MM:SSZ")
    ] = None


class DvOrdinal(DvOrdered):
    rm_type = "DV_ORDINAL"

    symbol: Annotated[Optional[DvCodedText], Required()] = None
    value: Annotated[Optional[int], Required()] = None


class DvScale(DvOrdered):
    rm_type = "DV_SCALE"

    symbol: Annotated[Optional[DvCodedText], Required()] = None
    value: Annotated[Optional[Number], Required()] = None


class DvEncapsulated(RMObject):
    charset: Annotated[Optional[CodePhrase], Terminology(CHARSET)] = None
    language: Annotated[Optional[CodePhrase], Terminology(LANGUAGE)] = None


class DvParsable(DvEncapsulated):
    rm_type = "DV_PARSABLE"

    value: Annotated[Optional[str], Required()] = None
    formalism: Annotated[Optional[str], Required()] = None


class DvMultimedia(DvEncapsulated):
    """Media carried inline (``data``) or by reference (``uri``).

    ``thumbnail`` is itself a DV_MULTIMEDIA, so nesting is bounded by the
    configured maximum depth.
    """

    rm_type = "DV_MULTIMEDIA"

    alternate_text: Optional[str] = None
    uri: Optional[DvUri] = None
    data: Optional[str] = None
    media_type: Annotated[Optional[CodePhrase], Required()] = None
    compression_algorithm: Optional[CodePhrase] = None
    integrity_check: Optional[str] = None
    integrity_check_algorithm: Optional[CodePhrase] = None
    thumbnail: Optional["DvMultimedia"] = None
    size: Annotated[Optional[int], Required(), NonNegative()] = None

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        if self.uri is None and self.data is None:
            yield self.violation(f"{path}.data", "DV_MULTIMEDIA must carry data or uri",
                                 "Set data (inline content) or uri (external reference)")
        if self.integrity_check is not None and self.integrity_check_algorithm is None:
            yield self.violation(f"{path}.integrity_check_algorithm",
                                 "integrity_check_algorithm is required when integrity_check is set",
                                 "Set integrity_check_algorithm")


class DvTimeSpecification(RMObject):
    value: Annotated[Optional[DvParsable], Required()] = None

    formalisms: ClassVar[tuple[str, ...]] = ()

    def invariants(self, path: str, ctx) -> Iterator[Violation]:
        formalism = self.value.formalism if self.value is not None else None
        if formalism and formalism not in self.formalisms:
            yield self.violation(f"{path}.value.formalism", f"invalid {self.rm_type} formalism: {formalism}",
                                 f"Ensure formalism is one of {', '.join(self.formalisms)}")


class DvPeriodicTimeSpecification(DvTimeSpecification):
    rm_type = "DV_PERIODIC_TIME_SPECIFICATION"
    formalisms = ("HL7:PIVL", "HL7:EIVL")


class DvGeneralTimeSpecification(DvTimeSpecification):
    rm_type = "DV_GENERAL_TIME_SPECIFICATION"
    formalisms = ("HL7:GTS",)
