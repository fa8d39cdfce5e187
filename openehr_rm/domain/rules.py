"""Declarative field rules.

Rules are attached to model fields as ``Annotated`` metadata and evaluated
by the generic validator, one field at a time:

    value: Annotated[Optional[str], Required(), MaxLength()] = None

A rule receives the owning node, the wire name of the field, its value and
the field path, and yields zero or more ``Violation`` records. Rules never
raise; an absent value is only a violation for ``Required``.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, Sequence

from pydantic.fields import FieldInfo

from openehr_rm.domain.base import RMObject, Violation
from openehr_rm.domain.ports import TerminologyPort


@dataclass
class ValidationContext:
    """Collaborators and limits for one validation run."""

    terminology: TerminologyPort
    max_depth: int
    max_text_length: int = 10000


class Rule:
    """Base class for field rules."""

    def check(self, node: RMObject, name: str, value: Any, path: str, ctx: ValidationContext) -> Iterator[Violation]:
        raise NotImplementedError


def field_rules(field_info: FieldInfo) -> list[Rule]:
    """Return the rules declared on a model field, in declaration order."""
    return [marker for marker in field_info.metadata if isinstance(marker, Rule)]


@dataclass(frozen=True)
class Required(Rule):
    """Field must be present. Strings must also be non-empty."""

    def check(self, node, name, value, path, ctx):
        if value is None or (isinstance(value, str) and value == ""):
            yield node.violation(path, f"{name} field is required", f"Ensure {name} field is set")


@dataclass(frozen=True)
class NonEmpty(Rule):
    """When present, a collection needs at least one entry and a string at least one character."""

    noun: str = "item"

    def check(self, node, name, value, path, ctx):
        if value is None or len(value) > 0:
            return
        if isinstance(value, str):
            yield node.violation(path, f"{name} field cannot be empty", f"Ensure {name} field is not empty when present")
        else:
            yield node.violation(
                path,
                f"{name} must contain at least one {self.noun}",
                f"Ensure {name} contains at least one {self.noun}",
            )


@dataclass(frozen=True)
class MaxLength(Rule):
    """String length bound; ``None`` uses the configured text limit."""

    limit: Optional[int] = None

    def check(self, node, name, value, path, ctx):
        limit = self.limit if self.limit is not None else ctx.max_text_length
        if isinstance(value, str) and len(value) > limit:
            yield node.violation(
                path,
                f"{name} field exceeds maximum length of {limit} characters",
                f"Ensure {name} field does not exceed {limit} characters",
            )


@dataclass(frozen=True)
class OneOf(Rule):
    """Value must be drawn from a fixed vocabulary."""

    choices: Sequence[Any] = ()

    def __init__(self, *choices: Any):
        object.__setattr__(self, "choices", tuple(choices))

    def check(self, node, name, value, path, ctx):
        if value is not None and value not in self.choices:
            allowed = ", ".join(f"'{c}'" for c in self.choices)
            yield node.violation(
                path,
                f"invalid {node.rm_type} {name} field: {value}",
                f"Ensure {name} field is one of {allowed}",
            )


@dataclass(frozen=True)
class Matches(Rule):
    """Non-empty string must satisfy a lexical predicate."""

    predicate: Callable[[str], bool]
    label: str

    def check(self, node, name, value, path, ctx):
        if isinstance(value, str) and value and not self.predicate(value):
            yield node.violation(
                path,
                f"invalid {node.rm_type} {name} field: {value}",
                f"Ensure {name} field is a valid {self.label}",
            )


@dataclass(frozen=True)
class NonNegative(Rule):
    def check(self, node, name, value, path, ctx):
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value < 0:
            yield node.violation(path, f"{name} must be non-negative", f"Ensure {name} is zero or greater")


LANGUAGE = "language"
CHARSET = "charset"
AUDIT_CHANGE_TYPE = "audit_change_type"


@dataclass(frozen=True)
class Terminology(Rule):
    """CODE_PHRASE (or DV_CODED_TEXT) must be known to the terminology port."""

    kind: str = LANGUAGE

    def check(self, node, name, value, path, ctx):
        if value is None:
            return
        phrase = getattr(value, "defining_code", value)
        if phrase is None:
            return
        terminology_id = phrase.terminology_id.value if phrase.terminology_id is not None else None
        code = phrase.code_string
        terminology = ctx.terminology

        if self.kind == LANGUAGE:
            if not terminology.is_language_terminology(terminology_id or ""):
                yield node.violation(path, f"invalid {name} field: {terminology_id}",
                                     f"Ensure {name} field is a known ISO 639-1 or ISO 639-2 language code")
            if not terminology.is_language_code(code or "", terminology_id):
                yield node.violation(path, f"invalid {name} field: {code}",
                                     f"Ensure {name} field is a known ISO 639-1 or ISO 639-2 language code")
        elif self.kind == CHARSET:
            if not terminology.is_charset_terminology(terminology_id or ""):
                yield node.violation(path, f"invalid {name} terminology ID: {terminology_id}",
                                     f"Ensure {name} field is a known IANA character set")
            if not terminology.is_charset(code or ""):
                yield node.violation(path, f"invalid {name} code string: {code}",
                                     f"Ensure {name} field is a known IANA character set")
        elif self.kind == AUDIT_CHANGE_TYPE:
            if not terminology.is_audit_change_type(terminology_id or "", code or ""):
                yield node.violation(path, f"invalid {name} field: {terminology_id}::{code}",
                                     f"Ensure {name} is a code from the openehr audit change type vocabulary")


@dataclass(frozen=True)
class RefTarget(Rule):
    """OBJECT_REF field (or list of them) must point at one of the given types."""

    types: frozenset = field(default_factory=frozenset)

    def __init__(self, *types: str):
        object.__setattr__(self, "types", frozenset(types))

    def check(self, node, name, value, path, ctx):
        if value is None:
            return
        refs = value if isinstance(value, list) else [value]
        for i, ref in enumerate(refs):
            ref_path = f"{path}[{i}]" if isinstance(value, list) else path
            if ref.type and ref.type not in self.types:
                allowed = " or ".join(sorted(self.types))
                yield node.violation(
                    f"{ref_path}.type",
                    f"invalid {name} reference type: {ref.type}",
                    f"Ensure {name} refers to {allowed}",
                )
