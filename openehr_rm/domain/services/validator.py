"""Validator - recursive, path-tracking structural validation.

The validator walks a tree and accumulates every violation it finds; it
never stops at the first one and never raises for a well-typed tree. Each
violation carries the owning type, a ``$``-rooted path, a message and a
recommendation.

Per node, in order:
    1. Tag consistency: a present ``_type`` must equal the type name
    2. Field rules declared on each field (``Annotated`` metadata), then
       recursion into the field's value at ``.field`` / ``.field[i]``
    3. The node's own ``invariants`` (cross-field and composite checks)

Union slots delegate to their active member at the same path. A slot that
holds the unknown kind yields exactly one violation naming the family.
Descending past the maximum depth yields one violation and stops that
branch.
"""

import logging
from typing import Any, Optional

from openehr_rm.domain.base import RMObject, Violation, default_max_depth
from openehr_rm.domain.ports import TerminologyPort
from openehr_rm.domain.rules import ValidationContext, field_rules
from openehr_rm.domain.union import TaggedUnion

logger = logging.getLogger(__name__)

ROOT_PATH = "$"


class Validator:
    """Generic validator driven by field rules and node invariants.

    Parameters:
        terminology: Terminology port (defaults to the configured one)
        max_depth: Maximum node nesting (defaults to the configured limit)
        max_text_length: Default bound for ``MaxLength`` rules

    Example Usage:
        ```python
        violations = Validator().validate(composition)
        for violation in violations:
            print(violation.path, violation.message)
        ```
    """

    def __init__(
        self,
        terminology: Optional[TerminologyPort] = None,
        max_depth: Optional[int] = None,
        max_text_length: Optional[int] = None,
    ):
        if terminology is None or max_text_length is None:
            from openehr_rm.infrastructure.settings import settings
            terminology = terminology or settings.build_terminology()
            max_text_length = max_text_length if max_text_length is not None else settings.max_text_length
        self.context = ValidationContext(
            terminology=terminology,
            max_depth=max_depth if max_depth is not None else default_max_depth(),
            max_text_length=max_text_length,
        )

    def validate(self, node: Any, path: str = ROOT_PATH) -> list[Violation]:
        """Validate a node (or union) and return every violation found.

        Parameters:
            node: Root node, or a tagged union holding one
            path: Path of the root (``$`` by default)

        Returns:
            list[Violation]: Possibly empty, in tree order
        """
        violations: list[Violation] = []
        self._value(node, path, 0, violations)
        logger.debug("Validated %s: %d violation(s)", getattr(node, "rm_type", type(node).__name__), len(violations))
        return violations

    def _node(self, node: RMObject, path: str, depth: int, out: list[Violation]) -> None:
        if depth > self.context.max_depth:
            logger.warning("Validation stopped at depth %d (%s)", depth, path)
            out.append(node.violation(
                path,
                f"maximum nesting depth exceeded ({self.context.max_depth})",
                "Reduce nesting of this structure",
            ))
            return

        if node.type_ is not None and node.type_ != node.rm_type:
            out.append(node.violation(
                f"{path}._type",
                f"invalid {node.rm_type} _type field: {node.type_}",
                f"Ensure _type field is set to '{node.rm_type}'",
            ))

        for name, field in type(node).model_fields.items():
            if name == "type_":
                continue
            key = field.alias or name
            value = getattr(node, name)
            field_path = f"{path}.{key}"
            for rule in field_rules(field):
                out.extend(rule.check(node, key, value, field_path, self.context))
            self._value(value, field_path, depth, out)

        out.extend(node.invariants(path, self.context))

    def _value(self, value: Any, path: str, depth: int, out: list[Violation]) -> None:
        if value is None:
            return
        if isinstance(value, RMObject):
            self._node(value, path, depth + 1, out)
        elif isinstance(value, TaggedUnion):
            if value.is_unknown:
                family = value.family.name
                out.append(Violation(
                    family,
                    path,
                    f"value is not a known member of family {family}",
                    "Ensure value is properly set",
                ))
            else:
                self._node(value.value, path, depth + 1, out)
        elif isinstance(value, list):
            for index, item in enumerate(value):
                self._value(item, f"{path}[{index}]", depth, out)


def validate(node: Any, path: str = ROOT_PATH, terminology: Optional[TerminologyPort] = None,
             max_depth: Optional[int] = None) -> list[Violation]:
    """Validate a tree with the configured collaborators.

    Returns:
        list[Violation]: Every violation found, never raises for a well-typed tree
    """
    return Validator(terminology=terminology, max_depth=max_depth).validate(node, path)
