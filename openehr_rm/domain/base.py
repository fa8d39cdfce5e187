"""Reference Model Base Node and Violation Record.

Every concrete Reference Model type derives from ``RMObject``. A concrete
type declares its authoritative type name in the ``rm_type`` class constant;
classes that do not declare one (LOCATABLE, ENTRY, CARE_ENTRY, ...) are
abstract and cannot be constructed or decoded directly.

Architecture:
    - Concrete types are declarative pydantic models: field list, field
      types (fixed, union slot or list) and ``Annotated`` rule metadata
    - Concrete types self-register in an immutable type table at import
      time; family registries are frozen views over that table
    - Nesting depth is tracked through the pydantic validation context, so
      decode fails closed instead of exhausting the call stack
"""

import logging
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Any, ClassVar, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

from openehr_rm.domain.ports import AbstractTypeError, MaxDepthExceededError

logger = logging.getLogger(__name__)

# Context key under which decode stores its DepthGuard
DEPTH_GUARD_KEY = "rm_depth_guard"

DEFAULT_MAX_DEPTH = 64

_type_table: dict[str, type['RMObject']] = {}
TYPE_TABLE: Mapping[str, type['RMObject']] = MappingProxyType(_type_table)


@dataclass(frozen=True)
class Violation:
    """One structural or lexical constraint failure found during validation.

    Attributes:
        model: Type (or family) name that owns the failing constraint
        path: ``$``-rooted location, e.g. ``$.items[0].value.magnitude``
        message: What is wrong
        recommendation: How to fix it
    """

    model: str
    path: str
    message: str
    recommendation: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


class DepthGuard:
    """Counts node nesting during a single decode call."""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        self.depth = 0
        self.trail: list[str] = []

    def enter(self, rm_type: str) -> None:
        self.depth += 1
        self.trail.append(rm_type)
        if self.depth > self.max_depth:
            path = ".".join(self.trail[:3] + ["..."] + self.trail[-2:]) if len(self.trail) > 5 else ".".join(self.trail)
            logger.warning("Decode stopped at depth %d (%s)", self.depth, path)
            raise MaxDepthExceededError(self.max_depth, path=path)

    def exit(self) -> None:
        self.depth -= 1
        self.trail.pop()


def default_max_depth() -> int:
    """Return the configured maximum nesting depth."""
    from openehr_rm.infrastructure.settings import settings
    return settings.max_depth


class RMObject(BaseModel):
    """Base class for every Reference Model node.

    The ``_type`` wire field is exposed as ``type_``. It is optional on
    decode; the canonicalizer stamps it with ``rm_type`` before encode and
    the validator reports a mismatch when it is present but wrong.

    Attributes:
        rm_type: Authoritative type name (class constant, concrete types only)
        type_: The ``_type`` tag as received or stamped
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    rm_type: ClassVar[str] = ""

    type_: Optional[str] = Field(None, alias="_type", description="Wire discriminator")

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        if not cls.is_abstract():
            existing = _type_table.get(cls.rm_type)
            if existing is not None and existing is not cls:
                raise TypeError(f"duplicate Reference Model type {cls.rm_type}: {existing.__name__}, {cls.__name__}")
            _type_table[cls.rm_type] = cls

    @classmethod
    def is_abstract(cls) -> bool:
        """Return True if the class does not declare its own ``rm_type``."""
        return "rm_type" not in cls.__dict__ or not cls.rm_type

    @model_validator(mode="wrap")
    @classmethod
    def guard_construction(cls, data: Any, handler, info: ValidationInfo):
        if cls.is_abstract():
            raise AbstractTypeError(
                f"cannot decode into abstract type {cls.__name__}",
                discriminator=cls.__name__,
            )
        guard = info.context.get(DEPTH_GUARD_KEY) if info.context else None
        if guard is None:
            return handler(data)
        guard.enter(cls.rm_type)
        try:
            return handler(data)
        finally:
            guard.exit()

    def invariants(self, path: str, ctx: Any) -> Iterable[Violation]:
        """Yield violations that a single field rule cannot express.

        Concrete types override this for cross-field consistency (reference
        target vs. identifier variant, interval bounds) and for composite
        lexical forms such as OBJECT_VERSION_ID. Field-local rules are
        declared on the fields themselves.
        """
        return ()

    def violation(self, path: str, message: str, recommendation: str = "") -> Violation:
        return Violation(self.rm_type, path, message, recommendation)
