"""Tree services: canonicalization and validation."""

from .canonicalizer import Canonicalizer, canonicalize
from .validator import Validator, validate

__all__ = ["Canonicalizer", "canonicalize", "Validator", "validate"]
