"""Domain Ports - Result Type, Codec Errors and Collaborator Contracts.

This module defines the contracts the Reference Model core relies on: the
``Result`` type used by non-raising entry points, the codec exception
hierarchy, and the terminology port consulted during validation.

Error Model:
    - Decode errors are fatal to the decode call and propagate immediately
    - Validation violations are never raised; they are returned as data
    - Encoding a union that holds an unknown variant is always an error

Architecture:
    - Pure abstract interfaces with zero infrastructure dependencies
    - Adapters (static terminology tables, remote terminology services)
      implement ``TerminologyPort``
    - The codec, canonicalizer and validator depend only on these contracts
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

# Type variable for Result generic
T = TypeVar('T')


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Result type for communicating success or failure without exceptions.

    Batch callers (bulk decoders, report generators) use this to collect
    failures per document instead of aborting on the first malformed one.

    Attributes:
        success: True if the operation succeeded, False otherwise
        value: The successful result value (only present if success=True)
        error: Error message (only present if success=False)
        error_type: Type of error (DecodeError, MaxDepthExceededError, ...)
        error_details: Additional error context (family, discriminator, ...)

    Example:
        ```python
        result = try_decode(raw, Composition)
        if result.is_success():
            report = validate(result.value)
        else:
            logger.warning(result.error, extra=result.error_details)
        ```
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: Optional[dict] = None

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        """Create a successful result.

        Parameters:
            value: The successful result value

        Returns:
            Result: Success result with the value
        """
        return cls(success=True, value=value)

    @classmethod
    def failure_result(
        cls,
        error: Union[str, Exception],
        error_type: Optional[str] = None,
        error_details: Optional[dict] = None
    ) -> 'Result[T]':
        """Create a failure result.

        Parameters:
            error: Error message or exception
            error_type: Type of error (defaults to the exception class name)
            error_details: Additional context

        Returns:
            Result: Failure result with error information
        """
        error_message = str(error) if isinstance(error, Exception) else error
        error_type_name = error_type or (type(error).__name__ if isinstance(error, Exception) else "UnknownError")
        if error_details is None and isinstance(error, CodecError):
            error_details = error.to_dict()

        return cls(
            success=False,
            value=None,
            error=error_message,
            error_type=error_type_name,
            error_details=error_details or {}
        )

    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class CodecError(Exception):
    """Base exception for all Reference Model codec errors.

    Attributes:
        family: The union family being decoded or encoded, if any
        discriminator: The ``_type`` value involved, if any
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        family: Optional[str] = None,
        discriminator: Optional[str] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message)
        self.family = family
        self.discriminator = discriminator
        self.details = details or {}

    def to_dict(self) -> dict:
        """Return the error context as a plain dictionary."""
        return {
            "family": self.family,
            "discriminator": self.discriminator,
            **self.details,
        }


class DecodeError(CodecError):
    """Raised when bytes cannot be decoded into a Reference Model tree.

    The message names the family, the discriminator and the underlying
    parse failure. No partial tree is ever returned alongside this error.
    """
    pass


class AbstractTypeError(DecodeError):
    """Raised when decoding directly into an abstract (non-instantiable) type."""
    pass


class MaxDepthExceededError(DecodeError):
    """Raised when a tree nests deeper than the configured maximum depth.

    Attributes:
        max_depth: The limit that was exceeded
        path: Type path of the node where the limit was hit
    """

    def __init__(self, max_depth: int, path: Optional[str] = None, family: Optional[str] = None):
        message = f"max depth exceeded: nesting deeper than {max_depth} levels"
        if path:
            message = f"{message} at {path}"
        super().__init__(message, family=family, details={"max_depth": max_depth, "path": path})
        self.max_depth = max_depth
        self.path = path


class EncodeError(CodecError):
    """Raised when a tree cannot be serialized.

    Encoding a union that holds an unknown variant always raises this:
    there is nothing to serialize.
    """
    pass


# ============================================================================
# Collaborator Ports
# ============================================================================

class TerminologyPort(ABC):
    """Abstract contract for terminology lookups used during validation.

    Implementations answer membership questions only; they share no state
    with the codec or validator and must be safe to call from any thread.
    """

    @abstractmethod
    def is_language_terminology(self, terminology_id: str) -> bool:
        """Return True if the terminology id names a language code set."""
        pass

    @abstractmethod
    def is_language_code(self, code: str, terminology_id: Optional[str] = None) -> bool:
        """Return True if the code is a known language code.

        Parameters:
            code: The language code (e.g. ``en`` or ``eng``)
            terminology_id: Code set to check against; ``None`` accepts any
                known language code set
        """
        pass

    @abstractmethod
    def is_charset_terminology(self, terminology_id: str) -> bool:
        """Return True if the terminology id names a character set registry."""
        pass

    @abstractmethod
    def is_charset(self, code: str) -> bool:
        """Return True if the code is a known character set name."""
        pass

    @abstractmethod
    def is_audit_change_type(self, terminology_id: str, code: str) -> bool:
        """Return True if the code is a known audit change type.

        Parameters:
            terminology_id: Terminology the code is drawn from (``openehr``)
            code: The audit change type code (e.g. ``249`` for creation)
        """
        pass
