"""
credgraph Exception Hierarchy

Every failure in the transformation graph and the preparation pipeline is
raised as a CredGraphError subclass carrying a deterministic error code.

Error Codes:
- CG_DUPLICATE_NODE: Extension tried to register an existing node name
- CG_DUPLICATE_LINK: Extension tried to register an existing link name
- CG_UNKNOWN_NODE: A link references a node that is not registered
- CG_UNKNOWN_LINK: A chain references a link that is not registered
- CG_TYPE_MISMATCH: A value failed an input or output node predicate
- CG_RANGE: A fixed-width encode/decode exceeded its declared width
- CG_FORMAT: A string/byte decode received a value outside its literal set
- CG_SCHEMA_MISMATCH: A record path has no usable schema leaf
- CG_INVALID_RECORD: A credential record is missing a required field
- CG_GRAPH_FROZEN: Extension attempted on a frozen graph
- CG_SCHEMA_LOAD: A schema document could not be read or parsed
- CG_CANONICAL_ENCODING: A value has no canonical JSON form
- CG_CONFIG: A setting (or its environment variable) has an invalid value
- CG_INTERNAL_ERROR: Unexpected failure inside a link transform (catch-all)
"""

from typing import Any, Dict, Optional
import json

__all__ = [
    # Exception classes
    'CredGraphError',
    'DuplicateNodeError',
    'DuplicateLinkError',
    'UnknownNodeError',
    'UnknownLinkError',
    'TypeMismatchError',
    'RangeError',
    'FormatError',
    'SchemaMismatchError',
    'InvalidRecordError',
    'GraphFrozenError',
    'SchemaLoadError',
    'CanonicalEncodingError',
    'ConfigError',
    'InternalError',
    # Mapping utilities
    'EXCEPTION_MAP',
    'wrap_internal_exception',
]


class CredGraphError(Exception):
    """
    Base exception for all credgraph errors.

    Provides a consistent interface for error handling with:
    - code: A deterministic error code (CG_*)
    - message: Human-readable error description
    - details: Additional context as a dictionary

    All errors can be serialized to dict or JSON.
    """

    code: str = "CG_INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize a CredGraphError.

        Args:
            message: Human-readable error description
            details: Additional context (defaults to empty dict)
        """
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize error to a dictionary.

        Returns:
            Dictionary with code, message and details
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize error to a JSON string (non-JSON detail values are repr'd)."""
        return json.dumps(self.to_dict(), indent=indent, default=repr)

    def __str__(self) -> str:
        """Return formatted error string with code prefix."""
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )


class DuplicateNodeError(CredGraphError):
    """A node with the same name is already registered."""

    code: str = "CG_DUPLICATE_NODE"


class DuplicateLinkError(CredGraphError):
    """A link with the same name is already registered."""

    code: str = "CG_DUPLICATE_LINK"


class UnknownNodeError(CredGraphError):
    """
    A node name is not present in the registry.

    Raised on direct lookup and when a link declares an input or output
    type that was never registered (a malformed link registration).
    """

    code: str = "CG_UNKNOWN_NODE"


class UnknownLinkError(CredGraphError):
    """A chain references a link name that is not registered."""

    code: str = "CG_UNKNOWN_LINK"


class TypeMismatchError(CredGraphError):
    """
    A value failed a node membership predicate.

    Details always carry:
    - node: the node whose predicate rejected the value
    - link: the link being applied
    - step: zero-based position of the link in the chain
    - direction: "input" or "output"
    """

    code: str = "CG_TYPE_MISMATCH"


class RangeError(CredGraphError):
    """A fixed-width integer or float step exceeded its declared width."""

    code: str = "CG_RANGE"


class FormatError(CredGraphError):
    """
    A decode step received a value outside its accepted literal set.

    Examples: a boolean literal other than "true"/"false", a malformed
    decimal, a string outside its codec alphabet.
    """

    code: str = "CG_FORMAT"


class SchemaMismatchError(CredGraphError):
    """A flattened record path has no corresponding schema leaf."""

    code: str = "CG_SCHEMA_MISMATCH"


class InvalidRecordError(CredGraphError):
    """A credential-shaped record (or schema) lacks a required field."""

    code: str = "CG_INVALID_RECORD"


class GraphFrozenError(CredGraphError):
    """The graph was frozen and no longer accepts extensions."""

    code: str = "CG_GRAPH_FROZEN"


class SchemaLoadError(CredGraphError):
    """A schema document could not be read or parsed."""

    code: str = "CG_SCHEMA_LOAD"


class CanonicalEncodingError(CredGraphError):
    """A value cannot be rendered as canonical JSON (floats, bytes, non-str keys)."""

    code: str = "CG_CANONICAL_ENCODING"


class ConfigError(CredGraphError):
    """A setting has an invalid value (bad log level, bad boolean flag)."""

    code: str = "CG_CONFIG"


class InternalError(CredGraphError):
    """
    Unexpected internal error.

    Catch-all for failures raised by link transforms that do not map to a
    more specific category.
    """

    code: str = "CG_INTERNAL_ERROR"


# =============================================================================
# EXCEPTION MAPPING
# =============================================================================

# Foreign exceptions raised inside link transforms -> credgraph error classes.
# Subclasses are listed before their bases; lookup walks the MRO.
EXCEPTION_MAP: Dict[type, type] = {
    # Codec failures
    UnicodeError: FormatError,
    # Width overflow (struct packing, int conversions)
    OverflowError: RangeError,
    # Bad literal / bad format
    ValueError: FormatError,
    # Wrong value kind reaching a transform
    TypeError: InternalError,
}


def wrap_internal_exception(
    exc: Exception,
    default_message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> CredGraphError:
    """
    Wrap a foreign exception as a CredGraphError.

    Maps known exception types to error classes using EXCEPTION_MAP, walking
    the exception's MRO so subclasses (e.g. binascii.Error) resolve to their
    nearest mapped base. Unknown exceptions map to InternalError.

    IMPORTANT: Use with exception chaining to preserve traceback:
        try:
            result = link.transform(value)
        except Exception as e:
            raise wrap_internal_exception(e, details={"link": link.name}) from e

    Args:
        exc: The exception to wrap
        default_message: Override message (uses str(exc) if None)
        details: Additional structured details to include

    Returns:
        Appropriate CredGraphError subclass instance
    """
    error_class: type = InternalError
    for klass in type(exc).__mro__:
        if klass in EXCEPTION_MAP:
            error_class = EXCEPTION_MAP[klass]
            break

    error_details = details.copy() if details else {}
    error_details["internal_error"] = type(exc).__name__

    return error_class(
        message=default_message or str(exc),
        details=error_details,
    )
