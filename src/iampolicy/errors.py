"""
Exception hierarchy for iampolicy.

All iampolicy exceptions inherit from PolicyError, allowing callers to catch
every library-specific failure with a single except clause.

Exception Categories:
    - InvalidPolicyVersionError: Unknown "Version" literal in a document
    - InvalidEffectError: Unknown "Effect" literal in a statement
    - PolicyDecodeError: Input is not a well-formed policy document
    - PolicyEncodeError: In-memory document could not be encoded
    - PolicyFileError: Policy file missing or unreadable

Design Principles:
    - All errors have error codes for programmatic handling
    - Domain errors carry the raw offending value
    - Errors are both human-readable and machine-parseable
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Decode errors: 1xxx
ERROR_INVALID_VERSION = 1001
ERROR_INVALID_EFFECT = 1002
ERROR_DECODE_FAILED = 1003

# Encode errors: 2xxx
ERROR_ENCODE_FAILED = 2001

# File errors: 3xxx
ERROR_FILE_UNREADABLE = 3001


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class PolicyError(Exception):
    """
    Base exception for all iampolicy errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Decode Errors
# =============================================================================


@dataclass
class InvalidPolicyVersionError(PolicyError):
    """
    Raised when a document's "Version" is neither the current nor the legacy literal.

    Attributes:
        version: The raw version value found in the document
    """

    version: Any = None

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid Policy Version {self.version}"
        if self.code == 0:
            self.code = ERROR_INVALID_VERSION
        if not self.suggestion:
            self.suggestion = 'Use "2012-10-17" as the document Version'
        self.context["version"] = self.version


@dataclass
class InvalidEffectError(PolicyError):
    """
    Raised when a statement's "Effect" is neither "Allow" nor "Deny".

    Attributes:
        effect: The raw effect value found in the document
    """

    effect: Any = None

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid Effect {self.effect}"
        if self.code == 0:
            self.code = ERROR_INVALID_EFFECT
        if not self.suggestion:
            self.suggestion = 'Effect must be exactly "Allow" or "Deny"'
        self.context["effect"] = self.effect


@dataclass
class PolicyDecodeError(PolicyError):
    """Raised when input is not a well-formed policy document."""

    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Failed to decode policy document: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_DECODE_FAILED
        self.context["underlying_error"] = self.underlying_error


# =============================================================================
# Encode Errors
# =============================================================================


@dataclass
class PolicyEncodeError(PolicyError):
    """
    Raised when an in-memory document cannot be encoded.

    Documents built through the public API always encode; this only
    surfaces when raw fields were filled with non-string values.
    """

    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Failed to encode policy document: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_ENCODE_FAILED
        self.context["underlying_error"] = self.underlying_error


# =============================================================================
# File Errors
# =============================================================================


@dataclass
class PolicyFileError(PolicyError):
    """Raised when a policy file does not exist or cannot be read."""

    path: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Cannot read policy file {self.path}: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_FILE_UNREADABLE
        if not self.suggestion:
            self.suggestion = "Check that the path exists and is readable"
        self.context.update({
            "path": self.path,
            "underlying_error": self.underlying_error,
        })
