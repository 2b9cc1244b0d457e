"""
Centralized Exception Hierarchy for CiteForge.

This module defines all custom exceptions used throughout CiteForge.
All exceptions inherit from CiteForgeError for easy catching.

Each exception includes:
- user_message: Human-readable description of what went wrong
- why_it_happened: Explanation of the root cause
- how_to_fix: Actionable steps to resolve the issue
- error_code: Unique identifier for documentation lookup (e.g., "CF-CITE-001")

Usage
-----
    from citeforge.core.exceptions import CitationError, KeyNotFoundError

    try:
        marker = formatter.get_reference(citations)
    except KeyNotFoundError as e:
        logger.error(f"Unknown key: {e.key}")
    except CitationError as e:
        logger.error(f"Citation failed: {e}")

Exception Hierarchy
-------------------
    CiteForgeError (base)
    ├── CitationError
    │   ├── KeyNotFoundError
    │   └── NoNumberError
    ├── FormattingStateError      (also an AssertionError)
    └── ValidationError
        └── ConfigValidationError

Design Principles
-----------------
1. All exceptions inherit from CiteForgeError
2. Citation errors are terminal for the current marker, never retried
3. FormattingStateError marks a programming error, not bad user input
"""

from typing import Any, List, Optional


def get_root_cause(exc: BaseException) -> BaseException:
    """Extract the root cause from a chain of exceptions.

    Follows nested __cause__ and __context__ attributes to find
    the original error that started the chain.

    Args:
        exc: Exception to analyze

    Returns:
        Root cause exception (may be the same as input)
    """
    seen = set()
    current = exc

    while current is not None:
        if id(current) in seen:
            break
        seen.add(id(current))

        # Prefer explicit cause over implicit context
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__context__ is not None:
            current = current.__context__
        else:
            break

    return current


class CiteForgeError(Exception):
    """
    Base exception for all CiteForge errors.

    Example
    -------
        try:
            marker = formatter.get_reference(citations)
        except CiteForgeError as e:
            logger.error(f"Citation failed: {e}")
            print(f"Fix: {e.how_to_fix}")
    """

    # Default error info - subclasses should override
    error_code: str = "CF-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        """Initialize CiteForgeError with helpful information.

        Args:
            message: Human-readable error message
            error_code: Unique identifier (e.g., "CF-CITE-001")
            why_it_happened: Explanation of root cause
            how_to_fix: List of actionable fix suggestions
        """
        super().__init__(message)

        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix

    @property
    def user_message(self) -> str:
        """Get the user-friendly error message."""
        return str(self)

    def get_root_cause(self) -> BaseException:
        """Get the root cause of this exception chain."""
        return get_root_cause(self)


# ============================================================================
# Citation Exceptions
# ============================================================================


class CitationError(CiteForgeError):
    """
    Base exception for citation marker failures.

    Raised by citation formatters when a requested citation cannot be
    expressed with the known entries. The offending key is kept on the
    exception so callers can substitute a placeholder or abort.
    """

    error_code = "CF-CITE-000"
    why_it_happened = "A citation could not be formatted"
    how_to_fix = ["Check the cited keys against the bibliography"]

    def __init__(self, key: str, message: str, **kwargs: Any) -> None:
        """Initialize with the offending citation key.

        Args:
            key: Cited entry key that caused the failure
            message: Error message
            **kwargs: Forwarded to CiteForgeError
        """
        super().__init__(message, **kwargs)
        self.key = key


class KeyNotFoundError(CitationError):
    """
    Raised when a cited key is absent from the known entries.

    Example
    -------
        KeyCitationFormatter({"knuth84": ...}).get_reference(
            [AtomicCitation("lamport94")]
        )
        # Raises: KeyNotFoundError("key lamport94 could not be found ...")
    """

    error_code = "CF-CITE-001"
    why_it_happened = (
        "The citation refers to a key that is not present in the "
        "bibliography database"
    )
    how_to_fix = [
        "Check the key for typos",
        "Add the missing entry to the bibliography file",
    ]

    def __init__(self, key: str) -> None:
        super().__init__(
            key, f"key {key} could not be found in the citation database"
        )


class NoNumberError(CitationError):
    """
    Raised when a numeric marker is requested for an unnumbered citation.

    Numbers are assigned by the bibliography's numbering policy before
    markers are formatted; a missing number means that step was skipped.
    """

    error_code = "CF-CITE-002"
    why_it_happened = (
        "Numeric citation styles need an assigned number for every cited "
        "entry, but this entry has none"
    )
    how_to_fix = [
        "Assign citation numbers before formatting numeric markers",
        "Use the key-based citation style instead",
    ]

    def __init__(self, key: str) -> None:
        super().__init__(key, f"key {key} did not contain a number")


# ============================================================================
# Formatting State Exceptions
# ============================================================================


class FormattingStateError(CiteForgeError, AssertionError):
    """
    Raised when a RichText formatting state machine is misused.

    This is a contract violation by the calling code, e.g. opening a
    formatting kind that is already open, or merging a RichText that
    still has open formatting spans.
    """

    error_code = "CF-FMT-001"
    why_it_happened = (
        "A rich text value was used in a way that breaks its formatting "
        "invariants"
    )
    how_to_fix = [
        "Commit open formats before opening the same kind again",
        "Commit open formats before appending one rich text to another",
    ]


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(CiteForgeError):
    """Raised when input validation fails."""

    error_code = "CF-VAL-000"
    why_it_happened = "The provided input did not pass validation checks"
    how_to_fix = ["Check the input against the documented format"]


class ConfigValidationError(ValidationError):
    """
    Raised when configuration values are invalid.

    Attributes:
        field: Name of the invalid configuration field
    """

    error_code = "CF-VAL-001"
    why_it_happened = "A configuration value is outside its allowed set"
    how_to_fix = [
        "Check citeforge.yaml for typos",
        "Remove the setting to fall back to the default",
    ]

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


# ============================================================================
# Error Info Lookup
# ============================================================================

STANDARD_ERROR_INFO: dict[type, dict[str, Any]] = {
    FileNotFoundError: {
        "error_code": "CF-FILE-001",
        "why_it_happened": "The requested file does not exist",
        "how_to_fix": [
            "Check the path for typos",
            "Use an absolute path",
        ],
    },
    UnicodeDecodeError: {
        "error_code": "CF-FILE-002",
        "why_it_happened": "The file is not valid UTF-8 text",
        "how_to_fix": [
            "Re-save the file with UTF-8 encoding",
            "Check that the path points to a YAML or JSON file",
        ],
    },
    ValueError: {
        "error_code": "CF-VAL-002",
        "why_it_happened": "A value had the right type but an invalid content",
        "how_to_fix": ["Check the input values"],
    },
}


def get_error_info(exc: BaseException) -> dict[str, Any]:
    """Get helpful error information for any exception.

    Looks up the exception type in STANDARD_ERROR_INFO or extracts
    info from CiteForgeError subclasses.

    Args:
        exc: Exception to get info for

    Returns:
        Dict with error_code, why_it_happened, how_to_fix
    """
    if isinstance(exc, CiteForgeError):
        return {
            "error_code": exc.error_code,
            "why_it_happened": exc.why_it_happened,
            "how_to_fix": exc.how_to_fix,
        }

    exc_type = type(exc)
    if exc_type in STANDARD_ERROR_INFO:
        return STANDARD_ERROR_INFO[exc_type]

    for parent_type, info in STANDARD_ERROR_INFO.items():
        if isinstance(exc, parent_type):
            return info

    return {
        "error_code": "CF-ERR-999",
        "why_it_happened": "An unexpected error occurred",
        "how_to_fix": [
            "Check the error message for details",
            "Report the issue if it persists",
        ],
    }
