"""
Error handling for the sgoann tokenizer.

Defines the diagnostic record shared by every sgoann error and the encoding
error raised when the source is not valid UTF-8.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass

from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """Diagnostic record attached to every annotation error."""
    message: str
    location: Optional[SourceLocation]
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class AnnotationError(Exception):
    """
    Base class for every error raised while reading an annotation source.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class EncodingError(AnnotationError):
    """Raised when the bytes at the current position are not valid UTF-8."""

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column


# Error codes used by the tokenizer
ERROR_CODES = {
    "L004": "Invalid UTF-8 sequence",
}


def create_invalid_utf8_error(sequence: bytes, location: SourceLocation) -> EncodingError:
    """Create an error for an invalid UTF-8 byte sequence."""
    return EncodingError(
        message=f"invalid UTF-8 character starting at {location.line}:{location.column}",
        location=location,
        code="L004",
        help_text=f"Found bytes {sequence.hex(' ')} which do not form a valid UTF-8 character.",
        suggestions=["Re-save the file with UTF-8 encoding"]
    )
