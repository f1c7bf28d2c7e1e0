"""
Token definitions for the sgoann tokenizer.

The annotation language has no multi-character tokens: every token is a
single rune (Unicode code point) together with its position in the source.
Grammar decisions are made by the parser from the rune value alone.

Author: xwest
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in an annotation source.

    Used for error reporting and by tools that point back into the source.
    """
    filename: str
    line: int
    column: int       # 1-based, counted in runes
    offset: int       # Byte offset into the UTF-8 encoded source
    rune_offset: int  # Rune offset from start of source

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return (f"SourceLocation({self.filename!r}, {self.line}, {self.column}, "
                f"{self.offset}, {self.rune_offset})")


@dataclass(frozen=True)
class Token:
    """
    A single rune read from an annotation source.

    `size` is the length in bytes of the rune's UTF-8 encoding, so
    `offset + size` is the byte offset of the following token.
    """
    lexeme: str
    size: int
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.lexeme!r} at {self.location}"

    def __repr__(self) -> str:
        return f"Token({self.lexeme!r}, {self.size}, {self.location!r})"

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    @property
    def offset(self) -> int:
        return self.location.offset

    @property
    def rune_offset(self) -> int:
        return self.location.rune_offset

    def is_newline(self) -> bool:
        return self.lexeme == '\n'

    def is_terminator(self) -> bool:
        """Check if this token ends an item (';' or line feed)."""
        return self.lexeme in TERMINATORS


# Runes that end an item
TERMINATORS = frozenset({';', '\n'})

# Runes a type text may not start with
TYPE_TEXT_FORBIDDEN_START = frozenset({'{', '\n', ';'})

# str.isspace() also accepts the ASCII information separators; they are not
# whitespace in annotation sources
_NON_WHITESPACE = frozenset('\x1c\x1d\x1e\x1f')


def is_whitespace(char: str) -> bool:
    return char.isspace() and char not in _NON_WHITESPACE


def strip_whitespace(text: str) -> str:
    """Trim leading and trailing runes for which is_whitespace holds."""
    start, end = 0, len(text)
    while start < end and is_whitespace(text[start]):
        start += 1
    while end > start and is_whitespace(text[end - 1]):
        end -= 1
    return text[start:end]


# Punctuation used by the grammar
LEFT_PAREN = '('
RIGHT_PAREN = ')'
LEFT_BRACE = '{'
RIGHT_BRACE = '}'
STAR = '*'
UNDERSCORE = '_'
