"""
sgoann Tokenizer - rune scanner over an in-memory annotation source

Decodes the source one rune at a time and hands runes to the parser on
demand, with a single token of lookahead. Nothing is decoded ahead of the
parser, so an encoding error is only reported once the parser actually
reaches the broken bytes.

xwest
"""

from typing import Iterator, Optional, Tuple, Union

from .tokens import Token, SourceLocation, is_whitespace
from .errors import create_invalid_utf8_error


def _sequence_length(lead: int) -> int:
    """Length of the UTF-8 sequence announced by a lead byte, 0 if invalid."""
    if lead < 0x80:
        return 1
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


class Tokenizer:
    """
    Produces Tokens from an annotation source.

    Tracks line, column, byte offset and rune offset. Columns are 1-based
    and counted in runes, not bytes.
    """

    def __init__(self, source: Union[str, bytes], filename: str = "<string>"):
        """
        Initialize the tokenizer with source text.

        Args:
            source: Annotation source. A str is encoded to UTF-8; lone
                surrogates are kept as (invalid) bytes so they are reported
                like any other encoding error.
            filename: Name of source file for error reporting
        """
        if isinstance(source, str):
            source = source.encode('utf-8', 'surrogatepass')
        self.source = bytes(source)
        self.filename = filename
        self.byte_offset = 0
        self.rune_offset = 0
        self.line = 1
        self.line_start = 0  # Rune offset of the first rune of the current line
        self._lookahead: Optional[Token] = None

    @property
    def at_end(self) -> bool:
        return self._lookahead is None and self.byte_offset >= len(self.source)

    @property
    def column(self) -> int:
        return self.rune_offset - self.line_start + 1

    def location(self) -> SourceLocation:
        """Location of the next unconsumed rune (or of end of input)."""
        return SourceLocation(self.filename, self.line, self.column,
                              self.byte_offset, self.rune_offset)

    def peek(self) -> Optional[Token]:
        """
        Return the next token without consuming it.

        Returns None at end of input.

        Raises:
            EncodingError: If the next bytes are not valid UTF-8
        """
        if self._lookahead is not None:
            return self._lookahead
        if self.byte_offset >= len(self.source):
            return None

        char, size = self._decode_rune()
        self._lookahead = Token(char, size, self.location())
        return self._lookahead

    def next(self) -> Optional[Token]:
        """
        Consume and return the next token.

        Returns None at end of input.

        Raises:
            EncodingError: If the next bytes are not valid UTF-8
        """
        token = self.peek()
        if token is None:
            return None

        self._lookahead = None
        self.rune_offset += 1
        self.byte_offset += token.size
        if token.is_newline():
            self.line += 1
            self.line_start = self.rune_offset
        return token

    def skip_whitespace(self):
        """Skip until the next non-whitespace rune, newlines included."""
        while True:
            token = self.peek()
            if token is None or not is_whitespace(token.lexeme):
                return
            self.next()

    def skip_whitespace_same_line(self):
        """Skip whitespace, stopping before a newline or non-whitespace rune."""
        while True:
            token = self.peek()
            if token is None or token.is_newline() or not is_whitespace(token.lexeme):
                return
            self.next()

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            if token is None:
                return
            yield token

    def _decode_rune(self) -> Tuple[str, int]:
        """Decode the rune starting at the current byte offset."""
        pos = self.byte_offset
        size = _sequence_length(self.source[pos])
        chunk = self.source[pos:pos + max(size, 1)]

        if size == 0 or len(chunk) < size:
            raise create_invalid_utf8_error(chunk, self.location())
        try:
            char = chunk.decode('utf-8')
        except UnicodeDecodeError:
            # Bad continuation byte, overlong form or encoded surrogate
            raise create_invalid_utf8_error(chunk, self.location()) from None

        return char, size


def tokenize_string(source: Union[str, bytes], filename: str = "<string>") -> Iterator[Token]:
    """
    Convenience generator over every token of a source.

    Raises:
        EncodingError: When the iteration reaches an invalid byte sequence
    """
    return iter(Tokenizer(source, filename))
