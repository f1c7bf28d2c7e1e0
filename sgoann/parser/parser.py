"""
sgoann Recursive Descent Parser

Parses .sgoann sources into a flat mapping from symbol path to signature
text. The grammar is:

    List      -> Item*
    Item      -> Name Def Terminator*
    Name      -> Identifier | Receiver
    Receiver  -> "(" "*" Identifier ")"
    Def       -> TypeText | "{" List "}"
    TypeText  -> /[^{\\n;][^\\n;]*/
    Terminator -> ";" | "\\n"

A Def must start on the same line as its Name. Nested Lists produce dotted
paths: `pkg { Type { Method sig } }` yields `pkg.Type.Method`. Inside a
block, a '}' not balanced by an earlier '{' in the same TypeText ends it, so
`interface{}` stays part of a signature while `T { M sig }` still closes.

Author: xwest
"""

import logging
import unicodedata
from os import PathLike
from typing import Dict, Union

from ..lexer.tokens import (
    Token, SourceLocation, TYPE_TEXT_FORBIDDEN_START, strip_whitespace,
    LEFT_PAREN, RIGHT_PAREN, LEFT_BRACE, RIGHT_BRACE, STAR, UNDERSCORE
)
from ..lexer.tokenizer import Tokenizer
from ..annotations import Annotation, receiver_key
from .errors import (
    create_unexpected_token_error, create_unexpected_eof_error,
    create_duplicate_symbol_error, create_nesting_too_deep_error
)

logger = logging.getLogger(__name__)

# Each block costs a few interpreter frames; stay well under the recursion limit
MAX_NESTING_DEPTH = 100


def _is_letter(char: str) -> bool:
    return unicodedata.category(char).startswith('L')


def _is_digit(char: str) -> bool:
    return unicodedata.category(char) == 'Nd'


def _is_name_start(char: str) -> bool:
    return char == LEFT_PAREN or char == UNDERSCORE or _is_letter(char)


class Parser:
    """
    sgoann recursive descent parser.

    Pulls tokens from a Tokenizer one at a time. Every grammar method raises
    on the first error; there is no recovery.
    """

    def __init__(self, tokenizer: Tokenizer, strict: bool = False,
                 max_depth: int = MAX_NESTING_DEPTH):
        """
        Initialize parser with a tokenizer.

        Args:
            tokenizer: Tokenizer over the source, owned by this parser
            strict: Raise DuplicateSymbolError when a symbol path is
                annotated twice instead of keeping the later annotation
            max_depth: Deepest allowed nesting of "{" blocks
        """
        self.tokenizer = tokenizer
        self.strict = strict
        self.max_depth = max_depth
        self._depth = 0  # Number of enclosing "{" blocks

    def parse(self) -> Dict[str, str]:
        """
        Parse the whole source.

        Returns:
            Mapping from symbol path to signature text

        Raises:
            EncodingError: If the source is not valid UTF-8
            UnexpectedTokenError: On a syntax error
            UnexpectedEOFError: If the source ends inside an item
            DuplicateSymbolError: On a repeated symbol path in strict mode
            NestingTooDeepError: If blocks nest deeper than max_depth
        """
        logger.debug("parsing %s (%d bytes)", self.tokenizer.filename,
                     len(self.tokenizer.source))

        annotations = self._parse_list()

        # The list stops on anything that cannot start a name
        leftover = self.tokenizer.peek()
        if leftover is not None:
            raise create_unexpected_token_error("symbol name", leftover)

        logger.debug("parsed %d annotations from %s", len(annotations),
                     self.tokenizer.filename)
        return annotations

    def _parse_list(self) -> Dict[str, str]:
        annotations: Dict[str, str] = {}
        while True:
            self._skip_separators()
            token = self.tokenizer.peek()
            if token is None or not _is_name_start(token.lexeme):
                return annotations

            entries = self._parse_item()
            for path, signature in entries.items():
                if path in annotations:
                    if self.strict:
                        raise create_duplicate_symbol_error(path, token.location)
                    logger.debug("%s: replacing annotation for %s", token.location, path)
                annotations[path] = signature

    def _parse_item(self) -> Dict[str, str]:
        name = self._parse_name()

        self.tokenizer.skip_whitespace_same_line()
        definitions = self._parse_def()

        self.tokenizer.skip_whitespace_same_line()
        token = self.tokenizer.peek()
        if token is not None:
            if token.is_terminator():
                self.tokenizer.next()
            elif not (token.lexeme == RIGHT_BRACE and self._depth > 0):
                raise create_unexpected_token_error("terminator", token)

        entries = {}
        for key, signature in definitions.items():
            entries[f"{name}.{key}" if key else name] = signature
        return entries

    def _parse_name(self) -> str:
        token = self._peek_required("symbol name")
        if token.lexeme == LEFT_PAREN:
            return self._parse_receiver()
        elif token.lexeme == UNDERSCORE or _is_letter(token.lexeme):
            return self._parse_identifier()
        else:
            raise create_unexpected_token_error("symbol name", token)

    def _parse_receiver(self) -> str:
        self.tokenizer.next()  # We know it's '('

        self.tokenizer.skip_whitespace()
        self._expect(STAR)

        self.tokenizer.skip_whitespace()
        type_name = self._parse_identifier(follow=RIGHT_PAREN)

        self.tokenizer.skip_whitespace()
        self._expect(RIGHT_PAREN)

        return receiver_key(type_name)

    def _parse_identifier(self, follow: str = "definition") -> str:
        token = self._next_required("identifier")
        if token.lexeme != UNDERSCORE and not _is_letter(token.lexeme):
            raise create_unexpected_token_error("identifier", token)

        chars = [token.lexeme]
        while True:
            token = self._peek_required(follow)
            if not _is_letter(token.lexeme) and not _is_digit(token.lexeme):
                break
            self.tokenizer.next()
            chars.append(token.lexeme)

        return "".join(chars)

    def _parse_def(self) -> Dict[str, str]:
        token = self._peek_required("definition")

        if token.lexeme == LEFT_BRACE:
            if self._depth >= self.max_depth:
                raise create_nesting_too_deep_error(token, self.max_depth)
            self.tokenizer.next()
            self._depth += 1
            nested = self._parse_list()
            self._expect(RIGHT_BRACE)
            self._depth -= 1
            return nested
        else:
            return {"": self._parse_type_text()}

    def _parse_type_text(self) -> str:
        token = self._next_required("definition")
        if token.lexeme in TYPE_TEXT_FORBIDDEN_START or (
                token.lexeme == RIGHT_BRACE and self._depth > 0):
            raise create_unexpected_token_error("definition", token)

        chars = [token.lexeme]
        braces = 0
        while True:
            token = self.tokenizer.peek()
            if token is None or token.is_terminator():
                break
            if token.lexeme == LEFT_BRACE:
                braces += 1
            elif token.lexeme == RIGHT_BRACE:
                # An unbalanced '}' closes the enclosing block
                if braces == 0 and self._depth > 0:
                    break
                braces -= 1
            self.tokenizer.next()
            chars.append(token.lexeme)

        return strip_whitespace("".join(chars))

    def _expect(self, expected: str) -> Token:
        """Consume the next token, which must be the given rune."""
        token = self._next_required(expected)
        if token.lexeme != expected:
            raise create_unexpected_token_error(expected, token)
        return token

    def _skip_separators(self):
        """Skip whitespace and runs of terminators between items."""
        while True:
            self.tokenizer.skip_whitespace()
            token = self.tokenizer.peek()
            if token is None or token.lexeme != ';':
                return
            self.tokenizer.next()

    def _peek_required(self, expected: str) -> Token:
        token = self.tokenizer.peek()
        if token is None:
            raise create_unexpected_eof_error(expected, self._end_location())
        return token

    def _next_required(self, expected: str) -> Token:
        token = self.tokenizer.next()
        if token is None:
            raise create_unexpected_eof_error(expected, self._end_location())
        return token

    def _end_location(self) -> SourceLocation:
        return self.tokenizer.location()


def parse_string(source: Union[str, bytes], filename: str = "<string>",
                 strict: bool = False) -> Annotation:
    """
    Convenience function to parse a source string.

    Args:
        source: Annotation source (str or UTF-8 bytes)
        filename: Filename for error reporting
        strict: Reject repeated symbol paths

    Returns:
        Annotation store for the source

    Raises:
        AnnotationError: If parsing fails
    """
    parser = Parser(Tokenizer(source, filename), strict=strict)
    return Annotation(parser.parse())


def parse_file(filepath: Union[str, PathLike], strict: bool = False) -> Annotation:
    """
    Convenience function to parse an annotation file.

    The file is read as bytes so that invalid UTF-8 is reported with its
    line and column.

    Raises:
        AnnotationError: If parsing fails
        OSError: If file cannot be read
    """
    with open(filepath, 'rb') as f:
        source = f.read()

    return parse_string(source, str(filepath), strict=strict)
