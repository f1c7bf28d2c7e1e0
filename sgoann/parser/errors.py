"""
Error handling for the sgoann parser.

Syntax errors carry the offending token; truncation errors carry the
end-of-input position. There is no recovery: the first error ends the parse.

Author: xwest
"""

from typing import Optional, List

from ..lexer.tokens import Token, SourceLocation
from ..lexer.errors import AnnotationError


class ParseError(AnnotationError):
    """
    Exception raised when the parser encounters a syntax error.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation],
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message, location, code=code, help_text=help_text,
                         suggestions=suggestions)
        self.token = token


class UnexpectedTokenError(ParseError):
    """The next token does not match what the grammar requires."""


class UnexpectedEOFError(ParseError):
    """End of input was reached inside an incomplete item."""


class NestingTooDeepError(UnexpectedTokenError):
    """A "{" block opened beyond the parser's maximum nesting depth."""


class DuplicateSymbolError(ParseError):
    """A symbol path was defined twice (strict mode only)."""

    def __init__(self, message: str, location: SourceLocation, path: str, **kwargs):
        super().__init__(message, location, **kwargs)
        self.path = path


# Token suggestions keyed by what the parser was looking for
_MISSING_TOKEN_SUGGESTIONS = {
    '*': ["Method receivers are written as (*TypeName)"],
    ')': ["Add a closing parenthesis ')' after the receiver type name"],
    '}': ["Add a closing brace '}'"],
    'terminator': ["End the item with a newline or ';'"],
    'definition': ["Put the type or '{' on the same line as the name"],
}


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P010": "Unexpected end of input",
    "P013": "Duplicate symbol path",
    "P014": "Blocks nested too deeply",
}


def _describe(lexeme: str) -> str:
    if lexeme == '\n':
        return "newline"
    return repr(lexeme)


def create_unexpected_token_error(expected: str, found: Token) -> UnexpectedTokenError:
    """Create an error for an unexpected token."""
    return UnexpectedTokenError(
        message=f"unexpected token at {found.line}:{found.column}: {_describe(found.lexeme)}",
        location=found.location,
        token=found,
        code="P001",
        help_text=f"Expected {expected}, found {_describe(found.lexeme)}.",
        suggestions=_MISSING_TOKEN_SUGGESTIONS.get(expected, [])
    )


def create_unexpected_eof_error(expected: str, location: SourceLocation) -> UnexpectedEOFError:
    """Create an error for unexpected end of input."""
    return UnexpectedEOFError(
        message="unexpected end of file",
        location=location,
        code="P010",
        help_text=f"The parser reached the end of the file while expecting {expected}.",
        suggestions=_MISSING_TOKEN_SUGGESTIONS.get(expected, ["Check for incomplete items"])
    )


def create_duplicate_symbol_error(path: str, location: SourceLocation) -> DuplicateSymbolError:
    """Create an error for a symbol path defined more than once."""
    return DuplicateSymbolError(
        message=f"duplicate annotation for {path!r}",
        location=location,
        path=path,
        code="P013",
        help_text="Each symbol path may only be annotated once in strict mode."
    )


def create_nesting_too_deep_error(found: Token, limit: int) -> NestingTooDeepError:
    """Create an error for a block opened past the nesting limit."""
    return NestingTooDeepError(
        message=f"blocks nested more than {limit} deep at {found.line}:{found.column}",
        location=found.location,
        token=found,
        code="P014",
        help_text=f"Blocks may be nested at most {limit} levels deep.",
        suggestions=["Flatten the nesting with dotted names at an outer level"]
    )
