"""
sgoann Parser Package

Recursive descent parser for .sgoann annotation sources. Produces a flat
mapping from symbol path to signature text.

Key Features:
- Nested blocks flattened into dotted symbol paths
- Receiver-qualified method keys, (*Type).Method
- Verbatim signature capture
- Fail-fast diagnostics with source positions

Author: xwest
"""

from .parser import Parser, parse_string, parse_file
from .errors import (
    ParseError, UnexpectedTokenError, UnexpectedEOFError, DuplicateSymbolError,
    NestingTooDeepError
)

__all__ = [
    # Core parser
    "Parser",
    "parse_string",
    "parse_file",

    # Error handling
    "ParseError",
    "UnexpectedTokenError",
    "UnexpectedEOFError",
    "DuplicateSymbolError",
    "NestingTooDeepError",
]
