"""
sgoann - .sgoann annotation parser

Reads annotation sources that attach type signatures to symbols of code a
translator cannot analyze itself, and exposes them as a flat lookup table
keyed by symbol path.

Architecture:
    sgoann/
    ├── lexer/           # Rune tokenizer with position tracking
    ├── parser/          # Recursive descent parser
    ├── annotations.py   # Immutable annotation store
    └── cli.py           # sgoann command line tool

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__email__ = "dev@neuralscript.org"
__license__ = "MIT"

from .lexer import Tokenizer, Token, SourceLocation, AnnotationError, EncodingError
from .annotations import Annotation, receiver_key, method_key, join_path
from .parser import (
    Parser, parse_string, parse_file,
    ParseError, UnexpectedTokenError, UnexpectedEOFError, DuplicateSymbolError,
    NestingTooDeepError
)

parse = parse_string

__all__ = [
    # Core classes
    "Tokenizer",
    "Parser",
    "Annotation",
    "Token",
    "SourceLocation",

    # Entry points
    "parse",
    "parse_string",
    "parse_file",
    "receiver_key",
    "method_key",
    "join_path",

    # Errors
    "AnnotationError",
    "EncodingError",
    "ParseError",
    "UnexpectedTokenError",
    "UnexpectedEOFError",
    "DuplicateSymbolError",
    "NestingTooDeepError",

    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
