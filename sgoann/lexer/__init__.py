"""
sgoann Lexer Package

Rune-level tokenizer for the .sgoann annotation language.

Key Features:
- Lazy UTF-8 decoding with positioned encoding errors
- One token of lookahead
- Line, column, byte offset and rune offset tracking
- Same-line whitespace skipping for the "definition starts on the name's
  line" rule

Author: xwest
"""

from .tokens import Token, SourceLocation
from .tokenizer import Tokenizer, tokenize_string
from .errors import Diagnostic, AnnotationError, EncodingError

__all__ = [
    "Tokenizer",
    "tokenize_string",
    "Token",
    "SourceLocation",
    "Diagnostic",
    "AnnotationError",
    "EncodingError",
]
