"""
Test suite for the sgoann parser.

Tests cover:
- Plain, nested and receiver-qualified items
- Separators between items
- Duplicate symbol paths (default and strict)
- Syntax, truncation and encoding failures with their positions
- The file entry point

Author: xwest
"""

import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

import sgoann
from sgoann.lexer.tokenizer import Tokenizer
from sgoann.lexer.errors import AnnotationError, EncodingError
from sgoann.parser.parser import Parser, parse_string, parse_file
from sgoann.parser.errors import (
    ParseError, UnexpectedTokenError, UnexpectedEOFError, DuplicateSymbolError,
    NestingTooDeepError
)


OS_ANNOTATIONS = """
Stdin *File
Stdout *File
Create func(name string) (*File \\ error)

(*File) {
    Read func(b []byte) (n int, err error)
    Write func(b []byte) (n int, err error)
}
"""


class TestParseItems(unittest.TestCase):
    """Successful parses."""

    def _parse(self, source: str):
        return dict(parse_string(source))

    def test_empty_and_separator_only_sources(self):
        """Whitespace and terminators alone produce no annotations."""
        for source in ("", "   ", "\n\n", ";", " ;\n;; \t\n", "\r\n;\r\n"):
            with self.subTest(source=source):
                self.assertEqual(self._parse(source), {})

    def test_single_item(self):
        self.assertEqual(self._parse("Foo int"), {"Foo": "int"})

    def test_receiver_block_on_one_line(self):
        result = self._parse("(*File) { Read func(b []byte) (n int, err error) }")

        self.assertEqual(result, {"(*File).Read": "func(b []byte) (n int, err error)"})

    def test_nested_blocks(self):
        self.assertEqual(self._parse("pkg { Type { Method sig } }"),
                         {"pkg.Type.Method": "sig"})

    def test_multiline_source(self):
        result = self._parse(OS_ANNOTATIONS)

        self.assertEqual(result, {
            "Stdin": "*File",
            "Stdout": "*File",
            "Create": "func(name string) (*File \\ error)",
            "(*File).Read": "func(b []byte) (n int, err error)",
            "(*File).Write": "func(b []byte) (n int, err error)",
        })

    def test_separators_do_not_change_result(self):
        compact = self._parse("A int\nB string\nC bool")
        spaced = self._parse("\n\nA int\n\n;;B string;\n\n ; C bool;;\n")

        self.assertEqual(compact, spaced)
        self.assertEqual(compact, {"A": "int", "B": "string", "C": "bool"})

    def test_separators_inside_blocks(self):
        result = self._parse("T {\n\n  A int;; B int;\n\n}")

        self.assertEqual(result, {"T.A": "int", "T.B": "int"})

    def test_later_duplicate_wins(self):
        self.assertEqual(self._parse("Foo int\nFoo string"), {"Foo": "string"})
        self.assertEqual(self._parse("T { M a }\nT { M b }"), {"T.M": "b"})

    def test_signature_is_trimmed_but_otherwise_verbatim(self):
        result = self._parse("F    func(a, b int) (x | y, ?error)   \t;G  []*T  ")

        self.assertEqual(result, {"F": "func(a, b int) (x | y, ?error)", "G": "[]*T"})

    def test_balanced_braces_inside_signature(self):
        source = (
            "json {\n"
            "    Marshal func(v interface{}) ([]byte \\ error)\n"
            "    Unmarshaler { UnmarshalJSON func([]byte) ?error }\n"
            "}\n"
        )

        self.assertEqual(self._parse(source), {
            "json.Marshal": "func(v interface{}) ([]byte \\ error)",
            "json.Unmarshaler.UnmarshalJSON": "func([]byte) ?error",
        })

    def test_crlf_line_endings(self):
        self.assertEqual(self._parse("A int\r\nB int\r\n"), {"A": "int", "B": "int"})

    def test_receiver_allows_whitespace_and_newlines(self):
        result = self._parse("( *\n File\n ) { Read sig }")

        self.assertEqual(result, {"(*File).Read": "sig"})

    def test_receiver_with_plain_definition(self):
        self.assertEqual(self._parse("(*File) *os.File"), {"(*File)": "*os.File"})

    def test_empty_block(self):
        self.assertEqual(self._parse("T { }\nU int"), {"U": "int"})

    def test_identifiers(self):
        """Letters and digits after the first rune; unicode letters allowed."""
        self.assertEqual(self._parse("_x1 int"), {"_x1": "int"})
        self.assertEqual(self._parse("x2y int"), {"x2y": "int"})
        self.assertEqual(self._parse("Größe int"), {"Größe": "int"})

    def test_underscore_ends_identifier(self):
        """An underscore after the first rune starts the definition."""
        self.assertEqual(self._parse("Foo_bar int"), {"Foo": "_bar int"})

    def test_information_separators_are_not_whitespace(self):
        """U+001C..U+001F are ordinary runes, not whitespace."""
        self.assertEqual(self._parse("A\x1cint"), {"A": "\x1cint"})
        self.assertEqual(self._parse("A int\x1f"), {"A": "int\x1f"})
        self.assertEqual(self._parse("A\u00a0int\u3000"), {"A": "int"})

    def test_parser_returns_plain_dict(self):
        parser = Parser(Tokenizer("A b"))

        self.assertEqual(parser.parse(), {"A": "b"})

    def test_parse_alias(self):
        self.assertIsInstance(sgoann.parse("A b"), sgoann.Annotation)


class TestParseErrors(unittest.TestCase):
    """Failures and their positions."""

    def test_name_cannot_start_with_digit(self):
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_string("123abc int")

        error = ctx.exception
        self.assertEqual(error.token.lexeme, '1')
        self.assertEqual((error.location.line, error.location.column), (1, 1))
        self.assertEqual(error.code, "P001")

    def test_unclosed_block(self):
        with self.assertRaises(UnexpectedEOFError) as ctx:
            parse_string("Foo {")

        self.assertEqual(ctx.exception.code, "P010")
        self.assertIn("unexpected end of file", str(ctx.exception))

    def test_unclosed_multiline_block(self):
        with self.assertRaises(UnexpectedEOFError) as ctx:
            parse_string("pkg {\n A int\n")

        self.assertEqual((ctx.exception.location.line, ctx.exception.location.column), (3, 1))

    def test_incomplete_items(self):
        for source in ("Foo", "Foo   ", "(*File", "(*File) {", "( *", "("):
            with self.subTest(source=source):
                with self.assertRaises(UnexpectedEOFError):
                    parse_string(source)

    def test_definition_must_start_on_same_line(self):
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_string("Foo\nint")

        self.assertEqual(ctx.exception.token.lexeme, '\n')
        self.assertEqual((ctx.exception.token.line, ctx.exception.token.column), (1, 4))

    def test_definition_cannot_start_with_semicolon(self):
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_string("Foo ;")

        self.assertEqual(ctx.exception.token.lexeme, ';')

    def test_empty_definition_in_block(self):
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_string("pkg { A }")

        self.assertEqual(ctx.exception.token.lexeme, '}')
        self.assertEqual(ctx.exception.token.column, 9)

    def test_trailing_tokens_after_block(self):
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_string("T { A int } B int")

        self.assertEqual(ctx.exception.token.lexeme, 'B')
        self.assertEqual(ctx.exception.token.column, 13)

    def test_receiver_requires_star(self):
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_string("(File) { R s }")

        self.assertEqual(ctx.exception.token.lexeme, 'F')
        self.assertEqual(ctx.exception.token.column, 2)

    def test_receiver_requires_identifier(self):
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_string("(* 9File) { R s }")

        self.assertEqual(ctx.exception.token.lexeme, '9')

    def test_stray_closing_brace(self):
        with self.assertRaises(UnexpectedTokenError):
            parse_string("A int\n}")

    def test_bad_block_terminator(self):
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_string("T {\n A int\n 9")

        self.assertEqual(ctx.exception.token.lexeme, '9')
        self.assertEqual(ctx.exception.token.line, 3)

    def test_column_counts_runes(self):
        """Multi-byte runes before the error count as one column each."""
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_string("É { A ü } x")

        location = ctx.exception.location
        self.assertEqual(location.column, 11)
        self.assertEqual(location.offset, 12)
        self.assertEqual(location.rune_offset, 10)

    def test_encoding_error_position(self):
        with self.assertRaises(EncodingError) as ctx:
            parse_string(b"Foo int\nBar \xff")

        self.assertEqual((ctx.exception.line, ctx.exception.column), (2, 5))

    def test_encoding_error_inside_signature(self):
        with self.assertRaises(EncodingError) as ctx:
            parse_string("T {\n  ä func(".encode('utf-8') + b"\xfe)\n}")

        self.assertEqual((ctx.exception.line, ctx.exception.column), (2, 10))

    def test_deep_nesting_is_rejected(self):
        """Blocks nested past the limit fail at the first brace too deep."""
        source = "a { " * 1000 + "x sig" + " }" * 1000

        with self.assertRaises(NestingTooDeepError) as ctx:
            parse_string(source)

        error = ctx.exception
        self.assertIsInstance(error, UnexpectedTokenError)
        self.assertEqual(error.token.lexeme, '{')
        self.assertEqual((error.location.line, error.location.column), (1, 403))
        self.assertEqual(error.code, "P014")

    def test_nesting_at_limit_parses(self):
        source = "a { " * 100 + "x sig" + " }" * 100

        result = dict(parse_string(source))
        self.assertEqual(result, {".".join(["a"] * 100 + ["x"]): "sig"})

    def test_custom_nesting_limit(self):
        parser = Parser(Tokenizer("a { b { c d } }"), max_depth=1)

        with self.assertRaises(NestingTooDeepError) as ctx:
            parser.parse()

        self.assertEqual(ctx.exception.token.column, 7)

    def test_error_hierarchy(self):
        for source, kind in (("1", UnexpectedTokenError), ("A {", UnexpectedEOFError)):
            with self.subTest(source=source):
                with self.assertRaises(kind) as ctx:
                    parse_string(source)
                self.assertIsInstance(ctx.exception, ParseError)
                self.assertIsInstance(ctx.exception, AnnotationError)

    def test_error_rendering(self):
        with self.assertRaises(ParseError) as ctx:
            parse_string("A int\n\n  $", filename="io.sgoann")

        rendered = str(ctx.exception)
        self.assertTrue(rendered.startswith("ERROR: unexpected token at 3:3"))
        self.assertIn("--> io.sgoann:3:3", rendered)


class TestStrictMode(unittest.TestCase):
    """Duplicate symbol paths with strict=True."""

    def test_top_level_duplicate(self):
        with self.assertRaises(DuplicateSymbolError) as ctx:
            parse_string("Foo a\nFoo b", strict=True)

        self.assertEqual(ctx.exception.path, "Foo")
        self.assertEqual((ctx.exception.location.line, ctx.exception.location.column), (2, 1))
        self.assertEqual(ctx.exception.code, "P013")

    def test_nested_duplicate(self):
        with self.assertRaises(DuplicateSymbolError) as ctx:
            parse_string("T { M a; M b }", strict=True)

        self.assertEqual(ctx.exception.path, "M")
        self.assertEqual(ctx.exception.location.column, 10)

    def test_duplicate_across_blocks(self):
        with self.assertRaises(DuplicateSymbolError) as ctx:
            parse_string("T { M a }\nT { M b }", strict=True)

        self.assertEqual(ctx.exception.path, "T.M")

    def test_distinct_paths_pass(self):
        result = parse_string("T { M a }\nT { N b }", strict=True)

        self.assertEqual(dict(result), {"T.M": "a", "T.N": "b"})


class TestParseFile(unittest.TestCase):
    """The file entry point."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def _write(self, name: str, data: bytes) -> str:
        path = os.path.join(self.tmpdir.name, name)
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def test_parse_file(self):
        path = self._write("os.sgoann", OS_ANNOTATIONS.encode('utf-8'))

        annotations = parse_file(path)
        self.assertEqual(annotations.lookup_method("File", "Read"),
                         "func(b []byte) (n int, err error)")
        self.assertEqual(len(annotations), 5)

    def test_errors_carry_filename(self):
        path = self._write("bad.sgoann", b"A int\n\xff")

        with self.assertRaises(EncodingError) as ctx:
            parse_file(path)

        self.assertEqual(ctx.exception.location.filename, path)
        self.assertEqual(ctx.exception.line, 2)

    def test_missing_file(self):
        with self.assertRaises(OSError):
            parse_file(os.path.join(self.tmpdir.name, "missing.sgoann"))


if __name__ == '__main__':
    unittest.main()
