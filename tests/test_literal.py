"""Tests for the literal parser module."""

import pytest
from reassembly_shapes.literal import (
    Identifier,
    LiteralParser,
    Number,
    ParseError,
    ParseErrorKind,
    String,
    Table,
    ValueKind,
    parse,
)
from reassembly_shapes.literal.tokenizer import Tokenizer, TokType
from reassembly_shapes.literal.values import describe


class TestTokenizer:
    """Tests for Tokenizer."""

    def test_token_types(self):
        tokens = Tokenizer('{a=1, "s"; [2]} -- note').tokenize()
        types = [tok.type for tok in tokens]
        assert types == [
            TokType.LBRACE, TokType.IDENTIFIER, TokType.EQUALS, TokType.NUMBER,
            TokType.COMMA, TokType.STRING, TokType.SEMICOLON, TokType.LBRACKET,
            TokType.NUMBER, TokType.RBRACKET, TokType.RBRACE, TokType.COMMENT,
            TokType.EOF,
        ]

    def test_comment_body_is_stripped(self):
        tokens = Tokenizer("--  Shape Name  \n").tokenize()
        assert tokens[0].type == TokType.COMMENT
        assert tokens[0].value == "Shape Name"

    def test_locations(self):
        tokens = Tokenizer("{\n  1}").tokenize()
        number = tokens[1]
        assert number.offset == 4
        assert (number.line, number.column) == (2, 3)

    def test_numbers(self):
        cases = {
            "5": 5.0,
            "-5": -5.0,
            "0.5": 0.5,
            "-.25": -0.25,
            ".5": 0.5,
            "5.": 5.0,
            "1e3": 1000.0,
            "2.5E-1": 0.25,
            "0x1F": 31.0,
            "-0x10": -16.0,
        }
        for text, expected in cases.items():
            tokens = Tokenizer(text).tokenize()
            assert tokens[0].type == TokType.NUMBER, text
            assert tokens[0].value == expected, text

    def test_string_escapes(self):
        tokens = Tokenizer(r'"a\tb\"c" ' + r"'it\'s' " + r'"\65\x42"').tokenize()
        assert [tok.value for tok in tokens[:3]] == ['a\tb"c', "it's", "AB"]

    def test_byte_order_mark_is_skipped(self):
        tokens = Tokenizer("\ufeff{}").tokenize()
        assert tokens[0].type == TokType.LBRACE


class TestParser:
    """Tests for LiteralParser."""

    def test_empty_table(self):
        table = parse("{}")
        assert isinstance(table, Table)
        assert len(table) == 0

    def test_positional_values(self):
        table = parse('{1, -2.5, "text", NAME, {}}')
        values = table.values()
        assert values[:4] == [Number(1.0), Number(-2.5), String("text"), Identifier("NAME")]
        assert isinstance(values[4], Table)
        assert len(values[4]) == 0

    def test_number_keeps_source_text(self):
        table = parse("{0x10}")
        number = table.values()[0]
        assert number.value == 16.0
        assert number.text == "0x10"
        assert number.is_integral()

    def test_keys(self):
        table = parse('{verts={1}, ["ports"]=2, [3]=4; 5}')
        assert table.get("verts").values() == [Number(1)]
        assert table.get("ports") == Number(2)
        assert table.get(3) == Number(4)
        assert table.values() == [Number(5)]
        assert [entry.key for entry in table.keyed()] == ["verts", "ports", 3.0]

    def test_later_key_wins(self):
        table = parse("{a=1, a=2}")
        assert table.get("a") == Number(2)

    def test_trailing_separator(self):
        assert len(parse("{1, 2,}")) == 2
        assert len(parse("{1; 2;}")) == 2

    def test_whitespace_is_insignificant(self):
        compact = parse("{{1,2},{3,4}}")
        spread = parse("{\n  { 1 ,\t2 } ,\n\n  {3,\r\n 4}\n}\n")
        assert [t.values() for t in compact.values()] == [t.values() for t in spread.values()]

    def test_entry_positions(self):
        table = parse("{\n  1,\n  2}")
        assert [(entry.line, entry.column) for entry in table] == [(2, 3), (3, 3)]

    def test_validate(self):
        assert LiteralParser.validate("{1}") == (True, None)
        ok, message = LiteralParser.validate("{1")
        assert not ok
        assert "UnbalancedBrace" in message


class TestComments:
    """Tests for comment attachment."""

    def test_trailing_comment_attaches_to_previous_entry(self):
        table = parse("{1, -- one\n 2}")
        assert [entry.comment for entry in table] == ["one", None]

    def test_comment_on_own_line_leads_next_entry(self):
        table = parse("{1,\n-- two\n2}")
        assert [entry.comment for entry in table] == [None, "two"]

    def test_name_comment_after_id(self):
        table = parse("{\n  {101,  --Shape_Name\n    {}\n  }\n}")
        shape = table.values()[0]
        assert shape.entries[0].comment == "Shape_Name"
        assert shape.entries[1].comment is None

    def test_comment_after_nested_table_closes(self):
        table = parse("{\n  {\n    1\n  }, -- after\n  2\n}")
        assert [entry.comment for entry in table] == ["after", None]

    def test_multiple_leading_comments_are_joined(self):
        table = parse("{\n-- a\n-- b\n1}")
        assert table.entries[0].comment == "a\nb"

    def test_header_and_dangling_comments_are_dropped(self):
        table = parse("-- header\n{1,\n-- dangling\n}\n-- footer")
        assert [entry.comment for entry in table] == [None]


class TestLooseSeparators:
    """Tests for line breaks standing in for separators inside shape entries."""

    def test_line_break_separates_shape_entries(self):
        table = parse("{\n  {1  --Wing\n    {2}\n    launcher_radial=true\n  }\n}")
        entries = table.entries[0].value.entries
        assert [entry.key for entry in entries] == [None, None, "launcher_radial"]
        assert entries[0].comment == "Wing"

    def test_same_line_still_needs_separator(self):
        with pytest.raises(ParseError) as info:
            parse("{ {1 {2}} }")
        assert info.value.kind == ParseErrorKind.UNEXPECTED_TOKEN

    def test_other_depths_still_need_separator(self):
        for text in ("{1\n2}", "{{1, {2\n3}}}"):
            with pytest.raises(ParseError) as info:
                parse(text)
            assert info.value.kind == ParseErrorKind.UNEXPECTED_TOKEN, text


class TestLineEndings:
    """Tests for the line ending styles of different platforms."""

    def test_lone_carriage_returns(self):
        table = parse("{\r  1, -- one\r  2 -- two\r}")
        assert [entry.comment for entry in table] == ["one", "two"]
        assert table.entries[1].line == 3

    def test_crlf_counts_as_one_line(self):
        table = parse("{\r\n1, -- one\r\n2}")
        assert table.entries[0].comment == "one"
        assert table.entries[1].line == 3

    def test_error_position_with_carriage_returns(self):
        with pytest.raises(ParseError) as info:
            parse("{\r\r  @}")
        assert (info.value.line, info.value.column) == (3, 3)


class TestParseErrors:
    """Tests for parse error reporting."""

    def parse_error(self, text, **kwargs):
        with pytest.raises(ParseError) as info:
            parse(text, **kwargs)
        return info.value

    def test_unclosed_table(self):
        error = self.parse_error("{\n  {1, 2\n}")
        assert error.kind == ParseErrorKind.UNBALANCED_BRACE
        assert (error.line, error.column) == (1, 1)
        assert error.offset == 0

    def test_extra_closing_brace(self):
        error = self.parse_error("{1, 2}}")
        assert error.kind == ParseErrorKind.UNBALANCED_BRACE
        assert error.offset == 6

    def test_leading_closing_brace(self):
        assert self.parse_error("}").kind == ParseErrorKind.UNBALANCED_BRACE

    def test_unterminated_string(self):
        error = self.parse_error('{"abc')
        assert error.kind == ParseErrorKind.UNTERMINATED_STRING
        assert error.offset == 1

    def test_string_broken_by_newline(self):
        error = self.parse_error('{"abc\n"}')
        assert error.kind == ParseErrorKind.UNTERMINATED_STRING

    def test_invalid_numbers(self):
        for text in ("{1.2.3}", "{1e}", "{12abc}", "{1e999}", "{- 1}", "{0x}"):
            assert self.parse_error(text).kind == ParseErrorKind.INVALID_NUMBER, text

    def test_unexpected_tokens(self):
        for text in ("{1 2}", "{=1}", "{[a]=1}", "{1} 2", "{@}", "{a=}"):
            assert self.parse_error(text).kind == ParseErrorKind.UNEXPECTED_TOKEN, text

    def test_empty_document(self):
        error = self.parse_error("  -- only a comment\n")
        assert error.kind == ParseErrorKind.UNEXPECTED_TOKEN

    def test_document_must_be_a_table(self):
        assert self.parse_error("42").kind == ParseErrorKind.UNEXPECTED_TOKEN

    def test_too_deep(self):
        error = self.parse_error("{{{{}}}}", max_depth=3)
        assert error.kind == ParseErrorKind.TOO_DEEP
        assert error.column == 4

    def test_depth_limit_is_inclusive(self):
        assert len(parse("{{{}}}", max_depth=3)) == 1

    def test_default_depth_limit(self):
        assert len(parse("{" * 64 + "}" * 64)) == 1
        error = self.parse_error("{" * 65 + "}" * 65)
        assert error.kind == ParseErrorKind.TOO_DEEP

    def test_adversarial_nesting_fails_cleanly(self):
        error = self.parse_error("{" * 100000)
        assert error.kind == ParseErrorKind.TOO_DEEP

    def test_message_includes_location(self):
        error = self.parse_error("{\n  1 2}")
        assert "line 2, column 5" in str(error)


class TestValues:
    """Tests for the value tree helpers."""

    def test_kinds(self):
        table = parse("{1, 'a', b, {}}")
        assert [value.kind for value in table.values()] == [
            ValueKind.NUMBER,
            ValueKind.STRING,
            ValueKind.IDENTIFIER,
            ValueKind.TABLE,
        ]

    def test_describe(self):
        table = parse("{1.50, 'a', b, {1, 2}}")
        assert [describe(value) for value in table.values()] == [
            "number 1.50",
            "string 'a'",
            "identifier b",
            "table with 2 entries",
        ]

    def test_positional_and_keyed(self):
        table = parse("{1, x=2, [3]=4}")
        assert [entry.is_positional for entry in table] == [True, False, False]
        assert len(table.positional()) == 1
