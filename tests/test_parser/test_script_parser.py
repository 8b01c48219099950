"""Tests for the script lexer and parser."""

import pytest
from just_expand.ast.types import (
    FunctionDefNode,
    GroupNode,
    SimpleCommandNode,
    SubshellNode,
)
from just_expand.parser import ParseException, TokenType, parse, tokenize


class TestLexer:
    def test_words_and_operators(self):
        tokens = tokenize("a && b || c | d; e &")
        types = [t.type for t in tokens]
        assert types == [
            TokenType.WORD, TokenType.AND_IF, TokenType.WORD, TokenType.OR_IF,
            TokenType.WORD, TokenType.PIPE, TokenType.WORD, TokenType.SEMI,
            TokenType.WORD, TokenType.AMP, TokenType.EOF,
        ]

    def test_quoted_text_stays_in_one_word(self):
        tokens = tokenize("echo 'a b' \"c; d\" $(e f) ${g:-h i} `j k`")
        values = [t.value for t in tokens if t.type == TokenType.WORD]
        assert values == ["echo", "'a b'", '"c; d"', "$(e f)", "${g:-h i}", "`j k`"]

    def test_comment(self):
        tokens = tokenize("echo a # ignored\necho b#kept")
        values = [t.value for t in tokens if t.type == TokenType.WORD]
        assert values == ["echo", "a", "echo", "b#kept"]

    def test_line_continuation(self):
        tokens = tokenize("echo a \\\n b")
        values = [t.value for t in tokens if t.type == TokenType.WORD]
        assert values == ["echo", "a", "b"]


class TestParser:
    def test_simple_command(self):
        script = parse("echo hello world")
        (stmt,) = script.statements
        (cmd,) = stmt.pipelines[0].commands
        assert isinstance(cmd, SimpleCommandNode)
        assert cmd.name.text == "echo"
        assert [w.text for w in cmd.args] == ["hello", "world"]

    def test_assignments_before_command(self):
        cmd = parse("A=1 B+=2 cmd C=3").statements[0].pipelines[0].commands[0]
        assert [(a.name, a.append) for a in cmd.assignments] == [("A", False), ("B", True)]
        assert cmd.name.text == "cmd"
        assert cmd.args[0].text == "C=3"

    def test_assignment_value_offsets(self):
        cmd = parse("v=a$x").statements[0].pipelines[0].commands[0]
        value = cmd.assignments[0].value
        assert value.text == "a$x"
        assert value.parts[1].offset == 3

    def test_empty_assignment(self):
        cmd = parse("v=").statements[0].pipelines[0].commands[0]
        assert cmd.assignments[0].value.parts == ()

    def test_statements_and_lists(self):
        script = parse("a; b && c || d\ne")
        assert len(script.statements) == 3
        assert script.statements[1].operators == ("&&", "||")

    def test_background(self):
        script = parse("a & b")
        assert [s.background for s in script.statements] == [True, False]

    def test_negated_pipeline(self):
        pipeline = parse("! a | b").statements[0].pipelines[0]
        assert pipeline.negated is True
        assert len(pipeline.commands) == 2

    def test_group_and_subshell(self):
        script = parse("{ a; b; }; (c)")
        assert isinstance(script.statements[0].pipelines[0].commands[0], GroupNode)
        assert isinstance(script.statements[1].pipelines[0].commands[0], SubshellNode)

    def test_function_forms(self):
        script = parse("f() { a; }\nfunction g { b; }\nfunction h() (c)")
        names = [s.pipelines[0].commands[0].name for s in script.statements]
        assert names == ["f", "g", "h"]
        assert all(
            isinstance(s.pipelines[0].commands[0], FunctionDefNode) for s in script.statements
        )

    def test_multiline_function(self):
        script = parse("func1() {\n    echo $(($1-1))\n}\nz=$(func1 7)\n")
        assert isinstance(script.statements[0].pipelines[0].commands[0], FunctionDefNode)
        assert len(script.statements) == 2

    def test_empty_script(self):
        assert parse("").statements == ()
        assert parse("\n\n# only a comment\n").statements == ()


class TestRejected:
    @pytest.mark.parametrize(
        "source",
        [
            "if true; then a; fi",
            "for x in a; do b; done",
            "while true; do a; done",
            "case x in a) b;; esac",
            "echo > out",
            "cat < in",
            "[[ -n x ]]",
        ],
    )
    def test_unsupported(self, source):
        with pytest.raises(ParseException):
            parse(source)

    @pytest.mark.parametrize("source", ["a &&", "| a", "{ a; ", "(a", "a )", "echo 'x"])
    def test_malformed(self, source):
        with pytest.raises(ParseException):
            parse(source)

    def test_message_names_token(self):
        with pytest.raises(ParseException) as exc_info:
            parse("a; ; b")
        assert str(exc_info.value) == "syntax error near unexpected token `;'"
