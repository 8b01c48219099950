"""Tests for parameter expansion operators."""

import pytest
from just_expand import Shell


class TestLength:
    """${#var}."""

    @pytest.mark.asyncio
    async def test_length_of_value(self):
        shell = Shell()
        result = await shell.exec("v=hello; echo ${#v}")
        assert result.stdout == "5\n"

    @pytest.mark.asyncio
    async def test_length_of_unset(self):
        shell = Shell()
        result = await shell.exec("echo ${#nosuch}")
        assert result.stdout == "0\n"

    @pytest.mark.asyncio
    async def test_length_of_positional_list(self):
        shell = Shell()
        result = await shell.exec("set -- a b c; echo ${#@} ${#}")
        assert result.stdout == "3 3\n"

    @pytest.mark.asyncio
    async def test_length_counts_characters(self):
        shell = Shell()
        result = await shell.exec("v='héllo'; echo ${#v}")
        assert result.stdout == "5\n"


class TestPatternRemoval:
    """${var#pat} ${var##pat} ${var%pat} ${var%%pat}."""

    @pytest.mark.asyncio
    async def test_shortest_prefix(self):
        shell = Shell()
        result = await shell.exec("p=/usr/local/bin; echo ${p#*/}")
        assert result.stdout == "usr/local/bin\n"

    @pytest.mark.asyncio
    async def test_longest_prefix(self):
        shell = Shell()
        result = await shell.exec("p=/usr/local/bin; echo ${p##*/}")
        assert result.stdout == "bin\n"

    @pytest.mark.asyncio
    async def test_shortest_suffix(self):
        shell = Shell()
        result = await shell.exec("f=archive.tar.gz; echo ${f%.*}")
        assert result.stdout == "archive.tar\n"

    @pytest.mark.asyncio
    async def test_longest_suffix(self):
        shell = Shell()
        result = await shell.exec("f=archive.tar.gz; echo ${f%%.*}")
        assert result.stdout == "archive\n"

    @pytest.mark.asyncio
    async def test_no_match_leaves_value(self):
        shell = Shell()
        result = await shell.exec("f=abc; echo ${f#x} ${f%x}")
        assert result.stdout == "abc abc\n"

    @pytest.mark.asyncio
    async def test_question_mark_pattern(self):
        shell = Shell()
        result = await shell.exec("f=abc; echo ${f#?} ${f%?}")
        assert result.stdout == "bc ab\n"

    @pytest.mark.asyncio
    async def test_quoted_pattern_is_literal(self):
        shell = Shell()
        result = await shell.exec("f='*abc'; echo \"${f#'*'}\"")
        assert result.stdout == "abc\n"

    @pytest.mark.asyncio
    async def test_removal_applies_to_each_parameter(self):
        shell = Shell()
        result = await shell.exec('set -- a.txt b.txt; argv.py "${@%.txt}"')
        assert result.stdout == "['a', 'b']\n"


class TestDefaultValue:
    """${var-word} and ${var:-word}."""

    @pytest.mark.asyncio
    async def test_unset_uses_default(self):
        shell = Shell()
        result = await shell.exec("echo ${nosuch:-fallback} ${nosuch-fallback}")
        assert result.stdout == "fallback fallback\n"

    @pytest.mark.asyncio
    async def test_empty_with_colon_uses_default(self):
        shell = Shell()
        result = await shell.exec("e=; echo ${e:-fallback}")
        assert result.stdout == "fallback\n"

    @pytest.mark.asyncio
    async def test_empty_without_colon_keeps_empty(self):
        shell = Shell()
        result = await shell.exec("e=; argv.py \"${e-fallback}\"")
        assert result.stdout == "['']\n"

    @pytest.mark.asyncio
    async def test_set_value_wins(self):
        shell = Shell()
        result = await shell.exec("v=x; echo ${v:-fallback}")
        assert result.stdout == "x\n"

    @pytest.mark.asyncio
    async def test_default_is_expanded(self):
        shell = Shell()
        result = await shell.exec("d=deep; echo ${nosuch:-$d}")
        assert result.stdout == "deep\n"

    @pytest.mark.asyncio
    async def test_default_is_not_evaluated_when_set(self):
        shell = Shell()
        result = await shell.exec("v=x; echo ${v:-$((n = 5))}; echo ${n:-unset}")
        assert result.stdout == "x\nunset\n"

    @pytest.mark.asyncio
    async def test_unquoted_default_is_split(self):
        shell = Shell()
        result = await shell.exec("argv.py ${nosuch:-a b} \"${nosuch:-c d}\"")
        assert result.stdout == "['a', 'b', 'c d']\n"

    @pytest.mark.asyncio
    async def test_default_for_positional(self):
        shell = Shell()
        result = await shell.exec("set --; echo ${1:-none}")
        assert result.stdout == "none\n"


class TestAssignDefault:
    """${var=word} and ${var:=word}."""

    @pytest.mark.asyncio
    async def test_assigns_when_unset(self):
        shell = Shell()
        result = await shell.exec("echo ${v:=assigned}; echo $v")
        assert result.stdout == "assigned\nassigned\n"

    @pytest.mark.asyncio
    async def test_keeps_existing(self):
        shell = Shell()
        result = await shell.exec("v=old; echo ${v:=new}; echo $v")
        assert result.stdout == "old\nold\n"

    @pytest.mark.asyncio
    async def test_without_colon_keeps_empty(self):
        shell = Shell()
        result = await shell.exec("v=; echo \"[${v=new}]\"")
        assert result.stdout == "[]\n"

    @pytest.mark.asyncio
    async def test_assignment_visible_to_later_words(self):
        shell = Shell()
        result = await shell.exec("argv.py ${v:=one} $v")
        assert result.stdout == "['one', 'one']\n"

    @pytest.mark.asyncio
    async def test_positional_cannot_be_assigned(self):
        shell = Shell()
        result = await shell.exec("echo ${1:=x}")
        assert result.exit_code == 1
        assert result.stderr == "bash: 1: cannot assign in this way\n"


class TestUseAlternative:
    """${var+word} and ${var:+word}."""

    @pytest.mark.asyncio
    async def test_set_uses_alternative(self):
        shell = Shell()
        result = await shell.exec("v=x; echo ${v:+alt}")
        assert result.stdout == "alt\n"

    @pytest.mark.asyncio
    async def test_unset_gives_nothing(self):
        shell = Shell()
        result = await shell.exec("argv.py ${nosuch:+alt}")
        assert result.stdout == "[]\n"

    @pytest.mark.asyncio
    async def test_empty_with_and_without_colon(self):
        shell = Shell()
        result = await shell.exec("e=; argv.py ${e:+alt} ${e+alt}")
        assert result.stdout == "['alt']\n"


class TestErrorIfUnset:
    """${var?word} and ${var:?word}."""

    @pytest.mark.asyncio
    async def test_set_value_passes(self):
        shell = Shell()
        result = await shell.exec("v=ok; echo ${v:?missing}")
        assert result.stdout == "ok\n"

    @pytest.mark.asyncio
    async def test_custom_message(self):
        shell = Shell()
        result = await shell.exec("echo ${v:?must be set}")
        assert result.stdout == ""
        assert result.stderr == "bash: v: must be set\n"
        assert result.exit_code == 1

    @pytest.mark.asyncio
    async def test_default_message(self):
        shell = Shell()
        result = await shell.exec("echo ${v:?}")
        assert result.stderr == "bash: v: parameter null or not set\n"

    @pytest.mark.asyncio
    async def test_empty_without_colon_passes(self):
        shell = Shell()
        result = await shell.exec("v=; echo \"[${v?}]\"")
        assert result.stdout == "[]\n"
        assert result.exit_code == 0

    @pytest.mark.asyncio
    async def test_script_continues_after_error(self):
        shell = Shell()
        result = await shell.exec("echo ${v:?gone}; echo after")
        assert result.stdout == "after\n"
        assert result.exit_code == 0


class TestBadSubstitution:
    """Malformed ${...} forms."""

    @pytest.mark.asyncio
    async def test_unknown_operator(self):
        shell = Shell()
        result = await shell.exec("v=x; echo ${v^}")
        assert result.exit_code == 1
        assert result.stderr == "bash: ${v^}: bad substitution\n"

    @pytest.mark.asyncio
    async def test_invalid_name(self):
        shell = Shell()
        result = await shell.exec("echo ${%x}")
        assert result.stderr == "bash: ${%x}: bad substitution\n"

    @pytest.mark.asyncio
    async def test_empty_braces(self):
        shell = Shell()
        result = await shell.exec("echo ${}")
        assert result.stderr == "bash: ${}: bad substitution\n"

    @pytest.mark.asyncio
    async def test_other_words_still_expand(self):
        shell = Shell()
        result = await shell.exec("echo ${v:=set} ${^}; echo $v")
        assert result.stdout == "set\n"
        assert result.stderr == "bash: ${^}: bad substitution\n"


class TestNounset:
    """set -u makes unset variables an error."""

    @pytest.mark.asyncio
    async def test_unset_variable_is_error(self):
        shell = Shell()
        result = await shell.exec("set -u; echo $nosuch; echo next")
        assert result.stdout == "next\n"
        assert result.stderr == "bash: nosuch: unbound variable\n"

    @pytest.mark.asyncio
    async def test_default_operator_is_allowed(self):
        shell = Shell()
        result = await shell.exec("set -u; echo ${nosuch:-ok}")
        assert result.stdout == "ok\n"
        assert result.stderr == ""

    @pytest.mark.asyncio
    async def test_set_empty_variable_is_fine(self):
        shell = Shell(nounset=True)
        result = await shell.exec("e=; argv.py \"$e\"")
        assert result.stdout == "['']\n"

    @pytest.mark.asyncio
    async def test_one_diagnostic_per_failing_word(self):
        shell = Shell(nounset=True)
        result = await shell.exec("echo $a $b")
        assert result.stderr == "bash: a: unbound variable\nbash: b: unbound variable\n"
        assert result.exit_code == 1
