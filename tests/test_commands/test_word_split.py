"""Tests for word splitting.

Key areas: default IFS, custom IFS with whitespace and non-whitespace
characters, empty IFS, quoted expansions, $* vs $@, IFS changes taking
effect for later commands.
"""

import pytest
from just_expand import Shell


class TestIFSBasic:
    """Basic IFS (Internal Field Separator) behavior."""

    @pytest.mark.asyncio
    async def test_default_ifs_splits_whitespace(self):
        """Default IFS splits on space, tab, newline and collapses runs."""
        shell = Shell()
        result = await shell.exec('var="  one   two\tthree  "; argv.py $var')
        assert result.stdout == "['one', 'two', 'three']\n"

    @pytest.mark.asyncio
    async def test_three_words_default_ifs(self):
        shell = Shell()
        result = await shell.exec('words1="Cargo.toml Cargo.lock test.py"; argv.py $words1')
        assert result.stdout == "['Cargo.toml', 'Cargo.lock', 'test.py']\n"

    @pytest.mark.asyncio
    async def test_custom_ifs_colon(self):
        shell = Shell()
        result = await shell.exec('IFS=:; var="a:b:c"; argv.py $var')
        assert result.stdout == "['a', 'b', 'c']\n"

    @pytest.mark.asyncio
    async def test_custom_ifs_is_a_character_set(self):
        shell = Shell()
        result = await shell.exec('IFS="/#"; words2="Cargo.toml/Cargo.lock#test.py"; argv.py $words2')
        assert result.stdout == "['Cargo.toml', 'Cargo.lock', 'test.py']\n"

    @pytest.mark.asyncio
    async def test_quoted_expansion_is_one_field(self):
        shell = Shell()
        result = await shell.exec('IFS="/#"; words2="Cargo.toml/Cargo.lock#test.py"; argv.py "$words2"')
        assert result.stdout == "['Cargo.toml/Cargo.lock#test.py']\n"

    @pytest.mark.asyncio
    async def test_adjacent_non_whitespace_delimiters_make_empty_field(self):
        shell = Shell()
        result = await shell.exec('IFS=:; var="a::b"; argv.py $var')
        assert result.stdout == "['a', '', 'b']\n"

    @pytest.mark.asyncio
    async def test_leading_non_whitespace_delimiter(self):
        shell = Shell()
        result = await shell.exec('IFS=:; var=":a:"; argv.py $var')
        assert result.stdout == "['', 'a']\n"

    @pytest.mark.asyncio
    async def test_whitespace_around_non_whitespace_delimiter(self):
        shell = Shell()
        result = await shell.exec('IFS=" :"; var=" a : b  c "; argv.py $var')
        assert result.stdout == "['a', 'b', 'c']\n"

    @pytest.mark.asyncio
    async def test_empty_ifs_disables_splitting(self):
        shell = Shell()
        result = await shell.exec("IFS=; var='a b  c'; argv.py $var")
        assert result.stdout == "['a b  c']\n"

    @pytest.mark.asyncio
    async def test_unset_ifs_uses_default(self):
        shell = Shell()
        result = await shell.exec("IFS=:; unset IFS; var='a b:c'; argv.py $var")
        assert result.stdout == "['a', 'b:c']\n"


class TestSplittingScope:
    """What is and is not split."""

    @pytest.mark.asyncio
    async def test_literal_text_is_not_split(self):
        shell = Shell()
        result = await shell.exec("IFS=o; argv.py foo")
        assert result.stdout == "['foo']\n"

    @pytest.mark.asyncio
    async def test_literal_text_joins_adjacent_fields(self):
        shell = Shell()
        result = await shell.exec("var='a b'; argv.py x${var}y")
        assert result.stdout == "['xa', 'by']\n"

    @pytest.mark.asyncio
    async def test_empty_unquoted_expansion_produces_no_field(self):
        shell = Shell()
        result = await shell.exec("e=; argv.py $e $nosuch")
        assert result.stdout == "[]\n"

    @pytest.mark.asyncio
    async def test_empty_quoted_expansion_produces_empty_field(self):
        shell = Shell()
        result = await shell.exec('e=; argv.py "$e" \'\' ""')
        assert result.stdout == "['', '', '']\n"

    @pytest.mark.asyncio
    async def test_command_substitution_is_split(self):
        shell = Shell()
        result = await shell.exec("argv.py $(echo a b) \"$(echo c d)\"")
        assert result.stdout == "['a', 'b', 'c d']\n"

    @pytest.mark.asyncio
    async def test_arithmetic_result_is_split(self):
        shell = Shell()
        result = await shell.exec("IFS=2; argv.py $((120 + 3))")
        assert result.stdout == "['1', '3']\n"

    @pytest.mark.asyncio
    async def test_assignment_value_is_not_split(self):
        shell = Shell()
        result = await shell.exec("v='a   b'; w=$v; argv.py \"$w\"")
        assert result.stdout == "['a   b']\n"

    @pytest.mark.asyncio
    async def test_ifs_change_visible_to_next_command(self):
        shell = Shell()
        result = await shell.exec('v="a,b c"; argv.py $v; IFS=,; argv.py $v; IFS=" "; argv.py $v')
        assert result.stdout == "['a,b', 'c']\n['a', 'b c']\n['a,b', 'c']\n"


class TestPositionalSplitting:
    """$@ and $* in and out of quotes."""

    @pytest.mark.asyncio
    async def test_quoted_at_keeps_parameters(self):
        shell = Shell()
        result = await shell.exec("set -- 'a b' c ''; argv.py \"$@\"")
        assert result.stdout == "['a b', 'c', '']\n"

    @pytest.mark.asyncio
    async def test_unquoted_at_is_split(self):
        shell = Shell()
        result = await shell.exec("set -- 'a b' c; argv.py $@")
        assert result.stdout == "['a', 'b', 'c']\n"

    @pytest.mark.asyncio
    async def test_quoted_at_with_no_parameters(self):
        shell = Shell()
        result = await shell.exec('set --; argv.py "$@"')
        assert result.stdout == "[]\n"

    @pytest.mark.asyncio
    async def test_quoted_at_with_affixes(self):
        shell = Shell()
        result = await shell.exec('set -- a b; argv.py "x$@y"')
        assert result.stdout == "['xa', 'by']\n"

    @pytest.mark.asyncio
    async def test_quoted_star_joins_with_first_ifs_char(self):
        shell = Shell()
        result = await shell.exec('set -- a b c; IFS=,:; argv.py "$*"')
        assert result.stdout == "['a,b,c']\n"

    @pytest.mark.asyncio
    async def test_quoted_star_with_empty_ifs(self):
        shell = Shell()
        result = await shell.exec('set -- a b c; IFS=; argv.py "$*"')
        assert result.stdout == "['abc']\n"

    @pytest.mark.asyncio
    async def test_quoted_star_with_default_ifs(self):
        shell = Shell()
        result = await shell.exec('set -- a b c; argv.py "$*"')
        assert result.stdout == "['a b c']\n"
