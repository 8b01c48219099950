"""Tests for the interpreter."""

import pytest
from just_expand import (
    ExecutionLimits,
    MalformedParameterExpansion,
    Shell,
    UnsetVariableError,
)


class TestBasicExecution:
    """Test basic script execution."""

    @pytest.mark.asyncio
    async def test_simple_echo(self):
        shell = Shell()
        result = await shell.exec("echo hello")
        assert result.stdout == "hello\n"
        assert result.exit_code == 0

    @pytest.mark.asyncio
    async def test_echo_no_newline(self):
        shell = Shell()
        result = await shell.exec("echo -n hello")
        assert result.stdout == "hello"

    @pytest.mark.asyncio
    async def test_echo_escapes(self):
        shell = Shell()
        result = await shell.exec("echo -e 'a\\tb'")
        assert result.stdout == "a\tb\n"

    @pytest.mark.asyncio
    async def test_true_and_false(self):
        shell = Shell()
        assert (await shell.exec("true")).exit_code == 0
        assert (await shell.exec("false")).exit_code == 1

    @pytest.mark.asyncio
    async def test_command_not_found(self):
        shell = Shell()
        result = await shell.exec("nonexistent_command")
        assert result.stderr == "bash: nonexistent_command: command not found\n"
        assert result.exit_code == 127

    @pytest.mark.asyncio
    async def test_command_name_from_expansion(self):
        shell = Shell()
        result = await shell.exec("cmd=echo; $cmd via variable")
        assert result.stdout == "via variable\n"

    @pytest.mark.asyncio
    async def test_comments_and_blank_lines(self):
        shell = Shell()
        result = await shell.exec("# comment\n\necho one # trailing\n")
        assert result.stdout == "one\n"

    @pytest.mark.asyncio
    async def test_env_in_result(self):
        shell = Shell()
        result = await shell.exec("VAR=value")
        assert result.env["VAR"] == "value"
        assert shell.env.get("VAR") == "value"

    @pytest.mark.asyncio
    async def test_state_persists_between_calls(self):
        shell = Shell()
        await shell.exec("VAR=hello")
        await shell.exec("VAR+=world")
        result = await shell.exec("echo $VAR")
        assert result.stdout == "helloworld\n"

    @pytest.mark.asyncio
    async def test_exec_env_and_cwd(self):
        shell = Shell()
        result = await shell.exec("echo $GREETING; pwd", env={"GREETING": "hi"}, cwd="/tmp")
        assert result.stdout == "hi\n/tmp\n"

    @pytest.mark.asyncio
    async def test_reset(self):
        shell = Shell(env={"KEEP": "yes"})
        await shell.exec("VAR=1; cd /tmp")
        shell.reset()
        result = await shell.exec('echo "[$VAR]" $KEEP; pwd')
        assert result.stdout == "[] yes\n/home/user\n"


class TestListsAndPipelines:
    """Test && || ; and pipelines."""

    @pytest.mark.asyncio
    async def test_and(self):
        shell = Shell()
        result = await shell.exec("true && echo yes; false && echo no")
        assert result.stdout == "yes\n"

    @pytest.mark.asyncio
    async def test_or(self):
        shell = Shell()
        result = await shell.exec("false || echo fallback; true || echo no")
        assert result.stdout == "fallback\n"

    @pytest.mark.asyncio
    async def test_pipeline_passes_stdout(self):
        shell = Shell()
        result = await shell.exec("echo piped | cat")
        assert result.stdout == "piped\n"

    @pytest.mark.asyncio
    async def test_pipeline_status_is_last(self):
        shell = Shell()
        result = await shell.exec("false | true; echo $?")
        assert result.stdout == "0\n"

    @pytest.mark.asyncio
    async def test_group_shares_state(self):
        shell = Shell()
        result = await shell.exec("{ x=1; echo in; }; echo $x")
        assert result.stdout == "in\n1\n"

    @pytest.mark.asyncio
    async def test_subshell_isolated(self):
        shell = Shell()
        result = await shell.exec("x=1; (x=2; echo $x); echo $x")
        assert result.stdout == "2\n1\n"

    @pytest.mark.asyncio
    async def test_exit_in_subshell(self):
        shell = Shell()
        result = await shell.exec("(exit 4); echo $?")
        assert result.stdout == "4\n"


class TestFunctions:
    """Test function definition and calls."""

    @pytest.mark.asyncio
    async def test_define_and_call(self):
        shell = Shell()
        result = await shell.exec("greet() { echo hello $1; }; greet world")
        assert result.stdout == "hello world\n"

    @pytest.mark.asyncio
    async def test_function_keyword(self):
        shell = Shell()
        result = await shell.exec("function greet { echo hi; }; greet")
        assert result.stdout == "hi\n"

    @pytest.mark.asyncio
    async def test_arguments_become_positional_params(self):
        shell = Shell()
        result = await shell.exec('f() { echo $# "$@"; }; f 7 8; echo $#')
        assert result.stdout == "2 7 8\n0\n"

    @pytest.mark.asyncio
    async def test_return_status(self):
        shell = Shell()
        result = await shell.exec("f() { return 3; echo unreachable; }; f; echo $?")
        assert result.stdout == "3\n"

    @pytest.mark.asyncio
    async def test_return_masks_to_byte(self):
        shell = Shell()
        result = await shell.exec("f() { return 257; }; f; echo $?")
        assert result.stdout == "1\n"

    @pytest.mark.asyncio
    async def test_return_outside_function(self):
        shell = Shell()
        result = await shell.exec("return 2")
        assert result.exit_code == 2
        assert "can only `return' from a function" in result.stderr

    @pytest.mark.asyncio
    async def test_nested_calls_via_substitution(self):
        shell = Shell()
        result = await shell.exec(
            "double() { echo $(( $1 * 2 )); }; echo $(double $(double 3))"
        )
        assert result.stdout == "12\n"

    @pytest.mark.asyncio
    async def test_local_and_shift(self):
        shell = Shell()
        result = await shell.exec(
            "f() { local first=$1; shift; echo $first $#; }; f a b c; echo \"[$first]\""
        )
        assert result.stdout == "a 2\n[]\n"

    @pytest.mark.asyncio
    async def test_function_overrides_command(self):
        shell = Shell()
        result = await shell.exec("echo() { printenv HOME; }; echo ignored")
        assert result.stdout == "/home/user\n"


class TestExitAndErrexit:
    """Test exit and set -e."""

    @pytest.mark.asyncio
    async def test_exit_stops_script(self):
        shell = Shell()
        result = await shell.exec("echo before; exit 7; echo after")
        assert result.stdout == "before\n"
        assert result.exit_code == 7

    @pytest.mark.asyncio
    async def test_errexit_stops_on_failure(self):
        shell = Shell()
        result = await shell.exec("set -e; echo one; false; echo two")
        assert result.stdout == "one\n"
        assert result.exit_code == 1

    @pytest.mark.asyncio
    async def test_errexit_on_expansion_error(self):
        shell = Shell(errexit=True)
        result = await shell.exec("echo ${x:?}; echo two")
        assert result.stdout == ""
        assert result.exit_code == 1

    @pytest.mark.asyncio
    async def test_errexit_ignores_short_circuit(self):
        shell = Shell(errexit=True)
        result = await shell.exec("false && true; ! true; echo reached")
        assert result.stdout == "reached\n"

    @pytest.mark.asyncio
    async def test_set_o_listing(self):
        shell = Shell(errexit=True)
        result = await shell.exec("set -o")
        assert result.stdout == "errexit         on\nnoglob          off\nnounset         off\n"

    @pytest.mark.asyncio
    async def test_set_invalid_option(self):
        shell = Shell()
        result = await shell.exec("set -z")
        assert result.exit_code == 1
        assert result.stderr == "bash: set: -z: invalid option\n"


class TestBackground:
    """Test `cmd &`."""

    @pytest.mark.asyncio
    async def test_background_output_and_status(self):
        shell = Shell()
        result = await shell.exec("false & echo $?")
        assert result.stdout == "0\n"

    @pytest.mark.asyncio
    async def test_background_does_not_change_state(self):
        shell = Shell()
        result = await shell.exec("x=1; { x=2; echo job; } & echo $x")
        assert result.stdout == "job\n1\n"


class TestLimits:
    """Test execution limits."""

    @pytest.mark.asyncio
    async def test_call_depth(self):
        shell = Shell(limits=ExecutionLimits(max_call_depth=10))
        result = await shell.exec("f() { f; }; f")
        assert result.exit_code == 126
        assert "function call depth exceeded (10)" in result.stderr

    @pytest.mark.asyncio
    async def test_substitution_nesting_depth(self):
        shell = Shell(limits=ExecutionLimits(max_call_depth=5))
        result = await shell.exec("f() { echo $(f); }; f")
        assert result.exit_code == 126

    @pytest.mark.asyncio
    async def test_command_count(self):
        shell = Shell(limits=ExecutionLimits(max_command_count=3))
        result = await shell.exec("echo 1; echo 2; echo 3; echo 4")
        assert result.exit_code == 126
        assert "too many commands executed" in result.stderr

    @pytest.mark.asyncio
    async def test_command_count_resets_per_exec(self):
        shell = Shell(limits=ExecutionLimits(max_command_count=3))
        await shell.exec("echo 1; echo 2")
        result = await shell.exec("echo 3; echo 4")
        assert result.exit_code == 0


class TestParseErrors:
    """Unsupported or malformed input is rejected before running."""

    @pytest.mark.asyncio
    async def test_unterminated_quote(self):
        shell = Shell()
        result = await shell.exec("echo 'oops")
        assert result.exit_code == 2
        assert result.stderr.startswith("bash: ")

    @pytest.mark.asyncio
    async def test_unterminated_substitution(self):
        shell = Shell()
        result = await shell.exec("echo $(echo")
        assert result.exit_code == 2

    @pytest.mark.asyncio
    async def test_redirection_rejected(self):
        shell = Shell()
        result = await shell.exec("echo hi > /tmp/out")
        assert result.exit_code == 2
        assert result.stdout == ""

    @pytest.mark.asyncio
    async def test_compound_keyword_rejected(self):
        shell = Shell()
        result = await shell.exec("if true; then echo yes; fi")
        assert result.exit_code == 2

    @pytest.mark.asyncio
    async def test_nothing_runs_on_parse_error(self):
        shell = Shell()
        result = await shell.exec("x=1; echo 'oops")
        assert result.exit_code == 2
        assert "x" not in shell.env


class TestExpandApi:
    """Shell.expand runs the pipeline on a single word."""

    @pytest.mark.asyncio
    async def test_split_and_quoted(self):
        shell = Shell(env={"v": "a b"})
        assert await shell.expand("$v") == ["a", "b"]
        assert await shell.expand('"$v"') == ["a b"]

    @pytest.mark.asyncio
    async def test_glob(self):
        shell = Shell(files={"/home/user/a.txt": "", "/home/user/b.txt": ""})
        assert await shell.expand("*.txt") == ["a.txt", "b.txt"]
        assert await shell.expand('"*.txt"') == ["*.txt"]

    @pytest.mark.asyncio
    async def test_custom_ifs(self):
        shell = Shell(env={"IFS": ","})
        assert await shell.expand("x$IFS\"y\"") == ["x", "y"]

    @pytest.mark.asyncio
    async def test_empty_results(self):
        shell = Shell()
        assert await shell.expand("$nosuch") == []
        assert await shell.expand('""') == [""]

    @pytest.mark.asyncio
    async def test_side_effects_persist(self):
        shell = Shell()
        assert await shell.expand("${n:=5}") == ["5"]
        assert shell.env["n"] == "5"

    @pytest.mark.asyncio
    async def test_unset_error(self):
        shell = Shell()
        with pytest.raises(UnsetVariableError) as exc_info:
            await shell.expand("pre${missing:?gone}")
        assert exc_info.value.name == "missing"
        assert exc_info.value.word == "pre${missing:?gone}"
        assert exc_info.value.offset == 3
        assert exc_info.value.diagnostic() == "bash: missing: gone\n"

    @pytest.mark.asyncio
    async def test_bad_substitution_error(self):
        shell = Shell()
        with pytest.raises(MalformedParameterExpansion):
            await shell.expand("${a b}")

    @pytest.mark.asyncio
    async def test_unterminated_is_value_error(self):
        shell = Shell()
        with pytest.raises(ValueError):
            await shell.expand('"open')


class TestSyncRun:
    """Shell.run wraps exec for synchronous callers."""

    def test_run(self):
        shell = Shell()
        result = shell.run("b=2; echo $((b+1))")
        assert result.stdout == "3\n"

    def test_run_keeps_state(self):
        shell = Shell()
        shell.run("x=kept")
        assert shell.run("echo $x").stdout == "kept\n"
