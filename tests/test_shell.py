#!/usr/bin/env python3
"""
Unit tests for statement dispatch and the read loop.
"""

import io

import pytest

from byzershell.shell.core.errors import (
    CommandFailedError,
    EmptyLineError,
    InvalidHistoryError,
    MissingArgsError,
    QuitSignal,
    UnknownCommandError,
)
from byzershell.shell.core.shell import Shell, split_statement
from byzershell.shell.ui.prompt import StreamLineReader, create_line_reader
from byzershell.shell.utils.shared_io import SharedIO


class RecordingHandler:
    """Default handler remembering every statement it received."""

    def __init__(self, error=None):
        self.statements = []
        self.error = error

    def __call__(self, io, shell, statement):
        self.statements.append(statement)
        if self.error is not None:
            raise self.error


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest.fixture
def make_shell(handler, shared_io, scripted_reader):
    def factory(lines=(), **kwargs):
        kwargs.setdefault("default_handler", handler)
        reader = scripted_reader(lines)
        shell = Shell(io=shared_io, line_reader=reader, **kwargs)
        shell.reader = reader
        return shell

    return factory


class TestSplitStatement:
    """Test statement tokenization."""

    @pytest.mark.parametrize(
        "line,tokens",
        [
            ("help;", ["help"]),
            ("history 3;", ["history", "3"]),
            ("a  b\t c ;", ["a", "b", "c"]),
            ("select *\nfrom t;", ["select", "*", "from", "t"]),
            (";", []),
            ("   ", []),
            ("", []),
            ("no terminator", ["no", "terminator"]),
        ],
    )
    def test_split(self, line, tokens):
        """Test tokens are whitespace-split with the terminator removed."""
        assert split_statement(line) == tokens


class TestDispatch:
    """Test Shell.dispatch."""

    def test_empty_statement(self, make_shell):
        """Test a statement without tokens is rejected."""
        shell = make_shell()

        with pytest.raises(EmptyLineError):
            shell.dispatch("   ")

        with pytest.raises(EmptyLineError):
            shell.dispatch(";")

    def test_default_handler_gets_statement_verbatim(self, make_shell, handler):
        """Test unknown first words go to the default handler unchanged."""
        shell = make_shell()
        statement = "load csv.`/tmp/a.csv`  as t;"

        shell.dispatch(statement)

        assert handler.statements == [statement]

    def test_registered_command_receives_arguments(self, make_shell, handler):
        """Test a registered command gets the tokens after its name."""
        received = []
        shell = make_shell()
        shell.add_command("greet", "Say hello", lambda io, sh, args: received.append(list(args)))

        shell.dispatch("greet bob alice;")

        assert received == [["bob", "alice"]]
        assert handler.statements == []

    def test_command_lookup_is_case_sensitive(self, make_shell, handler):
        """Test 'HELP' is not the help builtin."""
        shell = make_shell()

        shell.dispatch("HELP;")

        assert handler.statements == ["HELP;"]

    def test_missing_arguments(self, make_shell):
        """Test commands with too few arguments are rejected before running."""
        calls = []
        shell = make_shell()
        shell.add_command("load", "Load", lambda io, sh, args: calls.append(args), min_args=2)

        with pytest.raises(MissingArgsError) as exc_info:
            shell.dispatch("load a;")

        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 1
        assert calls == []

    def test_handler_failure_is_wrapped(self, make_shell):
        """Test arbitrary handler errors become CommandFailedError."""
        boom = RuntimeError("boom")
        shell = make_shell(default_handler=RecordingHandler(error=boom))

        with pytest.raises(CommandFailedError, match="boom") as exc_info:
            shell.dispatch("select 1;")

        assert exc_info.value.__cause__ is boom

    def test_shell_errors_are_not_wrapped(self, make_shell):
        """Test shell errors raised by a handler propagate as they are."""
        shell = make_shell(default_handler=RecordingHandler(error=UnknownCommandError("foo")))

        with pytest.raises(UnknownCommandError, match="unknown command: foo"):
            shell.dispatch("foo;")

    def test_quit(self, make_shell):
        """Test the quit builtin raises the quit signal."""
        with pytest.raises(QuitSignal):
            make_shell().dispatch("quit;")

    def test_help_lists_commands(self, make_shell, output):
        """Test help prints one line per command, sorted by name."""
        shell = make_shell()

        shell.dispatch("help;")

        lines = output.getvalue().splitlines()
        assert [line.split()[0] for line in lines] == ["help", "history", "quit"]
        assert lines[0] == "help     Print this help"

    def test_history_replay(self, make_shell, handler):
        """Test 'history <n>' dispatches the stored statement again."""
        shell = make_shell()
        shell.execute("select 1;")

        shell.dispatch("history 0;")

        assert handler.statements == ["select 1;", "select 1;"]

    @pytest.mark.parametrize("index", ["5", "x", "-1", "²"])
    def test_invalid_history_index(self, make_shell, index):
        """Test replaying a missing or malformed index fails."""
        shell = make_shell()
        shell.execute("select 1;")

        with pytest.raises(InvalidHistoryError, match=f"invalid history index: {index}"):
            shell.dispatch(f"history {index};")

    def test_self_replaying_history_fails(self, make_shell):
        """Test an entry that replays itself ends in a failed command."""
        shell = make_shell(history_capacity=1)
        shell.history.push("history 0;")

        with pytest.raises(CommandFailedError) as exc_info:
            shell.dispatch("history 0;")

        assert isinstance(exc_info.value.cause, RecursionError)


class TestExecute:
    """Test Shell.execute and history recording."""

    def test_successful_statements_are_recorded(self, make_shell):
        """Test a capacity-2 history keeps the last two statements."""
        shell = make_shell(history_capacity=2)
        for statement in ("a;", "b;", "c;"):
            shell.execute(statement)

        assert shell.history.entries() == ["b;", "c;"]
        assert shell.execution_count == 3

    def test_failed_statement_is_not_recorded(self, make_shell):
        """Test statements that fail are not added to history."""
        shell = make_shell(default_handler=RecordingHandler(error=ValueError("bad")))

        with pytest.raises(CommandFailedError):
            shell.execute("a;")

        assert len(shell.history) == 0
        assert shell.execution_count == 0

    def test_replay_records_only_the_history_command(self, make_shell):
        """Test replaying pushes the 'history <n>' statement itself."""
        shell = make_shell(history_capacity=5)
        shell.execute("a;")
        shell.execute("history 0;")

        assert shell.history.entries() == ["a;", "history 0;"]


class TestReadStatement:
    """Test multi-line statement assembly."""

    def test_single_line(self, make_shell):
        """Test a terminated line is a complete statement."""
        shell = make_shell(["select 1;"])

        assert shell.read_statement(shell.reader) == "select 1;"
        assert shell.reader.prompts == [">> "]

    def test_continuation_lines(self, make_shell):
        """Test lines are joined with newlines until the terminator."""
        shell = make_shell(["select *", "from t;"])

        assert shell.read_statement(shell.reader) == "select *\nfrom t;"
        assert shell.reader.prompts == [">> ", ".. "]

    def test_trailing_whitespace_after_terminator(self, make_shell):
        """Test whitespace after ';' still completes the statement."""
        shell = make_shell(["select 1;   "])

        assert shell.read_statement(shell.reader) == "select 1;   "

    def test_blank_first_line(self, make_shell):
        """Test a blank first line is returned at once."""
        shell = make_shell(["  "])

        assert shell.read_statement(shell.reader) == "  "

    def test_blank_continuation_line_is_kept(self, make_shell):
        """Test blank lines inside a statement are part of it."""
        shell = make_shell(["select *", "", "from t;"])

        assert shell.read_statement(shell.reader) == "select *\n\nfrom t;"

    def test_custom_prompts(self, make_shell):
        """Test configured prompts are used."""
        shell = make_shell(["a", "b;"], prompt="byzer> ", unclosed_prompt="...... ")

        shell.read_statement(shell.reader)

        assert shell.reader.prompts == ["byzer> ", "...... "]


class TestRunLoop:
    """Test Shell.run."""

    def test_help_then_quit(self, make_shell, output):
        """Test help prints the builtins and quit ends the loop."""
        shell = make_shell(["help;", "quit;", "never read;"], history_capacity=2)

        shell.run()

        text = output.getvalue()
        assert len(text.splitlines()) == 3
        assert "CTRL-D" not in text
        assert shell.history.entries() == ["help;"]
        assert shell.reader.lines == ["never read;"]

    def test_multiline_statement_reaches_handler(self, make_shell, handler):
        """Test a statement typed over two lines is dispatched once."""
        shell = make_shell(["select *", "from t;"])

        shell.run()

        assert handler.statements == ["select *\nfrom t;"]

    def test_end_of_input(self, make_shell, output):
        """Test EOF at the prompt prints CTRL-D and stops."""
        shell = make_shell(["a;"])

        shell.run()

        assert output.getvalue() == "CTRL-D\n"

    def test_end_of_input_discards_partial_statement(self, make_shell, handler, output):
        """Test an unterminated statement is dropped at EOF."""
        shell = make_shell(["select *", "from t"])

        shell.run()

        assert handler.statements == []
        assert len(shell.history) == 0
        assert output.getvalue() == "CTRL-D\n"

    def test_interrupt_at_prompt(self, make_shell, handler, output):
        """Test Ctrl-C at the prompt prints CTRL-C and stops."""
        shell = make_shell(["select *", KeyboardInterrupt(), "a;"])

        shell.run()

        assert handler.statements == []
        assert output.getvalue() == "CTRL-C\n"

    def test_errors_are_reported_and_loop_continues(self, make_shell, handler, output):
        """Test a failing statement prints an error and the next one runs."""
        shell = make_shell(["history 9;", "select 1;"])

        shell.run()

        assert "Error: invalid history index: 9\n" in output.getvalue()
        assert handler.statements == ["select 1;"]
        assert shell.history.entries() == ["select 1;"]

    def test_missing_args_reported(self, make_shell, output):
        """Test argument count errors are printed."""
        shell = make_shell(["load;"])
        shell.add_command("load", "Load", lambda io, sh, args: None, min_args=1)

        shell.run()

        assert "Error: command 'load' expects at least 1 argument(s), got 0" in output.getvalue()

    def test_empty_statements_are_ignored(self, make_shell, handler, output):
        """Test blank lines and lone terminators print nothing."""
        shell = make_shell(["", "   ", ";", "a;"])

        shell.run()

        assert handler.statements == ["a;"]
        assert shell.history.entries() == ["a;"]
        assert output.getvalue() == "CTRL-D\n"

    def test_interrupt_during_statement(self, make_shell, output):
        """Test Ctrl-C while a statement runs only aborts that statement."""
        handler = RecordingHandler(error=KeyboardInterrupt())
        shell = make_shell(["a;", "b;"], default_handler=handler)

        shell.run()

        assert handler.statements == ["a;", "b;"]
        assert output.getvalue().count("Error: interrupted\n") == 2

    def test_history_listing(self, make_shell, output):
        """Test 'history' prints the recorded statements."""
        shell = make_shell(["a;", "b;", "history;"])

        shell.run()

        assert output.getvalue().startswith("0: a;\n1: b;\n")

    def test_data_is_available_to_handlers(self, make_shell):
        """Test handlers see the shell payload."""
        seen = []
        shell = make_shell(
            ["x;"],
            default_handler=lambda io, sh, statement: seen.append(sh.data),
            data={"user": "jack"},
        )

        shell.run()

        assert seen == [{"user": "jack"}]


class TestLineReaders:
    """Test the line readers."""

    def test_stream_reader(self):
        """Test lines are read without their newline and the prompt echoed."""
        out = io.StringIO()
        reader = StreamLineReader(SharedIO(input=io.StringIO("select 1;\r\n"), output=out))

        assert reader(">> ") == "select 1;"
        assert out.getvalue() == ">> "

        with pytest.raises(EOFError):
            reader(">> ")

    def test_non_terminal_uses_stream_reader(self, make_shell, shared_io):
        """Test a non-terminal channel gets the plain reader."""
        shell = make_shell()

        assert isinstance(create_line_reader(shared_io, shell.helper), StreamLineReader)

    def test_run_reads_from_channel(self, handler):
        """Test the loop reads statements from the channel by default."""
        out = io.StringIO()
        channel = SharedIO(input=io.StringIO("select *\nfrom t;\nquit;\n"), output=out)
        shell = Shell(default_handler=handler, io=channel)

        shell.run()

        assert handler.statements == ["select *\nfrom t;"]
        assert out.getvalue() == ">> .. >> "
