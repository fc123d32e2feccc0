import io

import pytest

from tickle import shell
from tickle.interpreter import Interp


def feed(monkeypatch, *lines, end=EOFError):
    """Make input() return the given lines, then raise `end`."""
    pending = list(lines)
    prompts = []

    def fake_input(prompt=""):
        prompts.append(prompt)
        if pending:
            return pending.pop(0)
        raise end()

    monkeypatch.setattr("builtins.input", fake_input)
    return prompts


@pytest.fixture(autouse=True)
def no_history(monkeypatch):
    monkeypatch.delenv("TICKLE_HISTORY_FILE", raising=False)

# -----------------------------------------------------
# repl
# -----------------------------------------------------

def test_repl_prints_results(monkeypatch, interp, out):
    prompts = feed(monkeypatch, "set a 5", "", "   ", "set b {}", "expr {$a * 2}")
    shell.repl(interp, "tickle> ")
    assert out.getvalue() == "5\n10\n"
    assert set(prompts) == {"tickle> "}
    assert len(prompts) == 6


def test_repl_prints_errors_and_continues(monkeypatch, interp, out):
    feed(monkeypatch, "bogus", "set ok yes")
    shell.repl(interp)
    assert out.getvalue() == 'invalid command name "bogus"\nyes\n'


def test_repl_prints_return_value(monkeypatch, interp, out):
    feed(monkeypatch, "return hi")
    shell.repl(interp)
    assert out.getvalue() == "hi\n"


def test_repl_reports_stray_break(monkeypatch, interp, out):
    feed(monkeypatch, "break", "continue")
    shell.repl(interp)
    assert out.getvalue() == (
        'invoked "break" outside of a loop\n'
        'invoked "continue" outside of a loop\n'
    )


def test_repl_interrupt(monkeypatch, interp, out):
    feed(monkeypatch, "set a 1", end=KeyboardInterrupt)
    shell.repl(interp)
    assert out.getvalue() == "1\n^C\n"


def test_repl_history_file(monkeypatch, interp, tmp_path):
    if shell.readline is None:
        pytest.skip("readline is not available")
    history = tmp_path / "history"
    monkeypatch.setenv("TICKLE_HISTORY_FILE", str(history))
    feed(monkeypatch, "set a 1")
    shell.repl(interp)
    assert history.exists()

# -----------------------------------------------------
# script
# -----------------------------------------------------

def test_script_sets_arguments(tmp_path, interp, out):
    path = tmp_path / "args.tcl"
    path.write_text("puts $arg0\nputs [llength $argv]\nputs [lindex $argv 1]\n")
    status = shell.script(interp, [str(path), "one", "two words"])
    assert status == 0
    assert out.getvalue() == f"{path}\n2\ntwo words\n"


def test_script_return_is_success(tmp_path, interp):
    path = tmp_path / "ret.tcl"
    path.write_text("return done\nerror unreachable\n")
    assert shell.script(interp, [str(path)]) == 0


def test_script_error(tmp_path, interp, out):
    path = tmp_path / "bad.tcl"
    path.write_text("puts before\nerror {it broke}\nputs after\n")
    assert shell.script(interp, [str(path)]) == 1
    assert out.getvalue() == "before\nit broke\n"


def test_script_stray_break(tmp_path, interp, out):
    path = tmp_path / "brk.tcl"
    path.write_text("break\n")
    assert shell.script(interp, [str(path)]) == 1
    assert out.getvalue() == 'invoked "break" outside of a loop\n'


def test_script_missing_file(tmp_path):
    errors = io.StringIO()
    interp = Interp(stderr=errors)
    assert shell.script(interp, [str(tmp_path / "nope.tcl")]) == 1
    assert "nope.tcl" in errors.getvalue()
    assert interp.get_var("arg0") is None


def test_script_undecodable_file(tmp_path):
    path = tmp_path / "binary.tcl"
    path.write_bytes(b"\xff\xfe puts hi\n")
    errors = io.StringIO()
    interp = Interp(stderr=errors)
    assert shell.script(interp, [str(path)]) == 1
    assert errors.getvalue().startswith(f'couldn\'t read file "{path}": ')
