from pathlib import Path

import pytest

from tickle.harness import install, parse_test, run_tests, tally
from tickle.types.signal import Error
from tickle.types.value import Value

TCL_DIR = Path(__file__).parent / "tcl"


def test_command_script_passes(interp, out):
    counts = run_tests(interp, TCL_DIR / "commands.tcl")
    assert counts is not None
    assert counts.failed == 0 and counts.errors == 0, out.getvalue()
    assert counts.passed == counts.num_tests > 50
    assert out.getvalue().rstrip().endswith(counts.summary())


def test_failure_report(interp, out, tmp_path):
    script = tmp_path / "failing.tcl"
    script.write_text(
        "test good {passes} {set a 1} -ok {1}\n"
        "test bad {fails} {set a 1} -ok {2}\n"
        "test raises {wrong outcome} {error boom} -ok {boom}\n"
    )
    counts = run_tests(interp, script)
    assert (counts.num_tests, counts.passed, counts.failed, counts.errors) == (3, 1, 2, 0)
    report = out.getvalue()
    assert "*** FAILED bad fails" in report
    assert "Expected -ok <2>" in report
    assert "Received -ok <1>" in report
    assert "Received -error <boom>" in report
    assert "3 tests, 1 passed, 2 failed, 0 errors" in report


def test_setup_and_cleanup_errors(interp, out, tmp_path):
    script = tmp_path / "broken.tcl"
    script.write_text(
        "test s {setup fails} -setup {error nope} -body {set a 1} -ok {1}\n"
        "test c {cleanup fails} -body {set a 1} -cleanup {error nope} -ok {1}\n"
    )
    counts = run_tests(interp, script)
    assert (counts.num_tests, counts.passed, counts.errors) == (2, 1, 2)
    assert "*** ERROR (setup) s setup fails" in out.getvalue()


def test_missing_test_file(interp, out, tmp_path):
    assert run_tests(interp, tmp_path / "absent.tcl") is None
    assert "absent.tcl" in out.getvalue()


def test_undecodable_test_file(interp, out, tmp_path):
    script = tmp_path / "binary.tcl"
    script.write_bytes(b"\xff\xfe test x {d} {} -ok {}\n")
    assert run_tests(interp, script) is None
    assert f'couldn\'t read file "{script}"' in out.getvalue()


def argv(*words):
    return [Value(w) for w in words]


def test_parse_short_form():
    case = parse_test(argv("test", "t-1", "desc", "set a 1", "-error", "msg"))
    assert (case.name, case.code, case.expected) == ("t-1", "-error", "msg")
    assert case.setup is None and case.cleanup is None


def test_parse_long_form():
    case = parse_test(argv("test", "t-2", "desc", "-setup", "s", "-body", "b", "-cleanup", "c", "-ok", "r"))
    assert (case.setup.as_string(), case.body.as_string(), case.cleanup.as_string()) == ("s", "b", "c")
    assert (case.code, case.expected) == ("-ok", "r")


@pytest.mark.parametrize("words", [
    ("test", "t"),
    ("test", "t", "d", "-body", "b"),
    ("test", "t", "d", "-setup", "s", "-ok", "r"),
])
def test_parse_wrong_args(words):
    result = parse_test(argv(*words))
    assert isinstance(result, Error)
    assert result.message.startswith('wrong # args: should be "test name description')


def test_parse_bad_option():
    result = parse_test(argv("test", "t", "d", "-body", "b", "-when", "x", "-ok", "r"))
    assert result.message.startswith('bad option "-when"')


def test_parse_bad_result_code():
    result = parse_test(argv("test", "t", "d", "body", "-maybe", "r"))
    assert result.message == 'invalid result code "-maybe": must be -ok or -error'


def test_install_registers_command(interp):
    install(interp)
    assert "test" in interp.commands
    interp.eval("test x {d} {list a b} -ok {a b}")
    assert tally(interp).passed == 1
