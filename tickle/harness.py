"""Script-level test harness.

Adds a `test` command to an interpreter and runs `.tcl` test files with it.
Two call forms are accepted:

    test name description body -ok|-error expected
    test name description ?-setup script? -body script ?-cleanup script? -ok|-error expected

A test passes when the body's outcome (Ok value or Error message) matches the
expected text exactly. Tallies are kept in ``interp.context["tests"]``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from tickle.types.signal import Break, ControlSignal, Continue, Error, Ok, Return
from tickle.types.value import Value

if TYPE_CHECKING:
    from tickle.interpreter import Interp

logger = logging.getLogger(__name__)

TEST_USAGE = "name description ?-setup script? -body script ?-cleanup script? -ok|-error result"
_CONTEXT_KEY = "tests"


@dataclass
class TestTally:
    __test__ = False

    num_tests: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0

    def summary(self) -> str:
        return (
            f"{self.num_tests} tests, {self.passed} passed, "
            f"{self.failed} failed, {self.errors} errors"
        )


@dataclass
class TestCase:
    __test__ = False

    name: str
    description: str
    body: Value
    code: str
    expected: str
    setup: Value | None = None
    cleanup: Value | None = None


def tally(interp: Interp) -> TestTally:
    return interp.context.setdefault(_CONTEXT_KEY, TestTally())


def _wrong_args() -> Error:
    return Error(f'wrong # args: should be "test {TEST_USAGE}"', kind="ArgumentError")


def parse_test(argv: list[Value]) -> TestCase | Error:
    """Read either form of the test command into a TestCase."""
    if len(argv) < 5:
        return _wrong_args()
    name, description = argv[1].as_string(), argv[2].as_string()

    if len(argv) == 6:
        code = argv[4].as_string()
        if code not in ("-ok", "-error"):
            return Error(f'invalid result code "{code}": must be -ok or -error')
        return TestCase(name, description, argv[3], code, argv[5].as_string())

    options = argv[3:]
    if len(options) % 2 != 0:
        return _wrong_args()
    fields: dict[str, Value] = {}
    code = None
    for i in range(0, len(options), 2):
        option = options[i].as_string()
        match option:
            case "-setup" | "-body" | "-cleanup":
                fields[option[1:]] = options[i + 1]
            case "-ok" | "-error":
                code = option
                fields["expected"] = options[i + 1]
            case _:
                return Error(
                    f'bad option "{option}": must be -setup, -body, -cleanup, -ok or -error'
                )
    if "body" not in fields or code is None:
        return _wrong_args()
    return TestCase(
        name,
        description,
        fields["body"],
        code,
        fields["expected"].as_string(),
        setup=fields.get("setup"),
        cleanup=fields.get("cleanup"),
    )


def _describe(result: ControlSignal) -> tuple[str, str]:
    match result:
        case Ok(value) | Return(value):
            return "-ok", value.as_string()
        case Error(message):
            return "-error", message
        case Break():
            return "-break", ""
        case Continue():
            return "-continue", ""
    return "-unknown", repr(result)


def _report(interp: Interp, case: TestCase, heading: str, *lines: str) -> None:
    out = interp.stdout
    out.write(f"\n*** {heading} {case.name} {case.description}\n")
    for line in lines:
        out.write(line + "\n")


def run_test(interp: Interp, case: TestCase) -> None:
    """Run one test case, updating the tally and reporting any failure."""
    counts = tally(interp)
    counts.num_tests += 1

    if case.setup is not None:
        result = interp.eval(case.setup)
        if not isinstance(result, Ok):
            counts.errors += 1
            _report(interp, case, "ERROR (setup)", "Received: %s %s" % _describe(result))
            logger.info("test %s: setup failed", case.name)
            return

    result = interp.eval(case.body)
    code, received = _describe(result)
    if code == case.code and received == case.expected:
        counts.passed += 1
    else:
        counts.failed += 1
        _report(
            interp,
            case,
            "FAILED",
            f"Expected {case.code} <{case.expected}>",
            f"Received {code} <{received}>",
        )
        logger.info("test %s failed", case.name)

    if case.cleanup is not None:
        result = interp.eval(case.cleanup)
        if not isinstance(result, Ok):
            counts.errors += 1
            _report(interp, case, "ERROR (cleanup)", "Received: %s %s" % _describe(result))
            logger.info("test %s: cleanup failed", case.name)


def _test_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    case = parse_test(argv)
    if isinstance(case, Error):
        return case
    run_test(interp, case)
    return Ok()


def install(interp: Interp) -> None:
    """Register the test command and start a fresh tally."""
    interp.context[_CONTEXT_KEY] = TestTally()
    interp.register_command("test", 1, 0, TEST_USAGE, _test_command)


def run_tests(interp: Interp, path: str | Path) -> TestTally | None:
    """Run a test script and print its summary; None if it could not be read."""
    path = Path(path)
    try:
        script = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        interp.stderr.write(f"couldn't read file \"{path}\": {getattr(exc, 'strerror', None) or exc}\n")
        return None

    install(interp)
    interp.set_var("arg0", str(path))
    result = interp.eval(script)
    if isinstance(result, Error):
        interp.stderr.write(result.error_info + "\n")

    counts = tally(interp)
    interp.stdout.write(f"\n{path}: {counts.summary()}\n")
    return counts
