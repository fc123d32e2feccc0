import io

import pytest

from tickle.interpreter import Interp
from tickle.types.signal import Error


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def interp(out):
    """A fresh interpreter with the builtin commands, writing to a buffer."""
    return Interp(stdout=out, stderr=out)


@pytest.fixture
def run(interp):
    """Evaluate a script that must succeed and return its value as a string."""
    def _run(script):
        result = interp.eval(script)
        assert result.is_ok, f"expected Ok, got {result!r}"
        return result.value.as_string()
    return _run


@pytest.fixture
def fails(interp):
    """Evaluate a script that must fail and return its error message."""
    def _fails(script):
        result = interp.eval(script)
        assert isinstance(result, Error), f"expected Error, got {result!r}"
        return result.message
    return _fails
