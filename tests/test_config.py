import pytest

from tickle.config import InterpConfig, float_from_env, get_history_file, get_prompt, int_from_env


@pytest.fixture
def clean_env(monkeypatch):
    for var in ("TICKLE_MAX_NESTING", "TICKLE_COMMAND_LIMIT", "TICKLE_TIME_LIMIT",
                "TICKLE_PROMPT", "TICKLE_HISTORY_FILE"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = InterpConfig.from_env()
    assert config == InterpConfig()
    assert (config.max_nesting, config.command_limit, config.time_limit) == (100, 0, 0.0)
    assert get_prompt() == "% "
    assert get_history_file() is None


def test_from_env(clean_env):
    clean_env.setenv("TICKLE_MAX_NESTING", " 40 ")
    clean_env.setenv("TICKLE_COMMAND_LIMIT", "1000")
    clean_env.setenv("TICKLE_TIME_LIMIT", "2.5")
    assert InterpConfig.from_env() == InterpConfig(max_nesting=40, command_limit=1000, time_limit=2.5)


def test_blank_values_use_default(clean_env):
    clean_env.setenv("TICKLE_MAX_NESTING", "   ")
    assert int_from_env("TICKLE_MAX_NESTING", 7) == 7
    assert float_from_env("TICKLE_TIME_LIMIT", 1.5) == 1.5


@pytest.mark.parametrize("var,reader", [
    ("TICKLE_MAX_NESTING", int_from_env),
    ("TICKLE_TIME_LIMIT", float_from_env),
])
def test_invalid_values(clean_env, var, reader):
    clean_env.setenv(var, "lots")
    with pytest.raises(ValueError, match=var):
        reader(var, 1)


def test_prompt_and_history(clean_env, tmp_path):
    clean_env.setenv("TICKLE_PROMPT", "tickle> ")
    clean_env.setenv("TICKLE_HISTORY_FILE", str(tmp_path / "hist"))
    assert get_prompt() == "tickle> "
    assert get_history_file() == tmp_path / "hist"
