import pytest
from status_menu.core.log_setup import QUIET_ENV_VAR, console_output_enabled


@pytest.mark.parametrize("value", ["", "0", "false", "No"])
def test_console_enabled(value, monkeypatch):
    monkeypatch.setenv(QUIET_ENV_VAR, value)
    assert console_output_enabled() is True


@pytest.mark.parametrize("value", ["1", "true", "yes"])
def test_console_quiet(value, monkeypatch):
    monkeypatch.setenv(QUIET_ENV_VAR, value)
    assert console_output_enabled() is False


def test_console_enabled_when_unset(monkeypatch):
    monkeypatch.delenv(QUIET_ENV_VAR, raising=False)
    assert console_output_enabled() is True
