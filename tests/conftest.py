import os

import pytest

import jsonsea.config


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config files and JSONSEA_* variables out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in list(os.environ):
        if name.startswith("JSONSEA_"):
            monkeypatch.delenv(name)
    jsonsea.config._config = None
    yield
    jsonsea.config._config = None


@pytest.fixture
def clock():
    return FakeClock()
