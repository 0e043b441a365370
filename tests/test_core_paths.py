"""Tests for per-user config directory resolution."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from habitquest.core.defaults import CONFIG_DIR_ENVVAR
from habitquest.core.paths import ConfigDirectory, FixedConfigDirectory, UserConfigDirectory


def test_fixed_directory_resolves_to_given_path(tmp_path: Path) -> None:
    assert FixedConfigDirectory(tmp_path).resolve() == tmp_path
    assert FixedConfigDirectory(str(tmp_path)).resolve() == tmp_path


def test_implementations_satisfy_protocol(tmp_path: Path) -> None:
    assert isinstance(FixedConfigDirectory(tmp_path), ConfigDirectory)
    assert isinstance(UserConfigDirectory(), ConfigDirectory)


def test_env_override_wins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(CONFIG_DIR_ENVVAR, str(tmp_path / "custom"))
    assert UserConfigDirectory().resolve() == tmp_path / "custom"


def test_blank_env_override_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(CONFIG_DIR_ENVVAR, "   ")
    resolved = UserConfigDirectory("myapp").resolve()
    assert resolved.name == "myapp"


@pytest.mark.skipif(
    sys.platform.startswith("win") or sys.platform == "darwin",
    reason="XDG layout applies to Linux/BSD only",
)
class TestXdgLayout:
    def test_xdg_config_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_DIR_ENVVAR, raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        assert UserConfigDirectory("habitquest").resolve() == tmp_path / "xdg" / "habitquest"

    def test_falls_back_to_dot_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_DIR_ENVVAR, raising=False)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert UserConfigDirectory("habitquest").resolve() == tmp_path / ".config" / "habitquest"
