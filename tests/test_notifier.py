"""Tests for the plyer-backed desktop notifier.

No real notifications are shown: a stand-in ``plyer`` module is placed in
``sys.modules`` for the duration of each test.
"""

from __future__ import annotations

import sys
import types
from pathlib import Path

import pytest

from habitquest.core.errors import NotifierDispatchError
from habitquest.notify.notifier import Notifier, PlyerNotifier, notifications_supported


@pytest.fixture()
def plyer_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict]:
    calls: list[dict] = []
    fake = types.ModuleType("plyer")
    fake.notification = types.SimpleNamespace(notify=lambda **kw: calls.append(kw))
    monkeypatch.setitem(sys.modules, "plyer", fake)
    return calls


class TestPlyerNotifier:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(PlyerNotifier(), Notifier)

    def test_forwards_title_and_body(self, plyer_calls: list[dict]) -> None:
        PlyerNotifier(app_name="habitquest", timeout=7).show("Title", "Body text")
        assert plyer_calls == [{
            "title": "Title",
            "message": "Body text",
            "app_name": "habitquest",
            "app_icon": "",
            "timeout": 7,
        }]

    def test_icon_name_without_file_is_dropped(self, plyer_calls: list[dict]) -> None:
        PlyerNotifier().show("T", "B", "habitquest-icon")
        assert plyer_calls[0]["app_icon"] == ""

    def test_existing_icon_file_is_used(self, plyer_calls: list[dict], tmp_path: Path) -> None:
        icon = tmp_path / "icon.png"
        icon.write_bytes(b"\x89PNG")
        PlyerNotifier().show("T", "B", str(icon), sound=True)
        assert plyer_calls[0]["app_icon"] == str(icon)

    def test_backend_failure_wrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def boom(**_kw):
            raise RuntimeError("dbus not available")

        fake = types.ModuleType("plyer")
        fake.notification = types.SimpleNamespace(notify=boom)
        monkeypatch.setitem(sys.modules, "plyer", fake)

        with pytest.raises(NotifierDispatchError, match="dbus not available"):
            PlyerNotifier().show("T", "B")


def test_notifications_supported_on_desktop(monkeypatch: pytest.MonkeyPatch) -> None:
    for platform in ("win32", "darwin", "linux"):
        monkeypatch.setattr(sys, "platform", platform)
        assert notifications_supported() is True
    monkeypatch.setattr(sys, "platform", "emscripten")
    assert notifications_supported() is False
