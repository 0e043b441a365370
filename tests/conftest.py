"""Shared fixtures for the habitquest test suite."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from habitquest.core.errors import ConfigDirectoryUnresolved, NotifierDispatchError
from habitquest.core.paths import FixedConfigDirectory

TZ = dt.timezone(dt.timedelta(hours=2))


def local(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> dt.datetime:
    """Aware datetime in the fixed test timezone."""
    return dt.datetime(year, month, day, hour, minute, tzinfo=TZ)


class FakeClock:
    """Settable clock; call it to read, ``advance`` or assign ``now`` to move."""

    def __init__(self, now: dt.datetime) -> None:
        self.now = now

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **kwargs: float) -> dt.datetime:
        self.now = self.now + dt.timedelta(**kwargs)
        return self.now


class RecordingNotifier:
    """Notifier double that records calls and optionally fails."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[dict] = []

    def show(
        self,
        title: str,
        body: str,
        icon: str | None = None,
        *,
        sound: bool = False,
    ) -> None:
        self.calls.append({"title": title, "body": body, "icon": icon, "sound": sound})
        if self.fail:
            raise NotifierDispatchError("notification daemon unavailable")


class UnresolvableDirectory:
    def resolve(self) -> Path:
        raise ConfigDirectoryUnresolved("no writable home")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(local(2026, 3, 10, 8, 0))


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / "config"


@pytest.fixture()
def directory(config_dir: Path) -> FixedConfigDirectory:
    return FixedConfigDirectory(config_dir)
