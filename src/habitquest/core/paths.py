"""Per-user configuration directory resolution.

The reminder service never looks up its storage location itself; it is
handed a :class:`ConfigDirectory` and calls :meth:`~ConfigDirectory.resolve`
whenever it needs to read or write a document.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Protocol, runtime_checkable

from habitquest.core.defaults import APP_NAME, CONFIG_DIR_ENVVAR
from habitquest.core.errors import ConfigDirectoryUnresolved


@runtime_checkable
class ConfigDirectory(Protocol):
    """Resolves a writable per-user directory for persisted state."""

    def resolve(self) -> Path: ...


class FixedConfigDirectory:
    """Always resolves to the directory given at construction."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def resolve(self) -> Path:
        return self._path


class UserConfigDirectory:
    """Platform-conventional config directory for *app_name*.

    Resolution order:

    1. ``$HABITQUEST_CONFIG_DIR`` if set and non-empty.
    2. Windows: ``%APPDATA%/<app_name>``.
    3. macOS: ``~/Library/Application Support/<app_name>``.
    4. Elsewhere: ``$XDG_CONFIG_HOME/<app_name>`` or ``~/.config/<app_name>``.

    Raises:
        ConfigDirectoryUnresolved: When no home directory can be determined
            (or ``%APPDATA%`` is missing on Windows).
    """

    def __init__(self, app_name: str = APP_NAME) -> None:
        self._app_name = app_name

    def resolve(self) -> Path:
        override = os.environ.get(CONFIG_DIR_ENVVAR, "").strip()
        if override:
            return Path(override).expanduser()

        if sys.platform.startswith("win"):
            appdata = os.environ.get("APPDATA")
            if not appdata:
                raise ConfigDirectoryUnresolved("APPDATA is not set")
            return Path(appdata) / self._app_name

        try:
            home = Path.home()
        except RuntimeError as exc:
            raise ConfigDirectoryUnresolved(f"Cannot determine home directory: {exc}") from exc

        if sys.platform == "darwin":
            return home / "Library" / "Application Support" / self._app_name

        xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
        base = Path(xdg) if xdg else home / ".config"
        return base / self._app_name
