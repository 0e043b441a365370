"""Desktop notification delivery.

Core modules depend on the :class:`Notifier` protocol, never on a specific
backend.  :class:`PlyerNotifier` delivers through ``plyer``, which wraps
the native notification surface on Windows, macOS and Linux.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Protocol, runtime_checkable

from habitquest.core.defaults import APP_NAME, NOTIFICATION_TIMEOUT_SECONDS
from habitquest.core.errors import NotifierDispatchError

logger = logging.getLogger(__name__)

_SUPPORTED_PLATFORMS = ("win", "darwin", "linux")


@runtime_checkable
class Notifier(Protocol):
    """Fires a titled alert on the OS notification surface.

    Implementations raise :class:`~habitquest.core.errors.NotifierDispatchError`
    when delivery fails.
    """

    def show(
        self,
        title: str,
        body: str,
        icon: str | None = None,
        *,
        sound: bool = False,
    ) -> None: ...


def notifications_supported() -> bool:
    """True on desktop platforms that ``plyer`` can notify on."""
    return sys.platform.startswith(_SUPPORTED_PLATFORMS)


class PlyerNotifier:
    """Notifier backed by :mod:`plyer.notification`.

    ``plyer`` wants a file path for the icon; icon names that do not point
    at an existing file are dropped and the platform default is used.
    ``plyer`` has no sound switch, so *sound* only shows up in the debug log.
    """

    def __init__(
        self,
        *,
        app_name: str = APP_NAME,
        timeout: int = NOTIFICATION_TIMEOUT_SECONDS,
    ) -> None:
        self._app_name = app_name
        self._timeout = timeout

    def show(
        self,
        title: str,
        body: str,
        icon: str | None = None,
        *,
        sound: bool = False,
    ) -> None:
        app_icon = icon if icon and Path(icon).is_file() else ""
        logger.debug("Dispatching notification title=%r sound=%s body=%r", title, sound, body)
        try:
            from plyer import notification

            notification.notify(
                title=title,
                message=body,
                app_name=self._app_name,
                app_icon=app_icon,
                timeout=self._timeout,
            )
        except Exception as exc:
            raise NotifierDispatchError(f"Could not send notification: {exc}") from exc
