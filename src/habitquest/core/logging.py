"""Log redaction for user-authored habit text.

Habit identifiers and notification bodies are free text typed by the
user (habit names, personal goals) and routinely contain spaces.  A value
following one of the free-text keys is redacted in one of two shapes:

- a quoted ``repr`` (``habit_id='Call mom tonight'``) up to its closing
  quote, so trailing context after it survives;
- anything else up to the end of the line.

Call sites log these values with ``%r`` and put them last in the message.
"""

from __future__ import annotations

import logging
import re
from typing import Final, Sequence

FREE_TEXT_KEYS: Final[tuple[str, ...]] = ("habit_id", "habit", "body")

_REDACTED: Final[str] = "[REDACTED]"

_VALUE: Final[str] = (
    r"(?:'(?:[^'\\\n]|\\.)*'(?=\W|$)"
    r"|\"(?:[^\"\\\n]|\\.)*\"(?=\W|$)"
    r"|[^\n]*)"
)

_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def free_text_pattern(keys: Sequence[str] = FREE_TEXT_KEYS) -> re.Pattern[str]:
    """Compile a pattern matching ``key=value`` / ``key: value`` for *keys*."""
    alternation = "|".join(re.escape(k) for k in sorted(keys, key=len, reverse=True))
    return re.compile(
        rf"\b(?P<key>{alternation})[ \t]*[=:][ \t]*(?P<value>{_VALUE})",
        re.IGNORECASE,
    )


_DEFAULT_PATTERN: Final[re.Pattern[str]] = free_text_pattern()


def redact_message(message: str, pattern: re.Pattern[str] = _DEFAULT_PATTERN) -> str:
    """Return *message* with every free-text value replaced by ``[REDACTED]``."""
    return pattern.sub(lambda m: f"{m.group('key')}={_REDACTED}", message)


class SanitizingFilter(logging.Filter):
    """Rewrites records whose formatted message carries habit text.

    Records without a match pass through untouched, arguments included.
    """

    def __init__(self, keys: Sequence[str] = FREE_TEXT_KEYS) -> None:
        super().__init__()
        self._pattern = free_text_pattern(keys)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_message(message, self._pattern)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def install_sanitizing_filter(*handlers: logging.Handler) -> SanitizingFilter:
    """Attach one :class:`SanitizingFilter` to *handlers*.

    With no arguments the root logger's handlers are used.  Filters sit on
    handlers rather than loggers because logger-level filters never see
    records propagated from child loggers.
    """
    filt = SanitizingFilter()
    for handler in handlers or tuple(logging.getLogger().handlers):
        handler.addFilter(filt)
    return filt


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging for the CLI with habit text redacted."""
    logging.basicConfig(level=level.upper(), format=_LOG_FORMAT)
    install_sanitizing_filter()
