"""JSON document I/O primitives for persisting pydantic records."""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from habitquest.core.errors import DeserializationError, PersistenceError

M = TypeVar("M", bound=BaseModel)


def save_document(record: BaseModel, path: Path) -> Path:
    """Write *record* to *path* as pretty-printed UTF-8 JSON, atomically.

    The parent directory is created if missing.  The document is written
    to a temporary file in the same directory first, then moved over the
    target via :func:`os.replace`, so a crash mid-write never leaves a
    truncated document behind.

    Args:
        record: Model instance to persist.
        path: Destination file path (e.g. ``<config_dir>/activity_data.json``).

    Returns:
        The *path* that was written, for convenient chaining.

    Raises:
        PersistenceError: If the directory or file cannot be written.
    """
    payload = record.model_dump_json(indent=2) + "\n"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".json.tmp")
    except OSError as exc:
        raise PersistenceError(f"Cannot write {path}: {exc}", path) from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
        os.replace(tmp, path)
    except BaseException as exc:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        if isinstance(exc, OSError):
            raise PersistenceError(f"Cannot write {path}: {exc}", path) from exc
        raise
    return path


def load_document(model_cls: type[M], path: Path) -> M | None:
    """Read a document written by :func:`save_document`.

    Args:
        model_cls: Model class to validate the document against.
        path: Path to the JSON file.

    Returns:
        The validated record, or ``None`` if *path* does not exist (the
        caller should keep its defaults).

    Raises:
        PersistenceError: If the file exists but cannot be read.
        DeserializationError: If the content is not valid UTF-8 JSON or does
            not satisfy *model_cls*.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise PersistenceError(f"Cannot read {path}: {exc}", path) from exc

    try:
        return model_cls.model_validate_json(raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise DeserializationError(
            f"Malformed {model_cls.__name__} document at {path}: not UTF-8 ({exc})", path,
        ) from exc
    except ValidationError as exc:
        raise DeserializationError(
            f"Malformed {model_cls.__name__} document at {path}: {exc}", path,
        ) from exc
