"""
Whole-document JSON persistence.

Each document is one pretty-printed JSON file inside Settings.data_dir.
Documents are always read and written as a unit:

* ``load``/``read`` return the whole mapping. A missing file is not an
  error (it reads as empty and is logged); an unreadable or corrupt file
  raises StorageUnavailableError instead of silently becoming ``{}``.
* ``save`` replaces the file atomically (temp file + ``os.replace``).
* ``update`` holds a per-document lock across load, mutate and save.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator
import json
import logging
import os
import tempfile
import threading

from servicedesk.core.config import get_settings
from servicedesk.core.errors import StorageUnavailableError

logger = logging.getLogger(__name__)

_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


@dataclass
class DocumentRead:
    """Outcome of reading a document: ``found`` is False for a missing file."""

    name: str
    data: dict = field(default_factory=dict)
    found: bool = False


def document_path(name: str) -> Path:
    base = get_settings().data_dir
    path = (base / name).resolve()
    if path.parent != base:
        raise ValueError(f"document name must be a plain file name: {name!r}")
    return path


def _lock_for(path: Path) -> threading.Lock:
    key = str(path)
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.Lock()
        return lock


def read(name: str) -> DocumentRead:
    path = document_path(name)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning("Document %s not found at %s; treating it as empty.", name, path)
        return DocumentRead(name=name)
    except (OSError, ValueError) as exc:
        logger.error("Error reading document %s: %s", name, exc)
        raise StorageUnavailableError("Storage is temporarily unavailable.") from exc
    if not isinstance(data, dict):
        logger.error("Document %s does not hold a JSON object", name)
        raise StorageUnavailableError("Storage is temporarily unavailable.")
    return DocumentRead(name=name, data=data, found=True)


def load(name: str) -> dict:
    return read(name).data


def save(name: str, document: dict) -> None:
    path = document_path(name)
    payload = json.dumps(document, ensure_ascii=False, indent=2)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        logger.error("Error writing document %s: %s", name, exc)
        raise StorageUnavailableError("Storage is temporarily unavailable.") from exc


@contextmanager
def update(name: str) -> Iterator[dict]:
    """Yield the loaded document under its lock and save it on clean exit.

    If the block raises, nothing is written.
    """
    lock = _lock_for(document_path(name))
    with lock:
        document = load(name)
        yield document
        save(name, document)


def collection(document: dict, key: str) -> list:
    """Return ``document[key]`` as a list, attaching an empty one when absent."""
    value = document.get(key)
    if not isinstance(value, list):
        value = document[key] = []
    return value
