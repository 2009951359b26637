"""Named document store.

Raw OpenAPI documents are kept as one pretty-printed JSON file per key under
``<data_dir>/documents/``. A key is either chosen by the user or derived
from the document's ``info.title``; the store never looks inside a document
beyond that.

Typical usage::

    key = save_document(load_spec("./openapi.yaml"))
    raw = load_document(key)
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional

from clearapi.config import _atomic_write, get_documents_dir
from clearapi.exceptions import NotFoundError, StoreError

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"


def document_key(title: Optional[str]) -> str:
    """Derive a storage key from a document title.

    Lowercases, replaces runs of non-alphanumeric characters with ``-`` and
    strips leading/trailing hyphens.

    Example::

        >>> document_key("Book Store API v2")
        'book-store-api-v2'
        >>> document_key("")
        'default'
    """
    slug = re.sub(r"[^a-z0-9]+", "-", (title or "").lower()).strip("-")
    return slug or DEFAULT_KEY


def _title_of(raw: dict[str, Any]) -> Optional[str]:
    info = raw.get("info")
    if isinstance(info, dict) and isinstance(info.get("title"), str):
        return info["title"]
    return None


def _document_path(key: str) -> Path:
    if not key or "/" in key or "\\" in key or key.startswith("."):
        raise StoreError(f"Invalid document key: {key!r}")
    return get_documents_dir() / f"{key}.json"


def save_document(raw: dict[str, Any], name: Optional[str] = None) -> str:
    """Persist *raw* under *name* (or a key derived from its title).

    An existing document with the same key is replaced.

    Returns:
        The key the document was stored under.

    Raises:
        StoreError: If the document cannot be serialised or written.
    """
    key = document_key(name) if name else document_key(_title_of(raw))
    try:
        text = json.dumps(raw, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError) as exc:
        raise StoreError(f"Document cannot be stored as JSON: {exc}") from exc

    try:
        _atomic_write(_document_path(key), text + "\n")
    except OSError as exc:
        raise StoreError(f"Failed to write document '{key}': {exc}") from exc
    logger.debug("Stored document '%s'", key)
    return key


def load_document(key: str) -> dict[str, Any]:
    """Load the raw document stored under *key*.

    Raises:
        NotFoundError: If no document is stored under *key*.
        StoreError: If the stored file is not a JSON object.
    """
    path = _document_path(key)
    if not path.is_file():
        raise NotFoundError(f"Document '{key}' not found. Run 'clearapi docs list'.")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise StoreError(f"Stored document '{key}' is unreadable: {exc}") from exc
    if not isinstance(data, dict):
        raise StoreError(f"Stored document '{key}' is not a JSON object")
    return data


def list_documents() -> list[str]:
    """Return all stored document keys, sorted alphabetically."""
    return sorted(p.stem for p in get_documents_dir().glob("*.json") if p.is_file())


def document_exists(key: str) -> bool:
    """Check whether a document is stored under *key*."""
    try:
        return _document_path(key).is_file()
    except StoreError:
        return False


def delete_document(key: str) -> None:
    """Remove the document stored under *key*.

    Raises:
        NotFoundError: If no document is stored under *key*.
    """
    path = _document_path(key)
    if not path.is_file():
        raise NotFoundError(f"Document '{key}' not found")
    path.unlink()
    logger.debug("Deleted document '%s'", key)


def export_document(key: str, path: str | Path) -> Path:
    """Write the document stored under *key* to *path* as pretty JSON.

    Returns:
        The path written.

    Raises:
        NotFoundError: If no document is stored under *key*.
        StoreError: If the target file cannot be written.
    """
    raw = load_document(key)
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(raw, indent=2, ensure_ascii=False, default=str) + "\n", encoding="utf-8")
    except OSError as exc:
        raise StoreError(f"Failed to export '{key}' to {target}: {exc}") from exc
    return target
