"""Shared test fixtures for clearapi.

Provides reusable fixtures for loading document fixtures, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from clearapi.models import Document, Schema
from clearapi.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def bookstore_path() -> Path:
    """Path of the bookstore fixture document."""
    return FIXTURES_DIR / "bookstore.json"


@pytest.fixture
def bookstore_raw(bookstore_path: Path) -> dict[str, Any]:
    """Load the raw bookstore document dict."""
    with open(bookstore_path) as f:
        return json.load(f)


@pytest.fixture
def bookstore_doc(bookstore_raw: dict[str, Any]) -> Document:
    """Parsed bookstore document."""
    from clearapi.parser.extractor import extract_document

    return extract_document(bookstore_raw, "3.0.3")


@pytest.fixture
def components(bookstore_doc: Document) -> dict[str, Schema]:
    """The bookstore ``components.schemas`` mapping."""
    return bookstore_doc.schemas


@pytest.fixture
def events_path() -> Path:
    """Path of the YAML events document (unquoted dates load as ``datetime.date``)."""
    return FIXTURES_DIR / "events.yaml"


@pytest.fixture
def events_raw(events_path: Path) -> dict[str, Any]:
    """Load the raw events document through the YAML loader."""
    from clearapi.parser.loader import load_spec

    return load_spec(str(events_path))


@pytest.fixture
def events_doc(events_raw: dict[str, Any]) -> Document:
    """Parsed events document."""
    from clearapi.parser.extractor import extract_document

    return extract_document(events_raw, "3.0.3")


@pytest.fixture
def recursive_components() -> dict[str, Schema]:
    """Components with mutual recursion (A -> B -> A) and an alias loop (X -> Y -> X)."""
    from clearapi.parser.schema import parse_schemas

    return parse_schemas({
        "A": {
            "type": "object",
            "properties": {
                "b": {"$ref": "#/components/schemas/B"},
                "n": {"type": "integer"},
            },
        },
        "B": {
            "type": "object",
            "properties": {
                "s": {"type": "string"},
                "a": {"$ref": "#/components/schemas/A"},
            },
        },
        "X": {"$ref": "#/components/schemas/Y"},
        "Y": {"$ref": "#/components/schemas/X"},
    })


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and the document store to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config, clears CLEARAPI_DOCUMENT and
    changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("clearapi.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("CLEARAPI_DOCUMENT", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
