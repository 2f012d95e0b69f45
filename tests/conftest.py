"""Shared test fixtures for structdoc.

Provides the JSON fixture documents, an isolated working directory for
config precedence tests, and the autouse reset of the global output
manager.  These fixtures are discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from structdoc.config import CONFIG_ENV_VAR
from structdoc.output import reset_output

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  Once CliRunner has restored the real streams those
    references are stale, so a fresh manager must be created on next use.
    The CLI's log handler is dropped for the same reason.
    """
    yield
    reset_output()
    logger = logging.getLogger("structdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Raw document fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


def _load(name: str) -> dict[str, Any]:
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def users_doc() -> dict[str, Any]:
    """OpenAPI 3.0 users API with refs, tag fan-out and mixed security."""
    return _load("users_openapi3.json")


@pytest.fixture
def petstore_doc() -> dict[str, Any]:
    """Swagger 2.0 pet store with inline parameter schemas."""
    return _load("petstore_swagger2.json")


@pytest.fixture
def circular_doc() -> dict[str, Any]:
    """Schemas that refer back to themselves directly or indirectly."""
    return _load("circular.json")


@pytest.fixture
def users_doc_path() -> Path:
    return FIXTURES_DIR / "users_openapi3.json"


@pytest.fixture
def petstore_doc_path() -> Path:
    return FIXTURES_DIR / "petstore_swagger2.json"


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test in an empty directory with no config env var set."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    return tmp_path
