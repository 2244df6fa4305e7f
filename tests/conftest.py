"""Shared test fixtures for cmspec.

Provides reusable fixtures for loading content-model fixtures and creating
isolated config environments, and resets global output and logging state
after every test. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from cmspec.models import ContentModel
from cmspec.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the cmspec logger after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use. The CLI callback also attaches a Rich
    handler to the ``cmspec`` logger bound to those streams, so it is
    detached and propagation restored for ``caplog``.
    """
    yield
    reset_output()
    logger = logging.getLogger("cmspec")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Content-model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def blog_raw() -> dict[str, Any]:
    """Load the raw blog content model dict."""
    with open(FIXTURES_DIR / "blog.json") as f:
        return json.load(f)


@pytest.fixture
def blog_model(blog_raw: dict[str, Any]) -> ContentModel:
    """Validated blog content model."""
    return ContentModel.model_validate(blog_raw)


@pytest.fixture
def blog_file() -> Path:
    """Path to the blog content model fixture on disk."""
    return FIXTURES_DIR / "blog.json"


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all CMSPEC_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("cmspec.config._is_xdg_platform", lambda: True)

    for var in ["CMSPEC_OUTPUT", "CMSPEC_TITLE", "CMSPEC_STRICT_SLUGS"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path

