"""
Test configuration for novelsieve.

Provides component fixtures plus the isolation needed around structlog and
the lazily loaded global settings.
"""

# Standard library imports
import logging
import os

# Third-party imports
import pytest
import structlog

# Local imports
from novelsieve.config import Config, ExtractionSettings, LazyConfig
from novelsieve.extractor import ExtractionPipeline, parse_document
from tests.helpers.pages import (
    BOOK_PAGE_HTML,
    BOOK_URL,
    CHAPTER_PAGE_HTML,
    CHAPTER_URL,
    NAV_ONLY_HTML,
)

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Isolation Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any structlog or root-handler configuration a test installs."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def clean_env(monkeypatch):
    """No NOVELSIEVE_ variables and no cached lazy settings."""
    for name in list(os.environ):
        if name.upper().startswith("NOVELSIEVE_"):
            monkeypatch.delenv(name, raising=False)
    LazyConfig.reset()
    yield monkeypatch
    LazyConfig.reset()


# ============================================================================
# Component Fixtures
# ============================================================================


@pytest.fixture
def extraction_settings() -> ExtractionSettings:
    return ExtractionSettings()


@pytest.fixture
def pipeline(extraction_settings) -> ExtractionPipeline:
    return ExtractionPipeline(extraction_settings)


@pytest.fixture
def config(clean_env) -> Config:
    return Config()


@pytest.fixture
def book_doc():
    return parse_document(BOOK_PAGE_HTML, BOOK_URL)


@pytest.fixture
def chapter_doc():
    return parse_document(CHAPTER_PAGE_HTML, CHAPTER_URL)


@pytest.fixture
def saved_pages(tmp_path) -> dict:
    """The sample pages written to disk, the way the CLI consumes them."""
    pages = {
        "book": tmp_path / "book.html",
        "chapter": tmp_path / "chapter.html",
        "nav": tmp_path / "nav.html",
        "empty": tmp_path / "empty.html",
    }
    pages["book"].write_text(BOOK_PAGE_HTML, encoding="utf-8")
    pages["chapter"].write_text(CHAPTER_PAGE_HTML, encoding="utf-8")
    pages["nav"].write_text(NAV_ONLY_HTML, encoding="utf-8")
    pages["empty"].write_bytes(b"")
    return pages
