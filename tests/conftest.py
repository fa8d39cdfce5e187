"""Shared fixtures."""

import pytest

from openehr_rm.infrastructure.settings import settings
from rm_documents import composition_document


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached configuration around every test."""
    settings.reload()
    yield
    settings.reload()


@pytest.fixture
def composition_doc():
    """A valid COMPOSITION document (fresh copy per test)."""
    return composition_document()
