"""Pytest configuration and shared fixtures for the richdocx test suite."""

import os
from io import BytesIO

import pytest

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=50)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )
    settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
except ImportError:
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def meta():
    """Provide valid document metadata."""
    from richdocx.metadata import DocumentMeta

    return DocumentMeta(title="Quarterly Report", author="Ada Lovelace")


@pytest.fixture
def editor_html() -> str:
    """Provide HTML shaped like the editor's output."""
    return (
        "<h1>Quarterly Report</h1>"
        "<p>Intro with <strong>bold</strong>, <em>italic</em> and "
        '<a href="https://example.com" rel="noopener noreferrer" target="_blank">a link</a>.</p>'
        "<ul><li>First</li><li>Second<ul><li>Nested</li></ul></li></ul>"
        '<ol><li data-heading="2"><span class="li-text">Numbered heading</span></li><li>Step</li></ol>'
        "<p>Closing</p>"
    )


@pytest.fixture
def open_docx():
    """Return a helper that opens DOCX bytes with python-docx."""
    from docx import Document

    def _open(data: bytes):
        return Document(BytesIO(data))

    return _open
