"""
Pytest configuration and shared fixtures.

Registers the ``integration`` marker; integration tests call the real
Gemini API and only run with ``--run-integration``.
"""

import pytest

from invoice_extractor.config import AppConfig, GeminiConfig
from invoice_extractor.models.invoice import InvoiceFields
from tests.helpers import SAMPLE_FIELDS, TEST_BASE_URL, TEST_MODEL


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against the real Gemini API"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring a real GEMINI_API_KEY"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def gemini_config():
    return GeminiConfig(
        base_url=TEST_BASE_URL,
        model=TEST_MODEL,
        api_key="test-key",
    )


@pytest.fixture
def app_config(gemini_config):
    return AppConfig(gemini=gemini_config, log_level="DEBUG")


@pytest.fixture
def sample_fields():
    return InvoiceFields.from_dict(SAMPLE_FIELDS)
