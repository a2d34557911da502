"""
Pytest configuration for asbuild test suite.

Integration tests (marked with @pytest.mark.integration) need a real AIR SDK
and Java; they are skipped unless --full is passed.
"""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite including integration tests (slow)",
    )


def pytest_configure(config):
    """Register the integration marker."""
    config.addinivalue_line("markers", "integration: needs a real SDK installation (run with --full)")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --full is given."""
    if config.getoption("--full"):
        return

    skip_integration = pytest.mark.skip(reason="integration test, use --full to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
