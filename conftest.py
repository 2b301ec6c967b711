"""Global pytest configuration and fixtures."""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from s3_verify.config import ServerConfig
from s3_verify.errors import ConfigError


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--no-verify-ssl",
        action="store_true",
        default=False,
        help="Disable SSL certificate verification (INSECURE - use for testing only)",
    )
    parser.addoption(
        "--fixture-objects",
        action="store",
        type=int,
        default=45,
        help="Number of objects seeded for live tests (default: 45)",
    )


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "s3_handler(name): mark test as testing specific S3 handler"
    )
    config.addinivalue_line(
        "markers", "edge_case: mark test as edge case or boundary condition"
    )
    config.addinivalue_line(
        "markers", "live: mark test as requiring a running server (S3_ENDPOINT)"
    )
    config.addinivalue_line("markers", "list_objects: ListObjects V1 tests")
    config.addinivalue_line(
        "markers", "list_multipart_uploads: ListMultipartUploads tests"
    )


@pytest.fixture(scope="session")
def live_config(request):
    """Session-scoped ServerConfig for the server under test."""
    if not os.getenv("S3_ENDPOINT"):
        pytest.skip("S3_ENDPOINT not configured for live tests")
    try:
        return ServerConfig.from_env(
            verify_ssl=False if request.config.getoption("--no-verify-ssl") else None
        )
    except ConfigError as e:
        pytest.fail(f"Invalid live configuration: {e}")
