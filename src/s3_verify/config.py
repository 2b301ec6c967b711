"""Server configuration shared read-only across a verification run."""

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse
import os

import requests
from botocore.credentials import Credentials

from s3_verify.errors import ConfigError, InvalidEndpoint

# Region used when the endpoint is not an Amazon S3 host.
GLOBAL_DEFAULT_REGION = "us-east-1"
# Region used for Amazon S3 hosts when none was given.
AMAZON_DEFAULT_REGION = "us-west-1"

AMAZON_S3_DOMAINS = ("amazonaws.com", "amazonaws.com.cn")


def normalize_endpoint(url: Optional[str]) -> Optional[str]:
    """Ensure endpoint URL has proper scheme."""
    if not url:
        return None
    if not url.startswith(("http://", "https://")):
        return f"https://{url}"
    return url


def parse_endpoint(endpoint: str):
    """Parse and validate an endpoint URL.

    Raises:
        InvalidEndpoint: If the scheme is not http/https or the host is empty.
    """
    try:
        parsed = urlparse(endpoint)
        # Accessing port validates it.
        parsed.port
    except ValueError as e:
        raise InvalidEndpoint(f"Invalid endpoint {endpoint!r}: {e}") from e
    if parsed.scheme not in ("http", "https"):
        raise InvalidEndpoint(
            f"Invalid endpoint {endpoint!r}: unsupported scheme {parsed.scheme!r}"
        )
    if not parsed.hostname:
        raise InvalidEndpoint(f"Invalid endpoint {endpoint!r}: missing host")
    return parsed


def is_amazon_endpoint(endpoint: str) -> bool:
    """Return True if the endpoint points at an Amazon S3 host."""
    host = (parse_endpoint(endpoint).hostname or "").lower()
    for domain in AMAZON_S3_DOMAINS:
        if host.endswith("." + domain) and host.startswith("s3"):
            return True
    return False


def default_region(endpoint: str, region: Optional[str] = None) -> str:
    """Pick the signing region for an endpoint.

    An explicit region always wins. Amazon hosts default to
    ``AMAZON_DEFAULT_REGION``, everything else to ``GLOBAL_DEFAULT_REGION``.
    """
    if region:
        return region
    if is_amazon_endpoint(endpoint):
        return AMAZON_DEFAULT_REGION
    return GLOBAL_DEFAULT_REGION


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ServerConfig:
    """Endpoint, region, credentials and a reusable HTTP session."""

    endpoint: str
    region: str
    access_key: str
    secret_key: str
    session: requests.Session = field(compare=False, repr=False)
    verbose: bool = False
    verify_ssl: bool = True

    @property
    def credentials(self) -> Credentials:
        """botocore credentials used for SigV4 signing."""
        return Credentials(self.access_key, self.secret_key)

    @classmethod
    def create(
        cls,
        endpoint: Optional[str],
        access_key: Optional[str],
        secret_key: Optional[str],
        region: Optional[str] = None,
        verbose: bool = False,
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None,
    ) -> "ServerConfig":
        """Validate inputs and build a config.

        Raises:
            ConfigError: On a missing or malformed endpoint or missing
                credentials.
        """
        # Imported here to avoid a cycle, client builds on ServerConfig.
        from s3_verify.client import new_http_session

        endpoint = normalize_endpoint(endpoint)
        if not endpoint:
            raise ConfigError("No endpoint configured, set S3_ENDPOINT or --url")
        endpoint = endpoint.rstrip("/")
        parse_endpoint(endpoint)
        if not access_key or not secret_key:
            raise ConfigError("Access key and secret key are both required")

        return cls(
            endpoint=endpoint,
            region=default_region(endpoint, region),
            access_key=access_key,
            secret_key=secret_key,
            session=session if session is not None else new_http_session(verbose),
            verbose=verbose,
            verify_ssl=verify_ssl,
        )

    @classmethod
    def from_env(cls, **overrides) -> "ServerConfig":
        """Build a config from environment variables.

        Keyword overrides that are not None take precedence over the
        environment.
        """
        values = {
            "endpoint": os.getenv("S3_ENDPOINT"),
            "access_key": os.getenv("S3_ACCESS_KEY", os.getenv("AWS_ACCESS_KEY_ID")),
            "secret_key": os.getenv(
                "S3_SECRET_KEY", os.getenv("AWS_SECRET_ACCESS_KEY")
            ),
            "region": os.getenv("S3_REGION", os.getenv("AWS_REGION")),
            # SSL verification enabled by default
            # Set S3_VERIFY_SSL=false to disable (use with caution)
            "verify_ssl": _env_flag("S3_VERIFY_SSL", "true"),
            "verbose": _env_flag("S3_VERBOSE", "false"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.create(**values)
