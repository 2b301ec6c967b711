"""HTTP session, request execution and boto3 client for fixture setup."""

from contextlib import contextmanager
from typing import Iterator
import logging

import boto3
import requests
from botocore.client import Config

from s3_verify.config import ServerConfig
from s3_verify.errors import TransportError
from s3_verify.utils import format_request_info, format_response_info

logger = logging.getLogger(__name__)

# Connect (dial + TLS handshake) timeout in seconds; reads are unbounded.
CONNECT_TIMEOUT = 5.0


def _trace_response(response: requests.Response, *args, **kwargs):
    """requests response hook that logs the round trip."""
    request = response.request
    logger.debug(
        "%s %s -> %s %s",
        request.method,
        request.url,
        response.status_code,
        response.reason,
        extra={
            "request": format_request_info(
                request.method, request.url, request.headers, request.body
            ),
            "response": format_response_info(response),
        },
    )


def new_http_session(verbose: bool = False) -> requests.Session:
    """Create the reusable session shared by every test in a run."""
    session = requests.Session()
    if verbose:
        session.hooks["response"].append(_trace_response)
    return session


def execute_request(
    config: ServerConfig, request: requests.PreparedRequest
) -> requests.Response:
    """Send a signed request and return the streamed response.

    Raises:
        TransportError: On any connection or IO failure
    """
    try:
        return config.session.send(
            request,
            stream=True,
            verify=config.verify_ssl,
            timeout=(CONNECT_TIMEOUT, None),
            allow_redirects=False,
        )
    except requests.RequestException as e:
        raise TransportError(f"{request.method} {request.url} failed: {e}") from e


@contextmanager
def open_response(
    config: ServerConfig, request: requests.PreparedRequest
) -> Iterator[requests.Response]:
    """Execute a request and release the response on every exit path."""
    response = execute_request(config, request)
    try:
        yield response
    finally:
        response.close()


def create_s3_client(config: ServerConfig):
    """Create boto3 S3 client for fixture setup against the same server."""
    session = boto3.Session(
        aws_access_key_id=config.access_key,
        aws_secret_access_key=config.secret_key,
        region_name=config.region,
    )

    client_config = Config(
        signature_version="s3v4",
        s3={"addressing_style": "path"},
    )

    return session.client(
        "s3",
        endpoint_url=config.endpoint,
        config=client_config,
        verify=config.verify_ssl,
    )
