"""Response verification shared by all operations.

Checks run in order (status, standard headers, body) and stop at the
first failure, so a wrong status never triggers body decoding.
"""

from email.utils import parsedate_to_datetime
from typing import Callable, TypeVar

import requests

from s3_verify.errors import TransportError, UnexpectedHeader, UnexpectedStatus

T = TypeVar("T")

BodyVerifier = Callable[[bytes, T], None]


def status_line(response: requests.Response) -> str:
    """Status line without the protocol, e.g. ``200 OK``."""
    return f"{response.status_code} {response.reason}"


def verify_status(response: requests.Response, expected_status: str) -> None:
    """Raise UnexpectedStatus unless the status line matches."""
    received = status_line(response)
    if received != expected_status:
        raise UnexpectedStatus(expected_status, received)


def verify_standard_headers(response: requests.Response) -> None:
    """Check headers every S3 response carries.

    ``Date`` must be present and a valid HTTP date, ``x-amz-request-id``
    must be present.
    """
    date = response.headers.get("Date")
    if not date:
        raise UnexpectedHeader("Missing Date header")
    try:
        parsedate_to_datetime(date)
    except (TypeError, ValueError) as e:
        raise UnexpectedHeader(f"Invalid Date header {date!r}") from e

    if not response.headers.get("x-amz-request-id"):
        raise UnexpectedHeader("Missing x-amz-request-id header")


def verify_response(
    response: requests.Response,
    expected_status: str,
    expected: T,
    verify_body: BodyVerifier,
) -> None:
    """Run status, header and body checks against one response."""
    verify_status(response, expected_status)
    verify_standard_headers(response)
    try:
        body = response.content
    except requests.RequestException as e:
        raise TransportError(f"Failed to read response body: {e}") from e
    verify_body(body, expected)
