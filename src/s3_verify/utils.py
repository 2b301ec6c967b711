"""Hashing, URL and formatting helpers shared by request builders."""

import base64
import hashlib
import io
from typing import BinaryIO, Mapping, NamedTuple, Optional, Union
from urllib.parse import quote, urlencode, urlunparse

import requests

from s3_verify.config import is_amazon_endpoint, parse_endpoint
from s3_verify.errors import SigningError

# SHA-256 of the empty string, sent with every body-less request.
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

REDACTED_HEADERS = ("authorization", "x-amz-security-token")


class HashedPayload(NamedTuple):
    """Digest of a request payload plus a replayable copy of it."""

    sha256: str
    md5: str
    size: int
    body: io.BytesIO


def calculate_content_md5(content: Union[str, bytes]) -> str:
    """Calculate Content-MD5 header value (base64 encoded)."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    md5_hash = hashlib.md5(content).digest()
    return base64.b64encode(md5_hash).decode("utf-8")


def calculate_content_sha256(content: Union[str, bytes]) -> str:
    """Calculate x-amz-content-sha256 header value (hex encoded)."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def compute_hash(stream: Union[bytes, str, BinaryIO, None]) -> HashedPayload:
    """Hash a payload and keep a re-readable copy of it.

    The stream is read once; the returned ``body`` is rewound so it can be
    replayed for signing and again for sending.

    Args:
        stream: Payload as bytes, str, a binary file object or None

    Returns:
        HashedPayload with hex SHA-256, base64 MD5, size and body

    Raises:
        SigningError: If reading the stream fails
    """
    if stream is None:
        data = b""
    elif isinstance(stream, str):
        data = stream.encode("utf-8")
    elif isinstance(stream, (bytes, bytearray)):
        data = bytes(stream)
    else:
        try:
            data = stream.read()
        except OSError as e:
            raise SigningError(f"Failed to read request payload: {e}") from e

    return HashedPayload(
        sha256=calculate_content_sha256(data),
        md5=calculate_content_md5(data),
        size=len(data),
        body=io.BytesIO(data),
    )


def url_encode_key(key: Union[str, bytes], safe: str = "/~") -> str:
    """URL-encode an S3 object key.

    Handles both string and bytes keys (for non-UTF-8 keys).
    """
    if isinstance(key, str):
        key = key.encode("utf-8")
    return quote(key, safe=safe)


def encode_query(params: Optional[Mapping[str, str]]) -> str:
    """Percent-encode query parameters sorted by name.

    Empty values render as ``name=`` (e.g. ``uploads=``).
    """
    if not params:
        return ""
    return urlencode(sorted(params.items()), quote_via=quote, safe="-_.~")


def get_s3_host(region: str) -> str:
    """Regional Amazon S3 host name."""
    if region == "us-east-1":
        return "s3.amazonaws.com"
    return f"s3.{region}.amazonaws.com"


def make_target_url(
    endpoint: str,
    bucket: str,
    key: str = "",
    region: str = "us-east-1",
    params: Optional[Mapping[str, str]] = None,
) -> str:
    """Build a path-style request URL.

    Args:
        endpoint: Server endpoint, e.g. ``https://play.min.io:9000``
        bucket: Bucket name (empty for the service root)
        key: Object key, empty for the bucket root
        region: Signing region, picks the host for Amazon endpoints
        params: Query parameters

    Returns:
        Fully qualified URL

    Raises:
        InvalidEndpoint: If the endpoint cannot be parsed
    """
    parsed = parse_endpoint(endpoint)
    netloc = parsed.netloc
    if is_amazon_endpoint(endpoint):
        netloc = get_s3_host(region)

    path = "/"
    if bucket:
        path = f"/{bucket}/"
    if key:
        path += url_encode_key(key)

    return urlunparse((parsed.scheme, netloc, path, "", encode_query(params), ""))


def _redact(headers: Mapping[str, str]) -> dict:
    return {
        k: ("[REDACTED]" if k.lower() in REDACTED_HEADERS else v)
        for k, v in headers.items()
    }


def format_request_info(
    method: str,
    url: str,
    headers: Mapping[str, str],
    body: Optional[bytes],
    max_body_display: int = 2000,
) -> dict:
    """Format request information for trace logging.

    Args:
        method: HTTP method
        url: Request URL
        headers: Request headers (credentials are redacted)
        body: Request body as bytes
        max_body_display: Maximum body characters to include

    Returns:
        dict with formatted request info
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    body_str = body.decode("utf-8", errors="replace") if body else ""
    return {
        "method": method,
        "url": url,
        "headers": _redact(headers),
        "body": body_str[:max_body_display],
        "body_truncated": len(body_str) > max_body_display,
        "body_length": len(body) if body else 0,
    }


def format_response_info(response: requests.Response) -> dict:
    """Format response status and headers for trace logging.

    The body is left alone because responses are streamed and the
    verifier still has to read it.
    """
    return {
        "status": f"{response.status_code} {response.reason}",
        "url": response.url,
        "headers": dict(response.headers),
    }
