"""Signed request construction.

Every operation goes through ``new_request``: build the target URL, hash
the payload, sign, and hand back a ``requests.PreparedRequest`` that can be
sent without further changes.
"""

from datetime import datetime
from typing import Mapping, Optional, Union

import requests

from s3_verify.config import ServerConfig
from s3_verify.signing import sign_request
from s3_verify.utils import compute_hash, make_target_url


def new_request(
    config: ServerConfig,
    bucket: str,
    params: Optional[Mapping[str, str]] = None,
    method: str = "GET",
    key: str = "",
    body: Union[bytes, str, None] = None,
    headers: Optional[Mapping[str, str]] = None,
    timestamp: Optional[datetime] = None,
) -> requests.PreparedRequest:
    """Build a signed request against the configured server.

    Args:
        config: Server configuration
        bucket: Target bucket
        params: Query parameters, e.g. ``{"max-keys": "30"}``
        method: HTTP method
        key: Object key, empty for bucket-level operations
        body: Request payload; None for GET requests
        headers: Extra headers to sign and send
        timestamp: Fixed signing time, mainly for tests

    Returns:
        requests.PreparedRequest ready to send
    """
    url = make_target_url(config.endpoint, bucket, key, config.region, params)
    payload = compute_hash(body)

    request_headers = dict(headers or {})
    request_headers["X-Amz-Content-Sha256"] = payload.sha256
    if payload.size:
        request_headers["Content-Length"] = str(payload.size)

    data = payload.body.getvalue()
    signed_headers = sign_request(
        method=method,
        url=url,
        headers=request_headers,
        body=data,
        credentials=config.credentials,
        region=config.region,
        timestamp=timestamp,
    )

    return requests.Request(
        method=method,
        url=url,
        headers=signed_headers,
        data=data or None,
    ).prepare()
