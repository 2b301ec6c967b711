"""SigV4 signing utilities for S3 requests."""

from datetime import datetime, timezone
from typing import Optional

from botocore.auth import SIGV4_TIMESTAMP, S3SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.config import Config
from botocore.credentials import Credentials
from botocore.exceptions import BotoCoreError, NoCredentialsError

from s3_verify.errors import SigningError


class FixedClockS3SigV4Auth(S3SigV4Auth):
    """S3SigV4Auth that signs with a caller-supplied timestamp."""

    def __init__(self, credentials, service_name, region_name, timestamp: datetime):
        super().__init__(credentials, service_name, region_name)
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(timezone.utc)
        self._fixed_timestamp = timestamp.strftime(SIGV4_TIMESTAMP)

    def add_auth(self, request):
        if self.credentials is None:
            raise NoCredentialsError()
        request.context["timestamp"] = self._fixed_timestamp
        self._modify_request_before_signing(request)
        canonical_request = self.canonical_request(request)
        string_to_sign = self.string_to_sign(request, canonical_request)
        signature = self.signature(string_to_sign, request)
        self._inject_signature_to_request(request, signature)


def sign_request(
    method: str,
    url: str,
    headers: dict,
    body: bytes,
    credentials: Credentials,
    region: str,
    service: str = "s3",
    unsigned_payload: bool = False,
    timestamp: Optional[datetime] = None,
) -> dict:
    """Sign an HTTP request using S3SigV4Auth.

    Args:
        method: HTTP method (GET, PUT, POST, DELETE, etc.)
        url: Full URL of the request
        headers: Request headers (not modified)
        body: Request body as bytes
        credentials: AWS credentials
        region: AWS region
        service: AWS service name (default: s3)
        unsigned_payload: If True, sign with UNSIGNED-PAYLOAD
        timestamp: Signing time; the current time when omitted

    Returns:
        dict: Signed headers

    Raises:
        SigningError: If botocore fails to compute the signature
    """
    request = AWSRequest(method=method, url=url, data=body, headers=dict(headers))
    if unsigned_payload:
        request.context["client_config"] = Config(
            s3={"payload_signing_enabled": False}
        )

    if timestamp is None:
        auth = S3SigV4Auth(credentials, service, region)
    else:
        auth = FixedClockS3SigV4Auth(credentials, service, region, timestamp)

    try:
        auth.add_auth(request)
    except (BotoCoreError, ValueError, TypeError) as e:
        raise SigningError(f"Failed to sign {method} {url}: {e}") from e

    return dict(request.headers)
