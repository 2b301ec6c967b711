"""S3 API conformance verification."""

from s3_verify.config import ServerConfig, default_region, is_amazon_endpoint
from s3_verify.signing import sign_request
from s3_verify.utils import (
    EMPTY_SHA256,
    HashedPayload,
    calculate_content_md5,
    calculate_content_sha256,
    compute_hash,
    make_target_url,
)
from s3_verify.errors import (
    ErrorKind,
    VerifyError,
    ConfigError,
    InvalidEndpoint,
    SigningError,
    TransportError,
    UnexpectedStatus,
    UnexpectedHeader,
    MalformedBody,
    UnexpectedBucket,
    UnexpectedContents,
    UnexpectedCount,
)
from s3_verify.models import (
    ObjectInfo,
    ObjectMultipartInfo,
    ListBucketResult,
    ListMultipartUploadsResult,
)
from s3_verify.request import new_request
from s3_verify.verify import verify_response, verify_standard_headers, verify_status
from s3_verify.fixtures import FixtureContext, seed_fixtures, cleanup_fixtures
from s3_verify.operations import OPERATIONS, Operation, Variant
from s3_verify.driver import TestOutcome, run_all, run_test

__all__ = [
    # Config
    "ServerConfig",
    "default_region",
    "is_amazon_endpoint",
    # Signing
    "sign_request",
    # Utils
    "EMPTY_SHA256",
    "HashedPayload",
    "calculate_content_md5",
    "calculate_content_sha256",
    "compute_hash",
    "make_target_url",
    # Errors
    "ErrorKind",
    "VerifyError",
    "ConfigError",
    "InvalidEndpoint",
    "SigningError",
    "TransportError",
    "UnexpectedStatus",
    "UnexpectedHeader",
    "MalformedBody",
    "UnexpectedBucket",
    "UnexpectedContents",
    "UnexpectedCount",
    # Models
    "ObjectInfo",
    "ObjectMultipartInfo",
    "ListBucketResult",
    "ListMultipartUploadsResult",
    # Requests and verification
    "new_request",
    "verify_response",
    "verify_standard_headers",
    "verify_status",
    # Fixtures
    "FixtureContext",
    "seed_fixtures",
    "cleanup_fixtures",
    # Driver
    "OPERATIONS",
    "Operation",
    "Variant",
    "TestOutcome",
    "run_all",
    "run_test",
]
