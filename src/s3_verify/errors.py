"""Error taxonomy for S3 conformance verification.

Every builder and verifier raises the first problem it finds as a
``VerifyError`` subclass. Callers branch on ``kind`` instead of parsing
messages; ``expected`` and ``received`` hold the compared values.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Machine-readable tag for each failure class."""

    CONFIG = "ConfigError"
    SIGNING = "SigningError"
    TRANSPORT = "TransportError"
    UNEXPECTED_STATUS = "UnexpectedStatus"
    UNEXPECTED_HEADER = "UnexpectedHeader"
    MALFORMED_BODY = "MalformedBody"
    UNEXPECTED_BUCKET = "UnexpectedBucket"
    UNEXPECTED_CONTENTS = "UnexpectedContents"
    UNEXPECTED_COUNT = "UnexpectedCount"


class VerifyError(Exception):
    """Base class for all verification failures.

    Attributes:
        kind: ErrorKind tag for this failure.
        message: Human-readable description.
        expected: Value the check wanted, if the check compares values.
        received: Value the server returned, if the check compares values.
        details: Optional structured diagnostics (e.g. a deepdiff report).
    """

    kind: ErrorKind = ErrorKind.CONFIG

    def __init__(
        self,
        message: str,
        expected: Any = None,
        received: Any = None,
        details: Optional[dict] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.expected = expected
        self.received = received
        self.details = details or {}

    def __str__(self) -> str:
        if self.expected is None and self.received is None:
            return self.message
        return f"{self.message}: wanted {self.expected}, got {self.received}"

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "expected": self.expected,
            "received": self.received,
            "details": self.details,
        }


class ConfigError(VerifyError):
    """Malformed endpoint, region or credentials."""

    kind = ErrorKind.CONFIG


class InvalidEndpoint(ConfigError):
    """The endpoint URL cannot be used to build request targets."""


class SigningError(VerifyError):
    """Payload hashing or signature computation failed."""

    kind = ErrorKind.SIGNING


class TransportError(VerifyError):
    """Connection or IO failure while executing a request."""

    kind = ErrorKind.TRANSPORT


class UnexpectedStatus(VerifyError):
    kind = ErrorKind.UNEXPECTED_STATUS

    def __init__(self, expected: str, received: str) -> None:
        super().__init__("Unexpected Status Received", expected, received)


class UnexpectedHeader(VerifyError):
    kind = ErrorKind.UNEXPECTED_HEADER


class MalformedBody(VerifyError):
    kind = ErrorKind.MALFORMED_BODY


class UnexpectedBucket(VerifyError):
    kind = ErrorKind.UNEXPECTED_BUCKET

    def __init__(self, expected: str, received: str) -> None:
        super().__init__("Unexpected Bucket Listed", expected, received)


class UnexpectedContents(VerifyError):
    kind = ErrorKind.UNEXPECTED_CONTENTS

    def __init__(
        self, expected: int, received: int, details: Optional[dict] = None
    ) -> None:
        super().__init__(
            "Wrong Metadata Saved in Received List", expected, received, details
        )


class UnexpectedCount(VerifyError):
    kind = ErrorKind.UNEXPECTED_COUNT

    def __init__(self, what: str, expected: int, received: int) -> None:
        super().__init__(f"Unexpected Number of {what} Listed", expected, received)
