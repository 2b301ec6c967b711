"""Operation descriptors dispatched by the test driver."""

from dataclasses import dataclass
from typing import Any, Callable, Mapping

import requests

from s3_verify.config import ServerConfig
from s3_verify.fixtures import FixtureContext
from s3_verify.verify import BodyVerifier

RequestBuilder = Callable[[ServerConfig, str, Mapping[str, str]], requests.PreparedRequest]


@dataclass(frozen=True)
class Variant:
    """One request/verify round trip within a test."""

    params: Mapping[str, str]
    expected: Any
    expected_status: str = "200 OK"
    description: str = ""


@dataclass(frozen=True)
class Operation:
    """An API operation under test.

    Attributes:
        name: Display name used in reports
        build_variants: Computes the expected results from fixture state
        build_request: Builds the signed request for one variant
        verify_body: Compares a response body against one expectation
    """

    name: str
    build_variants: Callable[[FixtureContext], list[Variant]]
    build_request: RequestBuilder
    verify_body: BodyVerifier
