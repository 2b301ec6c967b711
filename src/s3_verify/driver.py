"""Test driver: build expectations, send requests, verify, report.

Each operation runs as one test made of one or more variants. A test
fails at its first failing variant; the run always continues with the
next test.
"""

from dataclasses import dataclass
from typing import Iterable, Optional
import logging

from s3_verify.client import open_response
from s3_verify.config import ServerConfig
from s3_verify.errors import VerifyError
from s3_verify.fixtures import FixtureContext
from s3_verify.operations import OPERATIONS, Operation
from s3_verify.verify import verify_response

logger = logging.getLogger(__name__)


@dataclass
class TestOutcome:
    """Pass/fail result of one operation test."""

    name: str
    index: int
    total: int
    error: Optional[VerifyError] = None
    variant: str = ""

    # Keep pytest from collecting this class.
    __test__ = False

    @property
    def passed(self) -> bool:
        return self.error is None

    @property
    def label(self) -> str:
        return f"[{self.index:02d}/{self.total}] {self.name}:"

    @property
    def message(self) -> str:
        if self.passed:
            return f"{self.label} PASSED"
        where = f" ({self.variant})" if self.variant else ""
        return f"{self.label} FAILED{where}: {self.error}"


def run_test(
    config: ServerConfig,
    fixtures: FixtureContext,
    operation: Operation,
    index: int = 1,
    total: int = 1,
) -> TestOutcome:
    """Run every variant of one operation, stopping at the first failure."""
    outcome = TestOutcome(name=operation.name, index=index, total=total)
    variants = operation.build_variants(fixtures)

    for variant in variants:
        outcome.variant = variant.description
        try:
            request = operation.build_request(
                config, fixtures.bucket_name, variant.params
            )
            with open_response(config, request) as response:
                verify_response(
                    response,
                    variant.expected_status,
                    variant.expected,
                    operation.verify_body,
                )
        except VerifyError as e:
            outcome.error = e
            logger.error("%s", outcome.message, extra={"error": e.to_dict()})
            return outcome

    outcome.variant = ""
    logger.info("%s", outcome.message)
    return outcome


def run_all(
    config: ServerConfig,
    fixtures: FixtureContext,
    operations: Optional[Iterable[Operation]] = None,
) -> list[TestOutcome]:
    """Run operations sequentially; a failed test does not stop the run."""
    operations = list(OPERATIONS if operations is None else operations)
    total = len(operations)
    return [
        run_test(config, fixtures, operation, index, total)
        for index, operation in enumerate(operations, start=1)
    ]
