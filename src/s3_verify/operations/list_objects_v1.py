"""ListObjects V1: ``GET /<bucket>/`` with optional ``max-keys``."""

from typing import Mapping, Optional, Union

from s3_verify.comparison import count_matches, diff_entries, object_signature
from s3_verify.config import ServerConfig
from s3_verify.errors import UnexpectedBucket, UnexpectedContents, UnexpectedCount
from s3_verify.fixtures import FixtureContext
from s3_verify.models import ListBucketResult
from s3_verify.operations.base import Operation, Variant
from s3_verify.request import new_request

MAX_KEYS = 30


def new_list_objects_v1_request(
    config: ServerConfig,
    bucket: str,
    params: Optional[Mapping[str, str]] = None,
    **kwargs,
):
    """Signed ListObjects V1 request; no body is sent."""
    return new_request(config, bucket, params=params, method="GET", **kwargs)


def expected_listing(
    fixtures: FixtureContext, max_keys: int = 0
) -> ListBucketResult:
    """Expected listing of the fixture bucket.

    With ``max_keys`` set only the first ``max_keys`` objects by key are
    expected, and the whole fixture set is kept as the population the
    server may pick from.
    """
    population = fixtures.sorted_objects()
    objects = population[:max_keys] if max_keys else population
    return ListBucketResult(
        name=fixtures.bucket_name,
        contents=objects,
        max_keys=max_keys,
        population=population if max_keys else [],
    )


def build_variants(fixtures: FixtureContext) -> list[Variant]:
    return [
        Variant(params={}, expected=expected_listing(fixtures), description="all objects"),
        Variant(
            params={"max-keys": str(MAX_KEYS)},
            expected=expected_listing(fixtures, MAX_KEYS),
            description=f"max-keys={MAX_KEYS}",
        ),
    ]


def verify_list_bucket_body(
    body: Union[bytes, str], expected: ListBucketResult
) -> None:
    """Compare a ListBucketResult body against the expected listing.

    A limited listing must return exactly ``max_keys`` entries, each one
    a distinct fixture object with intact metadata; which ones is up to
    the server. An unlimited listing must contain every expected object
    and nothing else.
    """
    received = ListBucketResult.from_xml(body)
    if received.name != expected.name:
        raise UnexpectedBucket(expected.name, received.name)

    if expected.max_keys:
        if received.entry_count != expected.max_keys:
            raise UnexpectedCount("Objects", expected.max_keys, received.entry_count)
        population = expected.population or expected.contents
        matched = count_matches(population, received.contents, object_signature)
        if matched != len(received.contents):
            raise UnexpectedContents(
                len(received.contents),
                matched,
                diff_entries(population, received.contents, object_signature),
            )
        return

    matched = count_matches(expected.contents, received.contents, object_signature)
    if matched != len(expected.contents):
        raise UnexpectedContents(
            len(expected.contents),
            matched,
            diff_entries(expected.contents, received.contents, object_signature),
        )
    if received.entry_count != len(expected.contents):
        raise UnexpectedCount("Objects", len(expected.contents), received.entry_count)


LIST_OBJECTS_V1 = Operation(
    name="ListObjects V1",
    build_variants=build_variants,
    build_request=new_list_objects_v1_request,
    verify_body=verify_list_bucket_body,
)
