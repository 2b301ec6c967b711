"""ListMultipartUploads: ``GET /<bucket>/?uploads=``."""

from typing import Mapping, Optional, Union

from s3_verify.comparison import count_matches, diff_entries, upload_signature
from s3_verify.config import ServerConfig
from s3_verify.errors import UnexpectedBucket, UnexpectedContents, UnexpectedCount
from s3_verify.fixtures import FixtureContext
from s3_verify.models import ListMultipartUploadsResult
from s3_verify.operations.base import Operation, Variant
from s3_verify.request import new_request


def new_list_multipart_uploads_request(
    config: ServerConfig,
    bucket: str,
    params: Optional[Mapping[str, str]] = None,
    **kwargs,
):
    """Signed ListMultipartUploads request.

    The ``uploads`` sub-resource is always set; extra parameters such as
    ``prefix`` are added alongside it.
    """
    query = dict(params or {})
    query["uploads"] = ""
    return new_request(config, bucket, params=query, method="GET", **kwargs)


def expected_uploads(fixtures: FixtureContext) -> ListMultipartUploadsResult:
    return ListMultipartUploadsResult(
        bucket=fixtures.bucket_name,
        uploads=list(fixtures.uploads),
    )


def build_variants(fixtures: FixtureContext) -> list[Variant]:
    return [Variant(params={}, expected=expected_uploads(fixtures))]


def verify_list_uploads_body(
    body: Union[bytes, str], expected: ListMultipartUploadsResult
) -> None:
    """Compare a ListMultipartUploadsResult body against the fixtures."""
    received = ListMultipartUploadsResult.from_xml(body)
    if received.bucket != expected.bucket:
        raise UnexpectedBucket(expected.bucket, received.bucket)
    if len(received.uploads) != len(expected.uploads):
        raise UnexpectedCount("Uploads", len(expected.uploads), len(received.uploads))

    matched = count_matches(expected.uploads, received.uploads, upload_signature)
    if matched != len(expected.uploads):
        raise UnexpectedContents(
            len(expected.uploads),
            matched,
            diff_entries(expected.uploads, received.uploads, upload_signature),
        )


LIST_MULTIPART_UPLOADS = Operation(
    name="Multipart (List-Uploads)",
    build_variants=build_variants,
    build_request=new_list_multipart_uploads_request,
    verify_body=verify_list_uploads_body,
)
