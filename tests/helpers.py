"""Offline stand-ins for server responses, sessions and the boto3 client."""

from datetime import datetime, timezone
import hashlib
import io
from types import SimpleNamespace
from typing import Iterable, Optional

from botocore.exceptions import ClientError
import requests
from requests.structures import CaseInsensitiveDict

from s3_verify.models import ObjectInfo, ObjectMultipartInfo

S3_NAMESPACE = "http://s3.amazonaws.com/doc/2006-03-01/"

STANDARD_HEADERS = {
    "Date": "Wed, 14 Oct 2026 10:00:00 GMT",
    "x-amz-request-id": "17D3A5C2E1F0B9A8",
    "Content-Type": "application/xml",
}


class TrackingBody(io.BytesIO):
    """Response body that records whether anything read it."""

    def __init__(self, data: bytes = b""):
        super().__init__(data)
        self.was_read = False

    def read(self, *args, **kwargs):
        self.was_read = True
        return super().read(*args, **kwargs)


def make_response(
    status: int = 200,
    reason: str = "OK",
    body: bytes = b"",
    headers: Optional[dict] = None,
) -> requests.Response:
    """Build a streamed requests.Response without a server."""
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response.raw = TrackingBody(body)
    response.headers = CaseInsensitiveDict(
        STANDARD_HEADERS if headers is None else headers
    )
    response.url = "http://localhost:9000/fixture-bucket/"
    return response


class FakeSession:
    """Stand-in for requests.Session that replays canned responses."""

    def __init__(self, responses: Iterable = ()):
        self.responses = list(responses)
        self.sent: list[requests.PreparedRequest] = []
        self.send_kwargs: list[dict] = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def send(self, request, **kwargs):
        self.sent.append(request)
        self.send_kwargs.append(kwargs)
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def etag_for(key: str) -> str:
    return hashlib.md5(key.encode("utf-8")).hexdigest()


def list_bucket_xml(
    name: str,
    objects: Iterable[ObjectInfo],
    prefixes: Iterable[str] = (),
    max_keys: int = 1000,
    quote_etag: bool = True,
    is_truncated: bool = False,
) -> bytes:
    """Render a ListBucketResult document the way S3 does."""
    contents = []
    for obj in objects:
        etag = f"&quot;{obj.etag}&quot;" if quote_etag else obj.etag
        contents.append(
            "<Contents>"
            f"<Key>{obj.key}</Key>"
            "<LastModified>2026-10-14T10:00:00.000Z</LastModified>"
            f"<ETag>{etag}</ETag>"
            f"<Size>{obj.size}</Size>"
            "<StorageClass>STANDARD</StorageClass>"
            "</Contents>"
        )
    common = [
        f"<CommonPrefixes><Prefix>{prefix}</Prefix></CommonPrefixes>"
        for prefix in prefixes
    ]
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<ListBucketResult xmlns="{S3_NAMESPACE}">'
        f"<Name>{name}</Name><Prefix></Prefix><Marker></Marker>"
        f"<MaxKeys>{max_keys}</MaxKeys>"
        f"<IsTruncated>{'true' if is_truncated else 'false'}</IsTruncated>"
        + "".join(contents)
        + "".join(common)
        + "</ListBucketResult>"
    ).encode("utf-8")


def list_uploads_xml(bucket: str, uploads: Iterable[ObjectMultipartInfo]) -> bytes:
    """Render a ListMultipartUploadsResult document."""
    entries = "".join(
        "<Upload>"
        f"<Key>{upload.key}</Key>"
        f"<UploadId>{upload.upload_id}</UploadId>"
        "<Initiated>2026-10-14T10:00:00.000Z</Initiated>"
        "<StorageClass>STANDARD</StorageClass>"
        "</Upload>"
        for upload in uploads
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<ListMultipartUploadsResult xmlns="{S3_NAMESPACE}">'
        f"<Bucket>{bucket}</Bucket><KeyMarker></KeyMarker>"
        "<UploadIdMarker></UploadIdMarker><MaxUploads>1000</MaxUploads>"
        "<IsTruncated>false</IsTruncated>"
        f"{entries}"
        "</ListMultipartUploadsResult>"
    ).encode("utf-8")


class BucketAlreadyOwnedByYou(ClientError):
    pass


class FakeS3Client:
    """Records calls the way a boto3 S3 client would receive them."""

    exceptions = SimpleNamespace(BucketAlreadyOwnedByYou=BucketAlreadyOwnedByYou)

    def __init__(self, bucket_exists=False):
        self.bucket_exists = bucket_exists
        self.objects = {}
        self.uploads = {}
        self.created_buckets = []
        self.deleted_buckets = []

    def head_bucket(self, Bucket):
        if not self.bucket_exists:
            raise ClientError({"Error": {"Code": "404"}}, "HeadBucket")

    def create_bucket(self, Bucket, **kwargs):
        self.created_buckets.append((Bucket, kwargs))
        self.bucket_exists = True

    def put_object(self, Bucket, Key, Body):
        self.objects[Key] = Body

    def head_object(self, Bucket, Key):
        body = self.objects[Key]
        return {
            "ContentLength": len(body),
            "ETag": f'"{hashlib.md5(body).hexdigest()}"',
            "LastModified": datetime(2026, 10, 14, tzinfo=timezone.utc),
        }

    def create_multipart_upload(self, Bucket, Key):
        upload_id = f"upload-{len(self.uploads)}"
        self.uploads[upload_id] = Key
        return {"UploadId": upload_id}

    def abort_multipart_upload(self, Bucket, Key, UploadId):
        del self.uploads[UploadId]

    def delete_object(self, Bucket, Key):
        if Key not in self.objects:
            raise ClientError({"Error": {"Code": "NoSuchKey"}}, "DeleteObject")
        del self.objects[Key]

    def delete_bucket(self, Bucket):
        self.deleted_buckets.append(Bucket)
