"""Fixture state used to compute expected results.

Fixtures are created once per run through boto3 and recorded in a
``FixtureContext`` that is passed explicitly to every test.
"""

from dataclasses import dataclass
import logging
import uuid

from botocore.exceptions import ClientError

from s3_verify.comparison import normalize_etag
from s3_verify.models import ObjectInfo, ObjectMultipartInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixtureContext:
    """Objects and multipart uploads that exist before any list test runs."""

    bucket_name: str
    objects: tuple[ObjectInfo, ...] = ()
    uploads: tuple[ObjectMultipartInfo, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "objects", tuple(self.objects))
        object.__setattr__(self, "uploads", tuple(self.uploads))

    def sorted_objects(self) -> list[ObjectInfo]:
        """Objects ordered by key."""
        return sorted(self.objects, key=lambda o: o.key)


def new_bucket_name(prefix: str = "s3verify") -> str:
    """Generate a unique bucket name."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def ensure_bucket_exists(s3_client, bucket_name, region="us-east-1"):
    """Ensure bucket exists, create if it doesn't.

    Returns:
        True if the bucket was created by this call
    """
    try:
        s3_client.head_bucket(Bucket=bucket_name)
        return False
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "")
        if error_code not in ("404", "NoSuchBucket"):
            raise
    try:
        if region == "us-east-1":
            s3_client.create_bucket(Bucket=bucket_name)
        else:
            s3_client.create_bucket(
                Bucket=bucket_name,
                CreateBucketConfiguration={"LocationConstraint": region},
            )
    except s3_client.exceptions.BucketAlreadyOwnedByYou:
        return False
    return True


def seed_fixtures(
    s3_client,
    bucket_name: str,
    object_count: int = 45,
    upload_count: int = 2,
    region: str = "us-east-1",
) -> FixtureContext:
    """Create objects and in-flight multipart uploads in a bucket.

    If any call fails, whatever was created so far is removed (the bucket
    too when this call created it) and the error is re-raised.

    Args:
        s3_client: boto3 S3 client
        bucket_name: Bucket to populate, created if missing
        object_count: Number of objects to put
        upload_count: Number of multipart uploads to start
        region: Region used when creating the bucket

    Returns:
        FixtureContext describing everything that was created
    """
    created_bucket = ensure_bucket_exists(s3_client, bucket_name, region)
    objects: list[ObjectInfo] = []
    uploads: list[ObjectMultipartInfo] = []

    try:
        for i in range(object_count):
            key = f"object-{i:03d}"
            body = f"s3verify fixture {i}\n".encode("utf-8") * (i + 1)
            s3_client.put_object(Bucket=bucket_name, Key=key, Body=body)
            # Recorded before head_object so a failed head still gets deleted.
            objects.append(ObjectInfo(key=key))
            head = s3_client.head_object(Bucket=bucket_name, Key=key)
            objects[-1] = ObjectInfo(
                key=key,
                size=head["ContentLength"],
                etag=normalize_etag(head["ETag"]),
                last_modified=head.get("LastModified"),
            )
        logger.info("Created %d objects in %s", len(objects), bucket_name)

        for i in range(upload_count):
            key = f"multipart-{i:03d}"
            response = s3_client.create_multipart_upload(Bucket=bucket_name, Key=key)
            uploads.append(
                ObjectMultipartInfo(key=key, upload_id=response["UploadId"])
            )
        logger.info("Started %d multipart uploads in %s", len(uploads), bucket_name)
    except Exception:
        logger.error(
            "Fixture setup in %s failed after %d objects and %d uploads, cleaning up",
            bucket_name,
            len(objects),
            len(uploads),
        )
        partial = FixtureContext(bucket_name=bucket_name, objects=objects, uploads=uploads)
        cleanup_fixtures(s3_client, partial, delete_bucket=created_bucket)
        raise

    return FixtureContext(
        bucket_name=bucket_name,
        objects=objects,
        uploads=uploads,
    )


def cleanup_fixtures(s3_client, fixtures: FixtureContext, delete_bucket: bool = True):
    """Abort uploads and delete objects (and the bucket) created by seeding.

    Failures are logged and cleanup continues with the next item.
    """
    bucket = fixtures.bucket_name
    for upload in fixtures.uploads:
        try:
            s3_client.abort_multipart_upload(
                Bucket=bucket, Key=upload.key, UploadId=upload.upload_id
            )
        except ClientError as e:
            logger.warning("Failed to abort upload %s: %s", upload.key, e)
    for obj in fixtures.objects:
        try:
            s3_client.delete_object(Bucket=bucket, Key=obj.key)
        except ClientError as e:
            logger.warning("Failed to delete object %s: %s", obj.key, e)
    if delete_bucket:
        try:
            s3_client.delete_bucket(Bucket=bucket)
        except ClientError as e:
            logger.warning("Failed to delete bucket %s: %s", bucket, e)
