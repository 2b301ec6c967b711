"""Operations under test, in run order."""

from s3_verify.operations.base import Operation, Variant
from s3_verify.operations.list_multipart_uploads import LIST_MULTIPART_UPLOADS
from s3_verify.operations.list_objects_v1 import LIST_OBJECTS_V1

OPERATIONS: list[Operation] = [
    LIST_OBJECTS_V1,
    LIST_MULTIPART_UPLOADS,
]

__all__ = [
    "Operation",
    "Variant",
    "OPERATIONS",
    "LIST_OBJECTS_V1",
    "LIST_MULTIPART_UPLOADS",
]
