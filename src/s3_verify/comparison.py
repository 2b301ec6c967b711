"""Order-independent comparison of expected and received list entries.

Entries are reduced to a signature of their significant fields and
matched as multisets: a received entry satisfies at most one expected
entry, and the order the server lists them in does not matter.
"""

from collections import Counter
from typing import Callable, Iterable, Sequence, TypeVar

from deepdiff import DeepDiff

from s3_verify.models import ObjectInfo, ObjectMultipartInfo

T = TypeVar("T")
Signature = tuple


def normalize_etag(etag: str) -> str:
    """Remove the quotes S3 wraps around ETags."""
    return etag.strip().strip('"')


def object_signature(obj: ObjectInfo) -> Signature:
    """Fields that identify a listed object: key, size, ETag."""
    return (obj.key, obj.size, normalize_etag(obj.etag))


def upload_signature(upload: ObjectMultipartInfo) -> Signature:
    """Fields that identify a listed upload: key, upload ID, size."""
    return (upload.key, upload.upload_id, upload.size)


def count_matches(
    expected: Iterable[T],
    received: Iterable[T],
    signature: Callable[[T], Signature],
) -> int:
    """Count expected entries that have their own matching received entry.

    Matching is injective: two expected entries with the same signature
    need two received entries.
    """
    expected_counts = Counter(signature(e) for e in expected)
    received_counts = Counter(signature(r) for r in received)
    return sum((expected_counts & received_counts).values())


def diff_entries(
    expected: Sequence[T],
    received: Sequence[T],
    signature: Callable[[T], Signature],
) -> dict:
    """Describe how two entry lists differ, ignoring order.

    Returns:
        DeepDiff report as a dict, empty when the lists match
    """
    diff = DeepDiff(
        [list(signature(e)) for e in expected],
        [list(signature(r)) for r in received],
        ignore_order=True,
        report_repetition=True,
    )
    return dict(diff) if diff else {}
