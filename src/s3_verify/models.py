"""Fixture records and decoded list results.

The same result types hold both sides of a comparison: the expectation
built from fixture state and the result decoded from the response body.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union
import xml.etree.ElementTree as ET

from botocore.utils import parse_timestamp

from s3_verify.errors import MalformedBody


def local_name(tag: str) -> str:
    """Strip the XML namespace from a tag."""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if local_name(child.tag) == name]


def _text(element: ET.Element, name: str, default: str = "") -> str:
    for child in element:
        if local_name(child.tag) == name:
            return (child.text or "").strip()
    return default


def _int(element: ET.Element, name: str) -> int:
    value = _text(element, name)
    if not value:
        return 0
    try:
        return int(value)
    except ValueError as e:
        raise MalformedBody(f"Invalid <{name}> value {value!r}") from e


def _bool(element: ET.Element, name: str) -> bool:
    return _text(element, name).lower() == "true"


def _timestamp(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parse_timestamp(value)
    except (ValueError, RuntimeError) as e:
        raise MalformedBody(f"Invalid <LastModified> value {value!r}") from e


def parse_xml(body: Union[bytes, str], root_name: str) -> ET.Element:
    """Parse a response body and check its root element.

    Raises:
        MalformedBody: If the body is not well-formed XML or the root
            element is not ``root_name``
    """
    if not body:
        raise MalformedBody(f"Empty body, expected <{root_name}>")
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise MalformedBody(f"Response body is not well-formed XML: {e}") from e
    if local_name(root.tag) != root_name:
        raise MalformedBody(
            "Unexpected root element", expected=root_name, received=local_name(root.tag)
        )
    return root


@dataclass
class ObjectInfo:
    """An object created as a fixture, or one entry of a bucket listing."""

    key: str
    size: int = 0
    etag: str = ""
    last_modified: Optional[datetime] = None
    storage_class: Optional[str] = None

    @classmethod
    def from_element(cls, element: ET.Element) -> "ObjectInfo":
        return cls(
            key=_text(element, "Key"),
            size=_int(element, "Size"),
            # Kept as received, quotes included.
            etag=_text(element, "ETag"),
            last_modified=_timestamp(_text(element, "LastModified")),
            storage_class=_text(element, "StorageClass") or None,
        )


@dataclass
class ObjectMultipartInfo:
    """An in-flight multipart upload."""

    key: str
    upload_id: str
    size: int = 0

    @classmethod
    def from_element(cls, element: ET.Element) -> "ObjectMultipartInfo":
        return cls(
            key=_text(element, "Key"),
            upload_id=_text(element, "UploadId"),
            size=_int(element, "Size"),
        )


@dataclass
class ListBucketResult:
    """ListObjects V1 result.

    ``max_keys`` of 0 means the listing was not limited. ``population``
    holds every object a limited listing may draw from and is never
    filled from a response body.
    """

    name: str
    contents: list[ObjectInfo] = field(default_factory=list)
    common_prefixes: list[str] = field(default_factory=list)
    max_keys: int = 0
    prefix: str = ""
    marker: str = ""
    next_marker: str = ""
    delimiter: str = ""
    is_truncated: bool = False
    population: list[ObjectInfo] = field(default_factory=list)

    @property
    def entry_count(self) -> int:
        """Listed objects plus common prefixes."""
        return len(self.contents) + len(self.common_prefixes)

    @classmethod
    def from_xml(cls, body: Union[bytes, str]) -> "ListBucketResult":
        """Decode a ListBucketResult document.

        Raises:
            MalformedBody: On parse failure or invalid field values
        """
        root = parse_xml(body, "ListBucketResult")
        return cls(
            name=_text(root, "Name"),
            contents=[ObjectInfo.from_element(e) for e in _children(root, "Contents")],
            common_prefixes=[
                _text(e, "Prefix") for e in _children(root, "CommonPrefixes")
            ],
            max_keys=_int(root, "MaxKeys"),
            prefix=_text(root, "Prefix"),
            marker=_text(root, "Marker"),
            next_marker=_text(root, "NextMarker"),
            delimiter=_text(root, "Delimiter"),
            is_truncated=_bool(root, "IsTruncated"),
        )


@dataclass
class ListMultipartUploadsResult:
    """ListMultipartUploads result."""

    bucket: str
    uploads: list[ObjectMultipartInfo] = field(default_factory=list)
    key_marker: str = ""
    upload_id_marker: str = ""
    max_uploads: int = 0
    is_truncated: bool = False

    @classmethod
    def from_xml(cls, body: Union[bytes, str]) -> "ListMultipartUploadsResult":
        """Decode a ListMultipartUploadsResult document.

        Raises:
            MalformedBody: On parse failure or invalid field values
        """
        root = parse_xml(body, "ListMultipartUploadsResult")
        return cls(
            bucket=_text(root, "Bucket"),
            uploads=[
                ObjectMultipartInfo.from_element(e) for e in _children(root, "Upload")
            ],
            key_marker=_text(root, "KeyMarker"),
            upload_id_marker=_text(root, "UploadIdMarker"),
            max_uploads=_int(root, "MaxUploads"),
            is_truncated=_bool(root, "IsTruncated"),
        )
