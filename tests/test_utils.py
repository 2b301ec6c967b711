"""Tests for target URL building and payload hashing."""

import io
from urllib.parse import parse_qsl, urlparse

import pytest

from s3_verify.errors import ConfigError, InvalidEndpoint, SigningError
from s3_verify.utils import (
    EMPTY_SHA256,
    calculate_content_md5,
    compute_hash,
    encode_query,
    make_target_url,
    url_encode_key,
)


class TestMakeTargetURL:
    """Path-style URL construction."""

    def test_bucket_root(self):
        url = make_target_url("http://localhost:9000", "bucket", "")
        assert url == "http://localhost:9000/bucket/"

    def test_object_key_is_appended_and_encoded(self):
        url = make_target_url("http://localhost:9000", "bucket", "dir/a b+c.txt")
        assert urlparse(url).path == "/bucket/dir/a%20b%2Bc.txt"

    def test_query_contains_exactly_the_parameters(self):
        params = {"max-keys": "30", "prefix": "photos/2026 trip", "marker": "a&b"}
        url = make_target_url("https://s3.example.com", "bucket", "", params=params)

        parsed = urlparse(url)
        assert parsed.path.startswith("/bucket")
        assert dict(parse_qsl(parsed.query, keep_blank_values=True)) == params
        assert "photos%2F2026%20trip" in parsed.query
        assert "a%26b" in parsed.query

    def test_query_is_sorted_by_name(self):
        url = make_target_url(
            "http://localhost:9000", "bucket", "", params={"uploads": "", "max-uploads": "5"}
        )
        assert urlparse(url).query == "max-uploads=5&uploads="

    def test_empty_value_keeps_equals_sign(self):
        url = make_target_url("http://localhost:9000", "bucket", "", params={"uploads": ""})
        assert url.endswith("/bucket/?uploads=")

    def test_no_params_has_no_query(self):
        url = make_target_url("http://localhost:9000", "bucket", "", params={})
        assert "?" not in url

    def test_port_is_preserved(self):
        url = make_target_url("https://minio.local:9443", "bucket")
        assert urlparse(url).netloc == "minio.local:9443"

    @pytest.mark.parametrize(
        "region,host",
        [
            ("us-east-1", "s3.amazonaws.com"),
            ("eu-west-1", "s3.eu-west-1.amazonaws.com"),
        ],
    )
    def test_amazon_host_follows_region(self, region, host):
        url = make_target_url("https://s3.amazonaws.com", "bucket", region=region)
        assert urlparse(url).netloc == host

    @pytest.mark.parametrize(
        "endpoint", ["ftp://localhost:21", "localhost:9000", "http://", "http://host:port"]
    )
    def test_invalid_endpoint(self, endpoint):
        with pytest.raises(InvalidEndpoint) as exc:
            make_target_url(endpoint, "bucket")
        assert isinstance(exc.value, ConfigError)


class TestEncoding:
    def test_encode_query_empty(self):
        assert encode_query(None) == ""
        assert encode_query({}) == ""

    def test_encode_query_uses_percent_20_for_spaces(self):
        assert encode_query({"prefix": "a b"}) == "prefix=a%20b"

    def test_url_encode_key_keeps_slashes(self):
        assert url_encode_key("a/b~c d") == "a/b~c%20d"

    def test_url_encode_key_bytes(self):
        assert url_encode_key(b"\xff") == "%FF"


class TestComputeHash:
    """Payload digests."""

    def test_empty_payload_digest(self):
        assert compute_hash(b"").sha256 == EMPTY_SHA256
        assert compute_hash(None).sha256 == EMPTY_SHA256
        assert compute_hash(io.BytesIO()).sha256 == EMPTY_SHA256

    def test_empty_payload_digest_is_idempotent(self):
        digests = {compute_hash(io.BytesIO(b"")).sha256 for _ in range(5)}
        assert digests == {EMPTY_SHA256}

    def test_size_md5_and_replayable_body(self):
        payload = compute_hash(io.BytesIO(b"hello world"))
        assert payload.size == 11
        assert payload.md5 == calculate_content_md5(b"hello world")
        assert payload.body.read() == b"hello world"
        payload.body.seek(0)
        assert payload.body.read() == b"hello world"

    def test_str_payload_is_utf8(self):
        assert compute_hash("é").size == 2

    def test_read_failure_raises_signing_error(self):
        class BrokenStream:
            def read(self):
                raise OSError("disk on fire")

        with pytest.raises(SigningError, match="disk on fire"):
            compute_hash(BrokenStream())
