"""Command-line entry point: seed fixtures, run every operation, report."""

import argparse
import logging
import sys

import urllib3
from botocore.exceptions import BotoCoreError, ClientError

from s3_verify.client import create_s3_client
from s3_verify.config import ServerConfig
from s3_verify.driver import TestOutcome, run_all
from s3_verify.errors import ConfigError
from s3_verify.fixtures import cleanup_fixtures, new_bucket_name, seed_fixtures
from s3_verify.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3-verify",
        description="Verify an S3-compatible server against expected API behavior",
    )
    parser.add_argument("--url", help="Server endpoint (default: $S3_ENDPOINT)")
    parser.add_argument("--access", help="Access key (default: $S3_ACCESS_KEY)")
    parser.add_argument("--secret", help="Secret key (default: $S3_SECRET_KEY)")
    parser.add_argument(
        "--region",
        help="Signing region (default: us-west-1 for Amazon, us-east-1 otherwise)",
    )
    parser.add_argument(
        "--bucket",
        help="Bucket to create fixtures in (default: a new random bucket)",
    )
    parser.add_argument(
        "--objects", type=int, default=45, help="Number of fixture objects (default: 45)"
    )
    parser.add_argument(
        "--uploads",
        type=int,
        default=2,
        help="Number of fixture multipart uploads (default: 2)",
    )
    parser.add_argument(
        "--no-verify-ssl",
        action="store_true",
        help="Disable SSL certificate verification (INSECURE - use for testing only)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Trace every HTTP round trip"
    )
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    parser.add_argument(
        "--log-format", default="text", choices=["text", "json"], help="Log format"
    )
    parser.add_argument(
        "--keep-fixtures",
        action="store_true",
        help="Leave fixture objects, uploads and bucket in place",
    )
    return parser


def print_summary(outcomes: list[TestOutcome]) -> None:
    """Print one line per test and the totals."""
    for outcome in outcomes:
        print(outcome.message)
    passed = sum(1 for o in outcomes if o.passed)
    print("=" * 60)
    print(f"Total:  {len(outcomes)}")
    print(f"Passed: {passed}")
    print(f"Failed: {len(outcomes) - passed}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else args.log_level, args.log_format)

    try:
        config = ServerConfig.from_env(
            endpoint=args.url,
            access_key=args.access,
            secret_key=args.secret,
            region=args.region,
            verbose=args.verbose or None,
            verify_ssl=False if args.no_verify_ssl else None,
        )
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if not config.verify_ssl:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    s3_client = create_s3_client(config)
    bucket = args.bucket or new_bucket_name()
    try:
        fixtures = seed_fixtures(
            s3_client,
            bucket,
            object_count=args.objects,
            upload_count=args.uploads,
            region=config.region,
        )
    except (BotoCoreError, ClientError) as e:
        logger.error("Fixture setup in %s failed: %s", bucket, e)
        return 2

    try:
        outcomes = run_all(config, fixtures)
    finally:
        if not args.keep_fixtures:
            cleanup_fixtures(s3_client, fixtures, delete_bucket=not args.bucket)

    print_summary(outcomes)
    return 0 if all(o.passed for o in outcomes) else 1


if __name__ == "__main__":
    sys.exit(main())
