"""Command-line interface for s3stream.

Provides argument parsing and the main entry point for uploading and
downloading objects from the command line.
"""

import argparse
import logging
import os
import sys
from typing import Optional

import httpx

from s3stream.config import ConfigError, load_config
from s3stream.models import TransferResult
from s3stream.presigned import PresignedObjectStore
from s3stream.reporters import ConsoleReporter, JsonReporter, Reporter
from s3stream.store import Boto3ObjectStore, build_s3_client
from s3stream.transfer import StreamTransfer

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


class CompositeReporter(Reporter):
    """Reporter that delegates to multiple reporters.

    Allows using both ConsoleReporter and JsonReporter simultaneously.
    """

    def __init__(self, reporters: list[Reporter]):
        self._reporters = reporters

    def on_transfer_start(self, source, destination, total_size, strategy) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_transfer_start(source, destination, total_size, strategy)

    def on_chunk(self, chunk, total_size) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_chunk(chunk, total_size)

    def on_part_uploaded(self, part) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_part_uploaded(part)

    def on_transfer_complete(self, result) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_transfer_complete(result)

    def on_run_complete(self, results: list) -> None:
        """Delegate to all reporters."""
        for reporter in self._reporters:
            reporter.on_run_complete(results)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="s3stream",
        description="Stream files to and from an S3-compatible object store",
    )

    parser.add_argument(
        "-c", "--config",
        default="config.json",
        help="Path to configuration file (default: config.json)",
    )

    parser.add_argument(
        "-b", "--bucket",
        help="Bucket to use instead of the configured one",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output, show only summary",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Write debug logs to stderr",
    )

    parser.add_argument(
        "--show-chunks",
        action="store_true",
        help="Print a progress line for every chunk read",
    )

    parser.add_argument(
        "-j", "--json-output",
        metavar="PATH",
        help="Write JSON results to file",
    )

    parser.add_argument(
        "--github-actions",
        action="store_true",
        help="Enable GitHub Actions output mode",
    )

    parser.add_argument(
        "--presigned",
        action="store_true",
        help="Send object and part bodies through presigned URLs",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    upload = subparsers.add_parser("upload", help="Upload local files")
    upload.add_argument("files", nargs="+", metavar="FILE", help="Files to upload")
    upload.add_argument(
        "-k", "--key",
        help="Object key (single file only; default: file name)",
    )

    download = subparsers.add_parser("download", help="Download an object")
    download.add_argument("key", metavar="KEY", help="Object key to download")
    download.add_argument(
        "-o", "--output",
        metavar="PATH",
        help="Local destination (default: downloaded-<key name>)",
    )

    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> logging.Logger:
    """Attach a stderr handler to the package logger when verbose."""
    logger = logging.getLogger("s3stream")
    if verbose:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.handlers = [handler]
        logger.setLevel(logging.DEBUG)
    return logger


def create_reporters(args: argparse.Namespace) -> list[Reporter]:
    """Create reporters based on command-line arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        List of configured reporters
    """
    reporters = []

    # Always add console reporter
    reporters.append(ConsoleReporter(quiet=args.quiet, show_chunks=args.show_chunks))

    if args.json_output or args.github_actions:
        reporters.append(JsonReporter(
            output_path=args.json_output,
            github_output=args.github_actions,
        ))

    return reporters


def default_destination(key: str) -> str:
    """Local file name used when a download has no explicit destination."""
    return f"downloaded-{os.path.basename(key.rstrip('/')) or 'object'}"


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 1 for transfer failures, 2 for errors
    """
    args = parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "upload" and args.key and len(args.files) > 1:
        print("--key can only be used with a single file", file=sys.stderr)
        return 2

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    reporters = create_reporters(args)
    if len(reporters) == 1:
        reporter = reporters[0]
    else:
        reporter = CompositeReporter(reporters)

    s3_client = build_s3_client(config)
    http_client: Optional[httpx.Client] = None
    if args.presigned:
        http_client = httpx.Client(timeout=config.http_timeout)
        store = PresignedObjectStore(s3_client, http_client)
    else:
        store = Boto3ObjectStore(s3_client)

    transfer = StreamTransfer(store, config, reporter=reporter)
    results: list[TransferResult] = []

    try:
        if args.command == "upload":
            for path in args.files:
                results.append(transfer.upload_file(path, key=args.key, bucket=args.bucket))
        else:
            destination = args.output or default_destination(args.key)
            results.append(transfer.download(args.key, destination, bucket=args.bucket))
    finally:
        if http_client is not None:
            http_client.close()

    reporter.on_run_complete(results)

    return 0 if all(result.succeeded for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
