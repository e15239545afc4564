"""
Command-line entry point for a single fax intake run.

Usage
-----
# Sent faxes, directories and endpoint from the environment / .env
faxbridge run --profile sent

# Received faxes from a specific folder, smaller batches
faxbridge run --profile received --incoming ./inbox --batch-size 25

# List the available direction profiles
faxbridge profiles

Environment / .env
------------------
INCOMING_DIR      Folder scanned for PDFs (default: pdf_files)
PROCESSED_DIR     Destination for parsed PDFs (default: processed)
FAILED_DIR        Destination for unparseable PDFs (default: failed-uploads)
BATCH_SIZE        Records per upload request (default: 100)
UPLOAD_ENDPOINT   Bulk upload URL (default: https://humble-fax.com/upload_bulk)
REQUEST_TIMEOUT   Seconds per upload request (default: 30)
"""

import argparse
import json
import logging
import sys

from faxbridge.config import load_config
from faxbridge.exceptions import ConfigError, ScanError
from faxbridge.models.profile import PROFILES, get_profile
from faxbridge.services.pipeline import run_pipeline

logger = logging.getLogger("faxbridge")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="faxbridge",
        description="Extract prior-authorization fax metadata and upload it in bulk.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Process the incoming folder once")
    run.add_argument(
        "--profile",
        default="sent",
        choices=sorted(PROFILES),
        help="Direction profile to apply (default: sent)",
    )
    run.add_argument("--incoming", dest="incoming_dir", help="Override INCOMING_DIR")
    run.add_argument("--processed", dest="processed_dir", help="Override PROCESSED_DIR")
    run.add_argument("--failed", dest="failed_dir", help="Override FAILED_DIR")
    run.add_argument("--batch-size", dest="batch_size", type=int, help="Override BATCH_SIZE")
    run.add_argument("--endpoint", dest="upload_endpoint", help="Override UPLOAD_ENDPOINT")
    run.add_argument("--env-file", default=None, help="Path to a .env file")
    run.add_argument("--json", action="store_true", help="Print the run report as JSON")

    sub.add_parser("profiles", help="List direction profiles")
    return parser


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "profiles":
        for name, profile in sorted(PROFILES.items()):
            print(f"{name:<16} {profile.direction.value:<9} dynamic={profile.dynamic_party}")
        return 0

    try:
        config = load_config(
            args.env_file,
            incoming_dir=args.incoming_dir,
            processed_dir=args.processed_dir,
            failed_dir=args.failed_dir,
            batch_size=args.batch_size,
            upload_endpoint=args.upload_endpoint,
        )
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    try:
        report = run_pipeline(config, get_profile(args.profile))
    except ScanError as exc:
        logger.error("Error processing PDFs: %s", exc)
        return 1

    if args.json:
        print(json.dumps(report.model_dump(mode="json"), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
