#!/usr/bin/env python3
"""
Dev helper: send a one-record test batch to a fax ingestion endpoint.

Builds a FaxRecord the same way the pipeline does, optionally attaching a real
PDF (or a tiny placeholder), and POST-s {"records": [...]} to the endpoint.

Usage
-----
# Basic: Sent record with a placeholder attachment, endpoint from UPLOAD_ENDPOINT
python scripts/send_test_batch.py

# Attach a specific PDF
python scripts/send_test_batch.py --file path/to/fax.pdf

# Received record
python scripts/send_test_batch.py --direction Received

# Target a local receiver
python scripts/send_test_batch.py --url http://localhost/humblefax/upload_bulk

# Print the payload without sending it
python scripts/send_test_batch.py --dry-run

Environment / .env
------------------
UPLOAD_ENDPOINT   Bulk upload URL, overridden by --url.
"""

import argparse
import base64
import json
import os
import sys
from datetime import datetime
from pathlib import Path

import httpx
from dotenv import load_dotenv

from faxbridge.config import DEFAULT_UPLOAD_ENDPOINT
from faxbridge.models.profile import OFFICE_FAX_NUMBER, PRIOR_AUTH_SUBJECT, SUPPLIER_NAME
from faxbridge.models.record import Direction, FaxRecord

# Smallest PDF most parsers accept
_PLACEHOLDER_PDF = b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF\n"


def _build_record(direction: Direction, attachment: bytes) -> FaxRecord:
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    if direction == Direction.SENT:
        to, from_, sender = OFFICE_FAX_NUMBER, "(207) 555 - 0100", SUPPLIER_NAME
    else:
        to, from_, sender = "(207) 555 - 0100", OFFICE_FAX_NUMBER, "JANE DOE, MD"
    return FaxRecord(
        direction=direction,
        to=to,
        from_=from_,
        subject=PRIOR_AUTH_SUBJECT,
        sender=sender,
        created_at=now,
        attachment=base64.b64encode(attachment).decode("ascii"),
        file_extension="pdf",
    )


def _print_response(response: httpx.Response) -> None:
    print(f"\n[{'OK' if response.is_success else 'FAIL'}] HTTP {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)


def main() -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Send a test batch to the fax ingestion endpoint.")
    parser.add_argument("--url", default=os.getenv("UPLOAD_ENDPOINT", DEFAULT_UPLOAD_ENDPOINT))
    parser.add_argument("--file", type=Path, help="PDF to attach (default: placeholder)")
    parser.add_argument(
        "--direction",
        default=Direction.SENT.value,
        choices=[d.value for d in Direction],
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the payload and exit")
    args = parser.parse_args()

    if args.file:
        if not args.file.exists():
            print(f"ERROR: file not found: {args.file}", file=sys.stderr)
            return 1
        attachment = args.file.read_bytes()
    else:
        attachment = _PLACEHOLDER_PDF

    record = _build_record(Direction(args.direction), attachment)
    payload = {"records": [record.to_payload()]}

    print(f"Endpoint  : {args.url}")
    print(f"Direction : {args.direction}")
    print(f"Attachment: {args.file or '<placeholder>'}")

    if args.dry_run:
        display = {"records": [
            {**r, "attachment": "<base64-encoded, %d bytes>" % len(attachment)}
            for r in payload["records"]
        ]}
        print("\n[DRY RUN] Payload:")
        print(json.dumps(display, indent=2))
        return 0

    try:
        response = httpx.post(args.url, json=payload, timeout=30)
        _print_response(response)
        return 0 if response.is_success else 1
    except httpx.ConnectError:
        print(f"\nERROR: Could not connect to {args.url}", file=sys.stderr)
        return 1
    except httpx.HTTPError as exc:
        print(f"\nERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
