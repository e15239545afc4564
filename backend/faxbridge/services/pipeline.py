"""
One pipeline run: scan -> extract -> parse -> relocate -> upload.

Files are handled sequentially in name order. Per-file and per-batch errors
are contained and reported in the returned RunReport; only a failure to list
the incoming directory aborts the run (ScanError).
"""

import logging
import os
import random
from pathlib import Path
from typing import Callable, List, Optional

from faxbridge.config import PipelineConfig, ensure_directories
from faxbridge.exceptions import ExtractionError, ScanError
from faxbridge.models.outcome import FailureReason, FileStatus, RunReport
from faxbridge.models.profile import DirectionProfile
from faxbridge.models.record import FaxRecord
from faxbridge.services.extractor import encode_attachment, extract_text_from_pdf
from faxbridge.services.field_parser import parse_with_diagnostics
from faxbridge.services.lifecycle import LifecycleRouter
from faxbridge.services.uploader import BatchUploader

logger = logging.getLogger(__name__)


def scan_incoming(config: PipelineConfig) -> List[Path]:
    """
    List the documents waiting in the incoming directory, sorted by name.

    The extension match is case-sensitive ("fax.PDF" is not picked up);
    only count_documents ignores case.

    Raises ScanError if the directory cannot be read.
    """
    suffix = f".{config.file_extension}"
    incoming = Path(config.incoming_dir)
    try:
        names = sorted(os.listdir(incoming))
    except OSError as e:
        raise ScanError(f"Error reading incoming directory {incoming}: {e}") from e

    return [
        incoming / name
        for name in names
        if name.endswith(suffix) and (incoming / name).is_file()
    ]


def count_documents(directory: Path, extension: str) -> int:
    """Number of documents (any case of the extension) in a directory."""
    suffix = f".{extension}".lower()
    try:
        return sum(1 for name in os.listdir(directory) if name.lower().endswith(suffix))
    except OSError:
        return 0


def run_pipeline(
    config: PipelineConfig,
    profile: DirectionProfile,
    extractor: Callable[[str], str] = extract_text_from_pdf,
    uploader: Optional[BatchUploader] = None,
    rng: Optional[random.Random] = None,
) -> RunReport:
    """
    Process every incoming document once and upload the valid records.

    Args:
        config: Directories, endpoint and batch size
        profile: Which direction-specific heuristics to apply
        extractor: PDF path -> text; raises ExtractionError on failure
        uploader: Defaults to a BatchUploader built from config
        rng: Random source for synthesized times (tests pass a seeded one)

    Returns:
        RunReport with one FileOutcome per file and one BatchOutcome per batch

    Raises:
        ScanError: If the incoming directory cannot be listed
    """
    ensure_directories(config)
    router = LifecycleRouter(config)
    report = RunReport(profile=profile.name, direction=profile.direction.value)

    files = scan_incoming(config)
    logger.info("Found %d %s document(s) in %s", len(files), profile.name, config.incoming_dir)

    records: List[FaxRecord] = []
    for path in files:
        logger.info("Processing file: %s", path.name)

        try:
            text = extractor(str(path))
            record, missing = parse_with_diagnostics(text, profile, rng)
            if record is not None:
                record.attachment = encode_attachment(str(path))
                record.file_extension = config.file_extension
        except ExtractionError as e:
            logger.error("Failed to extract text from %s: %s", path.name, e)
            report.files.append(router.route(
                path, valid=False, reason=FailureReason.EXTRACTION_ERROR, error=str(e),
            ))
            continue

        if record is None:
            report.files.append(router.route(
                path, valid=False, reason=FailureReason.MISSING_FIELDS, missing_fields=missing,
            ))
            continue

        outcome = router.route(path, valid=True)
        report.files.append(outcome)
        if outcome.status == FileStatus.PROCESSED or not profile.upload_requires_relocation:
            records.append(record)

    if records:
        logger.info("Preparing to upload %d records...", len(records))
        uploader = uploader or BatchUploader(
            config.upload_endpoint,
            batch_size=config.batch_size,
            timeout=config.request_timeout,
        )
        report.batches = uploader.upload(records)
        report.records_uploaded = sum(b.size for b in report.batches if b.success)
    else:
        logger.info("No valid records found for upload.")

    if profile.sweep_leftovers:
        # A swept file's outcome replaces the one recorded earlier in the run
        swept = {o.filename: o for o in router.sweep_leftovers(scan_incoming(config))}
        report.files = [swept.pop(f.filename, f) for f in report.files]
        report.files.extend(swept.values())

    report.processed_total = count_documents(Path(config.processed_dir), config.file_extension)
    logger.info(
        "Run finished: %d processed, %d failed, %d pending, %d/%d batches failed. "
        "Total processed documents: %d",
        report.processed_count,
        report.failed_count,
        report.pending_count,
        report.failed_batches,
        len(report.batches),
        report.processed_total,
    )
    return report
