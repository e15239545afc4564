"""
Structured per-file and per-batch outcomes of a pipeline run.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field


class FileStatus(str, Enum):
    PROCESSED = "processed"
    FAILED = "failed"
    # Relocation failed; the file is still in the incoming directory
    PENDING = "pending"


class FailureReason(str, Enum):
    EXTRACTION_ERROR = "extraction_error"
    MISSING_FIELDS = "missing_fields"
    LEFTOVER = "leftover"


class FileOutcome(BaseModel):
    """Terminal outcome of one input file."""
    filename: str
    status: FileStatus
    reason: Optional[FailureReason] = None
    missing_fields: List[str] = Field(default_factory=list)
    error: Optional[str] = None


class BatchOutcome(BaseModel):
    """Result of submitting one batch to the ingestion endpoint."""
    index: int  # 1-based
    size: int
    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


class RunReport(BaseModel):
    """Everything a run did, returned by the pipeline and the API."""
    profile: str
    direction: str
    files: List[FileOutcome] = Field(default_factory=list)
    batches: List[BatchOutcome] = Field(default_factory=list)
    records_uploaded: int = 0
    processed_total: int = 0  # documents in the processed directory after the run

    @computed_field  # type: ignore[misc]
    @property
    def processed_count(self) -> int:
        return sum(1 for f in self.files if f.status == FileStatus.PROCESSED)

    @computed_field  # type: ignore[misc]
    @property
    def failed_count(self) -> int:
        return sum(1 for f in self.files if f.status == FileStatus.FAILED)

    @computed_field  # type: ignore[misc]
    @property
    def pending_count(self) -> int:
        return sum(1 for f in self.files if f.status == FileStatus.PENDING)

    @computed_field  # type: ignore[misc]
    @property
    def failed_batches(self) -> int:
        return sum(1 for b in self.batches if not b.success)
