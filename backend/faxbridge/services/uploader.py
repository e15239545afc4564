"""
Batch upload to the fax ingestion endpoint.

Fire-and-forget: every batch is POSTed exactly once, failures are logged and
reported, and never stop the remaining batches.
"""

import logging
import math
from typing import List, Optional, Sequence

import httpx

from faxbridge.config import DEFAULT_BATCH_SIZE
from faxbridge.exceptions import UploadError
from faxbridge.models.outcome import BatchOutcome
from faxbridge.models.record import FaxRecord

logger = logging.getLogger(__name__)


def partition(records: Sequence[FaxRecord], batch_size: int) -> List[List[FaxRecord]]:
    """Split records into consecutive, order-preserving batches of at most batch_size."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    return [list(records[i:i + batch_size]) for i in range(0, len(records), batch_size)]


class BatchUploader:
    """POSTs {"records": [...]} to the ingestion endpoint, one request per batch."""

    def __init__(
        self,
        endpoint: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.endpoint = endpoint
        self.batch_size = batch_size
        self.timeout = timeout
        self._client = client

    def _post_batch(self, client: httpx.Client, batch: List[FaxRecord]) -> int:
        """Send one batch; returns the status code or raises UploadError."""
        try:
            response = client.post(
                self.endpoint,
                json={"records": [record.to_payload() for record in batch]},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise UploadError(f"Error uploading batch: {e}") from e

        if not response.is_success:
            detail = response.text or response.reason_phrase
            raise UploadError(f"Error response: {detail}", status_code=response.status_code)

        logger.debug("Response: %s", response.text)
        return response.status_code

    def upload(self, records: Sequence[FaxRecord]) -> List[BatchOutcome]:
        """Submit every batch once and return one outcome per batch, in order."""
        batches = partition(records, self.batch_size)
        total = math.ceil(len(records) / self.batch_size)
        outcomes: List[BatchOutcome] = []

        client = self._client or httpx.Client()
        try:
            for index, batch in enumerate(batches, start=1):
                logger.info("Uploading batch %d of %d (%d records)...", index, total, len(batch))
                try:
                    status_code = self._post_batch(client, batch)
                except UploadError as e:
                    logger.error("Batch %d failed: %s", index, e)
                    outcomes.append(BatchOutcome(
                        index=index, size=len(batch), success=False,
                        status_code=e.status_code, error=str(e),
                    ))
                    continue

                logger.info("Batch %d uploaded successfully (HTTP %d)", index, status_code)
                outcomes.append(BatchOutcome(
                    index=index, size=len(batch), success=True, status_code=status_code,
                ))
        finally:
            if self._client is None:
                client.close()

        return outcomes
