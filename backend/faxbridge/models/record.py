"""
Pydantic model for fax records sent to the ingestion endpoint.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Direction(str, Enum):
    SENT = "Sent"
    RECEIVED = "Received"


class FaxRecord(BaseModel):
    """
    One fax document's metadata, in the shape the /upload_bulk endpoint expects.

    Python-side field names differ from the wire names where the wire name is
    a keyword or camelCase; always serialize with ``to_payload()``.
    """
    direction: Direction = Field(alias="type")
    to: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    subject: str
    sender: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")  # YYYY-MM-DD HH:MM:SS
    attachment: Optional[str] = None  # base64 of the source PDF
    file_extension: str = "pdf"

    class Config:
        populate_by_name = True

    def to_payload(self) -> dict:
        """Wire representation: {type, to, from, subject, sender, createdAt, attachment, file_extension}."""
        return self.model_dump(by_alias=True, mode="json")
