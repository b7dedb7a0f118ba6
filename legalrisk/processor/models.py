from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DocumentStatus(str, Enum):
    """Document lifecycle. COMPLETED and FAILED are terminal."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Document:
    """Domain model for an uploaded document."""

    id: int
    owner_id: int
    original_filename: str
    storage_filename: str
    mime_type: str
    size_bytes: int
    status: DocumentStatus = DocumentStatus.PENDING
    created_at: datetime | None = None
