"""Case document models"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DocumentType(str, Enum):
    """Detected kind of an uploaded case document"""
    TRANSCRIPT = "transcript"
    PRIOR_TESTIMONY = "prior_testimony"
    EXHIBIT = "exhibit"
    CASE_FILE = "case_file"
    OTHER = "other"


class DocumentStatus(str, Enum):
    """Processing status of an uploaded document"""
    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


class Document(BaseModel):
    """An uploaded case document with its extracted text"""
    id: str
    name: str
    type: DocumentType = DocumentType.OTHER
    file_type: str = "text/plain"
    size: int = 0
    uploaded_at: datetime = Field(default_factory=datetime.now)
    content: Optional[str] = None
    status: DocumentStatus = DocumentStatus.PROCESSING
    page_count: int = 1
    error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status == DocumentStatus.READY


class UploadedFile(BaseModel):
    """Raw bytes of a file handed to the ingest pipeline"""
    name: str
    data: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)
