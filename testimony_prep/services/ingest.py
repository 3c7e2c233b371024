"""Document ingest: size/count checks, text extraction, classification"""

import io
import logging
import math
from typing import Iterable, List, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from testimony_prep.errors import ExtractionError, UnsupportedFileType
from testimony_prep.models.document import Document, DocumentStatus, UploadedFile
from testimony_prep.models.usage import LimitKind
from testimony_prep.services.classifier import classify
from testimony_prep.services.limits import LimitEvaluator
from testimony_prep.services.sessions import SessionStore
from testimony_prep.services.usage import UsageLedger

logger = logging.getLogger(__name__)

# Fewer characters than this from a PDF means it is scanned or image-only
MIN_PDF_TEXT_CHARS = 50
CHARS_PER_PAGE = 3000


class ExtractionResult(BaseModel):
    text: str
    page_count: int
    method: str  # 'pdf-text' | 'plain-text'


def _is_plain_text(filename: str, content_type: str) -> bool:
    return content_type == "text/plain" or filename.lower().endswith(".txt")


def _is_pdf(filename: str, content_type: str) -> bool:
    return content_type == "application/pdf" or filename.lower().endswith(".pdf")


def extract_pdf_text(data: bytes) -> Tuple[str, int]:
    """Pull selectable text out of a PDF, one block per page"""
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
    except (PdfReadError, ValueError, KeyError) as e:
        logger.error(f"PDF extraction error: {e}")
        raise ExtractionError(
            "Failed to extract text from PDF. Please ensure the file is a valid PDF "
            "with selectable text, or upload a text file instead."
        ) from e
    return "\n\n".join(p for p in pages if p), len(pages)


def extract_text(filename: str, data: bytes, content_type: str = "") -> ExtractionResult:
    """Extract text from a plain text or PDF upload"""
    logger.info(f"Processing {filename} ({content_type or 'unknown type'})")

    if _is_plain_text(filename, content_type):
        text = data.decode("utf-8", errors="replace")
        return ExtractionResult(
            text=text,
            page_count=max(1, math.ceil(len(text) / CHARS_PER_PAGE)),
            method="plain-text",
        )

    if _is_pdf(filename, content_type):
        text, page_count = extract_pdf_text(data)
        if len(text.strip()) < MIN_PDF_TEXT_CHARS and page_count > 0:
            logger.info(f"{filename} appears to be scanned or image-based")
            raise ExtractionError(
                "This PDF appears to be a scanned document or image-based. Please upload "
                "a PDF with selectable text, or use a text file (.txt)."
            )
        logger.info(f"Extracted {len(text)} chars from {page_count} pages")
        return ExtractionResult(text=text, page_count=page_count, method="pdf-text")

    raise UnsupportedFileType(
        f"Unsupported file type: {content_type or filename}. Only PDF and text files are supported."
    )


class Rejection(BaseModel):
    """A file that was not accepted, and why"""
    file_name: str
    kind: Optional[LimitKind] = None
    message: str


class IngestReport(BaseModel):
    """Outcome of ingesting a batch of files"""
    added: List[Document] = []
    rejected: List[Rejection] = []
    errors: List[Rejection] = []

    @property
    def limit_kind(self) -> Optional[LimitKind]:
        """The document limit if it stopped the batch"""
        for rejection in self.rejected:
            if rejection.kind == LimitKind.DOCUMENTS:
                return rejection.kind
        return None


class DocumentIngestPipeline:
    """Adds uploaded files to a session one at a time.

    Files are handled strictly in order so that the document-count limit is
    checked against an up-to-date ledger before each file.
    """

    def __init__(self, sessions: SessionStore, ledger: UsageLedger, evaluator: LimitEvaluator):
        self.sessions = sessions
        self.ledger = ledger
        self.evaluator = evaluator

    def ingest(self, session_id: str, files: Iterable[UploadedFile]) -> IngestReport:
        report = IngestReport()

        for file in files:
            check = self.evaluator.evaluate(file_size=file.size, documents=1)
            if not check.allowed:
                report.rejected.append(
                    Rejection(file_name=file.name, kind=check.kind, message=f'"{file.name}": {check.reason}')
                )
                if check.kind == LimitKind.DOCUMENTS:
                    break
                continue

            document = Document(
                id=str(uuid4()),
                name=file.name,
                file_type=file.content_type or "text/plain",
                size=file.size,
                status=DocumentStatus.PROCESSING,
            )
            if self.sessions.add_document(session_id, document) is None:
                logger.warning(f"Session {session_id} not found, dropping {file.name}")
                break

            try:
                result = extract_text(file.name, file.data, file.content_type)
            except ExtractionError as e:
                logger.error(f"Error processing document {file.name}: {e}")
                self.sessions.update_document(
                    session_id, document.id, status=DocumentStatus.ERROR, error=str(e)
                )
                report.errors.append(Rejection(file_name=file.name, message=f"{file.name}: {e}"))
                continue

            updated = self.sessions.update_document(
                session_id,
                document.id,
                content=result.text,
                type=classify(file.name, result.text),
                status=DocumentStatus.READY,
                page_count=result.page_count,
            )
            self.ledger.record_document()
            self.ledger.record_cost(self.ledger.calculate_cost(len(result.text)))

            if updated:
                report.added.append(next(d for d in updated.documents if d.id == document.id))

        self._update_storage(session_id)
        return report

    def _update_storage(self, session_id: str) -> None:
        session = self.sessions.get(session_id)
        if session:
            self.ledger.update_total_storage(sum(d.size for d in session.documents))
