"""Request/response schemas for the prep API"""

from typing import List, Optional

from pydantic import BaseModel, Field

from testimony_prep.models.document import Document, DocumentType
from testimony_prep.models.question import CrossExamQuestion, DepositionQuestion
from testimony_prep.models.session import AnalysisSummary, Contradiction, TestimonyGap
from testimony_prep.services.analysis import PracticeFeedback


class DocumentPayload(BaseModel):
    """A document as sent by the client, text already extracted"""
    name: str
    content: Optional[str] = None
    type: Optional[DocumentType] = None

    def to_document(self, index: int) -> Document:
        return Document(
            id=f"doc-{index}",
            name=self.name,
            type=self.type or DocumentType.OTHER,
            content=self.content or "",
        )


class TextIngestRequest(BaseModel):
    text: Optional[str] = None
    page_count: Optional[int] = None
    file_name: Optional[str] = None


class TextIngestResponse(BaseModel):
    text: str
    page_count: int = 1
    status: str = "completed"
    file_name: Optional[str] = None
    document_type: DocumentType
    cost: float
    chars_processed: int


class TestimonyQuestionsRequest(BaseModel):
    witness_name: Optional[str] = None
    case_name: Optional[str] = None
    documents: List[DocumentPayload] = []


class TestimonyQuestionsResponse(BaseModel):
    questions: List[CrossExamQuestion]
    cost: float
    chars_processed: int
    used_fallback: bool


class QuestionDetails(BaseModel):
    suggested_approach: Optional[str] = None
    weak_point: Optional[str] = None
    document_reference: Optional[str] = None


class PracticeRequest(BaseModel):
    witness_name: Optional[str] = None
    case_name: Optional[str] = None
    documents: List[DocumentPayload] = []
    question_id: Optional[str] = None
    question: Optional[str] = None
    witness_response: Optional[str] = None
    duration: int = 0
    question_details: QuestionDetails = Field(default_factory=QuestionDetails)


class PracticeResponse(BaseModel):
    ai_response: PracticeFeedback
    cost: float
    chars_processed: int


class DepositionQuestionsRequest(BaseModel):
    deponent_name: Optional[str] = None
    case_name: Optional[str] = None
    documents: List[DocumentPayload] = []


class DepositionQuestionsResponse(BaseModel):
    gaps: List[TestimonyGap]
    contradictions: List[Contradiction]
    analysis: AnalysisSummary
    questions: List[DepositionQuestion]
    cost: float
    chars_processed: int
    used_fallback: bool


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    llm_configured: bool
