"""Prep session models for testimony practice and deposition prep"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from testimony_prep.models.document import Document, DocumentStatus
from testimony_prep.models.question import CrossExamQuestion, DepositionQuestion


class SessionKind(str, Enum):
    """Which wizard flow a session belongs to"""
    TESTIMONY = "testimony"
    DEPOSITION = "deposition"


class Severity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"


class TestimonyGap(BaseModel):
    """Missing or incomplete information found across the documents"""
    id: str
    description: str
    document_references: List[str] = []
    severity: Severity = Severity.MODERATE
    suggested_questions: List[str] = []


class ContradictionSource(BaseModel):
    document: str = ""
    excerpt: str = ""


class Contradiction(BaseModel):
    """Two document passages that disagree"""
    id: str
    description: str
    source1: ContradictionSource = Field(default_factory=ContradictionSource)
    source2: ContradictionSource = Field(default_factory=ContradictionSource)
    severity: Severity = Severity.MODERATE
    suggested_questions: List[str] = []


class TimelineEvent(BaseModel):
    date: str
    event: str
    source: str = ""


class AnalysisSummary(BaseModel):
    """Themes, timeline and people extracted from the documents"""
    key_themes: List[str] = []
    timeline_events: List[TimelineEvent] = []
    witnesses: List[str] = []
    key_exhibits: List[str] = []


class OutlineSection(BaseModel):
    id: str
    title: str
    order: int
    questions: List[DepositionQuestion] = []
    estimated_time: int = 0  # minutes


class Outline(BaseModel):
    id: str
    title: str
    sections: List[OutlineSection] = []
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class PracticeExchange(BaseModel):
    """One answered practice question with the examiner's reaction"""
    id: str
    question_id: str
    question: str
    witness_response: str
    ai_follow_up: Optional[str] = None
    feedback: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)
    duration: int = 0  # seconds


class PrepSession(BaseModel):
    """Fields shared by both session shapes"""
    id: str
    subject_name: str
    case_name: str
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    documents: List[Document] = []

    def ready_documents(self) -> List[Document]:
        return [d for d in self.documents if d.status == DocumentStatus.READY]


class TestimonySession(PrepSession):
    """Witness testimony practice session"""
    kind: Literal["testimony"] = "testimony"
    questions: List[CrossExamQuestion] = []
    practice_exchanges: List[PracticeExchange] = []

    @property
    def witness_name(self) -> str:
        return self.subject_name


class DepositionSession(PrepSession):
    """Deposition prep session"""
    kind: Literal["deposition"] = "deposition"
    case_number: Optional[str] = None
    questions: List[DepositionQuestion] = []
    gaps: List[TestimonyGap] = []
    contradictions: List[Contradiction] = []
    analysis: Optional[AnalysisSummary] = None
    outline: Optional[Outline] = None

    @property
    def deponent_name(self) -> str:
        return self.subject_name

    @property
    def has_analysis(self) -> bool:
        return bool(self.gaps or self.contradictions) or self.analysis is not None


Session = Annotated[Union[TestimonySession, DepositionSession], Field(discriminator="kind")]
