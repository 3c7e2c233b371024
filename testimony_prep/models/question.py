"""Generated question models"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class TestimonyCategory(str, Enum):
    """Cross-examination question categories"""
    TIMELINE = "timeline"
    CREDIBILITY = "credibility"
    INCONSISTENCY = "inconsistency"
    FOUNDATION = "foundation"
    IMPEACHMENT = "impeachment"
    GENERAL = "general"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class DepositionCategory(str, Enum):
    """Deposition question categories"""
    GAP = "gap"
    CONTRADICTION = "contradiction"
    TIMELINE = "timeline"
    FOUNDATION = "foundation"
    IMPEACHMENT = "impeachment"
    FOLLOW_UP = "follow_up"
    GENERAL = "general"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class CrossExamQuestion(BaseModel):
    """A likely cross-examination question for a testifying witness"""
    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    category: TestimonyCategory = TestimonyCategory.GENERAL
    difficulty: Difficulty = Difficulty.MEDIUM
    suggested_approach: Optional[str] = None
    weak_point: Optional[str] = None
    follow_up_questions: Optional[List[str]] = None
    document_reference: Optional[str] = None


class DepositionQuestion(BaseModel):
    """A strategic question to put to a deponent"""
    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    topic: str = "General"
    category: DepositionCategory = DepositionCategory.GENERAL
    priority: Priority = Priority.MEDIUM
    document_reference: Optional[str] = None
    rationale: Optional[str] = None
    follow_up_questions: Optional[List[str]] = None
