"""Data models"""

from testimony_prep.models.document import (
    DocumentType,
    DocumentStatus,
    Document,
    UploadedFile,
)
from testimony_prep.models.question import (
    TestimonyCategory,
    Difficulty,
    DepositionCategory,
    Priority,
    CrossExamQuestion,
    DepositionQuestion,
)
from testimony_prep.models.session import (
    SessionKind,
    Severity,
    TestimonyGap,
    Contradiction,
    ContradictionSource,
    TimelineEvent,
    AnalysisSummary,
    OutlineSection,
    Outline,
    PracticeExchange,
    TestimonySession,
    DepositionSession,
    Session,
)
from testimony_prep.models.usage import (
    LimitKind,
    SessionStats,
    LimitCheckResult,
    UsageStats,
)

__all__ = [
    "DocumentType",
    "DocumentStatus",
    "Document",
    "UploadedFile",
    "TestimonyCategory",
    "Difficulty",
    "DepositionCategory",
    "Priority",
    "CrossExamQuestion",
    "DepositionQuestion",
    "SessionKind",
    "Severity",
    "TestimonyGap",
    "Contradiction",
    "ContradictionSource",
    "TimelineEvent",
    "AnalysisSummary",
    "OutlineSection",
    "Outline",
    "PracticeExchange",
    "TestimonySession",
    "DepositionSession",
    "Session",
    "LimitKind",
    "SessionStats",
    "LimitCheckResult",
    "UsageStats",
]
