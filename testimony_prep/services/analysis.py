"""Remote analysis: question generation, deposition analysis and practice feedback.

Every call degrades to deterministic local content when the completion endpoint
fails or returns something that cannot be decoded, so callers always receive a
usable result. The ``used_fallback`` flag tells them which path was taken.
"""

import logging
from typing import Any, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from testimony_prep.errors import LLMError
from testimony_prep.models.document import Document
from testimony_prep.models.question import (
    CrossExamQuestion,
    DepositionCategory,
    DepositionQuestion,
    Difficulty,
    Priority,
    TestimonyCategory,
)
from testimony_prep.models.session import (
    AnalysisSummary,
    Contradiction,
    ContradictionSource,
    Severity,
    TestimonyGap,
    TimelineEvent,
)
from testimony_prep.services import prompts
from testimony_prep.services.fallback import canned_deposition_analysis, canned_testimony_questions
from testimony_prep.services.usage import calculate_cost
from testimony_prep.utils.config import Settings
from testimony_prep.utils.json_parse import best_effort_decode
from testimony_prep.utils.llm import CompletionClient, extract_content

logger = logging.getLogger(__name__)

MAX_TESTIMONY_QUESTIONS = 20
PRACTICE_MAX_TOKENS = 1000
DEFAULT_FOLLOW_UP = "Can you elaborate on that answer?"
DEFAULT_FEEDBACK = "Your response was received. Consider being more specific in your answers."


class QuestionResult(BaseModel):
    questions: List[CrossExamQuestion]
    cost: float = 0.0
    chars_processed: int = 0
    used_fallback: bool = False


class DepositionAnalysisResult(BaseModel):
    gaps: List[TestimonyGap] = []
    contradictions: List[Contradiction] = []
    analysis: AnalysisSummary = Field(default_factory=AnalysisSummary)
    questions: List[DepositionQuestion] = []
    cost: float = 0.0
    chars_processed: int = 0
    used_fallback: bool = False


class PracticeFeedback(BaseModel):
    follow_up: str = DEFAULT_FOLLOW_UP
    feedback: str = DEFAULT_FEEDBACK
    weakness_identified: str = ""
    suggested_improvement: str = ""


class PracticeResult(BaseModel):
    feedback: PracticeFeedback
    cost: float = 0.0
    chars_processed: int = 0
    used_fallback: bool = False


def _enum_or(enum_cls, value: Any, default):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return default


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def _text(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


def parse_cross_exam_question(item: dict) -> Optional[CrossExamQuestion]:
    """Build a question from one decoded array element; None if it has no text"""
    if not isinstance(item, dict) or not item.get("question"):
        return None
    return CrossExamQuestion(
        id=str(item.get("id") or uuid4()),
        question=str(item["question"]),
        category=_enum_or(TestimonyCategory, item.get("category"), TestimonyCategory.GENERAL),
        difficulty=_enum_or(Difficulty, item.get("difficulty"), Difficulty.MEDIUM),
        suggested_approach=_text(item.get("suggestedApproach")),
        weak_point=_text(item.get("weakPoint")),
        follow_up_questions=_str_list(item.get("followUpQuestions")),
        document_reference=_text(item.get("documentReference")),
    )


def parse_deposition_question(item: dict) -> Optional[DepositionQuestion]:
    if not isinstance(item, dict) or not item.get("question"):
        return None
    return DepositionQuestion(
        id=str(item.get("id") or uuid4()),
        question=str(item["question"]),
        topic=str(item.get("topic") or "General"),
        category=_enum_or(DepositionCategory, item.get("category"), DepositionCategory.GENERAL),
        priority=_enum_or(Priority, item.get("priority"), Priority.MEDIUM),
        document_reference=_text(item.get("documentReference")),
        rationale=_text(item.get("rationale")),
        follow_up_questions=_str_list(item.get("followUpQuestions")),
    )


def _parse_gap(item: dict) -> Optional[TestimonyGap]:
    if not isinstance(item, dict) or not item.get("description"):
        return None
    return TestimonyGap(
        id=str(item.get("id") or uuid4()),
        description=str(item["description"]),
        document_references=_str_list(item.get("documentReferences")),
        severity=_enum_or(Severity, item.get("severity"), Severity.MODERATE),
        suggested_questions=_str_list(item.get("suggestedQuestions")),
    )


def _parse_source(value: Any) -> ContradictionSource:
    if not isinstance(value, dict):
        return ContradictionSource()
    return ContradictionSource(
        document=str(value.get("document") or ""),
        excerpt=str(value.get("excerpt") or ""),
    )


def _parse_contradiction(item: dict) -> Optional[Contradiction]:
    if not isinstance(item, dict) or not item.get("description"):
        return None
    return Contradiction(
        id=str(item.get("id") or uuid4()),
        description=str(item["description"]),
        source1=_parse_source(item.get("source1")),
        source2=_parse_source(item.get("source2")),
        severity=_enum_or(Severity, item.get("severity"), Severity.MODERATE),
        suggested_questions=_str_list(item.get("suggestedQuestions")),
    )


def _parse_summary(value: Any) -> AnalysisSummary:
    if not isinstance(value, dict):
        return AnalysisSummary()
    events = []
    for event in value.get("timelineEvents") or []:
        if isinstance(event, dict) and event.get("event"):
            events.append(TimelineEvent(
                date=str(event.get("date") or ""),
                event=str(event["event"]),
                source=str(event.get("source") or ""),
            ))
    return AnalysisSummary(
        key_themes=_str_list(value.get("keyThemes")),
        timeline_events=events,
        witnesses=_str_list(value.get("witnesses")),
        key_exhibits=_str_list(value.get("keyExhibits")),
    )


def _collect(items: Any, parser) -> list:
    if not isinstance(items, list):
        return []
    return [parsed for parsed in (parser(item) for item in items) if parsed is not None]


class AnalysisClient:
    """Generates questions and feedback through the completion endpoint"""

    def __init__(self, client: CompletionClient, settings: Settings):
        self.client = client
        self.settings = settings

    def _cost(self, *parts: str) -> tuple[float, int]:
        chars = sum(len(p) for p in parts)
        return calculate_cost(chars, self.settings.demo_price_per_thousand_chars), chars

    async def _complete(self, system: str, user: str, max_tokens: Optional[int] = None) -> str:
        response = await self.client.chat_completion(
            [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            max_tokens=max_tokens,
        )
        return extract_content(response)

    async def generate_testimony_questions(
        self, witness_name: str, case_name: str, documents: List[Document]
    ) -> QuestionResult:
        """Up to 20 cross-examination questions for the witness"""
        system = prompts.testimony_system_prompt(witness_name)
        user = prompts.testimony_user_prompt(witness_name, case_name, documents)

        try:
            content = await self._complete(system, user)
        except LLMError as e:
            logger.error(f"Question generation failed, using fallback: {e}")
            return QuestionResult(questions=canned_testimony_questions(documents), used_fallback=True)

        cost, chars = self._cost(system, user, content)
        decoded = best_effort_decode(content, expect=list)
        questions = _collect(decoded, parse_cross_exam_question)[:MAX_TESTIMONY_QUESTIONS]

        if not questions:
            logger.warning("No usable questions in LLM output, using fallback")
            return QuestionResult(
                questions=canned_testimony_questions(documents),
                cost=cost,
                chars_processed=chars,
                used_fallback=True,
            )

        logger.info(f"Generated {len(questions)} questions for {witness_name} ({chars} chars)")
        return QuestionResult(questions=questions, cost=cost, chars_processed=chars)

    async def generate_deposition_analysis(
        self, deponent_name: str, case_name: str, documents: List[Document]
    ) -> DepositionAnalysisResult:
        """Gaps, contradictions, a summary and strategic questions for the deponent"""
        system = prompts.deposition_system_prompt(deponent_name)
        user = prompts.deposition_user_prompt(deponent_name, case_name, documents)

        try:
            content = await self._complete(system, user)
        except LLMError as e:
            logger.error(f"Deposition analysis failed, using fallback: {e}")
            return DepositionAnalysisResult(**canned_deposition_analysis(documents), used_fallback=True)

        cost, chars = self._cost(system, user, content)
        decoded = best_effort_decode(content, expect=dict)

        if decoded is None:
            logger.warning("Deposition analysis output unparsable, using fallback")
            return DepositionAnalysisResult(
                **canned_deposition_analysis(documents),
                cost=cost,
                chars_processed=chars,
                used_fallback=True,
            )

        result = DepositionAnalysisResult(
            gaps=_collect(decoded.get("gaps"), _parse_gap),
            contradictions=_collect(decoded.get("contradictions"), _parse_contradiction),
            analysis=_parse_summary(decoded.get("analysis")),
            questions=_collect(decoded.get("questions"), parse_deposition_question),
            cost=cost,
            chars_processed=chars,
        )
        logger.info(
            f"Deposition analysis for {deponent_name}: {len(result.questions)} questions, "
            f"{len(result.gaps)} gaps, {len(result.contradictions)} contradictions"
        )
        return result

    async def evaluate_practice_response(
        self,
        witness_name: str,
        case_name: str,
        documents: List[Document],
        question: str,
        witness_response: str,
        suggested_approach: str = "",
        weak_point: str = "",
        document_reference: str = "",
    ) -> PracticeResult:
        """Examiner follow-up and feedback for one practice answer"""
        system = prompts.PRACTICE_SYSTEM_PROMPT
        user = prompts.practice_user_prompt(
            witness_name,
            case_name,
            documents,
            question,
            witness_response,
            suggested_approach=suggested_approach,
            weak_point=weak_point,
            document_reference=document_reference,
        )

        try:
            content = await self._complete(system, user, max_tokens=PRACTICE_MAX_TOKENS)
        except LLMError as e:
            logger.error(f"Practice evaluation failed, using default feedback: {e}")
            return PracticeResult(feedback=PracticeFeedback(), used_fallback=True)

        cost, chars = self._cost(system, user, content)
        if not content:
            return PracticeResult(feedback=PracticeFeedback(), cost=cost, chars_processed=chars, used_fallback=True)

        decoded = best_effort_decode(content, expect=dict)
        if decoded is None:
            feedback = PracticeFeedback(feedback=content)
        else:
            feedback = PracticeFeedback(
                follow_up=str(decoded.get("followUp") or DEFAULT_FOLLOW_UP),
                feedback=str(decoded.get("feedback") or DEFAULT_FEEDBACK),
                weakness_identified=str(decoded.get("weaknessIdentified") or ""),
                suggested_improvement=str(decoded.get("suggestedImprovement") or ""),
            )
        return PracticeResult(feedback=feedback, cost=cost, chars_processed=chars)
