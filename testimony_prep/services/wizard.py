"""Step-by-step wizard driving the testimony and deposition flows.

The controller holds only transient UI state (current step, practice position,
limit flag, notices). Everything durable lives in the session store, and step
accessibility is recomputed from the stored session on every call.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional
from uuid import uuid4

from pydantic import BaseModel

from testimony_prep.errors import LimitReachedError, StepNotAccessible, ValidationFailed
from testimony_prep.models.document import UploadedFile
from testimony_prep.models.question import CrossExamQuestion
from testimony_prep.models.session import (
    DepositionSession,
    PracticeExchange,
    Session,
    SessionKind,
    TestimonySession,
)
from testimony_prep.models.usage import LimitCheckResult, LimitKind
from testimony_prep.services import prompts
from testimony_prep.services.analysis import PracticeFeedback
from testimony_prep.services.context import PrepContext
from testimony_prep.services.ingest import IngestReport
from testimony_prep.services.outline import build_outline

logger = logging.getLogger(__name__)

TESTIMONY_STEPS = ["setup", "documents", "questions", "practice", "review"]
DEPOSITION_STEPS = ["setup", "documents", "analysis", "questions", "outline"]


class Notice(BaseModel):
    """A transient message that dismisses itself after a few seconds"""
    id: str
    message: str
    level: str = "error"
    created_at: datetime
    expires_at: datetime


class WizardController:
    """Drives one flow (testimony or deposition) over a stored session"""

    def __init__(
        self,
        context: PrepContext,
        kind: SessionKind = SessionKind.TESTIMONY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.context = context
        self.kind = SessionKind(kind)
        self.clock = clock

        self.step = "setup"
        self.session_id: Optional[str] = None
        self.question_index = 0
        self.last_feedback: Optional[PracticeFeedback] = None
        self.limit_reached: Optional[LimitKind] = None
        self.limit_result: Optional[LimitCheckResult] = None
        self.notices: List[Notice] = []
        self._question_started_at: Optional[datetime] = None

    @property
    def steps(self) -> List[str]:
        return TESTIMONY_STEPS if self.kind == SessionKind.TESTIMONY else DEPOSITION_STEPS

    @property
    def session(self) -> Optional[Session]:
        if not self.session_id:
            return None
        return self.context.sessions.get(self.session_id)

    def _require_session(self) -> Session:
        session = self.session
        if session is None:
            raise ValidationFailed("No active session. Create or resume a session first.")
        return session

    # Notices

    def notify(self, message: str, level: str = "error") -> Notice:
        now = self.clock()
        notice = Notice(
            id=str(uuid4()),
            message=message,
            level=level,
            created_at=now,
            expires_at=now + timedelta(seconds=self.context.settings.error_banner_seconds),
        )
        self.notices.append(notice)
        return notice

    def active_notices(self) -> List[Notice]:
        now = self.clock()
        self.notices = [n for n in self.notices if n.expires_at > now]
        return list(self.notices)

    # Limits

    def _guard(self) -> None:
        if self.limit_reached:
            raise LimitReachedError(self.limit_result or LimitCheckResult(allowed=False, kind=self.limit_reached))

    def _hit_limit(self, result: LimitCheckResult) -> None:
        self.limit_reached = result.kind
        self.limit_result = result
        logger.info(f"Wizard blocked by {result.kind.value}: {result.reason}")

    def acknowledge_limit(self) -> None:
        self.limit_reached = None
        self.limit_result = None

    # Steps

    def create_session(self, subject_name: str, case_name: str, case_number: Optional[str] = None) -> Session:
        self._guard()
        subject_name = (subject_name or "").strip()
        case_name = (case_name or "").strip()
        if not subject_name or not case_name:
            raise ValidationFailed("Please enter both the witness name and case name")

        session = self.context.sessions.create(
            subject_name,
            case_name,
            kind=self.kind,
            case_number=(case_number or "").strip() or None,
        )
        self.context.sessions.set_current(self.kind, session.id)
        self.session_id = session.id
        self.step = "documents"
        return session

    def upload_files(self, files: Iterable[UploadedFile]) -> IngestReport:
        self._guard()
        session = self._require_session()

        report = self.context.ingest.ingest(session.id, files)
        for rejection in report.rejected:
            self.notify(rejection.message)
        for error in report.errors:
            self.notify(f"Failed to upload {error.file_name}")

        if report.limit_kind == LimitKind.DOCUMENTS:
            self._hit_limit(self.context.evaluator.check_documents(1))
        return report

    async def generate(self) -> Session:
        """Run question generation (testimony) or analysis (deposition)"""
        self._guard()
        session = self._require_session()
        documents = session.ready_documents()
        if not documents:
            raise ValidationFailed("Upload at least one document before generating questions")

        estimate = self.context.ledger.calculate_cost(sum(len(d.content or "") for d in documents))
        check = self.context.evaluator.evaluate(cost=estimate)
        if not check.allowed:
            self._hit_limit(check)
            raise LimitReachedError(check)

        analysis = self.context.analysis
        sessions = self.context.sessions

        if isinstance(session, TestimonySession):
            result = await analysis.generate_testimony_questions(
                session.witness_name, session.case_name, documents
            )
            self.context.ledger.record_cost(result.cost)
            updated = sessions.set_questions(session.id, result.questions)
            next_step = "questions"
        else:
            result = await analysis.generate_deposition_analysis(
                session.deponent_name, session.case_name, documents
            )
            self.context.ledger.record_cost(result.cost)
            sessions.set_questions(session.id, result.questions)
            updated = sessions.set_analysis(session.id, result.gaps, result.contradictions, result.analysis)
            next_step = "analysis"

        if result.used_fallback:
            self.notify("Generated questions from local templates; the analysis service was unavailable", "info")
        self.step = next_step
        return updated

    def build_outline(self) -> DepositionSession:
        self._guard()
        session = self._require_session()
        if not isinstance(session, DepositionSession):
            raise ValidationFailed("Outlines are only available for deposition sessions")
        if not session.questions:
            raise ValidationFailed("Generate questions before building an outline")

        updated = self.context.sessions.set_outline(session.id, build_outline(session))
        self.step = "outline"
        return updated

    def start_practice(self) -> CrossExamQuestion:
        self._guard()
        session = self._require_session()
        if not isinstance(session, TestimonySession):
            raise ValidationFailed("Practice is only available for testimony sessions")
        if not session.questions:
            raise ValidationFailed("Generate questions before starting practice")

        self.step = "practice"
        self.question_index = 0
        self.last_feedback = None
        self._question_started_at = self.clock()
        return session.questions[0]

    def current_question(self) -> Optional[CrossExamQuestion]:
        session = self.session
        if not isinstance(session, TestimonySession):
            return None
        if 0 <= self.question_index < len(session.questions):
            return session.questions[self.question_index]
        return None

    async def submit_response(self, text: str) -> PracticeFeedback:
        """Send a practice answer to the examiner and record the exchange"""
        self._guard()
        session = self._require_session()
        question = self.current_question()
        if question is None or self.step != "practice":
            raise ValidationFailed("Start practice before submitting a response")
        if not (text or "").strip():
            raise ValidationFailed("Enter a response before submitting")

        documents = session.ready_documents()
        estimate_chars = len(prompts.PRACTICE_SYSTEM_PROMPT) + len(
            prompts.practice_user_prompt(session.witness_name, session.case_name, documents, question.question, text)
        )
        check = self.context.evaluator.evaluate(cost=self.context.ledger.calculate_cost(estimate_chars))
        if not check.allowed:
            self._hit_limit(check)
            raise LimitReachedError(check)

        duration = 0
        if self._question_started_at:
            duration = int((self.clock() - self._question_started_at).total_seconds())

        result = await self.context.analysis.evaluate_practice_response(
            session.witness_name,
            session.case_name,
            documents,
            question.question,
            text,
            suggested_approach=question.suggested_approach or "",
            weak_point=question.weak_point or "",
            document_reference=question.document_reference or "",
        )
        self.context.ledger.record_cost(result.cost)

        self.context.sessions.add_practice_exchange(
            session.id,
            PracticeExchange(
                id=str(uuid4()),
                question_id=question.id,
                question=question.question,
                witness_response=text,
                ai_follow_up=result.feedback.follow_up,
                feedback=result.feedback.feedback,
                duration=duration,
            ),
        )
        if result.used_fallback:
            self.notify("Failed to analyze response. Showing default feedback.")
        self.last_feedback = result.feedback
        return result.feedback

    def next_question(self) -> Optional[CrossExamQuestion]:
        """Advance to the next question, or to review after the last one"""
        self._guard()
        session = self._require_session()
        self.last_feedback = None
        if self.question_index < len(session.questions) - 1:
            self.question_index += 1
            self._question_started_at = self.clock()
            return session.questions[self.question_index]
        self.step = "review"
        return None

    # Navigation

    def _has_step_data(self, step: str, session: Optional[Session]) -> bool:
        if session is None:
            return False
        if step == "questions":
            return bool(session.questions)
        if step == "analysis":
            return isinstance(session, DepositionSession) and session.has_analysis
        if step == "outline":
            return isinstance(session, DepositionSession) and session.outline is not None
        return False

    def can_access(self, step: str) -> bool:
        if step not in self.steps:
            return False
        if self.steps.index(step) <= self.steps.index(self.step):
            return True
        return self._has_step_data(step, self.session)

    def navigate(self, step: str) -> str:
        self._guard()
        if not self.can_access(step):
            raise StepNotAccessible(f"Step '{step}' is not available yet")
        self.step = step
        return step

    def reset(self) -> None:
        """Discard the current session and return to setup; usage is kept"""
        if self.session_id:
            self.context.sessions.delete(self.session_id)
        self.context.sessions.clear_current(self.kind)
        self.session_id = None
        self.step = "setup"
        self.question_index = 0
        self.last_feedback = None
        self.notices = []
        self.acknowledge_limit()

    def resume(self, session_id: Optional[str] = None) -> Optional[Session]:
        """Restore a saved session and pick the step its contents imply"""
        if session_id:
            session = self.context.sessions.get(session_id)
        else:
            session = self.context.sessions.get_current(self.kind)
        if session is None or session.kind != self.kind.value:
            return None

        self.session_id = session.id
        self.context.sessions.set_current(self.kind, session.id)
        if isinstance(session, DepositionSession) and session.outline:
            self.step = "outline"
        elif session.questions:
            self.step = "questions"
        elif session.documents:
            self.step = "documents"
        else:
            self.step = "setup"
        return session
