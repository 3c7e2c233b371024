"""Tests for the wizard controller"""

import asyncio
import json

import pytest

from testimony_prep.errors import LimitReachedError, LLMError, StepNotAccessible, ValidationFailed
from testimony_prep.models.document import UploadedFile
from testimony_prep.models.session import SessionKind
from testimony_prep.models.usage import LimitKind
from testimony_prep.services.wizard import DEPOSITION_STEPS, TESTIMONY_STEPS, WizardController

from conftest import FakeCompletionClient

STATEMENT = "I was sworn in on March 3, 2023. John Smith handed me the contract at the office."

QUESTIONS_JSON = json.dumps([
    {"question": "When did you first see the contract?", "category": "timeline", "difficulty": "easy"},
    {"question": "Who else was present?", "category": "foundation", "difficulty": "medium"},
])

ANALYSIS_JSON = json.dumps({
    "gaps": [{"description": "Nothing about March 4"}],
    "contradictions": [],
    "analysis": {"keyThemes": ["Contract"]},
    "questions": [
        {"question": "Describe the office.", "topic": "General", "priority": "low"},
        {"question": "Who is John Smith?", "topic": "Foundation", "priority": "high"},
    ],
})

FEEDBACK_JSON = json.dumps({"followUp": "Are you sure?", "feedback": "Be specific."})


def upload(name="statement.txt", text=STATEMENT):
    return UploadedFile(name=name, data=text.encode("utf-8"), content_type="text/plain")


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def testimony(make_context, clock):
    def _make(*replies, **overrides):
        context = make_context(FakeCompletionClient(*(replies or (QUESTIONS_JSON,))), **overrides)
        return WizardController(context, SessionKind.TESTIMONY, clock=clock)
    return _make


@pytest.fixture
def deposition(make_context, clock):
    def _make(*replies, **overrides):
        context = make_context(FakeCompletionClient(*(replies or (ANALYSIS_JSON,))), **overrides)
        return WizardController(context, SessionKind.DEPOSITION, clock=clock)
    return _make


class TestSetup:

    def test_steps_per_flow(self, testimony, deposition):
        assert testimony().steps == TESTIMONY_STEPS
        assert deposition().steps == DEPOSITION_STEPS

    @pytest.mark.parametrize("subject, case", [("", "Roe v. Acme"), ("Jane Roe", "  "), (None, None)])
    def test_blank_fields_are_rejected(self, testimony, subject, case):
        wizard = testimony()
        with pytest.raises(ValidationFailed):
            wizard.create_session(subject, case)
        assert wizard.step == "setup"
        assert wizard.context.sessions.list_sessions() == []
        assert wizard.context.client.calls == []

    def test_create_moves_to_documents(self, testimony):
        wizard = testimony()
        session = wizard.create_session("Jane Roe", "Roe v. Acme")
        assert wizard.step == "documents"
        assert wizard.context.sessions.get_current(SessionKind.TESTIMONY).id == session.id


class TestTestimonyFlow:

    def test_generate_requires_ready_documents(self, testimony):
        wizard = testimony()
        wizard.create_session("Jane Roe", "Roe v. Acme")
        with pytest.raises(ValidationFailed):
            run(wizard.generate())
        assert wizard.context.client.calls == []

    def test_generate_stores_questions_and_records_cost(self, testimony):
        wizard = testimony()
        wizard.create_session("Jane Roe", "Roe v. Acme")
        wizard.upload_files([upload()])
        spent_on_upload = wizard.context.ledger.get_stats().session_price

        session = run(wizard.generate())

        assert wizard.step == "questions"
        assert len(session.questions) == 2
        assert wizard.context.ledger.get_stats().session_price > spent_on_upload

    def test_practice_round(self, testimony):
        wizard = testimony(QUESTIONS_JSON, FEEDBACK_JSON)
        wizard.create_session("Jane Roe", "Roe v. Acme")
        wizard.upload_files([upload()])
        run(wizard.generate())

        first = wizard.start_practice()
        assert wizard.step == "practice"
        assert first.question == "When did you first see the contract?"

        feedback = run(wizard.submit_response("Sometime in March."))
        assert feedback.follow_up == "Are you sure?"
        assert wizard.session.practice_exchanges[0].witness_response == "Sometime in March."

        assert wizard.next_question().question == "Who else was present?"
        assert wizard.next_question() is None
        assert wizard.step == "review"

    def test_empty_response_is_rejected(self, testimony):
        wizard = testimony()
        wizard.create_session("Jane Roe", "Roe v. Acme")
        wizard.upload_files([upload()])
        run(wizard.generate())
        wizard.start_practice()
        with pytest.raises(ValidationFailed):
            run(wizard.submit_response("   "))

    def test_practice_requires_questions(self, testimony):
        wizard = testimony()
        wizard.create_session("Jane Roe", "Roe v. Acme")
        with pytest.raises(ValidationFailed):
            wizard.start_practice()

    def test_fallback_leaves_info_notice(self, testimony):
        wizard = testimony(LLMError("LLM API error (502): bad gateway"))
        wizard.create_session("Jane Roe", "Roe v. Acme")
        wizard.upload_files([upload()])

        session = run(wizard.generate())

        assert len(session.questions) == 20
        assert any(n.level == "info" for n in wizard.active_notices())


class TestLimits:

    def test_price_limit_blocks_generation_without_network(self, testimony):
        wizard = testimony(demo_session_price_limit=0.01)
        wizard.create_session("Jane Roe", "Roe v. Acme")
        wizard.upload_files([upload()])
        wizard.context.ledger.record_cost(0.02)

        with pytest.raises(LimitReachedError):
            run(wizard.generate())

        assert wizard.limit_reached == LimitKind.PRICE
        assert wizard.context.client.calls == []

    def test_actions_blocked_until_acknowledged(self, testimony):
        wizard = testimony(demo_session_price_limit=0.01)
        wizard.create_session("Jane Roe", "Roe v. Acme")
        wizard.upload_files([upload()])
        wizard.context.ledger.record_cost(0.02)
        with pytest.raises(LimitReachedError):
            run(wizard.generate())

        with pytest.raises(LimitReachedError):
            wizard.navigate("setup")
        with pytest.raises(LimitReachedError):
            wizard.upload_files([upload("other.txt")])

        wizard.acknowledge_limit()
        assert wizard.limit_reached is None
        assert wizard.navigate("documents") == "documents"

    def test_document_limit_from_upload(self, testimony):
        wizard = testimony(demo_max_documents_per_session=1)
        wizard.create_session("Jane Roe", "Roe v. Acme")

        report = wizard.upload_files([upload("a.txt"), upload("b.txt")])

        assert len(report.added) == 1
        assert len(report.rejected) == 1
        assert wizard.limit_reached == LimitKind.DOCUMENTS
        assert wizard.active_notices()

    def test_reset_keeps_the_ledger(self, testimony):
        wizard = testimony()
        session = wizard.create_session("Jane Roe", "Roe v. Acme")
        wizard.upload_files([upload()])
        stats = wizard.context.ledger.get_stats()

        wizard.reset()

        assert wizard.step == "setup"
        assert wizard.context.sessions.get(session.id) is None
        assert wizard.context.sessions.get_current(SessionKind.TESTIMONY) is None
        assert wizard.context.ledger.get_stats() == stats


class TestNavigation:

    def test_cannot_skip_ahead(self, testimony):
        wizard = testimony()
        wizard.create_session("Jane Roe", "Roe v. Acme")
        assert not wizard.can_access("questions")
        with pytest.raises(StepNotAccessible):
            wizard.navigate("questions")
        with pytest.raises(StepNotAccessible):
            wizard.navigate("outline")

    def test_back_then_forward_when_data_exists(self, deposition):
        wizard = deposition()
        wizard.create_session("John Smith", "Smith v. Acme")
        wizard.upload_files([upload()])
        run(wizard.generate())
        assert wizard.step == "analysis"

        wizard.navigate("documents")
        assert wizard.can_access("analysis")
        assert wizard.can_access("questions")
        assert not wizard.can_access("outline")

        wizard.build_outline()
        wizard.navigate("setup")
        assert wizard.can_access("outline")

    def test_analysis_needs_data(self, deposition):
        wizard = deposition(json.dumps({"gaps": [], "contradictions": [], "questions": []}))
        wizard.create_session("John Smith", "Smith v. Acme")
        wizard.upload_files([upload()])
        run(wizard.generate())
        wizard.navigate("documents")
        # an empty summary object still counts as analysis data
        assert wizard.can_access("analysis")
        assert not wizard.can_access("questions")


class TestDepositionFlow:

    def test_outline_orders_topics_and_priorities(self, deposition):
        wizard = deposition()
        wizard.create_session("John Smith", "Smith v. Acme", "24-cv-1")
        wizard.upload_files([upload()])
        run(wizard.generate())

        session = wizard.build_outline()

        assert wizard.step == "outline"
        assert [s.title for s in session.outline.sections] == ["Foundation", "General"]
        assert session.outline.title == "Deposition Outline - John Smith"

    def test_outline_requires_questions(self, deposition):
        wizard = deposition()
        wizard.create_session("John Smith", "Smith v. Acme")
        with pytest.raises(ValidationFailed):
            wizard.build_outline()


class TestResume:

    def test_resume_derives_step(self, deposition, make_context, clock):
        wizard = deposition()
        session = wizard.create_session("John Smith", "Smith v. Acme")
        wizard.upload_files([upload()])

        again = WizardController(wizard.context, SessionKind.DEPOSITION, clock=clock)
        assert again.resume().id == session.id
        assert again.step == "documents"

        run(wizard.generate())
        assert again.resume(session.id) is not None
        assert again.step == "questions"

        wizard.build_outline()
        again.resume()
        assert again.step == "outline"

    def test_resume_ignores_other_flow(self, testimony, clock):
        wizard = testimony()
        session = wizard.create_session("Jane Roe", "Roe v. Acme")
        other = WizardController(wizard.context, SessionKind.DEPOSITION, clock=clock)
        assert other.resume(session.id) is None


class TestNotices:

    def test_notices_expire(self, testimony, clock):
        wizard = testimony()
        wizard.notify("Something went wrong")
        assert len(wizard.active_notices()) == 1

        clock.advance(seconds=9)
        assert len(wizard.active_notices()) == 1
        clock.advance(seconds=1)
        assert wizard.active_notices() == []
