"""Tests for the analysis client and its offline fallbacks"""

import asyncio
import json

import pytest
from aiohttp import web

from testimony_prep.errors import LLMError
from testimony_prep.models.document import Document, DocumentStatus, DocumentType
from testimony_prep.models.question import Difficulty, TestimonyCategory
from testimony_prep.services.analysis import DEFAULT_FOLLOW_UP, AnalysisClient
from testimony_prep.services.facts import extract_document_details
from testimony_prep.services.fallback import canned_deposition_analysis, canned_testimony_questions
from testimony_prep.services.prompts import PRACTICE_CONTENT_LIMIT, practice_user_prompt
from testimony_prep.utils.llm import CompletionClient, extract_content

from conftest import FakeCompletionClient

TRANSCRIPT = (
    "Deposition of John Smith taken on March 3, 2023 in Springfield. "
    "Q: Did you meet Mary Jones at the warehouse? A: Yes, on 03/04/2023. "
    "He testified that the shipment was worth $12,500.00 and arrived late."
)


@pytest.fixture
def documents():
    return [
        Document(id="d1", name="smith_depo.txt", content=TRANSCRIPT,
                 type=DocumentType.TRANSCRIPT, status=DocumentStatus.READY),
        Document(id="d2", name="exhibit_a.txt", content="Invoice dated 2023-03-05 for $4,000.",
                 type=DocumentType.EXHIBIT, status=DocumentStatus.READY),
    ]


def question_payload(n, **extra):
    item = {
        "question": f"Question {n}?",
        "category": "timeline",
        "difficulty": "hard",
        "suggestedApproach": "Be precise",
        "weakPoint": "Dates",
        "followUpQuestions": ["Why?"],
        "documentReference": "smith_depo.txt",
    }
    item.update(extra)
    return item


def run(coro):
    return asyncio.run(coro)


async def with_gateway_page(settings, call):
    """Run call(client) against a local server answering 200 with an HTML page"""

    async def gateway(request):
        return web.Response(text="<html>gateway</html>", content_type="text/html")

    app = web.Application()
    app.router.add_post("/llm/v1/chat/completions", gateway)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    try:
        host, port = runner.addresses[0][:2]
        config = settings.model_copy(update={"case_api_base": f"http://{host}:{port}"})
        return await call(CompletionClient(config), config)
    finally:
        await runner.cleanup()


class TestTestimonyQuestions:

    def test_fallback_when_endpoint_fails(self, settings, documents, failing_client):
        client = AnalysisClient(failing_client, settings)
        result = run(client.generate_testimony_questions("Jane Roe", "Roe v. Acme", documents))

        assert result.used_fallback
        assert len(result.questions) == 20
        assert result.cost == 0
        assert result.chars_processed == 0
        general = [q for q in result.questions if q.category == TestimonyCategory.GENERAL]
        assert len(general) == 5
        assert all(q.document_reference == "General Cross-Examination" for q in general)

    def test_fenced_response_is_parsed(self, settings, documents):
        content = "```json\n" + json.dumps([question_payload(i) for i in range(3)]) + "\n```"
        fake = FakeCompletionClient(content)
        client = AnalysisClient(fake, settings)

        result = run(client.generate_testimony_questions("Jane Roe", "Roe v. Acme", documents))

        assert not result.used_fallback
        assert [q.question for q in result.questions] == ["Question 0?", "Question 1?", "Question 2?"]
        assert result.questions[0].difficulty == Difficulty.HARD
        assert result.questions[0].suggested_approach == "Be precise"

    def test_prompt_names_witness_and_documents(self, settings, documents):
        fake = FakeCompletionClient(json.dumps([question_payload(1)]))
        run(AnalysisClient(fake, settings).generate_testimony_questions("Jane Roe", "Roe v. Acme", documents))

        system, user = fake.calls[0]["messages"]
        assert "Jane Roe" in system["content"]
        assert "=== DOCUMENT: smith_depo.txt ===" in user["content"]
        assert "=== END DOCUMENT ===" in user["content"]

    def test_cost_counts_prompt_and_response(self, settings, documents):
        content = json.dumps([question_payload(1)])
        fake = FakeCompletionClient(content)
        result = run(AnalysisClient(fake, settings).generate_testimony_questions("Jane Roe", "Roe v. Acme", documents))

        system, user = fake.calls[0]["messages"]
        expected_chars = len(system["content"]) + len(user["content"]) + len(content)
        assert result.chars_processed == expected_chars
        assert result.cost == pytest.approx(expected_chars / 1000 * settings.demo_price_per_thousand_chars)

    def test_unknown_enums_fall_back_to_defaults(self, settings, documents):
        content = json.dumps([question_payload(1, category="rhetorical", difficulty="brutal")])
        result = run(AnalysisClient(FakeCompletionClient(content), settings)
                     .generate_testimony_questions("Jane Roe", "Roe v. Acme", documents))

        assert result.questions[0].category == TestimonyCategory.GENERAL
        assert result.questions[0].difficulty == Difficulty.MEDIUM

    def test_questions_are_capped_at_twenty(self, settings, documents):
        content = json.dumps([question_payload(i) for i in range(25)])
        result = run(AnalysisClient(FakeCompletionClient(content), settings)
                     .generate_testimony_questions("Jane Roe", "Roe v. Acme", documents))
        assert len(result.questions) == 20

    def test_unparsable_output_uses_fallback_but_is_charged(self, settings, documents):
        result = run(AnalysisClient(FakeCompletionClient("Sorry, I can't do that."), settings)
                     .generate_testimony_questions("Jane Roe", "Roe v. Acme", documents))
        assert result.used_fallback
        assert len(result.questions) == 20
        assert result.cost > 0


class TestDepositionAnalysis:

    def test_ids_assigned_and_missing_sections_defaulted(self, settings, documents):
        content = json.dumps({
            "questions": [{"question": "Who is Mary Jones?", "topic": "Foundation", "priority": "high"}],
            "gaps": [{"description": "No account of March 4", "severity": "significant"}],
        })
        result = run(AnalysisClient(FakeCompletionClient(content), settings)
                     .generate_deposition_analysis("John Smith", "Smith v. Acme", documents))

        assert not result.used_fallback
        assert result.questions[0].id
        assert result.gaps[0].id
        assert result.contradictions == []
        assert result.analysis.key_themes == []

    def test_full_payload(self, settings, documents):
        content = json.dumps({
            "gaps": [],
            "contradictions": [{
                "id": "c1",
                "description": "Dates disagree",
                "source1": {"document": "smith_depo.txt", "excerpt": "March 3"},
                "source2": {"document": "exhibit_a.txt", "excerpt": "2023-03-05"},
                "severity": "moderate",
                "suggestedQuestions": ["Which date is right?"],
            }],
            "analysis": {
                "keyThemes": ["Late shipment"],
                "timelineEvents": [{"date": "March 3, 2023", "event": "Deposition", "source": "smith_depo.txt"}],
                "witnesses": ["Mary Jones"],
                "keyExhibits": ["exhibit_a.txt"],
            },
            "questions": [],
        })
        result = run(AnalysisClient(FakeCompletionClient(content), settings)
                     .generate_deposition_analysis("John Smith", "Smith v. Acme", documents))

        assert result.contradictions[0].id == "c1"
        assert result.contradictions[0].source2.excerpt == "2023-03-05"
        assert result.analysis.timeline_events[0].event == "Deposition"
        assert result.analysis.witnesses == ["Mary Jones"]

    def test_user_prompt_labels_document_types(self, settings, documents):
        fake = FakeCompletionClient("{}")
        run(AnalysisClient(fake, settings).generate_deposition_analysis("John Smith", "Smith v. Acme", documents))
        user = fake.calls[0]["messages"][1]["content"]
        assert "=== TRANSCRIPT: smith_depo.txt ===" in user
        assert "=== EXHIBIT: exhibit_a.txt ===" in user

    def test_fallback_is_built_from_document_facts(self, settings, documents, failing_client):
        result = run(AnalysisClient(failing_client, settings)
                     .generate_deposition_analysis("John Smith", "Smith v. Acme", documents))

        assert result.used_fallback
        assert result.cost == 0
        assert any("March 3, 2023" in q.question for q in result.questions)
        assert result.analysis.key_exhibits == ["smith_depo.txt", "exhibit_a.txt"]
        assert result.gaps


class TestPractice:

    def test_json_feedback(self, settings, documents):
        content = json.dumps({
            "followUp": "Then why did you sign the invoice?",
            "feedback": "Too vague.",
            "weaknessIdentified": "No dates",
            "suggestedImprovement": "Give the date.",
        })
        fake = FakeCompletionClient(content)
        result = run(AnalysisClient(fake, settings).evaluate_practice_response(
            "Jane Roe", "Roe v. Acme", documents, "Where were you?", "At work."
        ))

        assert result.feedback.follow_up == "Then why did you sign the invoice?"
        assert result.feedback.weakness_identified == "No dates"
        assert result.cost > 0
        assert fake.calls[0]["max_tokens"] == 1000

    def test_prose_becomes_feedback(self, settings, documents):
        result = run(AnalysisClient(FakeCompletionClient("Good answer, but slow down."), settings)
                     .evaluate_practice_response("Jane Roe", "Roe v. Acme", documents, "Q?", "A."))
        assert result.feedback.feedback == "Good answer, but slow down."
        assert result.feedback.follow_up == DEFAULT_FOLLOW_UP

    def test_failure_returns_default_feedback(self, settings, documents, failing_client):
        result = run(AnalysisClient(failing_client, settings)
                     .evaluate_practice_response("Jane Roe", "Roe v. Acme", documents, "Q?", "A."))
        assert result.used_fallback
        assert result.cost == 0
        assert result.feedback.follow_up == DEFAULT_FOLLOW_UP

    def test_document_context_is_truncated(self, documents):
        long_doc = documents[0].model_copy(update={"content": "x" * (PRACTICE_CONTENT_LIMIT + 500)})
        prompt = practice_user_prompt("Jane Roe", "Roe v. Acme", [long_doc], "Q?", "A.")
        assert "x" * PRACTICE_CONTENT_LIMIT + "... [truncated]" in prompt
        assert "x" * (PRACTICE_CONTENT_LIMIT + 1) not in prompt


class TestFallbackContent:

    def test_canned_questions_without_documents(self):
        questions = canned_testimony_questions([])
        assert len(questions) == 20
        assert questions[0].document_reference == "the documents"
        assert len({q.id for q in questions}) == 20

    def test_deposition_fallback_without_facts(self):
        result = canned_deposition_analysis([])
        assert result["gaps"] == []
        assert len(result["questions"]) == 2
        assert result["analysis"].key_themes == ["Timeline of Events", "Document Authenticity", "Communications"]

    def test_fact_extraction(self, documents):
        details = extract_document_details(documents)
        assert "John Smith" in details.names
        assert "Mary Jones" in details.names
        assert details.dates[:2] == ["March 3, 2023", "03/04/2023"]
        assert "$12,500.00" in details.amounts
        assert "Springfield" in details.locations
        assert details.document_summaries[0].name == "smith_depo.txt"


class TestCompletionClient:

    def test_missing_key_raises(self, settings):
        client = CompletionClient(settings.model_copy(update={"case_api_key": None}))
        with pytest.raises(LLMError, match="CASE_API_KEY"):
            run(client.chat_completion([{"role": "user", "content": "hi"}]))

    def test_connection_error_becomes_llm_error(self, settings):
        client = CompletionClient(settings.model_copy(update={"case_api_base": "http://127.0.0.1:9"}))
        assert client.url == "http://127.0.0.1:9/llm/v1/chat/completions"
        with pytest.raises(LLMError):
            run(client.chat_completion([{"role": "user", "content": "hi"}]))

    def test_extract_content(self):
        assert extract_content({"choices": [{"message": {"content": "hi"}}]}) == "hi"
        assert extract_content({"choices": []}) == ""
        assert extract_content({}) == ""

    def test_html_body_becomes_llm_error(self, settings):
        async def call(client, config):
            return await client.chat_completion([{"role": "user", "content": "hi"}])

        with pytest.raises(LLMError, match="non-JSON"):
            run(with_gateway_page(settings, call))

    def test_html_body_falls_back_to_canned_questions(self, settings, documents):
        async def call(client, config):
            analysis = AnalysisClient(client, config)
            return await analysis.generate_testimony_questions("Jane Doe", "Doe v. Roe", documents)

        result = run(with_gateway_page(settings, call))
        assert result.used_fallback is True
        assert len(result.questions) == 20
        assert result.cost == 0
