"""Deposition outline building and plain-text exports"""

from datetime import datetime
from typing import Dict, List
from uuid import uuid4

from testimony_prep.models.question import PRIORITY_RANK, DepositionQuestion, Priority
from testimony_prep.models.session import DepositionSession, Outline, OutlineSection, TestimonySession

TOPIC_ORDER = [
    "Foundation",
    "Timeline",
    "Gap",
    "Contradiction",
    "Impeachment",
    "Follow-up",
    "General",
]
MINUTES_PER_QUESTION = 3

PRIORITY_LABELS = {Priority.HIGH: "HIGH", Priority.MEDIUM: "MED", Priority.LOW: "LOW"}


def _group_by_topic(questions: List[DepositionQuestion]) -> Dict[str, List[DepositionQuestion]]:
    groups: Dict[str, List[DepositionQuestion]] = {}
    for question in questions:
        groups.setdefault(question.topic or "General", []).append(question)
    return groups


def _ordered_topics(groups: Dict[str, List[DepositionQuestion]]) -> List[str]:
    preferred = [t for t in TOPIC_ORDER if t in groups]
    return preferred + [t for t in groups if t not in TOPIC_ORDER]


def build_outline(session: DepositionSession) -> Outline:
    """Group questions by topic into a timed outline"""
    groups = _group_by_topic(session.questions)
    sections = []
    for order, topic in enumerate(_ordered_topics(groups)):
        # sorted() is stable, so same-priority questions keep their order
        questions = sorted(groups[topic], key=lambda q: PRIORITY_RANK[q.priority])
        sections.append(
            OutlineSection(
                id=str(uuid4()),
                title=topic,
                order=order,
                questions=questions,
                estimated_time=len(questions) * MINUTES_PER_QUESTION,
            )
        )

    now = datetime.now()
    return Outline(
        id=str(uuid4()),
        title=f"Deposition Outline - {session.deponent_name}",
        sections=sections,
        created_at=now,
        updated_at=now,
    )


def _render_question(number: int, question: DepositionQuestion) -> List[str]:
    lines = [f"{number}. [{PRIORITY_LABELS[question.priority]}] {question.question}"]
    if question.rationale:
        lines.append(f"   - Rationale: {question.rationale}")
    if question.document_reference:
        lines.append(f"   - Reference: {question.document_reference}")
    for follow_up in question.follow_up_questions or []:
        lines.append(f"   - Follow-up: {follow_up}")
    return lines


def render_outline_markdown(session: DepositionSession) -> str:
    """Markdown export of the outline, or of the questions grouped by topic"""
    if session.outline:
        title = session.outline.title
        sections = [(s.title, s.questions, s.estimated_time) for s in session.outline.sections]
    else:
        title = f"Deposition Outline - {session.deponent_name}"
        groups = _group_by_topic(session.questions)
        sections = [
            (topic, groups[topic], len(groups[topic]) * MINUTES_PER_QUESTION)
            for topic in _ordered_topics(groups)
        ]

    lines = [f"# {title}", "", f"**Case:** {session.case_name}"]
    if session.case_number:
        lines.append(f"**Case Number:** {session.case_number}")
    lines.append(f"**Deponent:** {session.deponent_name}")
    lines.append(f"**Total Questions:** {sum(len(s[1]) for s in sections)}")
    lines.append("")

    if session.analysis and session.analysis.key_themes:
        lines.append("## Key Themes")
        lines.extend(f"- {theme}" for theme in session.analysis.key_themes)
        lines.append("")

    if session.gaps:
        lines.append("## Testimony Gaps")
        for gap in session.gaps:
            lines.append(f"- ({gap.severity.value}) {gap.description}")
        lines.append("")

    if session.contradictions:
        lines.append("## Contradictions")
        for contradiction in session.contradictions:
            lines.append(f"- ({contradiction.severity.value}) {contradiction.description}")
        lines.append("")

    number = 1
    for section_title, questions, minutes in sections:
        lines.append(f"## {section_title} (~{minutes} min)")
        lines.append("")
        for question in questions:
            lines.extend(_render_question(number, question))
            number += 1
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def render_practice_review(session: TestimonySession) -> str:
    """Markdown summary of a testimony practice run"""
    lines = [
        f"# Practice Review - {session.witness_name}",
        "",
        f"**Case:** {session.case_name}",
        f"**Questions Prepared:** {len(session.questions)}",
        f"**Responses Given:** {len(session.practice_exchanges)}",
        "",
    ]

    for index, exchange in enumerate(session.practice_exchanges, start=1):
        lines.append(f"## {index}. {exchange.question}")
        lines.append("")
        lines.append(f"**Your answer:** {exchange.witness_response}")
        if exchange.feedback:
            lines.append(f"**Feedback:** {exchange.feedback}")
        if exchange.ai_follow_up:
            lines.append(f"**Likely follow-up:** {exchange.ai_follow_up}")
        lines.append("")

    if not session.practice_exchanges:
        lines.append("No practice responses recorded yet.")

    return "\n".join(lines).rstrip() + "\n"
