"""Deterministic offline content used when the completion endpoint fails"""

from typing import List
from uuid import uuid4

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
    Severity,
    TestimonyGap,
    TimelineEvent,
)
from testimony_prep.services.facts import extract_document_details

GENERAL_REFERENCE = "General Cross-Examination"

# (question, category, difficulty, suggested approach, weak point, follow-ups)
DOCUMENT_QUESTIONS = [
    (
        "You've reviewed documents related to this case. Can you tell us exactly when you first "
        "became aware of the events described?",
        "timeline", "medium",
        "Be specific about dates and times. If uncertain, say so.",
        "Timeline inconsistencies",
        ["What were you doing at that time?", "Who else was present?"],
    ),
    (
        "Looking at the documents you've reviewed, can you identify any statements that you now "
        "believe may have been inaccurate?",
        "credibility", "hard",
        "If there are inaccuracies, acknowledge them. Honesty builds credibility.",
        "Prior inconsistent statements",
        ["Why didn't you correct this earlier?", "What other statements might need revision?"],
    ),
    (
        "You mentioned specific details in your statement. How can you be so certain about these "
        "details after all this time?",
        "credibility", "medium",
        "Explain what makes certain memories stand out.",
        "Memory reliability",
        ["Did you take notes at the time?", "Have you discussed these events with anyone?"],
    ),
    (
        "Based on the documents in this case, there appear to be gaps in the timeline. Can you "
        "explain what happened during these periods?",
        "timeline", "medium",
        "If you don't know, say so. Don't speculate.",
        "Incomplete knowledge",
        ["Were you present during this time?", "Who might have information about this period?"],
    ),
    (
        "The documents suggest a particular sequence of events. Do you agree with that sequence, "
        "or do you recall it differently?",
        "inconsistency", "hard",
        "If you disagree, explain specifically what you recall differently and why.",
        "Contradicting documentary evidence",
        ["What specifically do you recall differently?", "Why should your memory be trusted over the documents?"],
    ),
    (
        "Were you under any stress or distraction at the time of the events described in these documents?",
        "foundation", "medium",
        "Acknowledge any factors that might have affected your perception.",
        "Impaired observation",
        ["How might that have affected what you observed?", "Were you taking any medications?"],
    ),
    (
        "Can you explain your role in the events documented in the case materials?",
        "foundation", "easy",
        "Clearly explain your involvement and the basis for your knowledge.",
        "Limited firsthand knowledge",
        ["Were you directly involved?", "How do you have knowledge of what you're testifying about?"],
    ),
    (
        "The documents reference specific communications. Did you keep copies of all relevant communications?",
        "foundation", "medium",
        "Explain your document retention practices honestly.",
        "Missing evidence",
        ["Why didn't you keep copies?", "What happened to those communications?"],
    ),
    (
        "Is there anything in these documents that you believe is false or misleading?",
        "inconsistency", "hard",
        "If you believe something is false, explain specifically what and why.",
        "Challenging documentary evidence",
        ["How do you know it's false?", "Do you have evidence to support your claim?"],
    ),
    (
        "Who else was present that could corroborate your account?",
        "foundation", "medium",
        "Identify other witnesses who can support your testimony.",
        "Lack of corroboration",
        ["Have you spoken with them about this case?", "Would they agree with your version?"],
    ),
    (
        "How soon after the events did you first document your recollection?",
        "timeline", "medium",
        "Explain when and how you recorded your memories.",
        "Delayed documentation affects reliability",
        ["Why did you wait?", "What prompted you to finally document it?"],
    ),
    (
        "Have you reviewed these documents with anyone before today's testimony?",
        "credibility", "easy",
        "Be honest about document review. It's normal to prepare.",
        "Potential for coached testimony",
        ["Who did you review them with?", "Did anyone point out specific things you should remember?"],
    ),
    (
        "Is there any information relevant to this case that is NOT contained in these documents?",
        "foundation", "hard",
        "Disclose any relevant information not in the documents.",
        "Incomplete documentary record",
        ["Why wasn't that documented?", "Who else knows about this?"],
    ),
    (
        "Looking at the specific details in the documents, how do you explain any discrepancies "
        "between what's written and what you're testifying to today?",
        "inconsistency", "hard",
        "Address discrepancies directly.",
        "Documentary contradictions",
        ["Which version is correct?", "Were you truthful then or now?"],
    ),
    (
        "Were you consulted before any of the actions described in the documents occurred?",
        "foundation", "medium",
        "Be clear about your level of involvement.",
        "Limited involvement or knowledge",
        ["Did you have any input?", "Did you express any objections?"],
    ),
]

GENERAL_QUESTIONS = [
    (
        "How did you prepare for your testimony today?",
        "general", "easy",
        "Be honest about preparation. It's normal to review documents with counsel.",
        "May suggest coaching",
        ["Who did you meet with to prepare?", "How many times did you meet?"],
    ),
    (
        "Are you being compensated in any way for your testimony, or do you have any financial "
        "interest in the outcome?",
        "general", "easy",
        "Answer directly.",
        "Potential bias",
        ["How much are you being paid?", "Does compensation depend on the outcome?"],
    ),
    (
        "What is your relationship to the parties in this case?",
        "general", "easy",
        "Describe relationships factually without editorializing.",
        "Potential bias based on relationships",
        ["How long have you known them?", "Have you had any conflicts with them?"],
    ),
    (
        "How would you describe your memory in general? Is there anything about your testimony "
        "today that you're not completely certain about?",
        "general", "medium",
        "Be honest about your memory capabilities.",
        "Self-assessment of reliability",
        ["What specifically are you uncertain about?", "Have you forgotten important details before?"],
    ),
    (
        "Have you ever given testimony that was later found to be inaccurate or that you needed to correct?",
        "general", "hard",
        "Answer honestly. If yes, explain the circumstances.",
        "Prior credibility issues",
        ["What were the circumstances?", "How did you discover the inaccuracy?"],
    ),
]


def canned_testimony_questions(documents: List[Document]) -> List[CrossExamQuestion]:
    """The fixed set of 20 cross-examination questions (15 document, 5 general)"""
    doc_names = ", ".join(d.name for d in documents) or "the documents"

    questions = []
    for rows, reference in ((DOCUMENT_QUESTIONS, doc_names), (GENERAL_QUESTIONS, GENERAL_REFERENCE)):
        for text, category, difficulty, approach, weak_point, follow_ups in rows:
            questions.append(
                CrossExamQuestion(
                    id=str(uuid4()),
                    question=text,
                    category=TestimonyCategory(category),
                    difficulty=Difficulty(difficulty),
                    suggested_approach=approach,
                    weak_point=weak_point,
                    follow_up_questions=list(follow_ups),
                    document_reference=reference,
                )
            )
    return questions


def canned_deposition_analysis(documents: List[Document]) -> dict:
    """Gaps, questions and a summary built from facts found in the documents"""
    doc_names = [d.name for d in documents]
    details = extract_document_details(documents)
    first_doc = doc_names[0] if doc_names else "Documents"

    gaps: List[TestimonyGap] = []
    contradictions: List[Contradiction] = []
    questions: List[DepositionQuestion] = []

    if details.dates:
        date = details.dates[0]
        gaps.append(TestimonyGap(
            id=str(uuid4()),
            description=f"Timeline details around {date} need clarification - documents reference this date but lack context",
            document_references=doc_names[:2],
            severity=Severity.MODERATE,
            suggested_questions=[
                f"What specifically happened on {date}?",
                f"Who else was involved in the events of {date}?",
            ],
        ))

    if len(details.names) > 1:
        first, second = details.names[0], details.names[1]
        gaps.append(TestimonyGap(
            id=str(uuid4()),
            description=f"The relationship between {first} and {second} is not fully documented",
            document_references=doc_names[:1],
            severity=Severity.SIGNIFICANT,
            suggested_questions=[
                f"What was the nature of your communications with {second}?",
                f"How often did you interact with {second}?",
            ],
        ))

    for index, date in enumerate(details.dates[:3]):
        questions.append(DepositionQuestion(
            id=str(uuid4()),
            question=f"The documents reference {date}. Walk me through exactly what happened on that date and your involvement.",
            topic="Timeline of Events",
            category=DepositionCategory.TIMELINE,
            priority=Priority.HIGH if index == 0 else Priority.MEDIUM,
            document_reference=first_doc,
            rationale="This date appears in the documents and establishing specific events is critical.",
            follow_up_questions=[
                f"Who else was present on {date}?",
                f"What communications occurred before and after {date}?",
            ],
        ))

    for name in details.names[:3]:
        questions.append(DepositionQuestion(
            id=str(uuid4()),
            question=f"{name} is mentioned in the documents. Describe your relationship and interactions with {name}.",
            topic="Relationships and Communications",
            category=DepositionCategory.FOUNDATION,
            priority=Priority.MEDIUM,
            document_reference=first_doc,
            rationale="Understanding relationships with key individuals is essential.",
            follow_up_questions=[
                f"How often did you communicate with {name}?",
                "What was the nature of your professional relationship?",
            ],
        ))

    questions.extend([
        DepositionQuestion(
            id=str(uuid4()),
            question=(
                "You've reviewed documents for this case. Walk me through your role and "
                "responsibilities during the time period covered by these documents."
            ),
            topic="Role and Responsibilities",
            category=DepositionCategory.FOUNDATION,
            priority=Priority.HIGH,
            document_reference="General",
            rationale="Establishes foundation for testimony and scope of knowledge.",
            follow_up_questions=["What were your specific duties?", "Who did you report to?"],
        ),
        DepositionQuestion(
            id=str(uuid4()),
            question="Do you have any personal or financial interest in the outcome of this case?",
            topic="Bias",
            category=DepositionCategory.IMPEACHMENT,
            priority=Priority.HIGH,
            document_reference="General",
            rationale="Establishes potential bias.",
            follow_up_questions=[
                "Do you stand to gain financially?",
                "What is your current relationship with the parties?",
            ],
        ),
    ])

    if details.names:
        key_themes = [
            f"Involvement of {' and '.join(details.names[:2])}",
            "Timeline of Events",
            "Document Authenticity",
        ]
    else:
        key_themes = ["Timeline of Events", "Document Authenticity", "Communications"]

    analysis = AnalysisSummary(
        key_themes=key_themes,
        timeline_events=[
            TimelineEvent(
                date=date,
                event="Event referenced in documents",
                source=doc_names[i % len(doc_names)] if doc_names else "Documents",
            )
            for i, date in enumerate(details.dates)
        ],
        witnesses=details.names[:5],
        key_exhibits=doc_names[:5],
    )

    return {
        "gaps": gaps,
        "contradictions": contradictions,
        "questions": questions,
        "analysis": analysis,
    }
