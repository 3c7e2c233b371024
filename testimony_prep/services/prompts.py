"""Prompt builders for question generation and the practice examiner"""

from typing import List

from testimony_prep.models.document import Document

PRACTICE_CONTENT_LIMIT = 2000


def testimony_system_prompt(witness_name: str) -> str:
    return f"""You are an experienced trial attorney preparing cross-examination questions for {witness_name}. Based on the provided case documents, generate exactly 20 likely cross-examination questions that opposing counsel might ask {witness_name}.

THE WITNESS YOU ARE PREPARING QUESTIONS FOR IS: {witness_name}

The documents may contain depositions, testimony, or statements from OTHER people who are NOT {witness_name}. Treat them as evidence that {witness_name} may be asked about. Never direct questions to those other people.

REQUIREMENTS:
1. ALL questions and follow-up questions MUST be directed TO {witness_name}, using "you" and "your"
2. 15 questions must be DOCUMENT-SPECIFIC and reference facts, names, dates, times and locations from the documents
3. 5 questions must be GENERAL cross-examination questions (category "general"): preparation, compensation or financial interest, memory and certainty, relationship to the parties, prior inaccurate testimony

Return ONLY a JSON array of exactly 20 objects in this format (no markdown, no code blocks):
[
  {{
    "question": "Question directed to {witness_name}",
    "category": "timeline|credibility|inconsistency|foundation|impeachment|general",
    "difficulty": "easy|medium|hard",
    "suggestedApproach": "How {witness_name} should approach answering",
    "weakPoint": "What vulnerability this exposes based on the documents",
    "followUpQuestions": ["Follow-up addressed to {witness_name}"],
    "documentReference": "Which document/section this relates to OR 'General Cross-Examination'"
  }}
]"""


def deposition_system_prompt(deponent_name: str) -> str:
    return f"""You are an experienced litigation attorney preparing to take a deposition of {deponent_name}. Analyze the provided case documents and generate strategic deposition questions that are SPECIFIC to the document contents.

THE PERSON YOU ARE QUESTIONING IS: {deponent_name}
The documents may contain statements from OTHER people. Ask {deponent_name} what they know about those statements; never direct questions to those other people.

ANALYSIS OBJECTIVES:
1. Identify GAPS - missing or incomplete information in documents
2. Detect CONTRADICTIONS - inconsistencies between documents
3. Extract KEY THEMES - major topics from documents
4. Build TIMELINE - chronological events from documents
5. Generate STRATEGIC QUESTIONS - reference specific document content

Return a JSON object with this structure:
{{
  "gaps": [{{"description": "...", "documentReferences": ["..."], "severity": "minor|moderate|significant", "suggestedQuestions": ["..."]}}],
  "contradictions": [{{"description": "...", "source1": {{"document": "...", "excerpt": "..."}}, "source2": {{"document": "...", "excerpt": "..."}}, "severity": "minor|moderate|significant", "suggestedQuestions": ["..."]}}],
  "analysis": {{"keyThemes": ["..."], "timelineEvents": [{{"date": "...", "event": "...", "source": "..."}}], "witnesses": ["..."], "keyExhibits": ["..."]}},
  "questions": [{{"question": "...", "topic": "...", "category": "gap|contradiction|timeline|foundation|impeachment|follow_up|general", "priority": "high|medium|low", "documentReference": "...", "rationale": "...", "followUpQuestions": ["..."]}}]
}}

IMPORTANT: Return ONLY the JSON object. No markdown, no code blocks."""


PRACTICE_SYSTEM_PROMPT = """You are an experienced opposing counsel conducting a cross-examination. Your role is to:

1. Evaluate the witness's response to the question
2. Identify any weaknesses, inconsistencies, or areas to probe further based on the case documents
3. Provide a realistic follow-up question that relates to the specific facts in the documents
4. Give constructive feedback on how the witness could improve their response

Respond in JSON format:
{
  "followUp": "The follow-up question opposing counsel would likely ask",
  "feedback": "Constructive feedback for the witness on their response",
  "weaknessIdentified": "Any weakness in the response that was exposed",
  "suggestedImprovement": "How the witness could have answered better"
}"""


def testimony_user_prompt(witness_name: str, case_name: str, documents: List[Document]) -> str:
    context = "\n\n".join(
        f"=== DOCUMENT: {doc.name} ===\n{doc.content or '[Content not available]'}\n=== END DOCUMENT ==="
        for doc in documents
    )
    return (
        f"Case: {case_name}\n"
        f"Witness Name: {witness_name}\n\n"
        f"DOCUMENTS TO ANALYZE:\n{context}\n\n"
        f"Generate exactly 20 cross-examination questions for the witness {witness_name}.\n"
        "Return ONLY a valid JSON array. No markdown formatting."
    )


def deposition_user_prompt(deponent_name: str, case_name: str, documents: List[Document]) -> str:
    parts = []
    for doc in documents:
        label = doc.type.value.replace("_", " ").upper() if doc.type else "DOCUMENT"
        parts.append(
            f"=== {label}: {doc.name} ===\n{doc.content or '[Content not available]'}\n=== END DOCUMENT ==="
        )
    context = "\n\n".join(parts)
    return (
        f"Case: {case_name}\n"
        f"Deponent (Witness Name): {deponent_name}\n\n"
        f"DOCUMENTS TO ANALYZE:\n{context}\n\n"
        "Based on these documents, perform comprehensive analysis and generate 15-20 strategic "
        "deposition questions.\n\n"
        f"CRITICAL: ALL questions MUST be directed TO {deponent_name}. Use \"you\" and \"your\".\n"
        "CRITICAL: Return ONLY a valid JSON object. No markdown formatting, no code blocks."
    )


def practice_user_prompt(
    witness_name: str,
    case_name: str,
    documents: List[Document],
    question: str,
    witness_response: str,
    suggested_approach: str = "",
    weak_point: str = "",
    document_reference: str = "",
) -> str:
    parts = []
    for doc in documents:
        content = doc.content or ""
        if content:
            truncated = content[:PRACTICE_CONTENT_LIMIT]
            if len(content) > PRACTICE_CONTENT_LIMIT:
                truncated += "... [truncated]"
        else:
            truncated = "[Content not available]"
        parts.append(f"=== {doc.name} ===\n{truncated}")
    context = "\n\n".join(parts) or "No documents provided"

    details = ""
    if suggested_approach:
        details += f"Suggested Approach: {suggested_approach}\n"
    if weak_point:
        details += f"Known Weak Point: {weak_point}\n"
    if document_reference:
        details += f"Document Reference: {document_reference}\n"

    return (
        f"Case: {case_name or 'Unknown Case'}\n"
        f"Witness: {witness_name or 'Unknown Witness'}\n\n"
        f"CASE DOCUMENTS:\n{context}\n\n"
        "CROSS-EXAMINATION CONTEXT:\n"
        f"Question Asked: \"{question}\"\n"
        f"{details}\n"
        f"WITNESS RESPONSE: \"{witness_response}\"\n\n"
        "Analyze this response in the context of the case documents. Provide a follow-up question and feedback."
    )
