"""Testimony prep API routes.

These routes are stateless: clients send the document text they hold and get
back results plus the cost they should add to their own usage ledger.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from testimony_prep.api.deps import get_context
from testimony_prep.api.schemas import (
    PracticeRequest,
    PracticeResponse,
    TestimonyQuestionsRequest,
    TestimonyQuestionsResponse,
    TextIngestRequest,
    TextIngestResponse,
)
from testimony_prep.services.classifier import classify
from testimony_prep.services.context import PrepContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/testimony", tags=["testimony"])


@router.post("/ocr", response_model=TextIngestResponse)
async def ingest_text(request: TextIngestRequest, context: PrepContext = Depends(get_context)):
    """Validate extracted document text and price it"""
    if not request.text:
        raise HTTPException(status_code=400, detail="No text provided")

    chars = len(request.text)
    return TextIngestResponse(
        text=request.text,
        page_count=request.page_count or 1,
        file_name=request.file_name,
        document_type=classify(request.file_name or "", request.text),
        cost=context.ledger.calculate_cost(chars),
        chars_processed=chars,
    )


@router.post("/generate-questions", response_model=TestimonyQuestionsResponse)
async def generate_questions(
    request: TestimonyQuestionsRequest, context: PrepContext = Depends(get_context)
):
    if not request.witness_name or not request.case_name:
        raise HTTPException(status_code=400, detail="witness_name and case_name are required")
    if not request.documents:
        raise HTTPException(
            status_code=400, detail="No documents provided. Please upload case materials first."
        )

    documents = [d.to_document(i) for i, d in enumerate(request.documents)]
    result = await context.analysis.generate_testimony_questions(
        request.witness_name, request.case_name, documents
    )
    return TestimonyQuestionsResponse(**result.model_dump())


@router.post("/practice", response_model=PracticeResponse)
async def practice(request: PracticeRequest, context: PrepContext = Depends(get_context)):
    """Examiner feedback on one practice answer"""
    if not request.question or not request.witness_response:
        raise HTTPException(status_code=400, detail="question and witness_response are required")

    details = request.question_details
    result = await context.analysis.evaluate_practice_response(
        request.witness_name or "",
        request.case_name or "",
        [d.to_document(i) for i, d in enumerate(request.documents)],
        request.question,
        request.witness_response,
        suggested_approach=details.suggested_approach or "",
        weak_point=details.weak_point or "",
        document_reference=details.document_reference or "",
    )
    return PracticeResponse(
        ai_response=result.feedback,
        cost=result.cost,
        chars_processed=result.chars_processed,
    )
