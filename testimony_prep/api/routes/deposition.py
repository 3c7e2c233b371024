"""Deposition prep API routes"""

from fastapi import APIRouter, Depends, HTTPException

from testimony_prep.api.deps import get_context
from testimony_prep.api.schemas import DepositionQuestionsRequest, DepositionQuestionsResponse
from testimony_prep.services.context import PrepContext

router = APIRouter(prefix="/api/deposition", tags=["deposition"])


@router.post("/generate-questions", response_model=DepositionQuestionsResponse)
async def generate_questions(
    request: DepositionQuestionsRequest, context: PrepContext = Depends(get_context)
):
    """Gap and contradiction analysis plus strategic questions"""
    if not request.deponent_name or not request.case_name:
        raise HTTPException(status_code=400, detail="deponent_name and case_name are required")
    if not request.documents:
        raise HTTPException(status_code=400, detail="No documents provided")

    documents = [d.to_document(i) for i, d in enumerate(request.documents)]
    result = await context.analysis.generate_deposition_analysis(
        request.deponent_name, request.case_name, documents
    )
    return DepositionQuestionsResponse(**result.model_dump())
