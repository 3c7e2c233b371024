"""Demo configuration, usage and health routes"""

from fastapi import APIRouter, Depends

from testimony_prep import __version__
from testimony_prep.api.deps import get_context
from testimony_prep.api.schemas import HealthResponse
from testimony_prep.services.context import PrepContext
from testimony_prep.services.demo_config import build_demo_config
from testimony_prep.services.limits import usage_level

router = APIRouter(prefix="/api", tags=["demo"])


@router.get("/health", response_model=HealthResponse)
async def health(context: PrepContext = Depends(get_context)):
    return HealthResponse(
        status="ok",
        version=__version__,
        llm_configured=bool(context.settings.case_api_key),
    )


@router.get("/demo/config")
async def demo_config(context: PrepContext = Depends(get_context)):
    """Demo mode configuration and limits for the UI"""
    return build_demo_config(context.settings)


@router.get("/usage")
async def usage(context: PrepContext = Depends(get_context)):
    """Server-side usage ledger with meter levels"""
    ledger = context.ledger
    stats = ledger.get_usage_stats()
    return {
        "usage": stats.model_dump(),
        "levels": {
            "pricing": usage_level(stats.pricing.percent_used),
            "documents": usage_level(stats.documents.percent_used),
        },
        "time_remaining": ledger.time_remaining(),
    }
