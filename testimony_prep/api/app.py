"""FastAPI application factory"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from testimony_prep import __version__
from testimony_prep.api.routes.demo import router as demo_router
from testimony_prep.api.routes.deposition import router as deposition_router
from testimony_prep.api.routes.testimony import router as testimony_router
from testimony_prep.services.context import PrepContext, build_context
from testimony_prep.utils.config import Settings
from testimony_prep.utils.logging import LoggingMiddleware, setup_logging


def create_app(settings: Optional[Settings] = None, context: Optional[PrepContext] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    context = context or build_context(settings)
    setup_logging(context.settings.log_level)

    app = FastAPI(
        title=context.settings.demo_app_name,
        description="Cross-examination and deposition preparation API",
        version=__version__,
    )
    app.state.context = context

    # CORS: allow all for the demo
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.include_router(demo_router)
    app.include_router(testimony_router)
    app.include_router(deposition_router)

    return app
