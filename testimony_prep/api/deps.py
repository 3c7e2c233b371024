"""Shared route dependencies"""

from fastapi import Request

from testimony_prep.services.context import PrepContext


def get_context(request: Request) -> PrepContext:
    """Service graph built by ``create_app``"""
    return request.app.state.context
