"""Usage tracking and limit check models"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class LimitKind(str, Enum):
    """Which demo limit a check concerns"""
    FILE_SIZE = "file_too_large"
    DOCUMENTS = "document_limit"
    PRICE = "price_limit"


class SessionStats(BaseModel):
    """Persisted usage ledger for one usage window"""
    documents_uploaded: int = 0
    total_storage_used: int = 0
    session_price: float = 0.0  # USD
    session_start_at: datetime
    session_reset_at: datetime


class LimitCheckResult(BaseModel):
    """Outcome of evaluating a proposed operation against the demo limits"""
    allowed: bool
    kind: Optional[LimitKind] = None
    reason: Optional[str] = None
    current_usage: Optional[float] = None
    limit: Optional[float] = None
    remaining_usage: Optional[float] = None
    suggested_action: Optional[str] = None


class PricingUsage(BaseModel):
    session_used: float
    session_limit: float
    percent_used: float


class DocumentUsage(BaseModel):
    documents_used: int
    documents_limit: int
    percent_used: float


class UsageStats(BaseModel):
    """Usage figures for display"""
    pricing: PricingUsage
    documents: DocumentUsage
