"""Cumulative spend and document counts per usage window"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import uuid4

from pydantic import ValidationError

from testimony_prep.db.base import KeyValueStore
from testimony_prep.models.usage import DocumentUsage, PricingUsage, SessionStats, UsageStats
from testimony_prep.utils.config import Settings

logger = logging.getLogger(__name__)

STATS_KEY = "wtp_session_stats_v2"
USER_ID_KEY = "wtp_user_id_v1"
SESSION_ID_KEY = "wtp_session_id_v1"


def calculate_cost(char_count: int, price_per_thousand_chars: float) -> float:
    """Flat per-character proxy for LLM billing"""
    return (char_count / 1000) * price_per_thousand_chars


def format_price(price: float) -> str:
    return f"${price:.2f}"


class UsageLedger:
    """Tracks spend and uploads for the current usage window.

    The window rolls over lazily: the first read after ``session_reset_at``
    zeroes the counters and opens a new window. There is no background timer.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Settings,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.settings = settings
        self.clock = clock

    @property
    def window(self) -> timedelta:
        return timedelta(hours=self.settings.demo_session_hours)

    def _fresh_stats(self) -> SessionStats:
        now = self.clock()
        return SessionStats(session_start_at=now, session_reset_at=now + self.window)

    def _save(self, stats: SessionStats) -> None:
        self.store.set(STATS_KEY, stats.model_dump_json())

    def get_stats(self) -> SessionStats:
        """Current window's stats, rolling the window over if it has expired"""
        stored = self.store.get(STATS_KEY)
        if not stored:
            stats = self._fresh_stats()
            self._save(stats)
            return stats

        try:
            stats = SessionStats.model_validate_json(stored)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable usage stats: {e}")
            return self._fresh_stats()

        if self.clock() >= stats.session_reset_at:
            logger.info("Usage window expired, resetting ledger")
            stats = self._fresh_stats()
            self._save(stats)

        return stats

    def update(self, **fields) -> SessionStats:
        stats = self.get_stats().model_copy(update=fields)
        self._save(stats)
        return stats

    def record_document(self) -> SessionStats:
        stats = self.get_stats()
        return self.update(documents_uploaded=stats.documents_uploaded + 1)

    def record_cost(self, delta: float) -> SessionStats:
        stats = self.get_stats()
        return self.update(session_price=stats.session_price + delta)

    def update_total_storage(self, size: int) -> SessionStats:
        return self.update(total_storage_used=size)

    def calculate_cost(self, char_count: int) -> float:
        return calculate_cost(char_count, self.settings.demo_price_per_thousand_chars)

    def get_usage_stats(self) -> UsageStats:
        """Usage against the configured limits, percentages capped at 100"""
        stats = self.get_stats()
        price_limit = self.settings.demo_session_price_limit
        doc_limit = self.settings.demo_max_documents_per_session

        price_percent = (stats.session_price / price_limit) * 100 if price_limit > 0 else 100.0
        doc_percent = (stats.documents_uploaded / doc_limit) * 100 if doc_limit > 0 else 100.0

        return UsageStats(
            pricing=PricingUsage(
                session_used=stats.session_price,
                session_limit=price_limit,
                percent_used=min(100.0, price_percent),
            ),
            documents=DocumentUsage(
                documents_used=stats.documents_uploaded,
                documents_limit=doc_limit,
                percent_used=min(100.0, doc_percent),
            ),
        )

    def time_remaining(self, reset_at: Optional[datetime] = None) -> str:
        """Time until the window resets, as "Xh Ym" """
        reset_at = reset_at or self.get_stats().session_reset_at
        diff = (reset_at - self.clock()).total_seconds()
        if diff <= 0:
            return "0h 0m"
        hours = int(diff // 3600)
        minutes = int((diff % 3600) // 60)
        return f"{hours}h {minutes}m"

    def clear(self) -> None:
        """Forget all usage data"""
        self.store.remove(STATS_KEY)


def get_user_id(store: KeyValueStore) -> str:
    """Anonymous user id, persisted across sessions"""
    user_id = store.get(USER_ID_KEY)
    if not user_id:
        user_id = f"user_{uuid4()}"
        store.set(USER_ID_KEY, user_id)
    return user_id


def get_session_id(tab_store: KeyValueStore) -> str:
    """Per-process session id, kept in the short-lived tab store"""
    session_id = tab_store.get(SESSION_ID_KEY)
    if not session_id:
        session_id = f"session_{uuid4()}"
        tab_store.set(SESSION_ID_KEY, session_id)
    return session_id
