"""Allow/deny decisions against the demo limits"""

import logging
from typing import Optional

from testimony_prep.models.usage import LimitCheckResult, LimitKind
from testimony_prep.services.usage import UsageLedger, format_price
from testimony_prep.utils.config import Settings, upgrade_messages

logger = logging.getLogger(__name__)

# Usage meter thresholds (percent)
WARNING_PERCENT = 75
CRITICAL_PERCENT = 90


def usage_level(percent: float) -> str:
    """Bucket a usage percentage: normal, warning, critical or exhausted"""
    if percent >= 100:
        return "exhausted"
    if percent >= CRITICAL_PERCENT:
        return "critical"
    if percent >= WARNING_PERCENT:
        return "warning"
    return "normal"


class LimitEvaluator:
    """Checks proposed operations against file size, document and price limits.

    ``evaluate`` runs the checks in a fixed order (size, count, price) and
    reports the first denial so that user-facing messages are deterministic.
    """

    def __init__(self, ledger: UsageLedger, settings: Settings):
        self.ledger = ledger
        self.settings = settings

    def _suggestion(self, kind: LimitKind) -> str:
        message = upgrade_messages(self.settings)[kind.value]
        return f"{message['description']} {message['cta']}"

    def check_file_size(self, size: int) -> LimitCheckResult:
        limit = self.settings.demo_max_file_size
        if size > limit:
            return LimitCheckResult(
                allowed=False,
                kind=LimitKind.FILE_SIZE,
                reason=f"File exceeds {limit / (1024 * 1024):.0f}MB limit",
                current_usage=size,
                limit=limit,
                remaining_usage=0,
                suggested_action=self._suggestion(LimitKind.FILE_SIZE),
            )
        return LimitCheckResult(
            allowed=True,
            kind=LimitKind.FILE_SIZE,
            current_usage=size,
            limit=limit,
            remaining_usage=limit - size,
        )

    def check_documents(self, count: int = 1) -> LimitCheckResult:
        current = self.ledger.get_stats().documents_uploaded
        limit = self.settings.demo_max_documents_per_session
        remaining = max(0, limit - current)
        if current + count > limit:
            return LimitCheckResult(
                allowed=False,
                kind=LimitKind.DOCUMENTS,
                reason=f"Demo limit: Maximum {limit} documents per session",
                current_usage=current,
                limit=limit,
                remaining_usage=remaining,
                suggested_action=self._suggestion(LimitKind.DOCUMENTS),
            )
        return LimitCheckResult(
            allowed=True,
            kind=LimitKind.DOCUMENTS,
            current_usage=current,
            limit=limit,
            remaining_usage=remaining,
        )

    def check_price(self, delta: float) -> LimitCheckResult:
        current = self.ledger.get_stats().session_price
        limit = self.settings.demo_session_price_limit
        remaining = max(0.0, limit - current)
        if current + delta > limit:
            return LimitCheckResult(
                allowed=False,
                kind=LimitKind.PRICE,
                reason=(
                    f"Session limit reached: {format_price(current)} of "
                    f"{format_price(limit)} used"
                ),
                current_usage=current,
                limit=limit,
                remaining_usage=remaining,
                suggested_action=self._suggestion(LimitKind.PRICE),
            )
        return LimitCheckResult(
            allowed=True,
            kind=LimitKind.PRICE,
            current_usage=current,
            limit=limit,
            remaining_usage=remaining,
        )

    def evaluate(
        self,
        file_size: Optional[int] = None,
        documents: int = 0,
        cost: Optional[float] = None,
    ) -> LimitCheckResult:
        """Evaluate a proposed operation; the first failing check wins"""
        checks = []
        if file_size is not None:
            checks.append(lambda: self.check_file_size(file_size))
        if documents:
            checks.append(lambda: self.check_documents(documents))
        if cost is not None:
            checks.append(lambda: self.check_price(cost))

        result = LimitCheckResult(allowed=True)
        for check in checks:
            result = check()
            if not result.allowed:
                logger.info(f"Limit check denied ({result.kind.value}): {result.reason}")
                return result
        return result
