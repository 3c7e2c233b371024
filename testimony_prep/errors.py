"""Exception types shared across services"""

from typing import Optional


class PrepError(Exception):
    """Base class for prep tool errors"""


class ValidationFailed(PrepError):
    """A required field or precondition is missing; nothing was sent anywhere."""


class StepNotAccessible(PrepError):
    """Navigation to a wizard step that is not reachable yet"""


class LimitReachedError(PrepError):
    """A demo usage limit blocks the action until acknowledged"""

    def __init__(self, result, message: Optional[str] = None):
        self.result = result
        super().__init__(message or result.reason or "Usage limit reached")


class ExtractionError(PrepError):
    """Text could not be extracted from an uploaded file"""


class UnsupportedFileType(ExtractionError):
    """Only plain text and PDF uploads are accepted"""


class LLMError(PrepError):
    """The completion endpoint failed or returned a non-2xx status"""
