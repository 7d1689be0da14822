"""
Error taxonomy and classifier.

Every failure that reaches the action boundary is mapped to one of a few
categories, and each category to one fixed sentence. Raw exception text is
for the log only.

Classification is an ordered table: the first rule whose pattern (or status
code) matches wins. New failure modes are added as rows.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    TIMEOUT = "timeout"
    SAFETY_REJECTION = "safety_rejection"
    MISCONFIGURATION = "misconfiguration"
    SERVICE_UNAVAILABLE = "service_unavailable"
    GENERIC = "generic"


# =============================================================================
# Exceptions
# =============================================================================


class PhotoPoetError(Exception):
    """Base for failures raised inside the app."""

    category = ErrorCategory.GENERIC


class ValidationError(PhotoPoetError):
    """Required input missing or malformed. Raised before any remote call."""


class RemoteTimeout(PhotoPoetError):
    category = ErrorCategory.TIMEOUT


class SafetyRejection(PhotoPoetError):
    category = ErrorCategory.SAFETY_REJECTION


class MisconfigurationError(PhotoPoetError):
    category = ErrorCategory.MISCONFIGURATION


class ServiceUnavailableError(PhotoPoetError):
    category = ErrorCategory.SERVICE_UNAVAILABLE


class ProtocolViolation(PhotoPoetError):
    """The remote answered with a shape we cannot use."""


class MissingOutputError(ProtocolViolation):
    """A terminal response without the text or media we asked for."""


class OperationFailed(PhotoPoetError):
    """A long-running operation finished with an error."""


# =============================================================================
# Classifier
# =============================================================================


@dataclass(frozen=True)
class ErrorRule:
    category: ErrorCategory
    pattern: re.Pattern
    status_codes: frozenset = frozenset()

    def matches(self, message: str, status_code: Optional[int]) -> bool:
        if status_code is not None and status_code in self.status_codes:
            return True
        return bool(self.pattern.search(message or ""))


ERROR_RULES: tuple[ErrorRule, ...] = (
    ErrorRule(
        ErrorCategory.TIMEOUT,
        re.compile(r"Deadline exceeded|504"),
        frozenset({504}),
    ),
    ErrorRule(
        ErrorCategory.SAFETY_REJECTION,
        re.compile(r"safety policy", re.IGNORECASE),
    ),
    ErrorRule(
        ErrorCategory.MISCONFIGURATION,
        re.compile(r"API key not valid|API_KEY_INVALID"),
        frozenset({401}),
    ),
    ErrorRule(
        ErrorCategory.SERVICE_UNAVAILABLE,
        re.compile(r"server error|500|503", re.IGNORECASE),
        frozenset({500, 502, 503}),
    ),
)


def classify_error(message: str, status_code: Optional[int] = None) -> ErrorCategory:
    """Map a raw failure message (and optional HTTP status) to a category."""
    for rule in ERROR_RULES:
        if rule.matches(message, status_code):
            return rule.category
    return ErrorCategory.GENERIC


def classify_exception(exc: BaseException) -> ErrorCategory:
    """
    Classify a caught exception.

    Our own typed errors already know their category; anything else
    (including google-genai APIError, which carries ``code``) goes through
    the pattern table.
    """
    category = getattr(exc, "category", None)
    if isinstance(exc, PhotoPoetError) and category is not ErrorCategory.GENERIC:
        return category

    status_code = getattr(exc, "code", None)
    if not isinstance(status_code, int):
        status_code = getattr(exc, "status_code", None)
        if not isinstance(status_code, int):
            status_code = None
    return classify_error(str(exc), status_code)


# =============================================================================
# User-facing messages
# =============================================================================

CATEGORY_MESSAGES = {
    ErrorCategory.TIMEOUT: "The AI is taking a bit too long to respond. Please try again in a moment.",
    ErrorCategory.SAFETY_REJECTION: "The request was blocked by the content safety filter. Please adjust your prompt or image and try again.",
    ErrorCategory.MISCONFIGURATION: "The server is not configured correctly. Please contact support.",
    ErrorCategory.SERVICE_UNAVAILABLE: "The AI service is currently unavailable. Please try again later.",
}

GENERIC_MESSAGES = {
    "image": "An unexpected error occurred while creating your image. Please try again.",
    "poem": "An unexpected error occurred while generating your poem. Please try again.",
    "audio": "An unexpected error occurred while generating the audio. Please try again.",
    "revision": "An unexpected error occurred while revising the poem. Please try again.",
    "video": "An unexpected error occurred while creating your video. Please try again.",
}

DEFAULT_GENERIC_MESSAGE = "An unexpected error occurred. Please try again."


def user_message(category: ErrorCategory, capability=None) -> str:
    """
    The fixed sentence shown to users for a category.

    ``capability`` (a Capability or its string value) only picks the
    wording of the generic fallback.
    """
    if category in CATEGORY_MESSAGES:
        return CATEGORY_MESSAGES[category]
    key = getattr(capability, "value", capability)
    return GENERIC_MESSAGES.get(key, DEFAULT_GENERIC_MESSAGE)
