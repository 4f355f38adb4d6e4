"""Error taxonomy for interview operations.

Every error carries the HTTP status the API layer should answer with and a
short message that is safe to show to callers.
"""
from __future__ import annotations


class InterviewError(Exception):
    status_code = 500
    default_message = "Interview operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(InterviewError):
    status_code = 400
    default_message = "Invalid request"


class MissingIdentity(InterviewError):
    status_code = 400
    default_message = "User ID is required to create an interview."


class Unauthenticated(InterviewError):
    status_code = 401
    default_message = "Not authenticated"


class QuotaExceeded(InterviewError):
    status_code = 403
    default_message = (
        "Free plan users can only take 3 mock interviews per month. "
        "Upgrade to Premium for unlimited access."
    )


class PremiumRequired(InterviewError):
    status_code = 403
    default_message = "Premium plan required for this feature."


class NotFound(InterviewError):
    status_code = 404
    default_message = "Not found"


class InvalidTransition(InterviewError):
    status_code = 409
    default_message = "Interview is not in a state that allows this operation"


class MissingQuestions(InterviewError):
    status_code = 500
    default_message = "Interview has no generated questions; start it before submitting"


class GenerationFailed(InterviewError):
    status_code = 500
    default_message = "Failed to generate interview questions"


class EmptyResult(GenerationFailed):
    default_message = "No questions could be extracted from the generated text"


class UpstreamTimeout(GenerationFailed):
    status_code = 504
    default_message = "Question generation timed out"


class StorageError(InterviewError):
    status_code = 500
    default_message = "Storage operation failed"


__all__ = [
    "EmptyResult",
    "GenerationFailed",
    "InterviewError",
    "InvalidTransition",
    "MissingIdentity",
    "MissingQuestions",
    "NotFound",
    "PremiumRequired",
    "QuotaExceeded",
    "StorageError",
    "Unauthenticated",
    "UpstreamTimeout",
    "ValidationError",
]
