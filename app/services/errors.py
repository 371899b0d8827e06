# app/services/errors.py
"""
Error taxonomy for the ingestion pipeline.

Every rejection a caller can see is a ResumeIngestionError carrying one of
the boundary reason codes. ExtractorError stays internal to the dispatcher.
"""

UNREADABLE_DOCUMENT = "UnreadableDocument"
MISSING_EXPERIENCE_SECTION = "MissingExperienceSection"


class ResumeIngestionError(Exception):
    """Terminal rejection of a single document."""

    reason = "IngestionFailed"

    def __init__(self, message: str = "", reason: str | None = None):
        super().__init__(message or self.reason)
        if reason:
            self.reason = reason


class UnreadableDocumentError(ResumeIngestionError):
    reason = UNREADABLE_DOCUMENT


class MissingExperienceSectionError(ResumeIngestionError):
    reason = MISSING_EXPERIENCE_SECTION


class ExtractorError(Exception):
    """An extractor back-end could not produce text from the buffer."""
