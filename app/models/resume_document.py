import mimetypes
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

DEFAULT_MIME_TYPE = "application/octet-stream"
PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME = "application/msword"

# Not every platform mime table knows .docx
mimetypes.add_type(DOCX_MIME, ".docx")


@dataclass(frozen=True)
class RawDocument:
    """Uploaded bytes as handed over by the request layer. Read-only."""

    data: bytes
    mime_type: str
    filename: str

    @classmethod
    def from_upload(cls, data: bytes, mime_type: Optional[str], filename: str) -> "RawDocument":
        # Clients (and some browsers) send an empty content type; guess from the name.
        resolved = (mime_type or "").split(";")[0].strip().lower()
        if not resolved or resolved == DEFAULT_MIME_TYPE:
            resolved = mimetypes.guess_type(filename or "")[0] or DEFAULT_MIME_TYPE
        return cls(data=data or b"", mime_type=resolved, filename=filename or "")


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    used_fallback: bool = False


@dataclass
class IngestionOutcome:
    accepted: bool
    segments: Dict[str, str] = field(default_factory=dict)
    reason: Optional[str] = None

    @classmethod
    def accept(cls, segments: Dict[str, str]) -> "IngestionOutcome":
        return cls(accepted=True, segments=segments)

    @classmethod
    def reject(cls, reason: str) -> "IngestionOutcome":
        return cls(accepted=False, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        if self.accepted:
            return {"accepted": True, "segments": dict(self.segments)}
        return {"accepted": False, "reason": self.reason}
