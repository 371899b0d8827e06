# app/services/validation_gate.py
from typing import Dict

from .errors import MissingExperienceSectionError


def validate_segments(segments: Dict[str, str]) -> Dict[str, str]:
    """Experience is the only mandatory section; everything else may be empty."""
    if not (segments.get("experience") or "").strip():
        raise MissingExperienceSectionError("No experience section found in resume")
    return segments
