# app/services/section_segmenter.py
import logging
from typing import Dict, Iterable, Optional, Sequence

from .section_headers import SECTION_HEADERS, SectionHeaderEntry, empty_sections
from .text_normalizer import normalize_text

logger = logging.getLogger(__name__)


def match_header(line: str, headers: Sequence[SectionHeaderEntry] = SECTION_HEADERS) -> Optional[str]:
    """First key in table order with a variant contained anywhere in the line."""
    lower_line = line.lower()
    for entry in headers:
        for variant in entry.variants:
            if variant in lower_line:
                return entry.key
    return None


def segment_lines(lines: Iterable[str]) -> Dict[str, str]:
    """
    Single pass over normalized lines.

    Lines before the first recognized header belong to `contact`. A header
    line switches the current section and is not stored itself; every other
    line is appended, newline-terminated, to the current section.
    """
    sections = empty_sections()
    current = "contact"
    found_first_header = False

    for line in lines:
        if not line.strip():
            continue
        key = match_header(line)
        if key:
            current = key
            found_first_header = True
            logger.debug(f"[Header Detected] '{line}' => {key}")
            continue
        target = current if found_first_header else "contact"
        logger.debug(f"[Line] Section: {target} | {line}")
        sections[target] += line + "\n"
    return sections


def segment_resume(text: str) -> Dict[str, str]:
    """Normalize raw text and bucket it into sections."""
    return segment_lines(normalize_text(text))
