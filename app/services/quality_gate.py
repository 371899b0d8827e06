# app/services/quality_gate.py
"""
Usability checks on extracted text.

The dispatcher trusts a structured extractor only when its output passes
the gate for that format; otherwise it falls back to OCR.
"""
import re
from dataclasses import dataclass
from enum import Enum

_re_alnum = re.compile(r"[a-z0-9]", re.I)


class QualityMode(str, Enum):
    LENGTH = "length"              # DOCX structured output
    LENGTH_ASCII = "length_ascii"  # PDF structured output
    LENGTH_ALNUM = "length_alnum"  # final safety net, any branch


@dataclass(frozen=True)
class QualityThresholds:
    min_length: int = 100
    min_ascii_ratio: float = 0.85
    min_alnum_ratio: float = 0.5

    @classmethod
    def from_config(cls, config) -> "QualityThresholds":
        return cls(
            min_length=int(config.get("MIN_TEXT_LENGTH", cls.min_length)),
            min_ascii_ratio=float(config.get("MIN_ASCII_RATIO", cls.min_ascii_ratio)),
            min_alnum_ratio=float(config.get("MIN_ALNUM_RATIO", cls.min_alnum_ratio)),
        )


DEFAULT_THRESHOLDS = QualityThresholds()


def ascii_ratio(text: str) -> float:
    """Fraction of characters that are printable ASCII or whitespace."""
    if not text:
        return 0.0
    printable = sum(1 for c in text if " " <= c <= "~" or c in "\n\r\t")
    return printable / len(text)


def alnum_ratio(text: str) -> float:
    if not text:
        return 0.0
    return len(_re_alnum.findall(text)) / len(text)


def is_usable(
    text: str,
    mode: QualityMode = QualityMode.LENGTH,
    thresholds: QualityThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    if not text or not text.strip():
        return False
    if len(text) < thresholds.min_length:
        return False
    if mode == QualityMode.LENGTH_ASCII:
        return ascii_ratio(text) >= thresholds.min_ascii_ratio
    if mode == QualityMode.LENGTH_ALNUM:
        return alnum_ratio(text) >= thresholds.min_alnum_ratio
    return True
