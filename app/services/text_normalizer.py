# app/services/text_normalizer.py
import re
from typing import List

# Bullets and geometric dingbats that extractors leave at the start of list items.
_re_bullets = re.compile(r"[\u2022\u2023\u2043\u204c\u204d\u2219\u25a0-\u25ef]")
# Keep : - / for skill lists and dates, @ . for emails and urls.
_re_disallowed = re.compile(r"[^a-z0-9@.\-:/ \n]")
_re_newlines = re.compile(r"\n{2,}")
_re_spaces = re.compile(r"[ \t]+")


def normalize_text(text: str) -> List[str]:
    """
    Canonical line stream for segmentation.

    Lowercases, turns bullet glyphs into line breaks, strips everything
    outside the whitelist, collapses whitespace and drops empty lines.
    Normalizing the joined output again yields the same lines.
    """
    if not text:
        return []
    text = text.lower()
    text = _re_bullets.sub("\n", text)
    text = _re_disallowed.sub("", text)
    text = _re_newlines.sub("\n", text)
    text = _re_spaces.sub(" ", text)
    lines = (line.strip() for line in text.split("\n"))
    return [line for line in lines if line]
