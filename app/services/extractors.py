# app/services/extractors.py
"""
Text extractor back-ends.

Structured extractors read a document's own text layer; the OCR extractor
rasterizes pages and runs tesseract over them. All of them take the raw
upload bytes and raise ExtractorError when the buffer cannot be read.
"""
import io
import logging
import re
import warnings
from typing import Iterator, Optional

# ---- File & OCR libs ----
import docx
import fitz  # PyMuPDF
import pdfplumber
import pytesseract
from PIL import Image, ImageSequence

from .errors import ExtractorError

logger = logging.getLogger(__name__)

# silence noisy PDF logging
logging.getLogger("pdfplumber").setLevel(logging.ERROR)
logging.getLogger("pdfminer").setLevel(logging.ERROR)
warnings.filterwarnings("ignore", category=UserWarning, module="pdfminer")

_CID_RE = re.compile(r"\(cid:\d+\)")


class PdfTextExtractor:
    """pdfplumber text layer, page by page."""

    def extract(self, data: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                parts = []
                for page in pdf.pages:
                    page_text = page.extract_text()
                    if page_text:
                        parts.append(page_text)
        except Exception as e:
            raise ExtractorError(f"PDF text extraction failed: {e}") from e
        return _CID_RE.sub("", "\n".join(parts))


class DocxTextExtractor:
    """python-docx paragraphs, then table rows flattened as 'a | b'."""

    def extract(self, data: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(data))
        except Exception as e:
            raise ExtractorError(f"DOCX extraction failed: {e}") from e
        parts = []
        for p in document.paragraphs:
            if p.text.strip():
                parts.append(p.text)
        for table in document.tables:
            for row in table.rows:
                row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if row_text:
                    parts.append(" | ".join(row_text))
        return "\n".join(parts)


def set_tesseract_cmd(cmd: Optional[str]) -> None:
    """
    Point pytesseract at a tesseract binary. This is process-wide state in
    pytesseract, so it is set once at application start-up.
    """
    if cmd:
        pytesseract.pytesseract.tesseract_cmd = cmd


class OcrExtractor:
    """
    Tesseract over rasterized pages.

    PyMuPDF opens PDFs and common raster formats straight from memory and
    renders each page in greyscale at `dpi`. Buffers PyMuPDF rejects are
    handed to Pillow; anything neither can open is unreadable. Pages are
    rendered and recognized one at a time.
    """

    OCR_DPI = 300
    OCR_PSM = 6
    OCR_OEM = 3
    OCR_LANG = "eng"

    def __init__(self, dpi: int = OCR_DPI, psm: int = OCR_PSM, oem: int = OCR_OEM, lang: str = OCR_LANG):
        self.dpi = dpi
        self.psm = psm
        self.oem = oem
        self.lang = lang

    @classmethod
    def from_config(cls, config) -> "OcrExtractor":
        return cls(
            dpi=int(config.get("OCR_DPI", cls.OCR_DPI)),
            psm=int(config.get("OCR_PSM", cls.OCR_PSM)),
            oem=int(config.get("OCR_OEM", cls.OCR_OEM)),
            lang=config.get("OCR_LANG", cls.OCR_LANG),
        )

    @property
    def tesseract_config(self) -> str:
        return f"--oem {self.oem} --psm {self.psm}"

    def extract(self, data: bytes) -> str:
        if not data:
            raise ExtractorError("OCR received an empty buffer")
        pages = []
        for img in self._iter_pages(data):
            try:
                pages.append(self._ocr_image(img))
            except Exception as e:
                raise ExtractorError(f"OCR failed on page {len(pages) + 1}: {e}") from e
            finally:
                img.close()
        if not pages:
            raise ExtractorError("OCR found no pages to recognize")
        return "\n".join(p for p in pages if p)

    def _ocr_image(self, img: Image.Image) -> str:
        if img.mode != "L":
            img = img.convert("L")
        return pytesseract.image_to_string(img, lang=self.lang, config=self.tesseract_config).strip()

    def _iter_pages(self, data: bytes) -> Iterator[Image.Image]:
        try:
            doc = fitz.open(stream=data)
        except Exception as e:
            logger.debug(f"PyMuPDF could not open buffer, trying Pillow: {e}")
            doc = None
        if doc is None:
            yield from self._iter_pillow_frames(data)
            return

        with doc:
            for page in doc:
                try:
                    pix = page.get_pixmap(dpi=self.dpi, colorspace=fitz.csGRAY)
                    img = Image.open(io.BytesIO(pix.tobytes("png")))
                except Exception as e:
                    raise ExtractorError(f"Could not render page {page.number + 1}: {e}") from e
                del pix
                yield img

    def _iter_pillow_frames(self, data: bytes) -> Iterator[Image.Image]:
        try:
            img = Image.open(io.BytesIO(data))
        except Exception as e:
            raise ExtractorError(f"Unsupported document for OCR: {e}") from e
        with img:
            for frame in ImageSequence.Iterator(img):
                yield frame.convert("L")
