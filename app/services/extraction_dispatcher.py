# app/services/extraction_dispatcher.py
"""
Raw bytes -> text, with a quality-gated fallback to OCR.

    PDF       structured text, gate on length + ASCII density, else OCR
    DOCX      structured text, gate on length only, else OCR
    DOC/other OCR directly

Whatever branch ran, a final check on length + alphanumeric density may
trigger one OCR pass, but only if OCR has not run yet for this document.
"""
import asyncio
import logging
from enum import Enum
from typing import Optional

from app.models.resume_document import DOC_MIME, DOCX_MIME, PDF_MIME, ExtractionResult, RawDocument

from .errors import ExtractorError, UnreadableDocumentError
from .extractors import DocxTextExtractor, OcrExtractor, PdfTextExtractor
from .quality_gate import DEFAULT_THRESHOLDS, QualityMode, QualityThresholds, is_usable

logger = logging.getLogger(__name__)


class DocumentKind(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    LEGACY_DOC = "doc"
    OTHER = "other"


def classify_mime(mime_type: str) -> DocumentKind:
    mime = (mime_type or "").split(";")[0].strip().lower()
    if mime == PDF_MIME:
        return DocumentKind.PDF
    if mime == DOCX_MIME:
        return DocumentKind.DOCX
    if mime == DOC_MIME:
        return DocumentKind.LEGACY_DOC
    return DocumentKind.OTHER


class ExtractionDispatcher:
    def __init__(
        self,
        pdf_extractor: Optional[PdfTextExtractor] = None,
        docx_extractor: Optional[DocxTextExtractor] = None,
        ocr_extractor: Optional[OcrExtractor] = None,
        thresholds: QualityThresholds = DEFAULT_THRESHOLDS,
    ):
        self.pdf_extractor = pdf_extractor or PdfTextExtractor()
        self.docx_extractor = docx_extractor or DocxTextExtractor()
        self.ocr_extractor = ocr_extractor or OcrExtractor()
        self.thresholds = thresholds

    def extract(self, document: RawDocument) -> ExtractionResult:
        if not document.data:
            raise UnreadableDocumentError(f"{document.filename or 'document'} is empty")

        kind = classify_mime(document.mime_type)
        logger.info(f"Extracting '{document.filename}' as {kind.value} ({document.mime_type})")

        text = ""
        used_ocr = False
        if kind == DocumentKind.PDF:
            text = self._run_structured(self.pdf_extractor, document)
            if not is_usable(text, QualityMode.LENGTH_ASCII, self.thresholds):
                logger.info("PDF text layer failed quality gate, falling back to OCR")
                text, used_ocr = self._run_ocr(document), True
        elif kind == DocumentKind.DOCX:
            text = self._run_structured(self.docx_extractor, document)
            if not is_usable(text, QualityMode.LENGTH, self.thresholds):
                logger.info("DOCX text failed quality gate, falling back to OCR")
                text, used_ocr = self._run_ocr(document), True
        else:
            text, used_ocr = self._run_ocr(document), True

        # Safety net: one OCR retry per document at most.
        if not used_ocr and not is_usable(text, QualityMode.LENGTH_ALNUM, self.thresholds):
            logger.info("Extracted text failed alphanumeric check, retrying with OCR")
            text, used_ocr = self._run_ocr(document), True

        if not is_usable(text, QualityMode.LENGTH, self.thresholds):
            raise UnreadableDocumentError(
                f"Only {len(text.strip())} characters could be read from '{document.filename}'"
            )
        return ExtractionResult(text=text, used_fallback=used_ocr)

    async def extract_async(self, document: RawDocument) -> ExtractionResult:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.extract, document)

    def _run_structured(self, extractor, document: RawDocument) -> str:
        try:
            return extractor.extract(document.data) or ""
        except Exception as e:
            logger.warning(f"Structured extraction failed for '{document.filename}': {e}")
            return ""

    def _run_ocr(self, document: RawDocument) -> str:
        try:
            return self.ocr_extractor.extract(document.data) or ""
        except ExtractorError as e:
            raise UnreadableDocumentError(str(e)) from e
        except Exception as e:
            raise UnreadableDocumentError(f"OCR failed for '{document.filename}': {e}") from e
