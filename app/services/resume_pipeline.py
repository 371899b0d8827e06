# app/services/resume_pipeline.py
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from app.models.resume_document import ExtractionResult, IngestionOutcome, RawDocument

from .errors import ResumeIngestionError
from .extraction_dispatcher import ExtractionDispatcher
from .extractors import OcrExtractor
from .quality_gate import QualityThresholds
from .section_segmenter import segment_lines
from .text_normalizer import normalize_text
from .validation_gate import validate_segments

logger = logging.getLogger(__name__)


class ResumeIngestionPipeline:
    """
    Document bytes -> accepted section mapping, or a rejection reason.

    extract -> normalize -> segment -> validate, strictly in that order for
    each document. Separate documents share nothing but the header table.
    """

    MAX_WORKERS = 4

    def __init__(self, dispatcher: Optional[ExtractionDispatcher] = None, max_workers: int = MAX_WORKERS):
        self.dispatcher = dispatcher or ExtractionDispatcher()
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config) -> "ResumeIngestionPipeline":
        dispatcher = ExtractionDispatcher(
            ocr_extractor=OcrExtractor.from_config(config),
            thresholds=QualityThresholds.from_config(config),
        )
        return cls(dispatcher, max_workers=int(config.get("MAX_WORKERS", cls.MAX_WORKERS)))

    def process(self, document: RawDocument) -> IngestionOutcome:
        t0 = time.perf_counter()
        try:
            extraction = self.dispatcher.extract(document)
        except ResumeIngestionError as e:
            return self._reject(document, e)
        return self._segment(document, extraction, t0)

    async def process_async(self, document: RawDocument) -> IngestionOutcome:
        """Extraction runs in the loop's executor; segmentation is cheap and stays inline."""
        t0 = time.perf_counter()
        try:
            extraction = await self.dispatcher.extract_async(document)
        except ResumeIngestionError as e:
            return self._reject(document, e)
        return self._segment(document, extraction, t0)

    def process_batch(self, documents: Sequence[RawDocument]) -> List[IngestionOutcome]:
        """Independent documents in a thread pool; results keep input order."""
        if not documents:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self.process, documents))

    def _segment(self, document: RawDocument, extraction: ExtractionResult, t0: float) -> IngestionOutcome:
        lines = normalize_text(extraction.text)
        try:
            segments = validate_segments(segment_lines(lines))
        except ResumeIngestionError as e:
            return self._reject(document, e)

        elapsed = time.perf_counter() - t0
        logger.info(
            f"Accepted '{document.filename}' in {elapsed:.2f}s "
            f"(ocr={extraction.used_fallback}, lines={len(lines)})"
        )
        return IngestionOutcome.accept(segments)

    @staticmethod
    def _reject(document: RawDocument, e: ResumeIngestionError) -> IngestionOutcome:
        logger.info(f"Rejected '{document.filename}': {e.reason} ({e})")
        return IngestionOutcome.reject(e.reason)
