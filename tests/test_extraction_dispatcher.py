import asyncio

import pytest

from app.models.resume_document import RawDocument
from app.services.errors import ExtractorError, UnreadableDocumentError
from app.services.extraction_dispatcher import (
    DOC_MIME,
    DOCX_MIME,
    PDF_MIME,
    DocumentKind,
    classify_mime,
)

from conftest import RESUME_TEXT

GARBLED_40 = "x%#qz ?!~ k@@ 9 ;; zz ** a b c d ++ == w"


def _doc(mime, data=b"%PDF-1.7 fake", name="resume"):
    return RawDocument(data=data, mime_type=mime, filename=name)


@pytest.mark.parametrize("mime,kind", [
    (PDF_MIME, DocumentKind.PDF),
    ("Application/PDF; charset=binary", DocumentKind.PDF),
    (DOCX_MIME, DocumentKind.DOCX),
    (DOC_MIME, DocumentKind.LEGACY_DOC),
    ("image/png", DocumentKind.OTHER),
    ("", DocumentKind.OTHER),
])
def test_classify_mime(mime, kind):
    assert classify_mime(mime) == kind


def test_good_pdf_text_is_used_without_ocr(make_dispatcher):
    dispatcher = make_dispatcher(pdf=RESUME_TEXT)
    result = dispatcher.extract(_doc(PDF_MIME))
    assert result.text == RESUME_TEXT
    assert result.used_fallback is False
    assert dispatcher.ocr_extractor.calls == 0


def test_short_pdf_text_falls_through_to_ocr(make_dispatcher):
    assert len(GARBLED_40) == 40
    dispatcher = make_dispatcher(pdf=GARBLED_40)
    result = dispatcher.extract(_doc(PDF_MIME))
    assert result.text == RESUME_TEXT
    assert result.used_fallback is True
    assert dispatcher.pdf_extractor.calls == 1
    assert dispatcher.ocr_extractor.calls == 1


def test_non_ascii_pdf_text_falls_through_to_ocr(make_dispatcher):
    dispatcher = make_dispatcher(pdf="ÿþ" * 100)
    assert dispatcher.extract(_doc(PDF_MIME)).used_fallback is True
    assert dispatcher.ocr_extractor.calls == 1


def test_pdf_extractor_failure_is_recovered(make_dispatcher):
    dispatcher = make_dispatcher(pdf_error=ExtractorError("broken xref"))
    result = dispatcher.extract(_doc(PDF_MIME))
    assert result.text == RESUME_TEXT
    assert dispatcher.ocr_extractor.calls == 1


def test_docx_gate_is_length_only(make_dispatcher):
    # long enough, mostly non-ascii: passes the DOCX gate but not the alnum safety net
    text = "été — " * 30
    dispatcher = make_dispatcher(docx=text)
    result = dispatcher.extract(_doc(DOCX_MIME))
    assert result.used_fallback is True
    assert dispatcher.ocr_extractor.calls == 1


def test_good_docx_text_is_used_without_ocr(make_dispatcher):
    dispatcher = make_dispatcher(docx=RESUME_TEXT)
    result = dispatcher.extract(_doc(DOCX_MIME))
    assert result.text == RESUME_TEXT
    assert dispatcher.ocr_extractor.calls == 0


def test_short_docx_text_falls_through_to_ocr(make_dispatcher):
    dispatcher = make_dispatcher(docx="Experience")
    assert dispatcher.extract(_doc(DOCX_MIME)).used_fallback is True


def test_docx_extractor_failure_is_recovered(make_dispatcher):
    dispatcher = make_dispatcher(docx_error=ValueError("not a zip"))
    assert dispatcher.extract(_doc(DOCX_MIME)).text == RESUME_TEXT


@pytest.mark.parametrize("mime", [DOC_MIME, "image/png", "application/octet-stream"])
def test_doc_and_unknown_types_go_straight_to_ocr(make_dispatcher, mime):
    dispatcher = make_dispatcher(pdf=RESUME_TEXT, docx=RESUME_TEXT)
    result = dispatcher.extract(_doc(mime))
    assert result.used_fallback is True
    assert dispatcher.pdf_extractor.calls == 0
    assert dispatcher.docx_extractor.calls == 0
    assert dispatcher.ocr_extractor.calls == 1


def test_safety_net_retries_low_alnum_text_once(make_dispatcher):
    soup = "- . - . " * 20
    dispatcher = make_dispatcher(pdf=soup)
    result = dispatcher.extract(_doc(PDF_MIME))
    assert result.text == RESUME_TEXT
    assert dispatcher.ocr_extractor.calls == 1


def test_safety_net_retries_once_even_when_ocr_output_is_still_poor(make_dispatcher):
    soup = "- . - . " * 20
    dispatcher = make_dispatcher(pdf=soup, ocr=soup)
    result = dispatcher.extract(_doc(PDF_MIME))
    assert result.text == soup
    assert result.used_fallback is True
    assert dispatcher.ocr_extractor.calls == 1


def test_safety_net_never_fires_after_ocr_fallback(make_dispatcher):
    soup = "- . - . " * 20
    dispatcher = make_dispatcher(pdf="", ocr=soup)
    result = dispatcher.extract(_doc(PDF_MIME))
    assert result.text == soup
    assert dispatcher.ocr_extractor.calls == 1


def test_unreadable_after_ocr_when_text_too_short(make_dispatcher):
    dispatcher = make_dispatcher(pdf=GARBLED_40, ocr="too short")
    with pytest.raises(UnreadableDocumentError) as excinfo:
        dispatcher.extract(_doc(PDF_MIME))
    assert excinfo.value.reason == "UnreadableDocument"
    assert dispatcher.ocr_extractor.calls == 1


def test_ocr_failure_is_terminal(make_dispatcher):
    dispatcher = make_dispatcher(ocr_error=ExtractorError("tesseract not installed"))
    with pytest.raises(UnreadableDocumentError):
        dispatcher.extract(_doc(DOC_MIME))


def test_unexpected_ocr_exception_is_terminal(make_dispatcher):
    dispatcher = make_dispatcher(pdf="", ocr_error=RuntimeError("boom"))
    with pytest.raises(UnreadableDocumentError):
        dispatcher.extract(_doc(PDF_MIME))


def test_empty_buffer_is_unreadable(make_dispatcher):
    dispatcher = make_dispatcher()
    with pytest.raises(UnreadableDocumentError):
        dispatcher.extract(_doc(PDF_MIME, data=b""))
    assert dispatcher.ocr_extractor.calls == 0


def test_extract_async(make_dispatcher):
    dispatcher = make_dispatcher(docx=RESUME_TEXT)
    result = asyncio.run(dispatcher.extract_async(_doc(DOCX_MIME)))
    assert result.text == RESUME_TEXT
