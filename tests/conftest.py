import pytest

from app import create_app
from app.services.extraction_dispatcher import ExtractionDispatcher
from app.services.resume_pipeline import ResumeIngestionPipeline

RESUME_TEXT = """John Smith
john.smith@example.com

PROFESSIONAL EXPERIENCE
• Senior Engineer, Acme Corp (2019 - Present)
• Built payment services in Python and Go

SKILLS
Python, Java, SQL, Docker, Kubernetes
"""


class FakeExtractor:
    """Stands in for an extractor back-end; records how often it ran."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    def extract(self, data: bytes) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def make_dispatcher():
    def _make(pdf="", docx="", ocr=RESUME_TEXT, pdf_error=None, docx_error=None, ocr_error=None):
        return ExtractionDispatcher(
            pdf_extractor=FakeExtractor(pdf, pdf_error),
            docx_extractor=FakeExtractor(docx, docx_error),
            ocr_extractor=FakeExtractor(ocr, ocr_error),
        )
    return _make


@pytest.fixture
def app(tmp_path, make_dispatcher):
    app = create_app("testing", overrides={"RESUME_STORAGE_PATH": str(tmp_path / "analyses")})
    app.resume_pipeline = ResumeIngestionPipeline(make_dispatcher(pdf=RESUME_TEXT))
    return app


@pytest.fixture
def client(app):
    return app.test_client()
