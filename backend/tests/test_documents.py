import pytest

from interview_assistant.services.documents import (
    DOCX_MIME,
    PDF_MIME,
    DocumentProcessingError,
    detect_file_type,
    extract_text,
)
from interview_assistant.services.extractor import extract_fields

from conftest import FULL_RESUME, make_docx


def test_detect_file_type_by_mime_or_extension():
    assert detect_file_type("cv.bin", PDF_MIME) == "pdf"
    assert detect_file_type("cv.PDF", None) == "pdf"
    assert detect_file_type("cv", DOCX_MIME) == "docx"
    assert detect_file_type("cv.docx", "application/octet-stream") == "docx"


def test_unsupported_format_is_rejected():
    with pytest.raises(DocumentProcessingError, match="Unsupported file format"):
        extract_text(b"plain text resume", filename="cv.txt", content_type="text/plain")


def test_docx_text_feeds_the_extractor():
    text = extract_text(make_docx(*FULL_RESUME), filename="cv.docx")
    fields = extract_fields(text)

    assert text.startswith("Jane Doe\n")
    assert fields.name == "Jane Doe"
    assert fields.email == "jane.doe@example.com"
    assert fields.phone == "+1 (555) 123-4567"


def test_corrupt_pdf_raises():
    with pytest.raises(DocumentProcessingError, match="PDF"):
        extract_text(b"%PDF-1.4 this is not really a pdf", filename="cv.pdf")


def test_corrupt_docx_raises():
    with pytest.raises(DocumentProcessingError, match="DOCX"):
        extract_text(b"not a zip archive", filename="cv.docx")
