"""
Document Reading Module
Turns uploaded resume payloads (PDF or DOCX) into plain text.
"""

import io
import logging
from pathlib import Path
from typing import Optional

import PyPDF2
from docx import Document

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class DocumentProcessingError(Exception):
    """Raised when an upload cannot be turned into text."""
    pass


def detect_file_type(filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
    """
    Work out whether an upload is a PDF or a DOCX.

    Args:
        filename: Original file name, used for its extension
        content_type: MIME type reported by the client

    Returns:
        'pdf' or 'docx'

    Raises:
        DocumentProcessingError: If the upload is neither
    """
    extension = Path(filename).suffix.lower() if filename else ""

    if content_type == PDF_MIME or extension == ".pdf":
        return "pdf"
    if content_type == DOCX_MIME or extension == ".docx":
        return "docx"

    raise DocumentProcessingError("Unsupported file format. Please upload a PDF or DOCX file.")


def extract_text_from_pdf(payload: bytes) -> str:
    """Extract the text of every page, one line per page."""
    try:
        reader = PyPDF2.PdfReader(io.BytesIO(payload))
        text = ""
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text += page_text + "\n"

        logger.info(f"Extracted {len(text)} characters from {len(reader.pages)} PDF pages")
        return text
    except Exception as e:
        logger.error(f"Error parsing PDF: {e}")
        raise DocumentProcessingError(
            "Failed to parse PDF file. Please ensure the file is not corrupted."
        ) from e


def extract_text_from_docx(payload: bytes) -> str:
    """Extract paragraph text, then table cell text."""
    try:
        doc = Document(io.BytesIO(payload))
        text = ""

        for paragraph in doc.paragraphs:
            if paragraph.text.strip():
                text += paragraph.text + "\n"

        for table in doc.tables:
            for row in table.rows:
                for cell in row.cells:
                    if cell.text.strip():
                        text += cell.text + " "
                text += "\n"

        logger.info(f"Extracted {len(text)} characters from DOCX")
        return text
    except Exception as e:
        logger.error(f"Error parsing DOCX: {e}")
        raise DocumentProcessingError(
            "Failed to parse DOCX file. Please ensure the file is not corrupted."
        ) from e


def extract_text(payload: bytes, filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
    """
    Extract plain text from an uploaded resume.

    An empty result is not an error: the contact fields are simply collected
    in the chat afterwards.

    Raises:
        DocumentProcessingError: For unsupported formats or unreadable files
    """
    file_type = detect_file_type(filename, content_type)

    if file_type == "pdf":
        return extract_text_from_pdf(payload)
    return extract_text_from_docx(payload)
