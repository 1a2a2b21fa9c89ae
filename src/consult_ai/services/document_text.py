"""Doctor report text extraction from uploaded files (plain text, PDF, images).

PDF parsing needs ``pdfplumber`` and OCR needs ``pytesseract`` + ``Pillow``
(the ``extract`` extra). They are imported on first use.
"""

from __future__ import annotations

import io
import logging
import re

from consult_ai.exceptions import (
    DocumentExtractionError,
    EmptyDocumentError,
    UploadTooLargeError,
    ValidationError,
)

log = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 12 * 1024 * 1024
_IMAGE_SUFFIX = re.compile(r"\.(jpe?g|png|webp|bmp|tiff?)$", re.IGNORECASE)


class ExtractorUnavailableError(RuntimeError):
    """An optional extraction library is not installed."""


def _is_text(filename: str, content_type: str) -> bool:
    return content_type == "text/plain" or filename.lower().endswith(".txt")


def _is_pdf(filename: str, content_type: str) -> bool:
    return content_type == "application/pdf" or filename.lower().endswith(".pdf")


def _is_image(filename: str, content_type: str) -> bool:
    return content_type.startswith("image/") or bool(_IMAGE_SUFFIX.search(filename))


def extract_pdf_text(data: bytes) -> str:
    """Text of every page, pages separated by blank lines. Unreadable pages are skipped."""
    try:
        import pdfplumber
    except ImportError as exc:
        raise ExtractorUnavailableError("PDF extraction requires pdfplumber") from exc

    parts: list[str] = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for number, page in enumerate(pdf.pages, start=1):
            try:
                parts.append(page.extract_text() or "")
            except Exception as e:
                log.warning("Failed to read PDF page %d: %s", number, e)
    return "\n\n".join(parts)


def ocr_image(data: bytes, language: str = "eng") -> str:
    """OCR an image with Tesseract."""
    try:
        import pytesseract
        from PIL import Image
    except ImportError as exc:
        raise ExtractorUnavailableError("Image OCR requires pytesseract and Pillow") from exc

    with Image.open(io.BytesIO(data)) as img:
        return pytesseract.image_to_string(img, lang=language) or ""


def extract_document_text(
    data: bytes,
    filename: str = "",
    content_type: str = "",
    *,
    max_bytes: int = DEFAULT_MAX_BYTES,
    ocr_language: str = "eng",
) -> str:
    """Return the text of an uploaded doctor report.

    Raises:
        UploadTooLargeError: ``data`` exceeds ``max_bytes``.
        ValidationError: Empty upload or unsupported file type.
        EmptyDocumentError: The document parsed but held no text.
        DocumentExtractionError: The PDF or image could not be parsed.
        ExtractorUnavailableError: The library for this type is missing.
    """
    if not data:
        raise ValidationError("No file provided")
    if len(data) > max_bytes:
        raise UploadTooLargeError(f"File too large. Max {max_bytes} bytes allowed.")

    filename = filename or ""
    content_type = content_type or ""

    if _is_text(filename, content_type):
        return data.decode("utf-8", errors="replace")

    if _is_pdf(filename, content_type):
        try:
            text = extract_pdf_text(data)
        except ExtractorUnavailableError:
            raise
        except Exception as e:
            log.error("PDF parse error: %s", e)
            raise DocumentExtractionError("PDF parsing failed") from e
        if not text.strip():
            raise EmptyDocumentError("PDF parsed but no text found")
        return text

    if _is_image(filename, content_type):
        try:
            text = ocr_image(data, ocr_language)
        except ExtractorUnavailableError:
            raise
        except Exception as e:
            log.error("OCR error: %s", e)
            raise DocumentExtractionError("OCR failed") from e
        if not text.strip():
            raise EmptyDocumentError("OCR completed but no text found. Try a clearer scan.")
        return text

    raise ValidationError(f"Unsupported file type: {content_type or filename}")
