"""Doctor report upload: returns the text to feed into ``/compare``."""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from consult_ai.exceptions import UploadTooLargeError
from consult_ai.services.document_text import extract_document_text

log = logging.getLogger(__name__)

router = APIRouter(tags=["extraction"])


@router.post("/extract-doctor-report")
async def extract_doctor_report(req: Request, file: UploadFile = File(...)) -> dict[str, str]:
    """Extract text from a ``.txt``, PDF, or image upload (OCR)."""
    upload = req.app.state.settings.upload
    data = await file.read(upload.max_bytes + 1)
    if len(data) > upload.max_bytes:
        raise UploadTooLargeError(f"File too large. Max {upload.max_bytes} bytes allowed.")

    # PDF parsing and OCR block; keep them off the event loop
    text = await run_in_threadpool(
        extract_document_text,
        data,
        file.filename or "",
        file.content_type or "",
        max_bytes=upload.max_bytes,
        ocr_language=upload.ocr_language,
    )
    log.info("Extracted doctor report", extra={"upload_name": file.filename, "chars": len(text)})
    return {"text": text}
