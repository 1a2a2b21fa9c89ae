"""Exception hierarchy for consult-ai."""

from __future__ import annotations


class ConsultError(Exception):
    """Base exception for all consult-ai errors."""


class ValidationError(ConsultError):
    """Caller-supplied input fails a precondition."""


class UploadTooLargeError(ValidationError):
    """Uploaded document exceeds the configured size limit."""


class EmptyDocumentError(ValidationError):
    """Document was parsed but contained no extractable text."""


class UpstreamProviderError(ConsultError):
    """An external model provider call failed (transport, HTTP, or payload)."""


class EmbeddingProviderError(UpstreamProviderError):
    """Embedding request failed or returned a malformed payload."""


class ChatProviderError(UpstreamProviderError):
    """Chat-completion request failed or returned no content."""


class JSONParseError(ConsultError):
    """LLM response could not be parsed as JSON."""

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response


class SynthesisError(ConsultError):
    """Raised when a structured report cannot be produced."""


class SynthesisSchemaError(SynthesisError):
    """Model output was not valid JSON, or lacked required keys, after the retry."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = list(missing or [])


class PersistenceError(ConsultError):
    """Raised when the session store fails to read or write."""


class DocumentExtractionError(ConsultError):
    """A PDF or image could not be parsed into text."""


class NotFoundError(ConsultError):
    """A requested session or report does not exist."""


__all__ = [
    "ConsultError",
    "ValidationError",
    "UploadTooLargeError",
    "EmptyDocumentError",
    "UpstreamProviderError",
    "EmbeddingProviderError",
    "ChatProviderError",
    "JSONParseError",
    "SynthesisError",
    "SynthesisSchemaError",
    "PersistenceError",
    "DocumentExtractionError",
    "NotFoundError",
]
