"""Application services: session storage and document text extraction."""
