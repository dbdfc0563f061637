"""Extraction error types."""

from typing import Optional


class ExtractionError(Exception):
    """A document could not be turned into a citation record."""

    def __init__(self, field: str, message: str = "", source: Optional[str] = None):
        self.field = field
        self.source = source
        super().__init__(message or f"could not extract '{field}'")

    def with_source(self, source: str) -> 'ExtractionError':
        """Attach the title/URL of the document being processed."""
        self.source = source
        return self

    def __str__(self) -> str:
        message = super().__str__()
        if self.source:
            return f"{message} ({self.source})"
        return message


class MissingRequiredField(ExtractionError):
    """title, authors, journal or year is missing; no record is produced."""

    def __init__(self, field: str, source: Optional[str] = None):
        super().__init__(field, f"missing required field '{field}'", source)


class MalformedOptionalField(ExtractionError):
    """An optional value failed its validity check and is treated as absent."""

    def __init__(self, field: str, value: str):
        self.value = value
        super().__init__(field, f"malformed value for '{field}': {value!r}")


class StructureAssumptionViolated(ExtractionError):
    """An element the page layout is expected to contain is missing."""

    def __init__(self, field: str, selector: str):
        self.selector = selector
        super().__init__(field, f"no element matching '{selector}' for '{field}'")
