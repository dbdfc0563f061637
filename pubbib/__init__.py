"""PubBib Modules"""

from .errors import (
    ExtractionError,
    MissingRequiredField,
    MalformedOptionalField,
    StructureAssumptionViolated,
)
from .fetch import fetch_citation_key, FIELD_RULES, REQUIRED_FIELDS
from .bibtex import CitationRecord, make_cite_key, extract_record, format_record, export_records
from .pubmed_scraper import PubMedScraper, LookupResult, CiteKeyRegistry
from .file_handler import FileHandler

__version__ = '0.2.0'
