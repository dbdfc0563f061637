"""BibTeX Record Module.

Builds a CitationRecord from a parsed article page and renders it as a
BibTeX @article entry, e.g.:

    @article{uhrig2021accurate,
      title = {Accurate and efficient detection of gene fusions from RNA sequencing data},
      author = {Uhrig S and Ellermann J and Walther T},
      journal = {Genome research},
      volume = {31},
      number = {3},
      pages = {448-460},
      year = {2021},
      publisher = {Cold Spring Harbor Laboratory Press},
      doi = {10.1101/gr.257246.119},
    }
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Dict

from bs4 import BeautifulSoup
from loguru import logger

from .config import config
from .errors import MissingRequiredField, StructureAssumptionViolated
from .fetch import FIELD_RULES, REQUIRED_FIELDS


def _first_token(value: str) -> str:
    tokens = value.split()
    return tokens[0] if tokens else ""


def make_cite_key(authors: str, year: str, title: str, strip_punctuation: bool = False) -> str:
    """
    First author token + first year token + first title token, lowercased.

    Tokens are split on whitespace only, so "Smith, J." contributes "smith,"
    unless strip_punctuation is set.
    """
    cite_key = (_first_token(authors) + _first_token(year) + _first_token(title)).lower()
    if strip_punctuation:
        cite_key = re.sub(r'[^\w]', '', cite_key)
    return cite_key


@dataclass(frozen=True)
class CitationRecord:
    """A single journal article citation."""
    title: str
    authors: str  # semicolon-delimited, as found on the page
    journal: str
    year: str
    volume: Optional[str] = None
    issue_number: Optional[str] = None
    pages: Optional[str] = None
    publisher: Optional[str] = None
    doi: Optional[str] = None
    month: Optional[str] = None  # reserved, nothing extracts it yet
    strip_key_punctuation: bool = False
    key_suffix: str = ""  # batch disambiguation, e.g. "a" for the second smith2020t
    citation_key: str = field(init=False)
    entry_type: str = "article"

    def __post_init__(self):
        cite_key = make_cite_key(
            self.authors, self.year, self.title,
            strip_punctuation=self.strip_key_punctuation,
        )
        object.__setattr__(self, 'citation_key', cite_key + self.key_suffix)

    @property
    def bibtex_authors(self) -> str:
        """Author list joined with " and "; "Smith, J.; Doe, A." -> "Smith, J. and Doe, A."."""
        return ' and '.join(name.strip() for name in self.authors.split(';'))

    def to_dict(self) -> Dict[str, str]:
        """Record as a plain dict, absent fields left out."""
        data = {
            'entry_type': self.entry_type,
            'citation_key': self.citation_key,
            'title': self.title,
            'author': self.bibtex_authors,
            'journal': self.journal,
            'volume': self.volume,
            'number': self.issue_number,
            'pages': self.pages,
            'year': self.year,
            'month': self.month,
            'publisher': self.publisher,
            'doi': self.doi,
        }
        return {k: v for k, v in data.items() if v}

    def __str__(self) -> str:
        return format_record(self)


def extract_record(
    html: BeautifulSoup,
    strict: Optional[bool] = None,
    strip_punctuation: Optional[bool] = None,
) -> CitationRecord:
    """
    Build a CitationRecord from a parsed article page.

    Args:
        html: Parsed article page
        strict: Fail when the copyright or citation summary block is missing
            instead of leaving publisher/pages out (default: config)
        strip_punctuation: Clean the cite key (default: config)

    Raises:
        MissingRequiredField: title, authors, journal or year not found
        StructureAssumptionViolated: a page block is missing in strict mode
    """
    if strict is None:
        strict = config.STRICT_EXTRACTION
    if strip_punctuation is None:
        strip_punctuation = config.CITE_KEY_STRIP_PUNCTUATION

    values: Dict[str, Optional[str]] = {}
    for name, rule in FIELD_RULES.items():
        try:
            value = rule(html)
        except StructureAssumptionViolated as e:
            if strict or name in REQUIRED_FIELDS:
                raise
            logger.warning(f"Leaving out {name}: {e}")
            value = None

        if value is not None and not value.strip():
            value = None
        if value is None and name in REQUIRED_FIELDS:
            raise MissingRequiredField(name)
        values[name] = value

    record = CitationRecord(strip_key_punctuation=strip_punctuation, **values)
    logger.debug(f"Extracted record {record.citation_key}")
    return record


def format_record(record: CitationRecord, indent: str = "  ") -> str:
    """Render a record as a BibTeX entry; absent optional fields get no line."""
    optional_before_year = (
        ('volume', record.volume),
        ('number', record.issue_number),
        ('pages', record.pages),
    )
    optional_after_year = (
        ('publisher', record.publisher),
        ('doi', record.doi),
    )

    lines = [f"@{record.entry_type}{{{record.citation_key},"]
    lines.append(f"{indent}title = {{{record.title}}},")
    lines.append(f"{indent}author = {{{record.bibtex_authors}}},")
    lines.append(f"{indent}journal = {{{record.journal}}},")
    for key, value in optional_before_year:
        if value:
            lines.append(f"{indent}{key} = {{{value}}},")
    lines.append(f"{indent}year = {{{record.year}}},")
    for key, value in optional_after_year:
        if value:
            lines.append(f"{indent}{key} = {{{value}}},")
    lines.append("}")
    return "\n".join(lines) + "\n"


def export_records(records) -> str:
    """Join rendered entries with a blank line between them."""
    return "\n".join(format_record(r) for r in records)


__all__ = [
    'CitationRecord',
    'make_cite_key',
    'extract_record',
    'format_record',
    'export_records',
]
