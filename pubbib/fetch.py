"""Field Extractor - pulls citation fields out of a parsed article page.

Two strategies are used:
- structured lookup of ``<meta name="citation_*" content="...">`` tags
- text scraping of the copyright notice and citation summary blocks,
  for fields that have no usable meta tag

Every rule takes a parsed document and returns the value or ``None``.
Rules that depend on a page block raise ``StructureAssumptionViolated``
when the block is missing; the record builder decides whether that is fatal.

Reference page: view-source:https://pubmed.ncbi.nlm.nih.gov/33441414/
"""

import re
from typing import Callable, Dict, Optional

from bs4 import BeautifulSoup, Tag
from loguru import logger

from .errors import MalformedOptionalField, StructureAssumptionViolated

META_SELECTOR = 'meta[name="{key}"]'

# <p class="copyright">Copyright © 2021 by Cold Spring Harbor Laboratory Press</p>
COPYRIGHT_SELECTOR = 'p[class="copyright"]'

# <span class="cit">2021 Mar;31(3):448-460.</span>
CITATION_SUMMARY_SELECTOR = 'span[class="cit"]'

YEAR_PATTERN = re.compile(r'\d{4}')


def fetch_citation_key(key: str, html: BeautifulSoup) -> Optional[str]:
    """Return the ``content`` of the first ``meta[name=key]`` tag, if any."""
    logger.debug(f"key: {key}")
    element = html.select_one(META_SELECTOR.format(key=key))
    if element is None:
        return None
    return element.get('content')


def _select_block(html: BeautifulSoup, selector: str, field: str) -> Tag:
    element = html.select_one(selector)
    if element is None:
        raise StructureAssumptionViolated(field, selector)
    return element


def fetch_title(html: BeautifulSoup) -> Optional[str]:
    return fetch_citation_key("citation_title", html)


def fetch_author(html: BeautifulSoup) -> Optional[str]:
    """Semicolon-delimited author list, without its trailing ';'."""
    authors = fetch_citation_key("citation_authors", html)
    if authors is not None and authors.endswith(';'):
        authors = authors[:-1]
    return authors


def fetch_year(html: BeautifulSoup) -> Optional[str]:
    """
    Year from ``citation_date``.

    Handles slash dates in either order ("03/15/2021", "2021/03/15") and
    space separated dates ("2021 Mar 15").
    """
    text = fetch_citation_key("citation_date", html)
    if text is None:
        return None
    logger.debug(f"year: {text}")
    return parse_year(text)


def parse_year(text: str) -> str:
    text = text.strip()
    if '/' in text:
        segments = [s.strip() for s in text.split('/')]
        years = [s for s in segments if YEAR_PATTERN.fullmatch(s)]
        return years[-1] if years else segments[-1]
    return text.split(' ')[0]


def fetch_journal(html: BeautifulSoup) -> Optional[str]:
    return fetch_citation_key("citation_journal_title", html)


def fetch_volume(html: BeautifulSoup) -> Optional[str]:
    return fetch_citation_key("citation_volume", html)


def fetch_number(html: BeautifulSoup) -> Optional[str]:
    return fetch_citation_key("citation_issue", html)


def fetch_doi(html: BeautifulSoup) -> Optional[str]:
    return fetch_citation_key("citation_doi", html)


def fetch_publisher(html: BeautifulSoup) -> Optional[str]:
    """
    Publisher parsed from the copyright notice.

    "Copyright © 2021 by Cold Spring Harbor Laboratory Press" gives
    "Cold Spring Harbor Laboratory Press".
    """
    element = _select_block(html, COPYRIGHT_SELECTOR, "publisher")
    text = " ".join(element.strings).strip()
    publisher = text.split("by")[-1].strip()
    logger.debug(f"publisher: {publisher}")
    return publisher


def check_page(page: str) -> bool:
    return '-' in page


def parse_page(text: str) -> str:
    """Page range after the last ':' of a citation summary like "2021 Mar;31(3):448-460."."""
    page = text.split(':')[-1].strip()
    if page.endswith('.'):
        page = page[:-1]
    if not check_page(page):
        raise MalformedOptionalField("pages", page)
    return page


def fetch_page(html: BeautifulSoup) -> Optional[str]:
    element = _select_block(html, CITATION_SUMMARY_SELECTOR, "pages")
    text = "".join(element.strings)
    if not text:
        return None
    try:
        page = parse_page(text)
    except MalformedOptionalField as e:
        logger.debug(f"Ignoring {e}")
        return None
    logger.debug(f"page: {page}")
    return page


# Record field name -> extraction rule, in rendering order
FIELD_RULES: Dict[str, Callable[[BeautifulSoup], Optional[str]]] = {
    'title': fetch_title,
    'authors': fetch_author,
    'journal': fetch_journal,
    'volume': fetch_volume,
    'issue_number': fetch_number,
    'pages': fetch_page,
    'year': fetch_year,
    'publisher': fetch_publisher,
    'doi': fetch_doi,
}

REQUIRED_FIELDS = ('title', 'authors', 'journal', 'year')


__all__ = [
    'fetch_citation_key',
    'fetch_title',
    'fetch_author',
    'fetch_year',
    'fetch_journal',
    'fetch_volume',
    'fetch_number',
    'fetch_doi',
    'fetch_publisher',
    'fetch_page',
    'parse_year',
    'parse_page',
    'check_page',
    'FIELD_RULES',
    'REQUIRED_FIELDS',
]
