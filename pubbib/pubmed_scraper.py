"""PubMed Scraper Module - finds article pages by title and turns them into BibTeX."""

import dataclasses
import string
import time
from dataclasses import dataclass
from typing import Optional, List, Dict, Iterable
from urllib.parse import quote_plus, urljoin

import requests
from bs4 import BeautifulSoup
from loguru import logger

from .bibtex import CitationRecord, extract_record, format_record
from .config import config
from .errors import ExtractionError
from .logging_setup import log_lookup

# <a class="docsum-title" href="/33441414/">...</a>
SEARCH_RESULT_SELECTOR = 'a[class="docsum-title"]'


class RateLimiter:
    """Keeps successive requests at least 1/requests_per_second apart."""

    def __init__(self, requests_per_second: float = 2.5):
        self.min_interval = 1.0 / requests_per_second
        self.last_request_time = 0.0

    def wait_if_needed(self) -> None:
        """Wait if necessary to stay within rate limits."""
        now = time.time()
        elapsed = now - self.last_request_time

        if elapsed < self.min_interval:
            sleep_time = self.min_interval - elapsed
            logger.debug(f"Rate limiting: sleeping {sleep_time:.3f}s")
            time.sleep(sleep_time)

        self.last_request_time = time.time()


class CiteKeyRegistry:
    """
    Tracks cite keys handed out in one batch.

    The first record keeps its key; later records with the same key get
    a, b, c... appended (smith2020ta, smith2020tb).
    """

    def __init__(self):
        self._counts: Dict[str, int] = {}
        self._issued: set = set()

    def assign(self, key: str) -> str:
        count = self._counts.get(key, 0)
        self._counts[key] = count + 1
        if count == 0 and key not in self._issued:
            self._issued.add(key)
            return key

        candidate = key
        while candidate in self._issued:
            candidate = key + self._suffix(count)
            count += 1
        self._counts[key] = count
        self._issued.add(candidate)
        logger.debug(f"Cite key {key} already used, renamed to {candidate}")
        return candidate

    @staticmethod
    def _suffix(index: int) -> str:
        letters = string.ascii_lowercase
        suffix = ""
        index -= 1
        while index >= 0:
            suffix = letters[index % 26] + suffix
            index = index // 26 - 1
        return suffix

    def clear(self) -> None:
        self._counts.clear()
        self._issued.clear()


@dataclass
class LookupResult:
    """Result from a title/URL lookup."""
    success: bool
    source: str
    url: Optional[str] = None
    record: Optional[CitationRecord] = None
    bibtex: str = ""
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'success': self.success,
            'source': self.source,
            'url': self.url,
            'record': self.record.to_dict() if self.record else None,
            'error': self.error,
        }


class PubMedScraper:
    """Searches PubMed for a title and builds a BibTeX entry from the first hit."""

    def __init__(self, base_url: str = None, timeout: int = None,
                 requests_per_second: float = None, strict: bool = None):
        self.base_url = (base_url or config.PUBMED_BASE_URL).rstrip('/')
        self.timeout = timeout or config.REQUEST_TIMEOUT
        self.strict = strict
        self.rate_limiter = RateLimiter(requests_per_second or config.REQUESTS_PER_SECOND)
        self.headers = {
            'User-Agent': config.USER_AGENT,
            'Accept': 'text/html,application/xhtml+xml',
            'Accept-Language': 'en-US,en;q=0.9',
        }

    def search_url(self, title: str) -> str:
        return f"{self.base_url}/?term={quote_plus(title)}"

    def _request(self, url: str) -> str:
        self.rate_limiter.wait_if_needed()
        logger.info(f"GET {url}")
        response = requests.get(url, headers=self.headers, timeout=self.timeout)
        response.raise_for_status()
        return response.text

    def fetch_paper_url(self, search_html: str) -> Optional[str]:
        """URL of the first search result, or None when there are no results."""
        soup = BeautifulSoup(search_html, 'html.parser')
        element = soup.select_one(SEARCH_RESULT_SELECTOR)
        if element is None or not element.get('href'):
            return None
        return urljoin(self.base_url + '/', element['href'])

    def fetch_document(self, url: str) -> BeautifulSoup:
        return BeautifulSoup(self._request(url), 'html.parser')

    def lookup_html(self, html: str, source: str, url: Optional[str] = None) -> LookupResult:
        """Build a citation from page markup already in hand."""
        return self._build(BeautifulSoup(html, 'html.parser'), source, url)

    def lookup_url(self, url: str, source: Optional[str] = None) -> LookupResult:
        source = source or url
        logger.info(f"paper url: {url}")
        try:
            document = self.fetch_document(url)
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch {url}: {e}")
            log_lookup(source, "failed", {'url': url, 'error': str(e)})
            return LookupResult(success=False, source=source, url=url, error=f"Request failed: {e}")
        return self._build(document, source, url)

    def lookup_title(self, title: str) -> LookupResult:
        try:
            search_html = self._request(self.search_url(title))
        except requests.exceptions.RequestException as e:
            logger.error(f"Search failed for '{title}': {e}")
            log_lookup(title, "failed", {'error': str(e)})
            return LookupResult(success=False, source=title, error=f"Search failed: {e}")

        paper_url = self.fetch_paper_url(search_html)
        if not paper_url:
            logger.warning(f"No search results for '{title}'")
            log_lookup(title, "not_found")
            return LookupResult(success=False, source=title, error="No search results")
        return self.lookup_url(paper_url, source=title)

    def _build(self, document: BeautifulSoup, source: str, url: Optional[str]) -> LookupResult:
        try:
            record = extract_record(document, strict=self.strict)
        except ExtractionError as e:
            e.with_source(url or source)
            logger.error(f"Extraction failed: {e}")
            log_lookup(source, "failed", {'url': url, 'error': str(e)})
            return LookupResult(success=False, source=source, url=url, error=str(e))

        log_lookup(source, "success", {'url': url, 'cite_key': record.citation_key})
        return LookupResult(
            success=True,
            source=source,
            url=url,
            record=record,
            bibtex=format_record(record),
        )

    def batch_lookup(self, titles: Iterable[str], disambiguate: bool = None) -> List[LookupResult]:
        """
        Look up each title in turn; a failed title never stops the batch.

        Repeated cite keys are given letter suffixes when disambiguate is set
        (default: config).
        """
        if disambiguate is None:
            disambiguate = config.DISAMBIGUATE_KEYS
        registry = CiteKeyRegistry()
        results = []

        for title in titles:
            title = title.strip()
            if not title:
                continue
            result = self.lookup_title(title)
            if result.success and disambiguate:
                base_key = result.record.citation_key
                key = registry.assign(base_key)
                if key != base_key:
                    result.record = dataclasses.replace(result.record, key_suffix=key[len(base_key):])
                    result.bibtex = format_record(result.record)
            results.append(result)

        success_count = sum(1 for r in results if r.success)
        logger.info(f"Batch finished: {success_count}/{len(results)} successful")
        return results


__all__ = ['PubMedScraper', 'LookupResult', 'CiteKeyRegistry', 'RateLimiter']
