"""Shared fixtures: synthetic PubMed-style article pages."""

import sys
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

sys.path.insert(0, str(Path(__file__).parent.parent))


def _make_page(meta=None, copyright_text="Copyright © 2021 by Cold Spring Harbor Laboratory Press",
               citation_text="2021 Mar;31(3):448-460."):
    """Build an article page; pass None for a block to leave it out."""
    meta = meta if meta is not None else {}
    head = "\n".join(
        f'<meta name="{name}" content="{value}">' for name, value in meta.items()
    )
    body = ""
    if citation_text is not None:
        body += f'<div class="article-source"><span class="cit">{citation_text}</span></div>\n'
    if copyright_text is not None:
        body += f'<p class="copyright">{copyright_text}</p>\n'
    return f"<html><head>{head}</head><body>{body}</body></html>"


UHRIG_META = {
    "citation_title": "Accurate and efficient detection of gene fusions from RNA sequencing data",
    "citation_authors": "Uhrig S;Ellermann J;Walther T;",
    "citation_date": "03/15/2021",
    "citation_journal_title": "Genome research",
    "citation_volume": "31",
    "citation_issue": "3",
    "citation_doi": "10.1101/gr.257246.119",
}


@pytest.fixture
def uhrig_html():
    return _make_page(UHRIG_META)


@pytest.fixture
def uhrig_doc(uhrig_html):
    return BeautifulSoup(uhrig_html, 'html.parser')


@pytest.fixture
def minimal_doc():
    """Only the required tags plus the two page blocks."""
    html = _make_page(
        {
            "citation_title": "T",
            "citation_authors": "Smith;",
            "citation_date": "2020/01/01",
            "citation_journal_title": "J",
        },
        copyright_text="Copyright 2020 by Pub Co.",
        citation_text="2020 Jan;1(1):1-5.",
    )
    return BeautifulSoup(html, 'html.parser')


@pytest.fixture
def make_page():
    return _make_page


@pytest.fixture
def uhrig_meta():
    return dict(UHRIG_META)


@pytest.fixture
def uhrig_record():
    from pubbib.bibtex import CitationRecord
    return CitationRecord(
        title=UHRIG_META["citation_title"],
        authors="Uhrig S;Ellermann J;Walther T",
        journal="Genome research",
        year="2021",
        volume="31",
        issue_number="3",
        pages="448-460",
        publisher="Cold Spring Harbor Laboratory Press",
        doi="10.1101/gr.257246.119",
    )
