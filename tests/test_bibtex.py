"""
Tests for the BibTeX record module.

Tests cover:
- Cite key generation
- Record construction and required-field failures
- Strict vs lenient handling of missing page blocks
- Rendering order and optional-field omission
"""

import dataclasses

import pytest
from bs4 import BeautifulSoup

from pubbib.bibtex import CitationRecord, make_cite_key, extract_record, format_record, export_records
from pubbib.errors import MissingRequiredField, StructureAssumptionViolated, ExtractionError


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, 'html.parser')


class TestMakeCiteKey:

    def test_first_tokens_lowercased(self):
        key = make_cite_key(
            "Uhrig, Sebastian; Ellermann, Julia",
            "2021",
            "Accurate and efficient detection of gene fusions",
        )
        assert key == "uhrig,2021accurate"

    def test_stable(self):
        args = ("Uhrig, Sebastian; Ellermann, Julia", "2021", "Accurate and efficient detection")
        assert make_cite_key(*args) == make_cite_key(*args)

    def test_strip_punctuation(self):
        key = make_cite_key("Uhrig, Sebastian", "2021", "Accurate and efficient", strip_punctuation=True)
        assert key == "uhrig2021accurate"

    def test_depends_only_on_three_fields(self):
        a = CitationRecord(title="T x", authors="Smith J", journal="J1", year="2020")
        b = CitationRecord(title="T y", authors="Smith K", journal="J2", year="2020", doi="10.1/x")
        assert a.citation_key == b.citation_key == "smith2020t"


class TestCitationRecord:

    def test_key_derived_on_construction(self, uhrig_record):
        assert uhrig_record.citation_key == "uhrig2021accurate"
        assert uhrig_record.entry_type == "article"
        assert uhrig_record.month is None

    def test_immutable(self, uhrig_record):
        with pytest.raises(dataclasses.FrozenInstanceError):
            uhrig_record.title = "Other"

    def test_to_dict_omits_absent(self):
        record = CitationRecord(title="T", authors="Smith J;Doe A", journal="J", year="2020")
        assert record.to_dict() == {
            'entry_type': 'article',
            'citation_key': 'smith2020t',
            'title': 'T',
            'author': 'Smith J and Doe A',
            'journal': 'J',
            'year': '2020',
        }

    def test_key_recomputed_on_replace(self):
        record = CitationRecord(title="Accurate x", authors="Uhrig S", journal="J", year="2021")
        changed = dataclasses.replace(record, title="Different y", authors="Doe A")
        assert changed.citation_key == "doe2021different"
        assert format_record(changed).startswith("@article{doe2021different,\n")

    def test_key_not_settable(self):
        with pytest.raises(TypeError):
            CitationRecord(title="T", authors="Smith", journal="J", year="2020", citation_key="whatever")

    def test_key_suffix(self):
        record = CitationRecord(title="T", authors="Smith", journal="J", year="2020", key_suffix="b")
        assert record.citation_key == "smith2020tb"
        assert dataclasses.replace(record, year="2019").citation_key == "smith2019tb"

    def test_strip_key_punctuation_field(self):
        record = CitationRecord(title="T", authors="Smith, J.", journal="J", year="2020",
                                strip_key_punctuation=True)
        assert record.citation_key == "smith2020t"


class TestExtractRecord:

    def test_full_page(self, uhrig_doc):
        record = extract_record(uhrig_doc)
        assert record.title == "Accurate and efficient detection of gene fusions from RNA sequencing data"
        assert record.authors == "Uhrig S;Ellermann J;Walther T"
        assert record.year == "2021"
        assert record.volume == "31"
        assert record.issue_number == "3"
        assert record.pages == "448-460"
        assert record.publisher == "Cold Spring Harbor Laboratory Press"
        assert record.doi == "10.1101/gr.257246.119"
        assert record.citation_key == "uhrig2021accurate"

    @pytest.mark.parametrize("missing,field", [
        ("citation_title", "title"),
        ("citation_authors", "authors"),
        ("citation_journal_title", "journal"),
        ("citation_date", "year"),
    ])
    def test_missing_required_field(self, make_page, uhrig_meta, missing, field):
        del uhrig_meta[missing]
        with pytest.raises(MissingRequiredField) as exc:
            extract_record(soup(make_page(uhrig_meta)))
        assert exc.value.field == field

    def test_blank_required_field(self, make_page):
        doc = soup(make_page({
            "citation_title": "  ",
            "citation_authors": "Smith;",
            "citation_date": "2020",
            "citation_journal_title": "J",
        }))
        with pytest.raises(MissingRequiredField) as exc:
            extract_record(doc)
        assert exc.value.field == "title"
        assert isinstance(exc.value, ExtractionError)

    def test_blank_optional_field_is_absent(self, make_page):
        doc = soup(make_page({
            "citation_title": "T",
            "citation_authors": "Smith;",
            "citation_date": "2020",
            "citation_journal_title": "J",
            "citation_volume": "",
        }))
        assert extract_record(doc).volume is None

    def test_missing_blocks_lenient(self, make_page, uhrig_meta):
        doc = soup(make_page(uhrig_meta, copyright_text=None, citation_text=None))
        record = extract_record(doc, strict=False)
        assert record.publisher is None
        assert record.pages is None
        assert record.doi == "10.1101/gr.257246.119"

    def test_missing_blocks_strict(self, make_page, uhrig_meta):
        doc = soup(make_page(uhrig_meta, copyright_text=None))
        with pytest.raises(StructureAssumptionViolated) as exc:
            extract_record(doc, strict=True)
        assert exc.value.field == "publisher"

    def test_strip_punctuation_option(self, make_page):
        doc = soup(make_page({
            "citation_title": "Accurate detection",
            "citation_authors": "Uhrig, Sebastian;",
            "citation_date": "2021 Mar 15",
            "citation_journal_title": "Genome research",
        }))
        assert extract_record(doc, strip_punctuation=False).citation_key == "uhrig,2021accurate"
        assert extract_record(doc, strip_punctuation=True).citation_key == "uhrig2021accurate"


class TestFormatRecord:

    def test_field_order(self, uhrig_record):
        assert format_record(uhrig_record) == (
            "@article{uhrig2021accurate,\n"
            "  title = {Accurate and efficient detection of gene fusions from RNA sequencing data},\n"
            "  author = {Uhrig S and Ellermann J and Walther T},\n"
            "  journal = {Genome research},\n"
            "  volume = {31},\n"
            "  number = {3},\n"
            "  pages = {448-460},\n"
            "  year = {2021},\n"
            "  publisher = {Cold Spring Harbor Laboratory Press},\n"
            "  doi = {10.1101/gr.257246.119},\n"
            "}\n"
        )

    def test_idempotent(self, uhrig_record):
        assert format_record(uhrig_record) == format_record(uhrig_record)
        assert str(uhrig_record) == format_record(uhrig_record)

    def test_author_join(self):
        record = CitationRecord(title="T", authors="Smith, J.; Doe, A.", journal="J", year="2021")
        assert "  author = {Smith, J. and Doe, A.},\n" in format_record(record)

    def test_author_join_without_spaces(self):
        record = CitationRecord(title="T", authors="Smith, J.;Doe, A.", journal="J", year="2021")
        assert "  author = {Smith, J. and Doe, A.},\n" in format_record(record)

    @pytest.mark.parametrize("field,key", [
        ("volume", "volume"),
        ("issue_number", "number"),
        ("pages", "pages"),
        ("publisher", "publisher"),
        ("doi", "doi"),
    ])
    def test_optional_field_omitted(self, uhrig_record, field, key):
        record = dataclasses.replace(uhrig_record, **{field: None})
        output = format_record(record)
        assert f"  {key} = " not in output
        assert "{}" not in output
        assert "  year = {2021},\n" in output

    def test_month_never_rendered(self, uhrig_record):
        record = dataclasses.replace(uhrig_record, month="Mar")
        assert "month" not in format_record(record)

    def test_end_to_end_minimal_page(self, minimal_doc):
        assert format_record(extract_record(minimal_doc)) == (
            "@article{smith2020t,\n"
            "  title = {T},\n"
            "  author = {Smith},\n"
            "  journal = {J},\n"
            "  pages = {1-5},\n"
            "  year = {2020},\n"
            "  publisher = {Pub Co.},\n"
            "}\n"
        )

    def test_export_records(self, uhrig_record):
        other = CitationRecord(title="T", authors="Smith", journal="J", year="2020")
        output = export_records([uhrig_record, other])
        assert output == format_record(uhrig_record) + "\n" + format_record(other)
