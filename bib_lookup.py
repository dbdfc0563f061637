#!/usr/bin/env python3
"""
BibTeX Lookup Tool - Generate BibTeX entries for PubMed articles.

Usage:
    python bib_lookup.py --title "Accurate and efficient detection of gene fusions"
    python bib_lookup.py --url https://pubmed.ncbi.nlm.nih.gov/33441414/
    python bib_lookup.py --batch titles.txt -o refs.bib
    python bib_lookup.py --html saved_page.html --format json

Options:
    --strict            Fail when the copyright/citation block is missing
    --verbose           Debug logging
"""

import sys
import argparse
import json
from typing import List

from rich.console import Console

from pubbib.bibtex import export_records
from pubbib.config import config, VERSION
from pubbib.file_handler import FileHandler
from pubbib.logging_setup import init_from_config
from pubbib.pubmed_scraper import PubMedScraper, LookupResult

console = Console(stderr=True)


def format_output(results: List[LookupResult], output_format: str) -> str:
    """Render the successful results; failures are reported separately."""
    succeeded = [r for r in results if r.success]
    if output_format == 'json':
        return json.dumps([r.record.to_dict() for r in succeeded], indent=2)
    return export_records(r.record for r in succeeded)


def report_failures(results: List[LookupResult]) -> None:
    for result in results:
        if not result.success:
            where = result.url or result.source
            console.print(f"[red]Error: {where}: {result.error}[/red]")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate BibTeX entries from PubMed article pages",
    )

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument('--title', '-t', help='Article title to search')
    source_group.add_argument('--url', help='Article page URL')
    source_group.add_argument('--batch', help='File with titles (one per line)')
    source_group.add_argument('--html', help='Saved article page')

    parser.add_argument('--format', '-f', choices=['bibtex', 'json'], default='bibtex')
    parser.add_argument('--output', '-o', help='Output file (default: stdout)')
    parser.add_argument('--strict', action='store_true', default=None,
                        help='Fail when an expected page block is missing')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    parser.add_argument('--version', action='version', version=f'%(prog)s {VERSION}')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    init_from_config(verbose=args.verbose)

    scraper = PubMedScraper(strict=args.strict)
    files = FileHandler()

    try:
        if args.title:
            results = [scraper.lookup_title(args.title)]
        elif args.url:
            results = [scraper.lookup_url(args.url)]
        elif args.html:
            results = [scraper.lookup_html(files.read_html(args.html), source=args.html)]
        else:
            results = scraper.batch_lookup(files.read_titles(args.batch),
                                           disambiguate=config.DISAMBIGUATE_KEYS)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    report_failures(results)
    output_text = format_output(results, args.format)

    if args.output:
        path = files.write_output(output_text, args.output)
        console.print(f"[green]Output written to: {path}[/green]")
    elif output_text:
        print(output_text, end='' if args.format == 'bibtex' else '\n')

    if len(results) > 1:
        success_count = sum(1 for r in results if r.success)
        console.print(f"\n[cyan]Processed {len(results)} titles: {success_count} successful, "
                      f"{len(results) - success_count} failed[/cyan]")

    return 0 if any(r.success for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
