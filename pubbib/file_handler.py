"""File Handler Module - title lists, saved pages and .bib output."""

from pathlib import Path
from typing import List
from loguru import logger


class FileHandler:
    """Handles all file operations for PubBib."""

    @staticmethod
    def _existing(path: str) -> Path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.exists():
            raise FileNotFoundError(f"File not found: {resolved}")
        return resolved

    def read_titles(self, path: str) -> List[str]:
        """Read one title per line, skipping blank lines and '#' comments."""
        titles_path = self._existing(path)
        logger.info(f"Reading titles: {titles_path}")
        lines = titles_path.read_text(encoding='utf-8').splitlines()
        titles = [line.strip() for line in lines
                  if line.strip() and not line.strip().startswith('#')]
        logger.info(f"Read {len(titles)} titles")
        return titles

    def read_html(self, path: str) -> str:
        """Read a saved article page."""
        html_path = self._existing(path)
        logger.info(f"Reading: {html_path}")
        try:
            return html_path.read_text(encoding='utf-8')
        except UnicodeDecodeError:
            return html_path.read_text(encoding='latin-1')

    def write_output(self, content: str, output_path: str) -> Path:
        """Write rendered entries to output_path."""
        out_path = Path(output_path).expanduser().resolve()
        logger.info(f"Writing to: {out_path}")
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, 'w', encoding='utf-8') as f:
            f.write(content)
        logger.info(f"Wrote {len(content)} characters")
        return out_path
