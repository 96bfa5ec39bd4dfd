"""
EPUB generation through pandoc, with a plain-text placeholder fallback.

The placeholder is NOT a valid EPUB container: it is a text file with an
``.epub`` name. Callers can tell the two apart with :func:`is_epub_container`
or the ``placeholder`` flag of :class:`EpubResult`.

MIT License - Copyright (c) 2025 BookMagic
"""

import zipfile
from dataclasses import dataclass
from pathlib import Path

from .console import console
from .metadata import html_to_plain_text
from .pandoc import Pandoc
from .samples import epub_placeholder_text

EPUB_MIMETYPE = "application/epub+zip"


@dataclass
class EpubResult:
    path: Path
    placeholder: bool


def is_epub_container(path: Path) -> bool:
    """True when ``path`` is a ZIP whose ``mimetype`` entry names EPUB."""
    try:
        with zipfile.ZipFile(path) as zf:
            return zf.read("mimetype").decode("ascii", errors="replace").strip() == EPUB_MIMETYPE
    except (OSError, KeyError, zipfile.BadZipFile):
        return False


class EpubGenerator:
    """Writes ``{project_id}.epub`` from the styled HTML document."""

    def __init__(self, pandoc: Pandoc, output_dir: Path):
        self.pandoc = pandoc
        self.output_dir = Path(output_dir)

    def generate(self, styled_html: str, epub_path: Path, project_id: str) -> EpubResult:
        epub_path = Path(epub_path)
        epub_path.parent.mkdir(parents=True, exist_ok=True)

        if self.pandoc.is_available():
            temp_html = self.output_dir / f"{project_id}.temp.html"
            try:
                with open(temp_html, 'w', encoding='utf-8') as f:
                    f.write(styled_html)
                console.info("Generating EPUB with Pandoc...")
                if self.pandoc.html_to_epub(temp_html, epub_path):
                    console.success(f"EPUB generated: {epub_path}")
                    return EpubResult(epub_path, placeholder=False)
                console.warning("Pandoc EPUB generation failed, writing placeholder")
            except OSError as e:
                console.warning(f"Could not prepare EPUB input: {e}")
            finally:
                temp_html.unlink(missing_ok=True)

        return self._write_placeholder(styled_html, epub_path, project_id)

    def _write_placeholder(self, styled_html: str, epub_path: Path, project_id: str) -> EpubResult:
        text = epub_placeholder_text(project_id, html_to_plain_text(styled_html))
        with open(epub_path, 'w', encoding='utf-8') as f:
            f.write(text)
        console.warning(f"Wrote placeholder EPUB (not a valid EPUB container): {epub_path}")
        return EpubResult(epub_path, placeholder=True)
