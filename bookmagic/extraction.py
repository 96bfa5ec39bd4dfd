"""
Content extraction: source manuscript -> HTML.

Extraction is an ordered list of strategies. Each strategy is total: it
logs and swallows its own failure so the next one can run, and the
extractor always hands back some HTML (the real content, a labelled
placeholder or an error page).

MIT License - Copyright (c) 2025 BookMagic
"""

import re
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .console import console
from .markdown import markdown_to_html
from .pandoc import Pandoc
from .samples import (
    conversion_error_markdown,
    docx_placeholder_markdown,
    unsupported_format_markdown,
)

_RTF_CONTROL_WORD_RE = re.compile(r'\\[a-z]+\d*\s?')
_RTF_BRACES_RE = re.compile(r'[{}]')


@dataclass
class ExtractionResult:
    """HTML produced from one source document."""

    html: str
    used_pandoc: bool
    strategy: str
    source_path: Optional[Path] = None

    @property
    def is_placeholder(self) -> bool:
        return self.strategy in ("docx-placeholder", "unsupported", "error", "sample")


class DocumentParser(ABC):
    """Turns a .docx file into markdown text.

    Real OOXML parsing is not built in; plug an implementation in through
    ``ContentExtractor(docx_parser=...)``.
    """

    name = "docx"

    @abstractmethod
    def parse(self, path: Path) -> str:
        """Return the document as markdown text."""


class PlaceholderDocxParser(DocumentParser):
    """Default parser: a labelled placeholder reporting the file's name and size."""

    name = "docx-placeholder"

    def parse(self, path: Path) -> str:
        return docx_placeholder_markdown(path.name, path.stat().st_size)


class ExtractionStrategy(ABC):
    """One way of producing HTML from a source file."""

    name = "base"
    extensions: Tuple[str, ...] = ()
    uses_pandoc = False

    def handles(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    @abstractmethod
    def _extract(self, path: Path, html_output: Optional[Path]) -> str:
        """Return HTML for ``path``; raise on failure."""

    def run(self, path: Path, html_output: Optional[Path] = None) -> Tuple[Optional[str], Optional[str]]:
        """Return ``(html, None)`` on success or ``(None, error_message)``."""
        try:
            html = self._extract(path, html_output)
        except Exception as e:
            console.warning(f"{self.name} extraction failed for {path.name}: {e}")
            return None, str(e)
        if not html:
            return None, f"{self.name} extraction produced no output"
        return html, None


class PandocStrategy(ExtractionStrategy):
    name = "pandoc"
    uses_pandoc = True

    def __init__(self, pandoc: Pandoc):
        self.pandoc = pandoc

    def handles(self, path: Path) -> bool:
        return self.pandoc.supports(path) and self.pandoc.is_available()

    def _extract(self, path: Path, html_output: Optional[Path]) -> str:
        if html_output is None:
            with tempfile.TemporaryDirectory(prefix="bookmagic-") as tmp:
                return self._convert(path, Path(tmp) / f"{path.stem}.html")
        Path(html_output).parent.mkdir(parents=True, exist_ok=True)
        return self._convert(path, Path(html_output))

    def _convert(self, path: Path, html_file: Path) -> str:
        console.info(f"Converting {path.name} with Pandoc...")
        if not self.pandoc.to_html(path, html_file):
            raise RuntimeError("Pandoc conversion failed")
        with open(html_file, 'r', encoding='utf-8') as f:
            html = f.read()
        console.debug(f"Pandoc conversion successful: {len(html)} characters")
        return html


class MarkdownStrategy(ExtractionStrategy):
    name = "markdown"
    extensions = (".md",)

    def _extract(self, path: Path, html_output: Optional[Path]) -> str:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            content = f.read()
        console.debug(f"Read markdown file: {len(content)} characters")
        return markdown_to_html(content)


def rtf_to_plain_text(content: str) -> str:
    """Crude RTF stripping: drop control words and braces."""
    return _RTF_BRACES_RE.sub('', _RTF_CONTROL_WORD_RE.sub('', content))


class RtfStrategy(ExtractionStrategy):
    name = "rtf"
    extensions = (".rtf",)

    def _extract(self, path: Path, html_output: Optional[Path]) -> str:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            content = f.read()
        plain_text = rtf_to_plain_text(content)
        return markdown_to_html(f"# Document from {path.name}\n\n{plain_text}")


class DocxStrategy(ExtractionStrategy):
    extensions = (".docx",)

    def __init__(self, parser: DocumentParser):
        self.parser = parser
        self.name = parser.name

    def _extract(self, path: Path, html_output: Optional[Path]) -> str:
        return markdown_to_html(self.parser.parse(path))


class ContentExtractor:
    """Tries each extraction strategy in order until one yields HTML."""

    def __init__(self, pandoc: Optional[Pandoc] = None, docx_parser: Optional[DocumentParser] = None,
                 strategies: Optional[List[ExtractionStrategy]] = None):
        self.pandoc = pandoc or Pandoc()
        if strategies is None:
            strategies = [
                PandocStrategy(self.pandoc),
                MarkdownStrategy(),
                RtfStrategy(),
                DocxStrategy(docx_parser or PlaceholderDocxParser()),
            ]
        self.strategies = strategies

    def extract(self, path: Path, html_output: Optional[Path] = None) -> ExtractionResult:
        """Convert ``path`` to HTML. Pandoc output, when used, is written to ``html_output``."""
        path = Path(path)
        handled = False
        last_error: Optional[str] = None

        for strategy in self.strategies:
            if not strategy.handles(path):
                continue
            handled = True
            html, error = strategy.run(path, html_output)
            if html is not None:
                console.success(f"Extracted {path.name} using {strategy.name} ({len(html)} characters)")
                return ExtractionResult(html, strategy.uses_pandoc, strategy.name, path)
            last_error = error
            console.info("Falling back to the next extraction strategy...")

        if not handled:
            console.warning(f"Unsupported file type: {path.suffix or path.name}")
            html = markdown_to_html(unsupported_format_markdown(path.suffix.lower()))
            return ExtractionResult(html, False, "unsupported", path)

        console.error(f"Every extraction strategy failed for {path.name}: {last_error}")
        html = markdown_to_html(conversion_error_markdown(path.name, last_error or "unknown error"))
        return ExtractionResult(html, False, "error", path)

    def extract_markdown_text(self, markdown: str, strategy: str = "sample") -> ExtractionResult:
        """Run in-memory markdown (e.g. sample content) through the built-in transform."""
        return ExtractionResult(markdown_to_html(markdown), False, strategy, None)
