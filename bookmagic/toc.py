"""
Table of contents derived from the headings of an HTML document.

Only headings that carry an ``id`` attribute are considered, which in
practice means pandoc output; HTML from the built-in markdown transform
yields no TOC. Page numbers are synthetic: the TOC is page 1 and the n-th
entry is placed on page n + 2 (0-based n).

MIT License - Copyright (c) 2025 BookMagic
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from .console import console

_HEADING_RE = re.compile(r'<h([1-3])([^>]*?)(?<![\w-])id="([^"]*)"([^>]*)>([\s\S]*?)</h[1-3]>', re.IGNORECASE)
_CLASS_ATTR_RE = re.compile(r'(?<![\w-])class="([^"]*)"', re.IGNORECASE)
_TAG_RE = re.compile(r'<[^>]*>')
_WHITESPACE_RE = re.compile(r'\s+')
# Entry, entries and block close back to back only at the end of the block
_TOC_BLOCK_RE = re.compile(
    r'\s*<div class="table-of-contents"[^>]*>[\s\S]*?</div>\s*</div>\s*</div>', re.IGNORECASE)

FIRST_CONTENT_PAGE = 2


@dataclass(frozen=True)
class TocEntry:
    level: int
    anchor_id: str
    text: str
    page_number: int


def is_title_tag(opening_tag_attrs: str) -> bool:
    """True when a heading's attributes include the ``title`` class."""
    match = _CLASS_ATTR_RE.search(opening_tag_attrs)
    return bool(match) and "title" in match.group(1).split()


def heading_text(inner_html: str) -> str:
    return _WHITESPACE_RE.sub(' ', _TAG_RE.sub('', inner_html)).strip()


def extract_toc_entries(html: str, include_subheadings: bool = True) -> List[TocEntry]:
    """Collect TOC entries in document order."""
    entries: List[TocEntry] = []
    for match in _HEADING_RE.finditer(html):
        level = int(match.group(1))
        attrs = match.group(2) + match.group(4)
        if is_title_tag(attrs):
            continue
        if level > 1 and not include_subheadings:
            continue
        entries.append(TocEntry(
            level=level,
            anchor_id=match.group(3),
            text=heading_text(match.group(5)),
            page_number=len(entries) + FIRST_CONTENT_PAGE,
        ))
    return entries


def render_toc(entries: List[TocEntry]) -> str:
    """Render entries as the contents-page HTML block ("" when empty)."""
    if not entries:
        return ''

    toc_html = """
<div class="table-of-contents" style="page-break-after: always;">
  <h1 class="toc-title">Contents</h1>
  <div class="toc-entries">
"""
    for entry in entries:
        indent = f"margin-left: {(entry.level - 1) * 1.5:g}em;" if entry.level > 1 else ''
        toc_html += f"""
    <div class="toc-entry toc-level-{entry.level}" style="{indent}">
      <span class="toc-text">{entry.text}</span>
      <span class="toc-dots"></span>
      <span class="toc-page">{entry.page_number}</span>
    </div>"""

    toc_html += """
  </div>
</div>"""
    return toc_html


def generate_table_of_contents(html: str, template_id: Optional[str] = None,
                               include_subheadings: bool = True) -> str:
    """Build the contents page for ``html``.

    The markup is the same for every template; ``template_id`` only shows up
    in the debug log. Per-template styling lives in the TOC CSS.
    """
    entries = extract_toc_entries(html, include_subheadings)
    if not entries:
        console.debug("No headings found for table of contents")
        return ''
    console.debug(f"Found {len(entries)} headings for TOC (template {template_id})")
    return render_toc(entries)


def strip_toc(html: str) -> str:
    """Remove a contents block previously inserted by :func:`render_toc`."""
    return _TOC_BLOCK_RE.sub('', html)
