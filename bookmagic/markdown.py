"""
Minimal Markdown to HTML transform used when pandoc is not available.

Only a handful of constructs are recognised: ``#``/``##``/``###`` headers,
``**bold**``, ``*italic*``, ``> quote`` lines and ``-``/``1.`` list items.
Template stylesheets and the TOC deriver rely on this exact tag vocabulary
(h1-h3, strong, em, blockquote, ul/li, p). Headings get no ``id``
attribute. Embedded HTML is passed through unescaped.

MIT License - Copyright (c) 2025 BookMagic
"""

import re

_H3_RE = re.compile(r'^### (.*)$', re.MULTILINE)
_H2_RE = re.compile(r'^## (.*)$', re.MULTILINE)
_H1_RE = re.compile(r'^# (.*)$', re.MULTILINE)
_BOLD_RE = re.compile(r'\*\*(.*?)\*\*')
_ITALIC_RE = re.compile(r'\*(.*?)\*')
_QUOTE_RE = re.compile(r'^> (.*)$', re.MULTILINE)
_ORDERED_ITEM_RE = re.compile(r'^\d+\. (.*)$', re.MULTILINE)
_BULLET_ITEM_RE = re.compile(r'^- (.*)$', re.MULTILINE)
# A run of consecutive <li> lines
_LIST_RUN_RE = re.compile(r'(?:^<li>.*</li>(?:\n|$))+', re.MULTILINE)

_BLOCK_PREFIXES = ('<h', '<blockquote', '<ul')


def _wrap_list_run(match: re.Match) -> str:
    run = match.group(0)
    if run.endswith("\n"):
        return "<ul>" + run[:-1] + "</ul>\n"
    return "<ul>" + run + "</ul>"


def markdown_to_html(markdown: str) -> str:
    """Convert markdown text to an HTML fragment."""
    html = markdown.replace('\r\n', '\n')

    # Headers
    html = _H3_RE.sub(r'<h3>\1</h3>', html)
    html = _H2_RE.sub(r'<h2>\1</h2>', html)
    html = _H1_RE.sub(r'<h1>\1</h1>', html)
    # Bold and italic
    html = _BOLD_RE.sub(r'<strong>\1</strong>', html)
    html = _ITALIC_RE.sub(r'<em>\1</em>', html)
    # Block quotes
    html = _QUOTE_RE.sub(r'<blockquote>\1</blockquote>', html)
    # Lists
    html = _ORDERED_ITEM_RE.sub(r'<li>\1</li>', html)
    html = _BULLET_ITEM_RE.sub(r'<li>\1</li>', html)
    html = _LIST_RUN_RE.sub(_wrap_list_run, html)

    # Paragraphs (split by blank lines)
    blocks = []
    for paragraph in html.split('\n\n'):
        paragraph = paragraph.strip()
        if paragraph == '' or paragraph.startswith(_BLOCK_PREFIXES):
            blocks.append(paragraph)
        else:
            text = paragraph.replace("\n", " ")
            blocks.append(f"<p>{text}</p>")
    return '\n'.join(blocks)
