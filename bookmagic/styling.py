"""
Template styling: TOC insertion and stylesheet injection.

The output of :func:`apply_template` always holds exactly one ``<style>``
block (template CSS followed by TOC CSS) and a ``<head>``/``<body>`` pair.

MIT License - Copyright (c) 2025 BookMagic
"""

import re
from pathlib import Path
from typing import Optional

from .console import console
from .templates import get_template, get_toc_styles, load_template_css
from .toc import generate_table_of_contents, is_title_tag

_H1_OPEN_RE = re.compile(r'<h1(\s[^>]*)?>', re.IGNORECASE)
_BODY_CLOSE_RE = re.compile(r'</body\s*>', re.IGNORECASE)
_HEAD_CLOSE_RE = re.compile(r'</head\s*>', re.IGNORECASE)
_STYLE_BLOCK_RE = re.compile(r'<style\b[^>]*>[\s\S]*?</style\s*>\s*', re.IGNORECASE)

DEFAULT_TITLE = "Book Preview"


def insert_toc(html: str, toc_html: str) -> str:
    """Place the TOC before the first non-title ``<h1>``.

    Falls back to just before ``</body>``, then to the end of the document.
    """
    if not toc_html:
        return html

    for match in _H1_OPEN_RE.finditer(html):
        if is_title_tag(match.group(1) or ''):
            continue
        return html[:match.start()] + toc_html + '\n' + html[match.start():]

    body_close = _BODY_CLOSE_RE.search(html)
    if body_close:
        return html[:body_close.start()] + toc_html + '\n' + html[body_close.start():]
    return html + toc_html


def style_block(css: str, template_id: str) -> str:
    return f'<style data-template="{template_id}">\n{css}\n</style>'


def inject_styles(html: str, css: str, template_id: str, title: str = DEFAULT_TITLE) -> str:
    """Replace any existing stylesheets with a single template style block."""
    html = _STYLE_BLOCK_RE.sub('', html)
    block = style_block(css, template_id)

    head_close = _HEAD_CLOSE_RE.search(html)
    if head_close:
        return html[:head_close.start()] + block + '\n' + html[head_close.start():]

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  {block}
</head>
<body>
{html}
</body>
</html>"""


def apply_template(html: str, template_id: str, css_dir: Optional[Path] = None,
                   include_toc: bool = True, title: str = DEFAULT_TITLE) -> str:
    """Turn intermediate HTML into the styled document for ``template_id``."""
    template = get_template(template_id)
    if template.id != template_id:
        console.warning(f"Unknown template '{template_id}', using {template.id}")

    css = load_template_css(template.id, css_dir) + '\n' + get_toc_styles(template.id)

    if include_toc:
        toc_html = generate_table_of_contents(html, template.id)
        if toc_html:
            html = insert_toc(html, toc_html)
            console.debug("Inserted table of contents")

    styled = inject_styles(html, css, template.id, title)
    console.debug(f"Applied template {template.id} ({len(styled)} characters)")
    return styled
