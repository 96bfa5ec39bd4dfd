"""
Template registry: page geometry, typography and stylesheets for each book
template.

MIT License - Copyright (c) 2025 BookMagic
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .console import console

DEFAULT_TEMPLATE_ID = "serif-classic"

_MARGIN_RE = re.compile(r'^(-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)\s*(cm|in|mm|pt|px)?$')
_TEMPLATE_ID_RE = re.compile(r'^[a-z0-9][a-z0-9-]*$')


def validate_margin(margin_str: str) -> str:
    """Validate and normalize a single margin value."""
    match = _MARGIN_RE.match(margin_str.strip())
    if not match:
        raise ValueError(f"Invalid margin format: '{margin_str}'. Use format like '1in', '2.5cm', '10mm', etc.")

    value_str, unit = match.groups()
    value = float(value_str)

    # Set default unit to 'in' if not specified
    if not unit:
        unit = 'in'

    if unit == 'cm':
        value_inches = value / 2.54
    elif unit == 'mm':
        value_inches = value / 25.4
    elif unit == 'pt':
        value_inches = value / 72
    elif unit == 'px':
        value_inches = value / 96  # Assuming 96 DPI
    else:  # 'in'
        value_inches = value

    if value_inches < 0:
        raise ValueError(f"Margin cannot be negative: '{margin_str}'. Minimum value is 0.")
    elif value_inches > 3:
        raise ValueError(f"Margin too large: '{margin_str}'. Maximum value is 3 inches (7.62cm).")

    return f"{value:g}{unit}"


@dataclass(frozen=True)
class TemplateDescriptor:
    """Immutable description of one book template."""

    id: str
    name: str
    size_label: str
    font: str
    font_size: str
    description: str
    margins: Dict[str, str]
    fallback_css: str
    toc_css: str
    page_format: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    preview_url: str = field(default="")

    def pdf_page_options(self) -> Dict[str, object]:
        """Page geometry in the shape Playwright's page.pdf() expects."""
        options: Dict[str, object] = {
            "margin": {edge: validate_margin(self.margins[edge]) for edge in ("top", "right", "bottom", "left")},
        }
        if self.page_format:
            options["format"] = self.page_format
        else:
            options["width"] = self.width
            options["height"] = self.height
        return options

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size_label,
            "font": self.font,
            "fontSize": self.font_size,
            "description": self.description,
            "pageFormat": self.page_format,
            "width": self.width,
            "height": self.height,
            "margins": dict(self.margins),
            "previewUrl": self.preview_url,
        }


SERIF_CLASSIC_CSS = """
        body {
          font-family: 'Times New Roman', 'Times', serif;
          font-size: 11pt;
          line-height: 1.4;
          margin: 1in;
          text-align: justify;
          color: #333;
        }
        h1 {
          font-size: 18pt;
          font-weight: bold;
          text-align: center;
          margin: 2em 0 1em 0;
          page-break-before: always;
        }
        h2 {
          font-size: 14pt;
          font-weight: bold;
          margin: 1.5em 0 0.5em 0;
        }
        h3 {
          font-size: 12pt;
          font-weight: bold;
          margin: 1em 0 0.5em 0;
        }
        p {
          margin: 0 0 0.5em 0;
          text-indent: 1.5em;
        }
        p:first-child, h1 + p, h2 + p, h3 + p {
          text-indent: 0;
        }
        blockquote {
          margin: 1em 2em;
          font-style: italic;
          border-left: 3px solid #ccc;
          padding-left: 1em;
        }
        ul, ol {
          margin: 1em 0;
          padding-left: 2em;
        }
"""

TRADE_CLEAN_CSS = """
        body {
          font-family: 'Georgia', serif;
          font-size: 10pt;
          line-height: 1.5;
          margin: 1in;
          text-align: left;
          color: #2c2c2c;
        }
        h1 {
          font-size: 16pt;
          font-weight: normal;
          margin: 3em 0 2em 0;
          text-transform: uppercase;
          letter-spacing: 0.1em;
        }
        h2 {
          font-size: 12pt;
          font-weight: bold;
          margin: 2em 0 1em 0;
        }
        h3 {
          font-size: 11pt;
          font-weight: bold;
          margin: 1.5em 0 0.5em 0;
        }
        p {
          margin: 0 0 1em 0;
          text-indent: 0;
        }
        blockquote {
          margin: 1.5em 1em;
          font-style: italic;
          color: #555;
        }
"""

NOVELLA_A5_CSS = """
        body {
          font-family: 'Book Antiqua', 'Palatino', serif;
          font-size: 9pt;
          line-height: 1.3;
          margin: 0.75in;
          text-align: justify;
          color: #1a1a1a;
        }
        h1 {
          font-size: 14pt;
          font-weight: bold;
          margin: 1.5em 0 1em 0;
          text-align: center;
        }
        h2 {
          font-size: 11pt;
          font-weight: bold;
          margin: 1em 0 0.5em 0;
        }
        h3 {
          font-size: 10pt;
          font-weight: bold;
          margin: 0.8em 0 0.3em 0;
        }
        p {
          margin: 0 0 0.3em 0;
          text-indent: 1em;
        }
        p:first-child, h1 + p, h2 + p, h3 + p {
          text-indent: 0;
        }
        blockquote {
          margin: 0.8em 1.5em;
          font-style: italic;
          font-size: 0.95em;
        }
"""

BASE_TOC_CSS = """
    .table-of-contents {
      margin: 2em 0;
      page-break-after: always;
    }

    .toc-title {
      text-align: center;
      margin-bottom: 2em;
      font-weight: bold;
    }

    .toc-entries {
      margin: 0;
      padding: 0;
    }

    .toc-entry {
      display: flex;
      margin: 0.5em 0;
      align-items: baseline;
      page-break-inside: avoid;
    }

    .toc-text {
      flex: 0 0 auto;
    }

    .toc-dots {
      flex: 1 1 auto;
      border-bottom: 1px dotted #666;
      margin: 0 0.5em;
      height: 0.8em;
    }

    .toc-page {
      flex: 0 0 auto;
      font-weight: bold;
    }

    .toc-level-2 {
      font-size: 0.9em;
    }

    .toc-level-3 {
      font-size: 0.8em;
      font-style: italic;
    }
"""

TEMPLATES: Dict[str, TemplateDescriptor] = {
    "serif-classic": TemplateDescriptor(
        id="serif-classic",
        name="Serif Classic",
        size_label='6" × 9"',
        font="EB Garamond",
        font_size="11pt",
        description="Timeless style with literary charm.",
        width="6in",
        height="9in",
        margins={"top": "0.75in", "bottom": "0.75in", "left": "0.875in", "right": "0.625in"},
        fallback_css=SERIF_CLASSIC_CSS,
        toc_css="""
      .toc-title {
        font-size: 18pt;
        text-transform: uppercase;
        letter-spacing: 0.05em;
      }
      .toc-entry {
        font-size: 11pt;
        line-height: 1.4;
      }
""",
        preview_url="/previews/serif-classic.png",
    ),
    "trade-clean": TemplateDescriptor(
        id="trade-clean",
        name="Trade Clean",
        size_label='5.5" × 8.5"',
        font="Lora",
        font_size="10pt",
        description="Modern, clean look for nonfiction.",
        width="5.5in",
        height="8.5in",
        margins={"top": "1in", "bottom": "1in", "left": "1in", "right": "0.75in"},
        fallback_css=TRADE_CLEAN_CSS,
        toc_css="""
      .toc-title {
        font-size: 16pt;
        font-weight: normal;
      }
      .toc-entry {
        font-size: 10pt;
        line-height: 1.5;
      }
""",
        preview_url="/previews/trade-clean.png",
    ),
    "novella-a5": TemplateDescriptor(
        id="novella-a5",
        name="Novella A5",
        size_label="A5",
        font="Source Serif",
        font_size="9pt",
        description="Compact size, great for novellas.",
        page_format="A5",
        margins={"top": "0.75in", "bottom": "0.75in", "left": "0.75in", "right": "0.5in"},
        fallback_css=NOVELLA_A5_CSS,
        toc_css="""
      .toc-title {
        font-size: 14pt;
        text-transform: capitalize;
      }
      .toc-entry {
        font-size: 9pt;
        line-height: 1.3;
        margin: 0.3em 0;
      }
""",
        preview_url="/previews/novella-a5.png",
    ),
}


def is_known_template(template_id: Optional[str]) -> bool:
    return template_id in TEMPLATES


def get_template(template_id: Optional[str]) -> TemplateDescriptor:
    """Look up a template, falling back to serif-classic for unknown ids."""
    return TEMPLATES.get(template_id or "", TEMPLATES[DEFAULT_TEMPLATE_ID])


def list_templates() -> List[TemplateDescriptor]:
    return list(TEMPLATES.values())


def load_template_css(template_id: str, css_dir: Optional[Path]) -> str:
    """Return the template stylesheet.

    A ``{css_dir}/{template_id}.css`` file wins over the built-in stylesheet.
    Ids that are not plain slugs are never used to build a path.
    """
    if css_dir is not None and template_id and _TEMPLATE_ID_RE.match(template_id):
        css_path = Path(css_dir) / f"{template_id}.css"
        if css_path.is_file():
            with open(css_path, 'r', encoding='utf-8') as f:
                css = f.read()
            console.debug(f"Loaded template CSS: {css_path} ({len(css)} characters)")
            return css
        console.debug(f"Template CSS not found: {css_path}, using built-in stylesheet")
    return get_template(template_id).fallback_css


def get_toc_styles(template_id: Optional[str]) -> str:
    """Base TOC rules plus the template's overrides."""
    return BASE_TOC_CSS + get_template(template_id).toc_css
