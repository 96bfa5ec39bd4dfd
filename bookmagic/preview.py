"""
Preview generation: uploaded manuscript -> styled HTML.

Writes ``{output_dir}/{id}.preview.html`` (pandoc output, when pandoc ran)
and ``{output_dir}/{id}.preview.final.html`` (the styled document). A
recent final preview produced for the same template is reused.

MIT License - Copyright (c) 2025 BookMagic
"""

import argparse
import json
import re
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .config import Config, add_config_arguments, config_from_args
from .console import console
from .errors import BookMagicError, InputMissingError, TemplateNotSelectedError
from .extraction import ContentExtractor
from .locator import find_uploaded_file, validate_project_id
from .metadata import DocumentStats, document_stats
from .pandoc import Pandoc
from .styling import apply_template
from .templates import get_template

_STYLE_TEMPLATE_RE = re.compile(r'<style\b[^>]*\bdata-template="([^"]*)"', re.IGNORECASE)


@dataclass
class PreviewResult:
    project_id: str
    template_id: str
    html: str
    html_path: Path
    input_file: Path
    used_pandoc: bool
    strategy: str
    cached: bool
    stats: DocumentStats
    cache_age_seconds: Optional[float] = None

    def summary(self) -> Dict[str, Any]:
        """JSON-friendly result without the HTML body."""
        return {
            "success": True,
            "projectId": self.project_id,
            "templateId": self.template_id,
            "htmlPath": str(self.html_path),
            "inputFile": str(self.input_file),
            "usedPandoc": self.used_pandoc,
            "strategy": self.strategy,
            "cached": self.cached,
            "cacheAgeSeconds": self.cache_age_seconds,
            "stats": self.stats.to_dict(),
        }


def preview_paths(output_dir: Path, project_id: str):
    """Return the (intermediate, final) preview file paths."""
    output_dir = Path(output_dir)
    return output_dir / f"{project_id}.preview.html", output_dir / f"{project_id}.preview.final.html"


def cached_template_id(html: str) -> Optional[str]:
    match = _STYLE_TEMPLATE_RE.search(html)
    return match.group(1) if match else None


def _read_cached_preview(final_path: Path, source: Path, template_id: str,
                         max_age: float) -> Optional[tuple]:
    """Return ``(html, age_seconds)`` when the cached preview can be reused."""
    if max_age <= 0 or not final_path.is_file():
        return None
    mtime = final_path.stat().st_mtime
    age = time.time() - mtime
    if age >= max_age or mtime < source.stat().st_mtime:
        return None
    with open(final_path, 'r', encoding='utf-8') as f:
        html = f.read()
    if cached_template_id(html) != template_id:
        return None
    return html, age


def generate_preview(project_id: str, template_id: Optional[str], config: Optional[Config] = None,
                     extractor: Optional[ContentExtractor] = None, use_cache: bool = True) -> PreviewResult:
    """Produce the styled preview for a project.

    Raises:
        InvalidProjectIdError: ``project_id`` cannot name a file.
        InputMissingError: nothing was uploaded for the project.
        TemplateNotSelectedError: no template id was given.
    """
    config = config or Config()
    validate_project_id(project_id)

    source = find_uploaded_file(project_id, config.get_uploads_dir())
    if source is None:
        raise InputMissingError(f"No uploaded file found for project {project_id}. Please upload a file first.")
    if not template_id:
        raise TemplateNotSelectedError(f"No template selected for project {project_id}. Please choose a template first.")

    template = get_template(template_id)
    output_dir = config.get_output_dir()
    output_dir.mkdir(parents=True, exist_ok=True)
    intermediate_path, final_path = preview_paths(output_dir, project_id)

    if use_cache:
        cached = _read_cached_preview(final_path, source, template.id, config.get_preview_cache_seconds())
        if cached is not None:
            html, age = cached
            console.info(f"Using cached preview for {project_id} ({age:.0f}s old)")
            return PreviewResult(project_id, template.id, html, final_path, source, False,
                                 "cache", True, document_stats(html), age)

    extractor = extractor or ContentExtractor(Pandoc(config.get_pandoc_path(), config.get_pandoc_timeout()))
    console.info(f"Generating preview for {project_id} with template {template.id}")
    extraction = extractor.extract(source, intermediate_path)

    styled = apply_template(extraction.html, template.id, config.get_template_css_dir(),
                            title=f"{template.name} Preview")
    with open(final_path, 'w', encoding='utf-8') as f:
        f.write(styled)
    console.success(f"Preview HTML written: {final_path} ({len(styled)} characters)")

    return PreviewResult(project_id, template.id, styled, final_path, source, extraction.used_pandoc,
                         extraction.strategy, False, document_stats(extraction.html))


def main():
    """Entry point for bookmagic-preview."""
    parser = argparse.ArgumentParser(
        description="Generate a styled HTML preview for an uploaded manuscript",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bookmagic-preview my-book serif-classic
  bookmagic-preview my-book novella-a5 --output-dir build/output
  bookmagic-preview my-book trade-clean --no-cache --debug
        """
    )
    parser.add_argument("project_id", help="Project identifier (names the uploaded file)")
    parser.add_argument("template_id", help="Template id: serif-classic, trade-clean or novella-a5")
    parser.add_argument("--no-cache", action="store_true", help="Always regenerate the preview")
    add_config_arguments(parser)
    args = parser.parse_args()

    config = config_from_args(args)
    console.set_debug(config.is_debug())

    try:
        result = generate_preview(args.project_id, args.template_id, config, use_cache=not args.no_cache)
    except (BookMagicError, OSError, ValueError) as e:
        console.error(str(e))
        print(json.dumps({"success": False, "projectId": args.project_id, "error": str(e)}, indent=2))
        sys.exit(1)

    print(json.dumps(result.summary(), indent=2))


if __name__ == "__main__":
    main()
