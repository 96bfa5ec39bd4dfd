"""
Export worker: the full pipeline from uploaded manuscript to download bundle.

    locate -> extract -> TOC + styling -> PDF -> EPUB -> package

Each export is one sequential run. Stages that shell out to pandoc or write
the archive run in a worker thread and never block the event loop. The PDF stage
awaits the browser directly.

MIT License - Copyright (c) 2025 BookMagic
"""

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from tqdm import tqdm

from .config import Config, add_config_arguments, config_from_args
from .console import console
from .epub import EpubGenerator, is_epub_container
from .errors import BookMagicError
from .extraction import ContentExtractor, ExtractionResult
from .locator import find_uploaded_file, validate_project_id
from .metadata import DocumentStats, document_stats
from .package import ExportBundle, PackageAssembler
from .pandoc import Pandoc
from .pdf import FREE_PLAN, PdfRenderer, should_watermark
from .samples import sample_manuscript_markdown
from .styling import apply_template
from .templates import get_template


@dataclass
class ExportResult:
    project_id: str
    template_id: str
    user_plan: str
    input_file: Optional[Path]
    used_sample: bool
    used_pandoc: bool
    strategy: str
    html_path: Path
    pdf_path: Path
    epub_path: Path
    epub_placeholder: bool
    watermarked: bool
    bundle: ExportBundle
    stats: DocumentStats

    def summary(self) -> Dict[str, Any]:
        return {
            "success": True,
            "projectId": self.project_id,
            "templateId": self.template_id,
            "userPlan": self.user_plan,
            "inputFile": str(self.input_file) if self.input_file else None,
            "usedSample": self.used_sample,
            "usedPandoc": self.used_pandoc,
            "strategy": self.strategy,
            "htmlPath": str(self.html_path),
            "pdfPath": str(self.pdf_path),
            "epubPath": str(self.epub_path),
            "epubPlaceholder": self.epub_placeholder,
            "watermarked": self.watermarked,
            "exportDir": str(self.bundle.export_dir),
            "zipPath": str(self.bundle.zip_path),
            "stats": self.stats.to_dict(),
        }


class ExportPipeline:
    """Runs exports against one configuration.

    The PDF renderer keeps its browser between runs; call :meth:`close`
    (or use ``async with``) when done.
    """

    def __init__(self, config: Optional[Config] = None, pandoc: Optional[Pandoc] = None,
                 pdf_renderer: Optional[PdfRenderer] = None, extractor: Optional[ContentExtractor] = None):
        self.config = config or Config()
        self.pandoc = pandoc or Pandoc(self.config.get_pandoc_path(), self.config.get_pandoc_timeout())
        self.pdf_renderer = pdf_renderer or PdfRenderer()
        self.extractor = extractor or ContentExtractor(self.pandoc)
        self.assembler = PackageAssembler(self.config)

    async def __aenter__(self) -> "ExportPipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.pdf_renderer.close()

    def _extract(self, project_id: str, input_file: Optional[Path], html_path: Path) -> ExtractionResult:
        if input_file is not None:
            console.info(f"Using uploaded file: {input_file}")
            return self.extractor.extract(input_file, html_path)
        console.info(f"No upload for {project_id}, falling back to sample content")
        return self.extractor.extract_markdown_text(sample_manuscript_markdown(project_id))

    async def convert(self, project_id: str, template_id: str, user_plan: str = FREE_PLAN) -> ExportResult:
        """Run the whole export for one project.

        Raises:
            InvalidProjectIdError: ``project_id`` cannot name a file.
            ConversionError: the PDF could not be rendered.
            PackagingError: the bundle could not be written.
        """
        validate_project_id(project_id)
        template = get_template(template_id)
        user_plan = user_plan or FREE_PLAN
        console.info(f"Starting conversion for project {project_id} with template {template.id} ({user_plan} plan)")

        self.config.ensure_directories()
        self.assembler.ensure_static_assets()

        output_dir = self.config.get_output_dir()
        html_path = output_dir / f"{project_id}.html"
        pdf_path = output_dir / f"{project_id}.pdf"
        epub_path = output_dir / f"{project_id}.epub"
        watermark = should_watermark(user_plan)

        with tqdm(total=6, desc=f"  {project_id}", unit="step", leave=False) as pbar:
            pbar.set_description(f"  {project_id} - Locating")
            input_file = find_uploaded_file(project_id, self.config.get_uploads_dir())
            pbar.update(1)

            pbar.set_description(f"  {project_id} - Extracting")
            extraction = await asyncio.to_thread(self._extract, project_id, input_file, html_path)
            pbar.update(1)

            pbar.set_description(f"  {project_id} - Styling")
            styled_html = apply_template(extraction.html, template.id, self.config.get_template_css_dir(),
                                         title=project_id)
            with open(html_path, 'w', encoding='utf-8') as f:
                f.write(styled_html)
            console.info(f"Saved styled HTML: {html_path} ({len(styled_html)} characters)")
            pbar.update(1)

            pbar.set_description(f"  {project_id} - PDF")
            await self.pdf_renderer.render(html_path, pdf_path, template, watermark=watermark)
            pbar.update(1)

            pbar.set_description(f"  {project_id} - EPUB")
            epub_generator = EpubGenerator(self.pandoc, output_dir)
            epub = await asyncio.to_thread(epub_generator.generate, styled_html, epub_path, project_id)
            pbar.update(1)

            pbar.set_description(f"  {project_id} - Package")
            bundle = await asyncio.to_thread(self.assembler.assemble, project_id, pdf_path, epub.path)
            pbar.update(1)

        console.success(f"Conversion completed for project {project_id}")
        return ExportResult(
            project_id=project_id,
            template_id=template.id,
            user_plan=user_plan,
            input_file=input_file,
            used_sample=input_file is None,
            used_pandoc=extraction.used_pandoc,
            strategy=extraction.strategy,
            html_path=html_path,
            pdf_path=pdf_path,
            epub_path=epub.path,
            epub_placeholder=epub.placeholder or not is_epub_container(epub.path),
            watermarked=watermark,
            bundle=bundle,
            stats=document_stats(extraction.html),
        )


async def run_export(project_id: str, template_id: str, user_plan: str = FREE_PLAN,
                     config: Optional[Config] = None) -> ExportResult:
    """One-shot export that closes the browser afterwards."""
    async with ExportPipeline(config) as pipeline:
        return await pipeline.convert(project_id, template_id, user_plan)


def main():
    """Entry point for bookmagic-worker."""
    parser = argparse.ArgumentParser(
        description="Export a manuscript to PDF, EPUB and a ZIP publishing bundle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bookmagic-worker my-book serif-classic
  bookmagic-worker my-book trade-clean pro
  bookmagic-worker my-book novella-a5 free --export-dir public/exports --debug
        """
    )
    parser.add_argument("project_id", help="Project identifier (names the uploaded file)")
    parser.add_argument("template_id", help="Template id: serif-classic, trade-clean or novella-a5")
    parser.add_argument("user_plan", nargs="?", default=FREE_PLAN,
                        help="Account plan; 'free' exports carry a watermark (default: free)")
    add_config_arguments(parser)
    args = parser.parse_args()

    config = config_from_args(args)
    console.set_debug(config.is_debug())

    try:
        result = asyncio.run(run_export(args.project_id, args.template_id, args.user_plan, config))
    except (BookMagicError, OSError, ValueError) as e:
        console.error(f"Conversion failed: {e}")
        print(json.dumps({"success": False, "projectId": args.project_id, "error": str(e)}, indent=2))
        sys.exit(1)

    print(json.dumps(result.summary(), indent=2))


if __name__ == "__main__":
    main()
