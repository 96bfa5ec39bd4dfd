"""
Export bundle assembly.

MIT License - Copyright (c) 2025 BookMagic
"""

import os
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from .config import Config
from .console import console
from .errors import PackagingError
from .locator import validate_project_id
from .samples import FONT_LICENSE_TEXT, KDP_CHECKLIST_TEXT

ZIP_NAME = "export.zip"
LICENSE_NAME = "LICENSE.txt"
CHECKLIST_NAME = "KDP_Checklist.txt"
CHECKLIST_SOURCE_NAME = "kdp.txt"


@dataclass
class ExportBundle:
    export_dir: Path
    pdf_path: Path
    epub_path: Path
    zip_path: Path

    def entry_names(self) -> List[str]:
        with zipfile.ZipFile(self.zip_path) as zf:
            return zf.namelist()


class PackageAssembler:
    """Copies final artifacts into the public export directory and zips them."""

    def __init__(self, config: Config):
        self.config = config

    @property
    def license_path(self) -> Path:
        return self.config.get_fonts_dir() / LICENSE_NAME

    @property
    def checklist_path(self) -> Path:
        return self.config.get_checklist_dir() / CHECKLIST_SOURCE_NAME

    def project_export_dir(self, project_id: str) -> Path:
        return self.config.get_export_dir() / validate_project_id(project_id)

    def ensure_static_assets(self) -> None:
        """Create the font license and checklist files when they are missing."""
        for path, text in ((self.license_path, FONT_LICENSE_TEXT), (self.checklist_path, KDP_CHECKLIST_TEXT)):
            if path.exists():
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(text)
            console.debug(f"Created static asset: {path}")

    def assemble(self, project_id: str, pdf_path: Path, epub_path: Path) -> ExportBundle:
        """Build ``{export_dir}/{id}/export.zip`` with the PDF, EPUB, license and checklist.

        The archive is written under a temporary name and renamed into place
        once it is complete.

        Raises:
            PackagingError: an artifact is missing or any write failed.
        """
        pdf_path = Path(pdf_path)
        epub_path = Path(epub_path)
        for artifact in (pdf_path, epub_path):
            if not artifact.is_file():
                raise PackagingError(f"Cannot package {project_id}: missing artifact {artifact}")

        export_dir = self.project_export_dir(project_id)
        zip_path = export_dir / ZIP_NAME
        temp_zip = export_dir / f".{ZIP_NAME}.partial"

        try:
            self.ensure_static_assets()
            export_dir.mkdir(parents=True, exist_ok=True)

            final_pdf = export_dir / f"{project_id}.pdf"
            final_epub = export_dir / f"{project_id}.epub"
            shutil.copyfile(pdf_path, final_pdf)
            shutil.copyfile(epub_path, final_epub)

            console.info(f"Creating ZIP package: {zip_path}")
            with zipfile.ZipFile(temp_zip, 'w', compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
                zf.write(final_pdf, arcname=f"{project_id}.pdf")
                zf.write(final_epub, arcname=f"{project_id}.epub")
                zf.write(self.license_path, arcname=LICENSE_NAME)
                zf.write(self.checklist_path, arcname=CHECKLIST_NAME)
            os.replace(temp_zip, zip_path)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            temp_zip.unlink(missing_ok=True)
            console.error(f"Packaging failed for {project_id}: {e}")
            raise PackagingError(f"Failed to create export package for {project_id}: {e}") from e

        console.success(f"ZIP package created: {zip_path} ({zip_path.stat().st_size} bytes)")
        return ExportBundle(export_dir, final_pdf, final_epub, zip_path)

    def export_status(self, project_id: str) -> Dict[str, bool]:
        """Readiness of each downloadable artifact, by file existence."""
        export_dir = self.project_export_dir(project_id)
        pdf = (export_dir / f"{project_id}.pdf").is_file()
        epub = (export_dir / f"{project_id}.epub").is_file()
        zip_ready = (export_dir / ZIP_NAME).is_file()
        return {
            "pdf": pdf,
            "epub": epub,
            "zip": zip_ready,
            "ready": pdf and epub and zip_ready,
        }
