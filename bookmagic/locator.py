"""
Find the uploaded manuscript for a project.

MIT License - Copyright (c) 2025 BookMagic
"""

import re
from pathlib import Path
from typing import Optional

from .console import console
from .errors import InvalidProjectIdError

# Probe order matters: the first existing file wins.
SUPPORTED_EXTENSIONS = (".docx", ".md", ".rtf")

_PROJECT_ID_RE = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$')


def validate_project_id(project_id: str) -> str:
    """Reject identifiers that cannot safely name a file."""
    if not project_id or not _PROJECT_ID_RE.match(project_id) or ".." in project_id:
        raise InvalidProjectIdError(
            f"Invalid project id '{project_id}'. Use letters, digits, '.', '_' and '-' only."
        )
    return project_id


def upload_path(uploads_dir: Path, project_id: str, extension: str) -> Path:
    return Path(uploads_dir) / f"{validate_project_id(project_id)}{extension}"


def find_uploaded_file(project_id: str, uploads_dir: Path) -> Optional[Path]:
    """Return the project's source document, or None when nothing was uploaded."""
    console.debug(f"Looking for uploaded file for project: {project_id}")

    for ext in SUPPORTED_EXTENSIONS:
        file_path = upload_path(uploads_dir, project_id, ext)
        console.debug(f"Checking: {file_path}")
        if file_path.is_file():
            console.info(f"Found uploaded file: {file_path} ({file_path.stat().st_size} bytes)")
            return file_path

    console.info(f"No uploaded file found for project {project_id}")
    return None
