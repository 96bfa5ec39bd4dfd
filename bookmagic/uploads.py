"""
Upload validation and persistence.

An upload is checked (project id, extension, size) before anything touches
the filesystem. A project keeps at most one source document: earlier
uploads under any supported extension are removed when a new one lands.

MIT License - Copyright (c) 2025 BookMagic
"""

import os
import tempfile
from pathlib import Path, PurePath
from typing import Optional

from .config import Config
from .console import console
from .errors import UploadValidationError
from .locator import SUPPORTED_EXTENSIONS, upload_path, validate_project_id
from .store import ProjectStore, UploadRecord

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size_bytes: int) -> str:
    """Human readable size, e.g. ``1.5 KB``."""
    if size_bytes <= 0:
        return "0 Bytes"
    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"


def file_extension(filename: str) -> str:
    """Lower-cased extension with its dot, or ``""``."""
    return PurePath(filename or "").suffix.lower()


class UploadService:
    """Validates and stores manuscripts under ``{uploads_dir}/{project_id}{ext}``."""

    def __init__(self, config: Config, store: Optional[ProjectStore] = None):
        self.config = config
        self.store = store

    def validate(self, project_id: str, filename: str, size_bytes: int) -> str:
        """Return the normalised extension, or raise UploadValidationError."""
        validate_project_id(project_id)

        extension = file_extension(filename)
        if extension not in SUPPORTED_EXTENSIONS:
            allowed = ", ".join(SUPPORTED_EXTENSIONS)
            raise UploadValidationError(
                f"Unsupported file type '{extension or filename}'. Allowed: {allowed}"
            )

        max_bytes = self.config.get_max_upload_bytes()
        if size_bytes >= max_bytes:
            raise UploadValidationError(
                f"File too large ({format_file_size(size_bytes)}). "
                f"Uploads must be smaller than {format_file_size(max_bytes)}."
            )
        return extension

    def save_upload(self, project_id: str, filename: str, data: bytes) -> UploadRecord:
        """Validate and persist one upload, replacing the project's previous file."""
        extension = self.validate(project_id, filename, len(data))

        uploads_dir = self.config.get_uploads_dir()
        uploads_dir.mkdir(parents=True, exist_ok=True)
        destination = upload_path(uploads_dir, project_id, extension)

        fd, temp_name = tempfile.mkstemp(prefix=f".{project_id}.", suffix=".upload", dir=uploads_dir)
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            for ext in SUPPORTED_EXTENSIONS:
                if ext != extension:
                    upload_path(uploads_dir, project_id, ext).unlink(missing_ok=True)
            os.replace(temp_name, destination)
        except OSError:
            Path(temp_name).unlink(missing_ok=True)
            raise

        console.success(f"Saved upload for {project_id}: {destination} ({format_file_size(len(data))})")
        record = UploadRecord(
            project_id=project_id,
            file_name=PurePath(filename).name,
            file_size=len(data),
            file_extension=extension,
            saved_path=str(destination),
        )
        if self.store is not None:
            self.store.record_upload(record)
        return record
