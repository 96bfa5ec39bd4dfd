"""
In-memory project store: the latest upload and template selection per project.

Nothing is persisted; a new process starts with an empty store.

MIT License - Copyright (c) 2025 BookMagic
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UploadRecord:
    project_id: str
    file_name: str
    file_size: int
    file_extension: str
    saved_path: str
    uploaded_at: datetime = field(default_factory=_now)

    def to_dict(self) -> Dict[str, object]:
        return {
            "projectId": self.project_id,
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "fileExtension": self.file_extension,
            "savedPath": self.saved_path,
            "uploadedAt": self.uploaded_at.isoformat(),
        }


@dataclass
class TemplateSelection:
    project_id: str
    template_id: str
    selected_at: datetime = field(default_factory=_now)

    def to_dict(self) -> Dict[str, object]:
        return {
            "projectId": self.project_id,
            "templateId": self.template_id,
            "selectedAt": self.selected_at.isoformat(),
        }


class ProjectStore:
    """Thread-safe key-value store keyed by project id."""

    def __init__(self):
        self._lock = threading.Lock()
        self._uploads: Dict[str, UploadRecord] = {}
        self._templates: Dict[str, TemplateSelection] = {}

    def record_upload(self, record: UploadRecord) -> UploadRecord:
        with self._lock:
            self._uploads[record.project_id] = record
        return record

    def get_upload(self, project_id: str) -> Optional[UploadRecord]:
        with self._lock:
            return self._uploads.get(project_id)

    def remove_upload(self, project_id: str) -> bool:
        with self._lock:
            return self._uploads.pop(project_id, None) is not None

    def select_template(self, project_id: str, template_id: str) -> TemplateSelection:
        selection = TemplateSelection(project_id, template_id)
        with self._lock:
            self._templates[project_id] = selection
        return selection

    def get_selected_template(self, project_id: str) -> Optional[str]:
        with self._lock:
            selection = self._templates.get(project_id)
        return selection.template_id if selection else None

    def get_template_selection(self, project_id: str) -> Optional[TemplateSelection]:
        with self._lock:
            return self._templates.get(project_id)

    def remove_template_selection(self, project_id: str) -> bool:
        with self._lock:
            return self._templates.pop(project_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._uploads.clear()
            self._templates.clear()
