"""
Configuration for the BookMagic pipeline.

Each setting is resolved from (highest priority first): values passed on the
command line, BOOKMAGIC_* environment variables, an optional JSON file named
by BOOKMAGIC_CONFIG, and the built-in defaults. Relative directories are
resolved against BOOKMAGIC_HOME (default: the current working directory).

MIT License - Copyright (c) 2025 BookMagic
"""

import argparse
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

ENV_PREFIX = "BOOKMAGIC_"

DEFAULTS: Dict[str, Any] = {
    "uploads_dir": "uploads",
    "output_dir": "output",
    "export_dir": "public/exports",
    "template_css_dir": "template-css",
    "fonts_dir": "fonts",
    "checklist_dir": "checklist",
    "pandoc_path": "pandoc",
    "pandoc_timeout": 120,
    "max_upload_bytes": 50 * 1024 * 1024,
    "preview_cache_seconds": 300,
    "debug": False,
}

DIRECTORY_KEYS = (
    "uploads_dir",
    "output_dir",
    "export_dir",
    "template_css_dir",
    "fonts_dir",
    "checklist_dir",
)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Layered configuration lookup."""

    def __init__(self, cli_config: Optional[Dict[str, Any]] = None, environ: Optional[Dict[str, str]] = None):
        self.cli_config = {k: v for k, v in (cli_config or {}).items() if v is not None}
        self.environ = os.environ if environ is None else environ
        self.file_config = self._load_config_file()
        self.base_dir = Path(self.environ.get(f"{ENV_PREFIX}HOME", os.getcwd()))

    def _load_config_file(self) -> Dict[str, Any]:
        """Read the optional JSON config file."""
        config_path = self.environ.get(f"{ENV_PREFIX}CONFIG")
        if not config_path:
            return {}
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a JSON object: {path}")
        return data

    def get(self, key: str) -> Any:
        """Resolve a setting through the CLI > env > file > default chain."""
        if key not in DEFAULTS:
            raise KeyError(f"Unknown setting '{key}'")
        if key in self.cli_config:
            return self.cli_config[key]
        env_value = self.environ.get(ENV_PREFIX + key.upper())
        if env_value is not None and env_value != "":
            return env_value
        if key in self.file_config:
            return self.file_config[key]
        return DEFAULTS[key]

    def _get_dir(self, key: str) -> Path:
        path = Path(self.get(key))
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    def get_uploads_dir(self) -> Path:
        return self._get_dir("uploads_dir")

    def get_output_dir(self) -> Path:
        return self._get_dir("output_dir")

    def get_export_dir(self) -> Path:
        return self._get_dir("export_dir")

    def get_template_css_dir(self) -> Path:
        return self._get_dir("template_css_dir")

    def get_fonts_dir(self) -> Path:
        return self._get_dir("fonts_dir")

    def get_checklist_dir(self) -> Path:
        return self._get_dir("checklist_dir")

    def get_pandoc_path(self) -> str:
        return str(self.get("pandoc_path"))

    def get_pandoc_timeout(self) -> float:
        return float(self.get("pandoc_timeout"))

    def get_max_upload_bytes(self) -> int:
        return int(self.get("max_upload_bytes"))

    def get_preview_cache_seconds(self) -> float:
        return float(self.get("preview_cache_seconds"))

    def is_debug(self) -> bool:
        return _parse_bool(self.get("debug"))

    def ensure_directories(self) -> None:
        """Create every working directory that does not exist yet."""
        for key in DIRECTORY_KEYS:
            self._get_dir(key).mkdir(parents=True, exist_ok=True)

    def as_dict(self) -> Dict[str, Any]:
        """Resolved settings, directories as absolute paths."""
        resolved = {key: self.get(key) for key in DEFAULTS}
        for key in DIRECTORY_KEYS:
            resolved[key] = str(self._get_dir(key))
        return resolved


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the directory and tooling options shared by the CLIs."""
    parser.add_argument("--uploads-dir", default=None, help="Uploaded manuscripts (default: from config/env/uploads)")
    parser.add_argument("--output-dir", default=None, help="Intermediate HTML, PDF and EPUB files (default: from config/env/output)")
    parser.add_argument("--export-dir", default=None, help="Per-project download bundles (default: from config/env/public/exports)")
    parser.add_argument("--template-css-dir", default=None, help="Template stylesheets named <templateId>.css (default: from config/env/template-css)")
    parser.add_argument("--pandoc-path", default=None, help="Pandoc executable (default: 'pandoc' on PATH)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging for detailed output")


def config_from_args(args: argparse.Namespace) -> Config:
    """Build a Config from parsed CLI arguments."""
    cli_config: Dict[str, Any] = {
        "uploads_dir": args.uploads_dir,
        "output_dir": args.output_dir,
        "export_dir": args.export_dir,
        "template_css_dir": args.template_css_dir,
        "pandoc_path": args.pandoc_path,
    }
    if args.debug:
        cli_config["debug"] = True
    return Config(cli_config)
