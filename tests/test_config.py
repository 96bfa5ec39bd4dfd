"""Tests for layered configuration."""

import argparse
import json

import pytest

from bookmagic.config import DEFAULTS, Config, add_config_arguments, config_from_args


class TestConfig:

    def test_defaults_resolve_against_home(self, tmp_path):
        config = Config(environ={"BOOKMAGIC_HOME": str(tmp_path)})
        assert config.get_uploads_dir() == tmp_path / "uploads"
        assert config.get_export_dir() == tmp_path / "public" / "exports"
        assert config.get_max_upload_bytes() == 50 * 1024 * 1024
        assert config.get_preview_cache_seconds() == 300
        assert config.is_debug() is False

    def test_precedence_cli_env_file_default(self, tmp_path):
        config_file = tmp_path / "bookmagic.json"
        config_file.write_text(json.dumps({"output_dir": "from-file", "uploads_dir": "file-uploads",
                                           "pandoc_timeout": 30}), encoding="utf-8")
        environ = {
            "BOOKMAGIC_HOME": str(tmp_path),
            "BOOKMAGIC_CONFIG": str(config_file),
            "BOOKMAGIC_OUTPUT_DIR": "from-env",
            "BOOKMAGIC_UPLOADS_DIR": "env-uploads",
        }
        config = Config({"output_dir": "from-cli", "uploads_dir": None}, environ=environ)

        assert config.get_output_dir() == tmp_path / "from-cli"
        assert config.get_uploads_dir() == tmp_path / "env-uploads"
        assert config.get_pandoc_timeout() == 30.0
        assert config.get_pandoc_path() == "pandoc"

    def test_absolute_directories_kept(self, tmp_path):
        target = tmp_path / "elsewhere"
        config = Config({"output_dir": str(target)}, environ={"BOOKMAGIC_HOME": "/unused"})
        assert config.get_output_dir() == target

    def test_env_debug_flag(self, tmp_path):
        config = Config(environ={"BOOKMAGIC_HOME": str(tmp_path), "BOOKMAGIC_DEBUG": "true"})
        assert config.is_debug() is True

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(environ={"BOOKMAGIC_CONFIG": str(tmp_path / "nope.json")})

    def test_unknown_key(self, tmp_path):
        with pytest.raises(KeyError):
            Config(environ={"BOOKMAGIC_HOME": str(tmp_path)}).get("colour")

    def test_ensure_directories(self, config):
        config.ensure_directories()
        assert config.get_uploads_dir().is_dir()
        assert config.get_checklist_dir().is_dir()

    def test_as_dict_covers_every_setting(self, config):
        assert set(config.as_dict()) == set(DEFAULTS)


class TestCliArguments:

    def test_config_from_args(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BOOKMAGIC_HOME", str(tmp_path))
        parser = argparse.ArgumentParser()
        add_config_arguments(parser)
        args = parser.parse_args(["--output-dir", "build", "--pandoc-path", "/opt/pandoc", "--debug"])

        config = config_from_args(args)
        assert config.get_output_dir() == tmp_path / "build"
        assert config.get_pandoc_path() == "/opt/pandoc"
        assert config.is_debug() is True
