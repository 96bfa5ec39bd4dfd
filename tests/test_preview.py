"""Tests for preview generation and its cache."""

import json
import os
import sys
import time
from unittest.mock import MagicMock, patch

import pytest

from bookmagic import preview
from bookmagic.errors import InputMissingError, TemplateNotSelectedError
from bookmagic.extraction import ContentExtractor
from bookmagic.preview import generate_preview


class TestGeneratePreview:

    def test_no_file_fails_without_extraction(self, config):
        extractor = MagicMock(spec=ContentExtractor)
        with pytest.raises(InputMissingError, match="No uploaded file"):
            generate_preview("book", None, config, extractor=extractor)
        extractor.extract.assert_not_called()

    def test_no_template_fails_without_extraction(self, config, write_upload):
        write_upload("book", ".md", "# Title")
        extractor = MagicMock(spec=ContentExtractor)
        with pytest.raises(TemplateNotSelectedError, match="No template selected"):
            generate_preview("book", None, config, extractor=extractor)
        extractor.extract.assert_not_called()

    def test_writes_styled_preview(self, config, write_upload):
        write_upload("book", ".md", "# Title\n\nHello *world* again")
        result = generate_preview("book", "trade-clean", config)

        final_path = config.get_output_dir() / "book.preview.final.html"
        assert result.html_path == final_path
        assert final_path.read_text(encoding="utf-8") == result.html
        assert "<p>Hello <em>world</em> again</p>" in result.html
        assert 'data-template="trade-clean"' in result.html
        assert result.cached is False
        assert result.strategy == "markdown"
        assert result.stats.word_count == 4

    def test_recent_preview_is_reused(self, config, write_upload):
        write_upload("book", ".md", "# Title")
        generate_preview("book", "serif-classic", config)

        extractor = MagicMock(spec=ContentExtractor)
        result = generate_preview("book", "serif-classic", config, extractor=extractor)
        assert result.cached is True
        assert result.cache_age_seconds is not None
        extractor.extract.assert_not_called()

    def test_cached_stats_match_fresh_stats(self, config, write_upload):
        write_upload("book", ".md", "# Title\n\nHello *world*.")
        fresh = generate_preview("book", "serif-classic", config)
        cached = generate_preview("book", "serif-classic", config)
        assert cached.cached is True
        assert cached.stats == fresh.stats

    def test_cache_not_reused_for_other_template(self, config, write_upload):
        write_upload("book", ".md", "# Title")
        generate_preview("book", "serif-classic", config)
        result = generate_preview("book", "novella-a5", config)
        assert result.cached is False
        assert 'data-template="novella-a5"' in result.html

    def test_stale_cache_regenerated(self, config, write_upload):
        write_upload("book", ".md", "# Title")
        first = generate_preview("book", "serif-classic", config)
        old = time.time() - 600
        os.utime(first.html_path, (old, old))
        assert generate_preview("book", "serif-classic", config).cached is False

    def test_cache_older_than_upload_regenerated(self, config, write_upload):
        source = write_upload("book", ".md", "# Old")
        first = generate_preview("book", "serif-classic", config)
        past = time.time() - 60
        os.utime(first.html_path, (past, past))
        write_upload("book", ".md", "# New")
        os.utime(source, None)

        result = generate_preview("book", "serif-classic", config)
        assert result.cached is False
        assert "<h1>New</h1>" in result.html

    def test_placeholder_for_docx(self, config, write_upload):
        write_upload("book", ".docx", b"PK\x03\x04" + b"0" * 2048)
        result = generate_preview("book", "serif-classic", config)
        assert result.strategy == "docx-placeholder"
        assert "placeholder" in result.html.lower()


class TestPreviewCli:

    def test_success_prints_json_summary(self, config, write_upload, capsys):
        write_upload("book", ".md", "# Title")
        argv = ["bookmagic-preview", "book", "serif-classic", "--no-cache"]
        with patch.object(sys, "argv", argv), patch("bookmagic.preview.config_from_args", return_value=config):
            preview.main()
        out = capsys.readouterr().out
        summary = json.loads(out[out.index("{\n"):])
        assert summary["success"] is True
        assert summary["templateId"] == "serif-classic"

    def test_missing_upload_exits_nonzero(self, config, capsys):
        argv = ["bookmagic-preview", "book", "serif-classic"]
        with patch.object(sys, "argv", argv), patch("bookmagic.preview.config_from_args", return_value=config):
            with pytest.raises(SystemExit) as excinfo:
                preview.main()
        assert excinfo.value.code == 1
        out = capsys.readouterr().out
        assert json.loads(out[out.index("{\n"):])["success"] is False
