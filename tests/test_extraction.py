"""Tests for pandoc wrapping and the ordered extraction strategies."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from bookmagic.extraction import (
    ContentExtractor,
    DocumentParser,
    ExtractionStrategy,
    MarkdownStrategy,
    rtf_to_plain_text,
)
from bookmagic.pandoc import Pandoc


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestPandoc:

    def test_missing_executable_is_unavailable(self, missing_pandoc):
        assert missing_pandoc.is_available() is False
        assert missing_pandoc.version is None

    def test_availability_probed_once(self):
        pandoc = Pandoc("pandoc")
        with patch("bookmagic.pandoc.subprocess.run", return_value=_completed(stdout="pandoc 3.1\n")) as run:
            assert pandoc.is_available() is True
            assert pandoc.is_available() is True
        run.assert_called_once()
        assert pandoc.version == "pandoc 3.1"

    def test_convert_uses_argument_list(self, tmp_path):
        pandoc = Pandoc("pandoc", timeout=5)
        source = tmp_path / "my book; rm -rf.md"
        output = tmp_path / "out.html"

        def fake_run(cmd, **kwargs):
            output.write_text("<html></html>", encoding="utf-8")
            return _completed()

        with patch("bookmagic.pandoc.subprocess.run", side_effect=fake_run) as run:
            assert pandoc.to_html(source, output) is True
        cmd = run.call_args[0][0]
        assert cmd == ["pandoc", "--from=markdown", "--to=html5", "--standalone", str(source), "-o", str(output)]
        assert run.call_args[1]["timeout"] == 5
        assert "shell" not in run.call_args[1]

    def test_nonzero_exit_is_failure(self, tmp_path):
        with patch("bookmagic.pandoc.subprocess.run", return_value=_completed(returncode=1, stderr="boom")):
            assert Pandoc().convert(tmp_path / "a.md", tmp_path / "a.html", "markdown", "html5") is False

    def test_missing_output_is_failure(self, tmp_path):
        with patch("bookmagic.pandoc.subprocess.run", return_value=_completed()):
            assert Pandoc().convert(tmp_path / "a.md", tmp_path / "a.html", "markdown", "html5") is False

    def test_timeout_is_failure(self, tmp_path):
        with patch("bookmagic.pandoc.subprocess.run", side_effect=subprocess.TimeoutExpired("pandoc", 1)):
            assert Pandoc().convert(tmp_path / "a.md", tmp_path / "a.html", "markdown", "html5") is False


class TestContentExtractor:

    def test_markdown_fallback_without_pandoc(self, tmp_path, missing_pandoc):
        source = tmp_path / "book.md"
        source.write_text("# Title\n\nHello *world*.", encoding="utf-8")
        result = ContentExtractor(missing_pandoc).extract(source)
        assert result.strategy == "markdown"
        assert result.used_pandoc is False
        assert "<h1>Title</h1>" in result.html
        assert not result.is_placeholder

    def test_rtf_fallback(self, tmp_path, missing_pandoc):
        source = tmp_path / "story.rtf"
        source.write_text(r"{\rtf1\ansi\deff0 {\fonttbl {\f0 Times;}}\f0\fs24 Once upon a time.}", encoding="utf-8")
        result = ContentExtractor(missing_pandoc).extract(source)
        assert result.strategy == "rtf"
        assert "<h1>Document from story.rtf</h1>" in result.html
        assert "Once upon a time." in result.html
        assert "\\rtf1" not in result.html

    def test_docx_placeholder(self, tmp_path, missing_pandoc):
        source = tmp_path / "novel.docx"
        source.write_bytes(b"x" * 4096)
        result = ContentExtractor(missing_pandoc).extract(source)
        assert result.strategy == "docx-placeholder"
        assert result.is_placeholder
        assert "novel.docx" in result.html
        assert "(4KB)" in result.html
        assert "placeholder" in result.html.lower()

    def test_pluggable_docx_parser(self, tmp_path, missing_pandoc):
        class StubParser(DocumentParser):
            name = "stub-docx"

            def parse(self, path: Path) -> str:
                return "# Parsed\n\nReal words."

        source = tmp_path / "novel.docx"
        source.write_bytes(b"PK")
        result = ContentExtractor(missing_pandoc, docx_parser=StubParser()).extract(source)
        assert result.strategy == "stub-docx"
        assert "<h1>Parsed</h1>" in result.html

    def test_unsupported_extension(self, tmp_path, missing_pandoc):
        source = tmp_path / "notes.txt"
        source.write_text("hello", encoding="utf-8")
        result = ContentExtractor(missing_pandoc).extract(source)
        assert result.strategy == "unsupported"
        assert "Unsupported File Format" in result.html
        assert ".txt" in result.html

    def test_pandoc_used_when_available(self, tmp_path):
        source = tmp_path / "book.md"
        source.write_text("# Title", encoding="utf-8")
        html_output = tmp_path / "out" / "book.html"

        def fake_run(cmd, **kwargs):
            if "--version" in cmd:
                return _completed(stdout="pandoc 3.1\n")
            Path(cmd[-1]).write_text('<html><head></head><body><h1 id="title">Title</h1></body></html>',
                                     encoding="utf-8")
            return _completed()

        with patch("bookmagic.pandoc.subprocess.run", side_effect=fake_run):
            result = ContentExtractor(Pandoc("pandoc")).extract(source, html_output)
        assert result.strategy == "pandoc"
        assert result.used_pandoc is True
        assert 'id="title"' in result.html
        assert html_output.exists()

    def test_pandoc_failure_falls_back_to_markdown(self, tmp_path):
        source = tmp_path / "book.md"
        source.write_text("# Title", encoding="utf-8")

        def fake_run(cmd, **kwargs):
            if "--version" in cmd:
                return _completed(stdout="pandoc 3.1\n")
            return _completed(returncode=2, stderr="bad input")

        with patch("bookmagic.pandoc.subprocess.run", side_effect=fake_run):
            result = ContentExtractor(Pandoc("pandoc")).extract(source)
        assert result.strategy == "markdown"
        assert result.html == "<h1>Title</h1>"

    def test_every_strategy_failing_yields_error_document(self, tmp_path):
        broken = MagicMock(spec=ExtractionStrategy)
        broken.handles.return_value = True
        broken.run.return_value = (None, "disk on fire")
        broken.name = "broken"

        result = ContentExtractor(strategies=[broken]).extract(tmp_path / "book.md")
        assert result.strategy == "error"
        assert "Conversion Error" in result.html
        assert "disk on fire" in result.html

    def test_strategy_failure_is_contained(self, tmp_path):
        # File does not exist: the markdown strategy fails without raising
        html, error = MarkdownStrategy().run(tmp_path / "missing.md")
        assert html is None
        assert error

    def test_parser_and_strategy_bases_are_abstract(self):
        class NoExtract(ExtractionStrategy):
            extensions = (".md",)

        with pytest.raises(TypeError):
            DocumentParser()
        with pytest.raises(TypeError):
            NoExtract()


class TestRtfToPlainText:

    def test_strips_control_words_and_braces(self):
        assert rtf_to_plain_text(r"{\b bold} text").strip() == "bold text"
