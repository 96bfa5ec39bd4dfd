"""Shared fixtures for BookMagic tests."""

from pathlib import Path

import pytest

from bookmagic.config import Config
from bookmagic.pandoc import Pandoc
from bookmagic.store import ProjectStore

MISSING_PANDOC = "bookmagic-missing-pandoc"


class FakePdfRenderer:
    """Stands in for PdfRenderer without launching a browser."""

    def __init__(self):
        self.calls = []
        self.closed = False

    async def render(self, html_path, pdf_path, template, watermark=False):
        self.calls.append({
            "html_path": Path(html_path),
            "pdf_path": Path(pdf_path),
            "template": template,
            "watermark": watermark,
        })
        Path(pdf_path).parent.mkdir(parents=True, exist_ok=True)
        Path(pdf_path).write_bytes(b"%PDF-1.4\n% fake pdf for tests\n%%EOF\n")
        return Path(pdf_path)

    async def close(self):
        self.closed = True


@pytest.fixture
def config(tmp_path):
    """Config rooted in a temporary directory, with no pandoc on PATH."""
    return Config(
        {"pandoc_path": MISSING_PANDOC},
        environ={"BOOKMAGIC_HOME": str(tmp_path)},
    )


@pytest.fixture
def missing_pandoc():
    return Pandoc(MISSING_PANDOC)


@pytest.fixture
def store():
    return ProjectStore()


@pytest.fixture
def fake_renderer():
    return FakePdfRenderer()


@pytest.fixture
def write_upload(config):
    """Write a source document straight into the uploads directory."""
    def _write(project_id, extension, content):
        uploads_dir = config.get_uploads_dir()
        uploads_dir.mkdir(parents=True, exist_ok=True)
        path = uploads_dir / f"{project_id}{extension}"
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path
    return _write


PANDOC_HTML = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8" />
<title>My Book</title>
<style>
body { color: red; }
</style>
</head>
<body>
<header id="title-block-header">
<h1 class="title">My Book</h1>
</header>
<h1 id="chapter-one">Chapter <em>One</em></h1>
<p>Opening words.</p>
<h2 id="a-section">A   Section</h2>
<p>More words.</p>
<h3 id="a-detail">A Detail</h3>
<h1 id="chapter-two">Chapter Two</h1>
<p>Closing words.</p>
</body>
</html>
"""


@pytest.fixture
def pandoc_html():
    return PANDOC_HTML
