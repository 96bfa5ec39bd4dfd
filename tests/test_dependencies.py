"""Tests for the dependency check command."""

import json
import sys
from unittest.mock import AsyncMock, patch

import pytest

from bookmagic import dependencies
from bookmagic.dependencies import check_dependencies


class TestCheckDependencies:

    def test_reports_missing_pandoc_without_failing(self, missing_pandoc):
        report = check_dependencies(missing_pandoc, check_browser=False)
        assert report["pandoc"] is False
        assert report["pandocVersion"] is None
        assert report["ready"] is True

    def test_missing_chromium_is_not_ready(self, missing_pandoc):
        with patch("bookmagic.dependencies._chromium_available", new=AsyncMock(return_value=False)):
            report = check_dependencies(missing_pandoc)
        assert report["chromium"] is False
        assert report["ready"] is False

    def test_main_exits_nonzero_without_chromium(self, capsys):
        argv = ["bookmagic-check", "--pandoc-path", "bookmagic-missing-pandoc"]
        with patch.object(sys, "argv", argv), \
                patch("bookmagic.dependencies._chromium_available", new=AsyncMock(return_value=False)):
            with pytest.raises(SystemExit) as excinfo:
                dependencies.main()
        assert excinfo.value.code == 1
        out = capsys.readouterr().out
        assert json.loads(out[out.index("{\n"):])["chromium"] is False
