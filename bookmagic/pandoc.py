"""
Thin wrapper around the pandoc executable.

Commands are always built as argument lists; file paths are never formatted
into a shell string.

MIT License - Copyright (c) 2025 BookMagic
"""

import subprocess
from pathlib import Path
from typing import Optional, Sequence

from .console import console

# Source extension -> pandoc reader name
PANDOC_INPUT_FORMATS = {
    ".docx": "docx",
    ".md": "markdown",
    ".rtf": "rtf",
}

VERSION_CHECK_TIMEOUT = 10


class Pandoc:
    """Runs pandoc conversions and remembers whether pandoc is installed."""

    def __init__(self, executable: str = "pandoc", timeout: float = 120.0):
        self.executable = executable
        self.timeout = timeout
        self._available: Optional[bool] = None
        self._version: Optional[str] = None

    def is_available(self) -> bool:
        """Probe ``pandoc --version`` once; any failure means unavailable."""
        if self._available is None:
            try:
                result = subprocess.run(
                    [self.executable, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=VERSION_CHECK_TIMEOUT,
                )
                self._available = result.returncode == 0
                if self._available:
                    first_line = result.stdout.strip().splitlines()
                    self._version = first_line[0] if first_line else ""
            except (OSError, subprocess.SubprocessError):
                self._available = False

            if self._available:
                console.debug(f"Pandoc available: {self._version}")
            else:
                console.info("Pandoc not available, using fallback conversion")
        return self._available

    @property
    def version(self) -> Optional[str]:
        return self._version if self.is_available() else None

    def supports(self, source: Path) -> bool:
        return Path(source).suffix.lower() in PANDOC_INPUT_FORMATS

    def convert(self, source: Path, output: Path, from_format: str, to_format: str,
                extra_args: Sequence[str] = ()) -> bool:
        """Run one conversion. Returns True only when pandoc succeeded and wrote ``output``."""
        cmd = [
            self.executable,
            f"--from={from_format}",
            f"--to={to_format}",
            *extra_args,
            str(source),
            "-o", str(output),
        ]
        console.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            console.error(f"Pandoc timed out after {self.timeout:g}s converting {Path(source).name}")
            return False
        except (OSError, subprocess.SubprocessError) as e:
            console.error(f"Pandoc could not be started: {e}")
            return False

        if result.returncode != 0:
            console.error(f"Pandoc failed: {result.stderr.strip()}")
            return False
        if not Path(output).exists():
            console.error("Pandoc conversion failed - no output file created")
            return False
        return True

    def to_html(self, source: Path, output: Path) -> bool:
        """Convert a manuscript to a standalone HTML5 document."""
        from_format = PANDOC_INPUT_FORMATS.get(Path(source).suffix.lower())
        if from_format is None:
            console.warning(f"Pandoc has no reader configured for {Path(source).suffix}")
            return False
        return self.convert(source, output, from_format, "html5", ["--standalone"])

    def html_to_epub(self, html_file: Path, output_epub: Path) -> bool:
        return self.convert(html_file, output_epub, "html", "epub3")
