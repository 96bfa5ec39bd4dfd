"""
Check the external tools the pipeline relies on.

Pandoc is optional (without it the built-in fallbacks run); Playwright's
Chromium is required for PDF export.

MIT License - Copyright (c) 2025 BookMagic
"""

import argparse
import asyncio
import json
import sys
from typing import Dict

from playwright.async_api import async_playwright

from .config import add_config_arguments, config_from_args
from .console import console
from .pandoc import Pandoc


async def _chromium_available() -> bool:
    try:
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(headless=True)
            await browser.close()
        return True
    except Exception as e:
        console.debug(f"Chromium launch failed: {e}")
        return False


def check_dependencies(pandoc: Pandoc, check_browser: bool = True) -> Dict[str, object]:
    """Report availability of pandoc and Playwright Chromium."""
    report: Dict[str, object] = {
        "pandoc": pandoc.is_available(),
        "pandocVersion": pandoc.version,
    }
    if report["pandoc"]:
        console.success(f"Pandoc is available ({pandoc.version})")
    else:
        console.warning("Pandoc is not available; fallback conversion and placeholder EPUBs will be used")
        console.info("Install it from https://pandoc.org/installing.html")

    if check_browser:
        chromium = asyncio.run(_chromium_available())
        report["chromium"] = chromium
        if chromium:
            console.success("Playwright Chromium is available")
        else:
            console.error("Playwright Chromium is not available. Run: python -m playwright install chromium")

    report["ready"] = bool(report.get("chromium", True))
    return report


def main():
    """Entry point for bookmagic-check."""
    parser = argparse.ArgumentParser(description="Check pandoc and Playwright Chromium availability")
    parser.add_argument("--skip-browser", action="store_true", help="Do not try to launch Chromium")
    add_config_arguments(parser)
    args = parser.parse_args()

    config = config_from_args(args)
    console.set_debug(config.is_debug())

    report = check_dependencies(Pandoc(config.get_pandoc_path()), check_browser=not args.skip_browser)
    print(json.dumps(report, indent=2))
    if not report["ready"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
