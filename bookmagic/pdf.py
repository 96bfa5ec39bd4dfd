"""
PDF rendering with headless Chromium (Playwright).

MIT License - Copyright (c) 2025 BookMagic
"""

from pathlib import Path
from typing import Optional

from playwright.async_api import async_playwright

from .console import console
from .errors import ConversionError
from .templates import TemplateDescriptor

FREE_PLAN = "free"
WATERMARK_TEXT = "FREE EXPORT"
WATERMARK_CLASS = "bookmagic-watermark"

_CRASH_MARKERS = (
    "Connection closed",
    "Browser has been closed",
    "Target closed",
    "crashed",
    "Protocol error",
)

# Runs inside the page before printing
WATERMARK_SCRIPT = """([text, className]) => {
  const watermark = document.createElement('div');
  watermark.className = className;
  watermark.textContent = text;
  watermark.style.cssText = `
    position: fixed;
    bottom: 0.5in;
    right: 0.5in;
    font-size: 12px;
    color: #999999;
    opacity: 0.15;
    transform: rotate(-45deg);
    z-index: 1;
    pointer-events: none;
    font-family: Arial, sans-serif;
  `;
  document.body.appendChild(watermark);
}"""


def should_watermark(user_plan: Optional[str]) -> bool:
    """Free-tier exports are stamped; anything else is not."""
    return (user_plan or FREE_PLAN).strip().lower() == FREE_PLAN


class PdfRenderer:
    """Owns one Chromium instance and renders styled HTML files to PDF.

    The browser is started lazily and reused across renders until
    :meth:`close` is called. A crash mid-render is retried once with a
    fresh browser.
    """

    max_attempts = 2

    def __init__(self):
        self._playwright = None
        self._browser = None
        self._page = None

    async def _launch_browser(self) -> None:
        """Launch a fresh Chromium browser instance."""
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=True,
            args=[
                '--disable-dev-shm-usage',
                '--disable-gpu',
                '--no-sandbox',
            ]
        )

    async def _ensure_browser(self) -> None:
        """Make sure a connected browser and a fresh page exist."""
        if self._browser is None or not self._browser.is_connected():
            console.debug("Initializing browser instance")
            await self._launch_browser()

        if self._page is not None and not self._page.is_closed():
            try:
                await self._page.close()
            except Exception as e:
                console.debug(f"Ignoring error while closing previous page: {e}")
        try:
            self._page = await self._browser.new_page()
        except Exception:
            console.warning("Browser connection stale, restarting...")
            await self.close()
            await self._launch_browser()
            self._page = await self._browser.new_page()

    async def close(self) -> None:
        """Close page, browser and Playwright; safe to call repeatedly."""
        page, browser, pw = self._page, self._browser, self._playwright
        self._page = None
        self._browser = None
        self._playwright = None

        try:
            if page and not page.is_closed():
                await page.close()
        except Exception as e:
            console.debug(f"Ignoring error while closing page: {e}")
        try:
            if browser and browser.is_connected():
                await browser.close()
        except Exception as e:
            console.debug(f"Ignoring error while closing browser: {e}")
        try:
            if pw:
                await pw.stop()
        except Exception as e:
            console.debug(f"Ignoring error while stopping Playwright: {e}")

        console.debug("Browser instance closed and cleaned up")

    async def _apply_watermark(self, page) -> None:
        await page.evaluate(WATERMARK_SCRIPT, [WATERMARK_TEXT, WATERMARK_CLASS])
        console.debug("Watermark added")

    async def render(self, html_path: Path, pdf_path: Path, template: TemplateDescriptor,
                     watermark: bool = False) -> Path:
        """Print ``html_path`` to ``pdf_path`` using the template's page geometry.

        Raises:
            ConversionError: the browser failed, or produced no file.
        """
        html_path = Path(html_path)
        pdf_path = Path(pdf_path)
        pdf_path.parent.mkdir(parents=True, exist_ok=True)
        page_options = template.pdf_page_options()

        for attempt in range(1, self.max_attempts + 1):
            try:
                await self._ensure_browser()
                page = self._page

                await page.goto(html_path.absolute().as_uri())
                # Let fonts and other resources settle
                await page.wait_for_load_state('networkidle')

                if watermark:
                    await self._apply_watermark(page)

                await page.pdf(
                    path=str(pdf_path),
                    print_background=True,
                    prefer_css_page_size=False,
                    display_header_footer=False,
                    scale=1.0,
                    **page_options,
                )
                break
            except Exception as e:
                error_msg = str(e)
                is_crash = any(marker in error_msg for marker in _CRASH_MARKERS)
                if is_crash and attempt < self.max_attempts:
                    console.warning("Browser crashed during PDF generation, restarting and retrying...")
                    await self.close()
                    continue
                console.error(f"Failed to convert HTML to PDF: {e}")
                raise ConversionError(f"PDF generation failed: {e}") from e

        if not pdf_path.exists():
            raise ConversionError(f"PDF generation produced no file: {pdf_path}")
        console.success(f"PDF generated: {pdf_path}")
        return pdf_path
