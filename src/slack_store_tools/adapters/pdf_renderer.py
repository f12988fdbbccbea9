"""HTML to PDF rendering with a headless browser."""

from dataclasses import dataclass
from typing import Protocol

from playwright.async_api import async_playwright

_MARGIN = {"top": "0.5in", "right": "0.5in", "bottom": "0.5in", "left": "0.5in"}


class PdfRenderer(Protocol):
    """Interface for turning an HTML document into PDF bytes."""

    async def render(self, html: str) -> bytes:
        """Render HTML to a PDF document."""


@dataclass
class PlaywrightPdfRenderer(PdfRenderer):
    """Render PDFs with a short-lived headless Chromium instance."""

    page_format: str = "Letter"

    async def render(self, html: str) -> bytes:
        """Launch Chromium, print the HTML and close the browser."""
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=True, args=["--no-sandbox", "--disable-setuid-sandbox"]
            )
            try:
                page = await browser.new_page()
                await page.set_content(html, wait_until="networkidle")
                return await page.pdf(
                    format=self.page_format,
                    print_background=True,
                    margin=_MARGIN,
                )
            finally:
                await browser.close()
