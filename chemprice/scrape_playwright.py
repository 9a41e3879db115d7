"""Playwright-based price extraction from vendor product pages."""
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional

from playwright.sync_api import Page, sync_playwright
from playwright.sync_api import Error as PlaywrightError

from .config import Settings, get_settings
from .errors import CrawlError
from .logger_config import get_logger
from .schema import PriceLine

logger = get_logger(__name__)


@dataclass(frozen=True)
class PageExtractor:
    """
    Vendor-specific knowledge needed to read prices off a product page.

    Attributes:
        name: Short vendor tag, used in logs and screenshot filenames
        ready_selector: Selector that must appear before extraction runs
        extract: Returns raw ``{"quantity", "price"}`` dicts from a loaded page
        ready_timeout_ms: How long to wait for ``ready_selector``
        prepare: Optional step run after navigation, before the readiness wait
    """
    name: str
    ready_selector: str
    extract: Callable[[Page], List[Dict]]
    ready_timeout_ms: int = 5000
    prepare: Optional[Callable[[Page, Settings], None]] = None


def _clean_rows(rows: List[Dict]) -> List[PriceLine]:
    """Drop rows missing quantity or price text; keep page order."""
    prices = []
    for row in rows or []:
        quantity = (row.get("quantity") or "").strip()
        price = (row.get("price") or "").strip()
        if quantity and price:
            prices.append(PriceLine(quantity=quantity, price=price))
    return prices


def _capture_screenshot(page: Page, name: str, settings: Settings) -> Optional[str]:
    """Save a full-page screenshot for a failed crawl. Never raises."""
    filename = f"{name}_{datetime.now().strftime('%Y%m%d-%H%M%S-%f')}.png"
    path = os.path.join(settings.SCREENSHOT_DIR, filename)
    try:
        os.makedirs(settings.SCREENSHOT_DIR, exist_ok=True)
        page.screenshot(path=path, full_page=True)
    except Exception as e:
        logger.warning("Could not capture screenshot for %s: %s", name, e)
        return None
    return path


def crawl(url: str, extractor: PageExtractor, settings: Optional[Settings] = None) -> List[PriceLine]:
    """
    Open a fresh browser, load a vendor page and extract its price table.

    Every call gets its own browser and page, which are closed on every exit
    path. On failure a screenshot is saved to ``SCREENSHOT_DIR`` and a
    ``CrawlError`` chained to the original exception is raised.

    Args:
        url: Vendor product page
        extractor: Vendor-specific readiness condition and extraction logic
        settings: Optional settings override

    Returns:
        Price lines in page order; empty if the table had no complete rows
    """
    settings = settings or get_settings()

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=settings.CRAWL_HEADLESS)
        try:
            page = browser.new_page()
            step = "navigation"
            try:
                page.goto(url, wait_until="domcontentloaded", timeout=settings.CRAWL_NAVIGATION_TIMEOUT_MS)
                if extractor.prepare is not None:
                    step = "page preparation"
                    extractor.prepare(page, settings)
                step = "readiness wait"
                page.wait_for_selector(extractor.ready_selector, timeout=extractor.ready_timeout_ms)
                step = "extraction"
                rows = extractor.extract(page)
            except Exception as e:
                screenshot = _capture_screenshot(page, extractor.name, settings)
                logger.error(
                    "Crawl of %s failed during %s: %s (screenshot: %s)",
                    url, step, e, screenshot or "none",
                )
                raise CrawlError(f"{extractor.name} {step} failed: {e}", url=url, screenshot=screenshot) from e
        finally:
            browser.close()

    prices = _clean_rows(rows)
    logger.info("Extracted %d price rows from %s", len(prices), url)
    return prices


# --- Vendor extractors ---

_ACCELA_JS = """
() => Array.from(document.querySelectorAll('tr.tr')).map(row => {
    const cells = row.querySelectorAll('td');
    return {
        quantity: cells[2]?.innerText.trim(),
        price: cells[3]?.innerText.trim(),
    };
})
"""

_BLD_JS = """
() => {
    const data = [];
    for (const row of document.querySelectorAll('table.pro_table tbody tr')) {
        if (!row.getAttribute('size')) continue;
        const cells = row.querySelectorAll('td');
        data.push({
            quantity: cells[0]?.innerText.trim() || '',
            price: cells[1]?.innerText.trim() || '',
        });
    }
    return data;
}
"""

_BROADPHARM_JS = """
() => {
    const data = [];
    document.querySelectorAll('form.single-product > ul > ul').forEach(block => {
        const name = block.querySelector('li.name');
        const price = block.querySelector('li.price');
        if (name && price) {
            data.push({ quantity: name.textContent.trim(), price: price.textContent.trim() });
        }
    });
    return data;
}
"""


def _evaluator(script: str) -> Callable[[Page], List[Dict]]:
    def extract(page: Page) -> List[Dict]:
        return page.evaluate(script)
    return extract


def dismiss_bld_currency_popup(page: Page, settings: Settings) -> None:
    """
    Pick US/USD on BLD's location interstitial when it is shown.

    The popup is optional: if it never appears, or cannot be dismissed, the
    crawl carries on to the price table.
    """
    try:
        page.wait_for_selector(".location_selt", timeout=settings.BLD_POPUP_TIMEOUT_MS)
        if page.locator(".location_selt").is_visible():
            page.locator('span[key="United States"] ~ a', has_text="USD").first.click()
            page.wait_for_load_state("domcontentloaded")
            logger.debug("Dismissed BLD currency popup")
    except PlaywrightError as e:
        logger.debug("BLD currency popup not found or already dismissed: %s", e)


ACCELA = PageExtractor(
    name="accela",
    ready_selector="tr.tr",
    extract=_evaluator(_ACCELA_JS),
)

BLD = PageExtractor(
    name="bld",
    ready_selector="table.pro_table tbody tr",
    extract=_evaluator(_BLD_JS),
    prepare=dismiss_bld_currency_popup,
)

BROADPHARM = PageExtractor(
    name="broadpharm",
    ready_selector="form.single-product ul",
    extract=_evaluator(_BROADPHARM_JS),
    ready_timeout_ms=10000,
)
