"""Per-strategy vendor handlers.

Each handler turns one registry entry into a ``VendorResult``. Handlers catch
the failures they expect (upstream and crawl errors); anything else is left
to the aggregator, which converts it into an error result.
"""
from typing import Callable, Dict, Optional

from . import commerce
from .catalog import get_catalog
from .errors import CrawlError, UpstreamError
from .logger_config import get_logger
from .registry import Strategy, VendorDefinition
from .schema import VendorResult, VendorSourceEntry, VendorStatus
from .scrape_playwright import crawl

logger = get_logger(__name__)

NOT_OFFERED = "Company does not offer this product"
NO_PRICES = "No prices listed on product page"

Sources = Dict[str, VendorSourceEntry]
Handler = Callable[[VendorDefinition, str, Sources], VendorResult]


def not_found(vendor: VendorDefinition, message: str = NOT_OFFERED) -> VendorResult:
    return VendorResult(vendor_name=vendor.display_name, status=VendorStatus.NOT_FOUND, message=message)


def error(vendor: VendorDefinition, message: str, url: Optional[str] = None) -> VendorResult:
    return VendorResult(vendor_name=vendor.display_name, status=VendorStatus.ERROR, url=url, message=message)


def handle_api(vendor: VendorDefinition, identifier: str, sources: Sources) -> VendorResult:
    """Price the identifier through the commerce API, if it is in the catalog."""
    product_key = get_catalog().lookup(identifier)
    if product_key is None:
        return not_found(vendor)

    try:
        prices = commerce.get_variations(product_key)
    except UpstreamError as e:
        logger.warning("Commerce API failed for %s (%s): %s", vendor.display_name, product_key, e)
        return error(vendor, str(e))

    return VendorResult(
        vendor_name=vendor.display_name,
        status=VendorStatus.SUCCESS,
        prices=prices,
        message=None if prices else NO_PRICES,
    )


def handle_link(vendor: VendorDefinition, identifier: str, sources: Sources) -> VendorResult:
    """Report the vendor's product page, or a search link if PubChem has none."""
    entry = sources.get(vendor.source_name)
    url = entry.record_url if entry else None
    if not url:
        url = vendor.search_url(identifier)
    if not url:
        return not_found(vendor)
    return VendorResult(vendor_name=vendor.display_name, status=VendorStatus.LINK_ONLY, url=url)


def handle_crawl(vendor: VendorDefinition, identifier: str, sources: Sources) -> VendorResult:
    """Scrape prices from the vendor's PubChem-listed product page."""
    entry = sources.get(vendor.source_name)
    if entry is None or not entry.record_url:
        return not_found(vendor)

    try:
        prices = crawl(entry.record_url, vendor.extractor)
    except CrawlError as e:
        return error(vendor, str(e), url=entry.record_url)

    return VendorResult(
        vendor_name=vendor.display_name,
        status=VendorStatus.SUCCESS,
        prices=prices,
        url=entry.record_url,
        message=None if prices else NO_PRICES,
    )


HANDLERS: Dict[Strategy, Handler] = {
    Strategy.API: handle_api,
    Strategy.LINK: handle_link,
    Strategy.CRAWL: handle_crawl,
}
