import pytest

from chemprice import handlers
from chemprice.catalog import Catalog
from chemprice.errors import CrawlError, UpstreamError
from chemprice.registry import VENDORS, Strategy, VendorDefinition, get_vendor, strategy_counts
from chemprice.schema import PriceLine, VendorSourceEntry, VendorStatus
from chemprice.scrape_playwright import BLD

BLD_URL = "https://www.bldpharm.com/products/50-78-2.html"

SOURCES = {
    "BLD Pharm": VendorSourceEntry(source_name="BLD Pharm", record_url=BLD_URL),
    "Combi-Blocks": VendorSourceEntry(source_name="Combi-Blocks", record_url="https://www.combi-blocks.com/QA-1234"),
}


def test_registry_covers_every_strategy():
    assert strategy_counts() == {"link": 3, "crawl": 3, "api": 1}
    assert len({vendor.display_name for vendor in VENDORS}) == len(VENDORS)
    for vendor in VENDORS:
        if vendor.strategy is Strategy.CRAWL:
            assert vendor.extractor is not None


def test_get_vendor_unknown_name_returns_none():
    assert get_vendor("BLD").source_name == "BLD Pharm"
    assert get_vendor("Sigma") is None


def test_link_uses_directory_url():
    result = handlers.handle_link(get_vendor("Combi-Blocks"), "aspirin", SOURCES)

    assert result.status == VendorStatus.LINK_ONLY
    assert result.url == "https://www.combi-blocks.com/QA-1234"


def test_link_synthesizes_search_url_when_unlisted():
    result = handlers.handle_link(get_vendor("AA Blocks"), "acetylsalicylic acid", SOURCES)

    assert result.status == VendorStatus.LINK_ONLY
    assert result.url == "https://www.aablocks.com/prod/acetylsalicylic%20acid"


def test_link_without_template_is_not_found():
    result = handlers.handle_link(get_vendor("AbaChemScene"), "aspirin", SOURCES)

    assert result.status == VendorStatus.NOT_FOUND
    assert result.url is None


def test_crawl_not_listed_is_not_found(monkeypatch):
    def never(url, extractor):
        raise AssertionError("crawled an unlisted vendor")

    monkeypatch.setattr(handlers, "crawl", never)

    result = handlers.handle_crawl(get_vendor("Accela"), "aspirin", SOURCES)
    assert result.status == VendorStatus.NOT_FOUND


def test_crawl_success(monkeypatch):
    seen = {}

    def fake_crawl(url, extractor):
        seen["args"] = (url, extractor)
        return [PriceLine(quantity="1g", price="$9.00")]

    monkeypatch.setattr(handlers, "crawl", fake_crawl)

    result = handlers.handle_crawl(get_vendor("BLD"), "aspirin", SOURCES)

    assert seen["args"] == (BLD_URL, BLD)
    assert result.status == VendorStatus.SUCCESS
    assert result.prices == [PriceLine(quantity="1g", price="$9.00")]
    assert result.url == BLD_URL
    assert result.message is None


def test_crawl_with_no_rows_is_success_with_message(monkeypatch):
    monkeypatch.setattr(handlers, "crawl", lambda url, extractor: [])

    result = handlers.handle_crawl(get_vendor("BLD"), "aspirin", SOURCES)

    assert result.status == VendorStatus.SUCCESS
    assert result.prices == []
    assert result.message == handlers.NO_PRICES


def test_crawl_failure_is_error_result(monkeypatch):
    def timeout(url, extractor):
        raise CrawlError("bld navigation failed: Timeout 30000ms exceeded", url=url)

    monkeypatch.setattr(handlers, "crawl", timeout)

    result = handlers.handle_crawl(get_vendor("BLD"), "aspirin", SOURCES)

    assert result.status == VendorStatus.ERROR
    assert "Timeout" in result.message
    assert result.vendor_name == "BLD"


@pytest.fixture()
def catalog(monkeypatch):
    catalog = Catalog([{"product_key": "1042", "identifiers": ["aspirin"]}])
    monkeypatch.setattr(handlers, "get_catalog", lambda: catalog)
    return catalog


def test_api_not_in_catalog_is_not_found(catalog, monkeypatch):
    def never(product_key):
        raise AssertionError("commerce API called for an uncatalogued identifier")

    monkeypatch.setattr(handlers.commerce, "get_variations", never)

    result = handlers.handle_api(get_vendor("Catalog Store"), "caffeine", {})
    assert result.status == VendorStatus.NOT_FOUND


def test_api_ignores_directory_listing(catalog, monkeypatch):
    monkeypatch.setattr(
        handlers.commerce, "get_variations",
        lambda product_key: [PriceLine(quantity="5 g", price="24.00")],
    )

    result = handlers.handle_api(get_vendor("Catalog Store"), "aspirin", {})

    assert result.status == VendorStatus.SUCCESS
    assert result.prices[0].quantity == "5 g"


def test_api_failure_is_error_result(catalog, monkeypatch):
    def down(product_key):
        raise UpstreamError("Commerce API returned HTTP 503")

    monkeypatch.setattr(handlers.commerce, "get_variations", down)

    result = handlers.handle_api(get_vendor("Catalog Store"), "aspirin", SOURCES)

    assert result.status == VendorStatus.ERROR
    assert "503" in result.message


def test_new_vendor_needs_only_a_registry_entry():
    vendor = VendorDefinition("Example", "Example Chem", Strategy.LINK,
                              search_url_template="https://example.com/search?q={identifier}")

    result = handlers.HANDLERS[vendor.strategy](vendor, "50-78-2", SOURCES)

    assert result.url == "https://example.com/search?q=50-78-2"
