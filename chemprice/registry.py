"""Static table of the vendors reported on and how each one is priced."""
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
from urllib.parse import quote

from . import scrape_playwright
from .scrape_playwright import PageExtractor


class Strategy(str, Enum):
    API = "api"      # commerce API, keyed by the local catalog
    CRAWL = "crawl"  # headless browser against the PubChem record URL
    LINK = "link"    # product or search link only


@dataclass(frozen=True)
class VendorDefinition:
    display_name: str
    source_name: str
    strategy: Strategy
    extractor: Optional[PageExtractor] = None
    search_url_template: Optional[str] = None

    def search_url(self, identifier: str) -> Optional[str]:
        if not self.search_url_template:
            return None
        return self.search_url_template.format(identifier=quote(identifier, safe=""))


# Declaration order is the response order.
VENDORS = (
    VendorDefinition(
        display_name="AA Blocks",
        source_name="AA BLOCKS",
        strategy=Strategy.LINK,
        search_url_template="https://www.aablocks.com/prod/{identifier}",
    ),
    VendorDefinition("AbaChemScene", "AbaChemScene", Strategy.LINK),
    VendorDefinition("Combi-Blocks", "Combi-Blocks", Strategy.LINK),
    VendorDefinition("Accela", "Accela ChemBio Inc.", Strategy.CRAWL, extractor=scrape_playwright.ACCELA),
    VendorDefinition("BLD", "BLD Pharm", Strategy.CRAWL, extractor=scrape_playwright.BLD),
    VendorDefinition("BroadPharm", "BroadPharm", Strategy.CRAWL, extractor=scrape_playwright.BROADPHARM),
    VendorDefinition("Catalog Store", "Catalog Store", Strategy.API),
)


def get_vendor(display_name: str) -> Optional[VendorDefinition]:
    for vendor in VENDORS:
        if vendor.display_name == display_name:
            return vendor
    return None


def strategy_counts() -> Dict[str, int]:
    return dict(Counter(vendor.strategy.value for vendor in VENDORS))
