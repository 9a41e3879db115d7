"""Client for the commerce REST API that prices the in-house catalog."""
from typing import Dict, List, Optional
from urllib.parse import quote

import httpx

from .config import get_settings
from .errors import UpstreamError
from .logger_config import get_logger
from .schema import PriceLine

logger = get_logger(__name__)

WEIGHT_ATTRIBUTE = "weight"


def _weight_of(variation: Dict) -> Optional[str]:
    for attribute in variation.get("attributes") or []:
        if str(attribute.get("name", "")).lower() == WEIGHT_ATTRIBUTE:
            return attribute.get("option")
    return variation.get("weight")


def get_variations(product_key: str, client: Optional[httpx.Client] = None) -> List[PriceLine]:
    """
    Fetch the priced variations of a catalog product.

    Args:
        product_key: Product identifier in the commerce system
        client: Optional httpx client

    Returns:
        One price line per variation that has both a weight and a price
    """
    settings = get_settings()
    if not settings.COMMERCE_API_BASE_URL:
        raise UpstreamError("Commerce API is not configured")

    url = f"{settings.COMMERCE_API_BASE_URL.rstrip('/')}/products/{quote(str(product_key), safe='')}/variations"
    auth = None
    if settings.COMMERCE_API_KEY and settings.COMMERCE_API_SECRET:
        auth = (settings.COMMERCE_API_KEY, settings.COMMERCE_API_SECRET)

    owned = client is None
    if owned:
        client = httpx.Client(timeout=settings.COMMERCE_TIMEOUT_SECONDS)
    try:
        response = client.get(url, auth=auth)
        response.raise_for_status()
        variations = response.json()
    except httpx.HTTPStatusError as e:
        raise UpstreamError(
            f"Commerce API returned HTTP {e.response.status_code}",
            details=e.response.text[:200],
        ) from e
    except httpx.HTTPError as e:
        raise UpstreamError(f"Commerce API request failed: {type(e).__name__}", details=str(e)) from e
    except ValueError as e:
        raise UpstreamError("Commerce API returned a non-JSON body", details=str(e)) from e
    finally:
        if owned:
            client.close()

    prices = []
    for variation in variations or []:
        weight = _weight_of(variation)
        price = variation.get("price")
        if weight and price not in (None, ""):
            prices.append(PriceLine(quantity=str(weight), price=str(price)))

    logger.info("Commerce API returned %d priced variations for product %s", len(prices), product_key)
    return prices
