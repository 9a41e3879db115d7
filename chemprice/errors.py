"""Exception taxonomy for the price lookup pipeline.

Errors raised before the vendor fan-out (``ValidationError``, ``NotFoundError``,
``UpstreamError``) abort the whole request and are rendered by the API as a
single ``{error, details}`` body. ``CrawlError`` and ``HandlerError`` never
leave a vendor task; they end up as that vendor's ``status=error`` result.
"""
from typing import Optional


class PriceLookupError(Exception):
    """Base class for all lookup failures."""

    status_code: int = 500
    title: str = "Price lookup failed"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ValidationError(PriceLookupError):
    """Identifier is blank or otherwise unusable; raised before any I/O."""

    status_code = 400
    title = "Invalid identifier"


class NotFoundError(PriceLookupError):
    """Identifier does not resolve, or the compound has no listed vendors."""

    status_code = 404
    title = "Not found"


class UpstreamError(PriceLookupError):
    """Transport or server failure from an external collaborator."""

    status_code = 502
    title = "Upstream service failed"


class CrawlError(PriceLookupError):
    """Navigation, readiness wait or extraction failed for one vendor page."""

    title = "Crawl failed"

    def __init__(self, message: str, url: str, screenshot: Optional[str] = None):
        super().__init__(message)
        self.url = url
        self.screenshot = screenshot


class HandlerError(PriceLookupError):
    """Unexpected fault inside a vendor handler."""

    title = "Vendor handler failed"

    def __init__(self, vendor_name: str, message: str):
        super().__init__(message)
        self.vendor_name = vendor_name
