"""PubChem lookups: identifier to CID resolution and vendor source listing."""
from typing import Dict, List, Optional
from urllib.parse import quote

import httpx

from .config import get_settings
from .errors import NotFoundError, UpstreamError, ValidationError
from .logger_config import get_logger
from .schema import VendorSourceEntry

logger = get_logger(__name__)

NOT_FOUND_FAULT = "PUGREST.NotFound"
VENDOR_HEADING = "Chemical Vendors"

# Resolution paths, tried in order. Only a NotFound fault moves on to the next.
RESOLUTION_PATHS = ("name", "smiles")


class _NotFound(Exception):
    """Internal marker for a definitive PubChem "not found" answer."""


def _encode(value) -> str:
    return quote(str(value), safe="")


def _fault_code(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return (body.get("Fault") or {}).get("Code")
    return None


def _get_json(client: httpx.Client, url: str, params: Optional[Dict] = None) -> Dict:
    """GET a PubChem URL, separating "not found" from every other failure."""
    try:
        response = client.get(url, params=params)
    except httpx.HTTPError as e:
        raise UpstreamError(f"PubChem request failed: {type(e).__name__}", details=str(e)) from e

    if response.is_success:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("PubChem returned a non-JSON body", details=str(e)) from e

    if _fault_code(response) == NOT_FOUND_FAULT:
        raise _NotFound(url)

    raise UpstreamError(
        f"PubChem returned HTTP {response.status_code}",
        details=response.text[:200],
    )


def _unexpected_body(e: Exception) -> UpstreamError:
    return UpstreamError("PubChem returned an unexpected body", details=f"{type(e).__name__}: {e}")


def _client(client: Optional[httpx.Client]) -> httpx.Client:
    if client is not None:
        return client
    return httpx.Client(timeout=get_settings().PUBCHEM_TIMEOUT_SECONDS)


def _cids_for(client: httpx.Client, path: str, identifier: str) -> int:
    url = f"{get_settings().PUBCHEM_BASE_URL}/rest/pug/compound/{path}/{_encode(identifier)}/cids/JSON"
    data = _get_json(client, url)
    try:
        cids = (data.get("IdentifierList") or {}).get("CID") or []
        if not cids:
            raise _NotFound(url)
        return int(cids[0])
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise _unexpected_body(e) from e


def resolve_cid(identifier: str, client: Optional[httpx.Client] = None) -> int:
    """
    Resolve a free-text identifier to a PubChem compound ID.

    The identifier is first looked up as a compound name (which also covers
    CAS registry numbers), then as a SMILES string if the name lookup reports
    not found. Any other upstream failure is raised immediately without
    trying the fallback.

    Args:
        identifier: Name, CAS number or SMILES string
        client: Optional httpx client (a short-lived one is created otherwise)

    Returns:
        The first CID PubChem lists for the identifier

    Raises:
        ValidationError: identifier is blank
        NotFoundError: neither path knows the identifier
        UpstreamError: transport or server failure, or a malformed body
    """
    if identifier is None or not identifier.strip():
        raise ValidationError("Identifier must not be blank")
    identifier = identifier.strip()

    owned = client is None
    client = _client(client)
    try:
        for path in RESOLUTION_PATHS:
            try:
                cid = _cids_for(client, path, identifier)
            except _NotFound:
                logger.info("No compound found by %s for %r", path, identifier)
                continue
            logger.info("Resolved %r to CID %s by %s", identifier, cid, path)
            return cid
    finally:
        if owned:
            client.close()

    raise NotFoundError("No compound found for identifier", details=identifier)


def list_sources(cid: int, client: Optional[httpx.Client] = None) -> List[VendorSourceEntry]:
    """
    List the vendors PubChem reports for a compound.

    Args:
        cid: PubChem compound ID
        client: Optional httpx client

    Returns:
        Vendor entries in the order PubChem lists them

    Raises:
        NotFoundError: the compound has no vendor listing
        UpstreamError: transport or server failure, or a malformed body
    """
    url = f"{get_settings().PUBCHEM_BASE_URL}/rest/pug_view/categories/compound/{_encode(cid)}/JSON"

    owned = client is None
    client = _client(client)
    try:
        data = _get_json(client, url, params={"heading": VENDOR_HEADING})
    except _NotFound:
        raise NotFoundError("No vendors found for this compound", details=f"CID {cid}") from None
    finally:
        if owned:
            client.close()

    try:
        categories = (data.get("SourceCategories") or {}).get("Categories") or []
        sources = categories[0].get("Sources") if categories else None

        entries = []
        for source in sources or []:
            name = source.get("SourceName")
            if not name:
                continue
            entries.append(VendorSourceEntry(source_name=name, record_url=source.get("SourceRecordURL")))
    except (AttributeError, IndexError, TypeError, ValueError) as e:
        raise _unexpected_body(e) from e

    if not entries:
        raise NotFoundError("No vendors found for this compound", details=f"CID {cid}")

    logger.info("PubChem lists %d vendors for CID %s", len(entries), cid)
    return entries
