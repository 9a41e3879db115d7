"""Main orchestration: resolve the compound, then price it at every vendor."""
import concurrent.futures
from typing import Dict, List, Optional, Sequence

from .config import get_settings
from .errors import HandlerError
from .handlers import HANDLERS, Sources, error
from .logger_config import get_logger
from .pubchem import list_sources, resolve_cid
from .registry import VENDORS, VendorDefinition
from .schema import PriceLookupResult, VendorResult, VendorSourceEntry

logger = get_logger(__name__)


def _index_sources(entries: Sequence[VendorSourceEntry]) -> Sources:
    """Map source name to entry; the first listing of a vendor wins."""
    sources: Sources = {}
    for entry in entries:
        sources.setdefault(entry.source_name, entry)
    return sources


def process_vendor(vendor: VendorDefinition, identifier: str, sources: Sources) -> VendorResult:
    """
    Run one vendor's handler. Always returns a result, never raises.

    Args:
        vendor: Registry entry to price
        identifier: The identifier as the user typed it
        sources: PubChem vendor listings keyed by source name

    Returns:
        The handler's result, or an error result if the handler failed
    """
    try:
        handler = HANDLERS[vendor.strategy]
        return handler(vendor, identifier, sources)
    except Exception as e:
        fault = HandlerError(vendor.display_name, f"{type(e).__name__}: {e}")
        logger.exception("Handler for %s failed: %s", fault.vendor_name, fault)
        return error(vendor, fault.message)


def fan_out(
    identifier: str,
    sources: Sources,
    vendors: Sequence[VendorDefinition] = VENDORS,
    max_workers: Optional[int] = None,
) -> List[VendorResult]:
    """
    Price every vendor concurrently, returning results in registry order.

    Each task writes into its own slot, so the order of the returned list
    never depends on which vendor finishes first.
    """
    if not vendors:
        return []
    max_workers = max_workers or get_settings().AGGREGATOR_MAX_WORKERS
    results: List[Optional[VendorResult]] = [None] * len(vendors)

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=min(max_workers, len(vendors)),
        thread_name_prefix="vendor",
    ) as executor:
        future_to_slot = {
            executor.submit(process_vendor, vendor, identifier, sources): slot
            for slot, vendor in enumerate(vendors)
        }

        for future in concurrent.futures.as_completed(future_to_slot):
            slot = future_to_slot[future]
            try:
                results[slot] = future.result()
            except Exception as e:
                # process_vendor already catches handler faults; this guards the executor itself
                logger.exception("Vendor task %s crashed", vendors[slot].display_name)
                results[slot] = error(vendors[slot], f"{type(e).__name__}: {e}")

    return results


def aggregate(
    identifier: str,
    vendors: Sequence[VendorDefinition] = VENDORS,
    max_workers: Optional[int] = None,
) -> PriceLookupResult:
    """
    Look up vendor pricing for a chemical identifier.

    Resolution and vendor listing run first; a failure there aborts the
    lookup. After that every configured vendor produces exactly one result,
    whatever happens to the others.

    Args:
        identifier: Compound name, CAS number or SMILES string
        vendors: Registry entries to report on (defaults to all)
        max_workers: Maximum vendor tasks running at once

    Returns:
        PriceLookupResult with one VendorResult per vendor, in registry order

    Raises:
        ValidationError, NotFoundError, UpstreamError: from resolution or
        vendor listing
    """
    logger.info("Looking up prices for %r", identifier)
    cid = resolve_cid(identifier)
    sources = _index_sources(list_sources(cid))

    identifier = identifier.strip()
    listed = [vendor.display_name for vendor in vendors if vendor.source_name in sources]
    logger.info("Configured vendors listed by PubChem for CID %s: %s", cid, ", ".join(listed) or "none")

    results = fan_out(identifier, sources, vendors, max_workers)

    summary: Dict[str, int] = {}
    for result in results:
        summary[result.status] = summary.get(result.status, 0) + 1
    logger.info("Finished %r: %s", identifier, summary)

    return PriceLookupResult(identifier=identifier, cid=cid, vendors=results)
