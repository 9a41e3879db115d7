"""Command-line interface for the chemical vendor price lookup."""
import argparse
import sys

from .agent import aggregate
from .errors import PriceLookupError


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Look up chemical prices across vendors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m chemprice.main aspirin
  python -m chemprice.main 50-78-2 --output table
  python -m chemprice.main "CC(=O)OC1=CC=CC=C1C(=O)O" --output table --verbose
        """
    )

    parser.add_argument(
        "identifier",
        help="Compound name, CAS number or SMILES string"
    )

    parser.add_argument(
        "--output",
        choices=["json", "table"],
        default="json",
        help="Output format (default: json)"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show every price row and vendor message"
    )

    args = parser.parse_args(argv)

    try:
        result = aggregate(args.identifier)
    except KeyboardInterrupt:
        print("\nLookup interrupted by user")
        sys.exit(1)
    except PriceLookupError as e:
        print(f"Error: {e.title}: {e}" + (f" ({e.details})" if e.details else ""))
        sys.exit(1)

    if args.output == "json":
        print(result.model_dump_json(indent=2, by_alias=True))
    else:
        print_table_output(result, args.verbose)


def print_table_output(result, verbose=False):
    """Print results in a human-readable table format."""
    print(f"\nIdentifier: {result.identifier}")
    print(f"PubChem CID: {result.cid}\n")

    print("=" * 100)
    print(f"{'#':<3} {'Vendor':<16} {'Status':<10} {'Prices':<7} {'Link / message':<60}")
    print("=" * 100)

    for i, vendor in enumerate(result.vendors, 1):
        detail = vendor.url or vendor.message or ""
        detail = detail[:59] + "…" if len(detail) > 60 else detail
        print(f"{i:<3} {vendor.vendor_name:<16} {vendor.status:<10} {len(vendor.prices):<7} {detail:<60}")

        if verbose:
            for line in vendor.prices:
                print(f"    {line.quantity:<20} {line.price}")
            if vendor.message and vendor.url:
                print(f"    {vendor.message}")


if __name__ == "__main__":
    main()
