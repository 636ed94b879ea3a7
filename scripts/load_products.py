#!/usr/bin/env python3
"""Bulk load products script.

Loads a product spreadsheet (.xlsx) into the products index with one
bulk request and prints the per-row report.

Usage:
    python scripts/load_products.py products.xlsx
    python scripts/load_products.py products.xlsx --index products-staging
    python scripts/load_products.py products.xlsx --header-rows 1 --no-refresh

Exit status is 0 when every row was indexed, 1 when some rows failed
and 2 when the file could not be decoded or the index is unreachable.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from productsearch.catalog.ingestion import BulkIngestionPipeline, BulkIngestionResult
from productsearch.domain.exceptions import DecodeError, IndexUnavailableError
from productsearch.infrastructure.config import settings
from productsearch.infrastructure.index_gateway import IndexGateway
from productsearch.infrastructure.logging import configure_logging
from productsearch.infrastructure.search_client import build_search_client


async def load(
    path: Path,
    index: str,
    refresh: bool,
    wait_for_active_shards: int,
    header_rows: int,
) -> BulkIngestionResult:
    """Load one spreadsheet into the index.

    Args:
        path: Spreadsheet path.
        index: Target index.
        refresh: Whether loaded rows are searchable immediately.
        wait_for_active_shards: Shard copies required before writing.
        header_rows: Leading rows to skip on each sheet.

    Returns:
        Ingestion result.
    """
    client = build_search_client(settings)
    try:
        gateway = IndexGateway(client, request_timeout=settings.index_request_timeout)
        pipeline = BulkIngestionPipeline(
            gateway,
            index,
            wait_for_active_shards=wait_for_active_shards,
            refresh=refresh,
            header_rows=header_rows,
        )
        return await pipeline.ingest(path.read_bytes(), source=path.name)
    finally:
        await client.close()


async def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Bulk load products from a spreadsheet",
    )
    parser.add_argument("path", type=Path, help="Spreadsheet (.xlsx) to load")
    parser.add_argument(
        "--index",
        default=settings.products_index,
        help=f"Target index (default: {settings.products_index})",
    )
    parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Don't refresh the index after loading",
    )
    parser.add_argument(
        "--wait-for-active-shards",
        type=int,
        default=settings.bulk_wait_for_active_shards,
        help="Shard copies that must be active before writing (default: %(default)s)",
    )
    parser.add_argument(
        "--header-rows",
        type=int,
        default=settings.spreadsheet_header_rows,
        help="Leading rows to skip on each sheet (default: %(default)s)",
    )

    args = parser.parse_args()
    configure_logging(settings)

    print("=" * 60)
    print("Product Bulk Loader")
    print("=" * 60)
    print(f"File: {args.path}")
    print(f"Index: {args.index}")
    print()

    try:
        result = await load(
            path=args.path,
            index=args.index,
            refresh=not args.no_refresh,
            wait_for_active_shards=args.wait_for_active_shards,
            header_rows=args.header_rows,
        )
    except (DecodeError, IndexUnavailableError, OSError) as e:
        print(f"  ✗ Error: {e}")
        return 2

    print(f"  ✓ Indexed: {result.succeeded} of {result.total} rows")
    for item in result.failed_items:
        print(f"  ✗ {item.sheet}!{item.row} [{item.document_id or '-'}]: {item.error}")
    print()

    print("=" * 60)
    print("Load complete!" if result.success else "Load finished with errors")
    print("=" * 60)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
