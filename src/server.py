"""Protean Engine runner for the warehouse domain.

Starts the Engine that processes events asynchronously after commit:
- InventoryMirrorSync: propagates new stock levels to external storefronts
- InvoiceDocumentRenderer: renders generated invoices

Usage:
    python src/server.py
"""

import argparse
import asyncio

import structlog
from protean.server.engine import Engine
from warehouse.domain import warehouse
from warehouse.utils.logging import configure_logging

logger = structlog.get_logger(__name__)


async def run(log_dir=None):
    configure_logging(log_dir)
    warehouse.init()
    logger.info("Starting warehouse engine", domain=warehouse.name)
    await asyncio.gather(Engine(warehouse).run())


def main():
    parser = argparse.ArgumentParser(description="Warehouse Engine runner")
    parser.add_argument(
        "--log-dir",
        help="Also write rotating log files into this directory",
    )
    args = parser.parse_args()

    asyncio.run(run(args.log_dir))


if __name__ == "__main__":
    main()
