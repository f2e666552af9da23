#!/usr/bin/env python3
"""
Design-time schema creation script.

Usage:
    python -m apps.products.scripts.init_db [--deployment demo|sample] [--database-url URL]

Creates the products table when missing; the sample deployment seeds its
fixed rows on first creation only.
"""

import asyncio
import sys

from framework.logging.logger import LogConfig, get_logger
from apps.products.context import ProductContextFactory

logger = get_logger("init_db_script")


async def main(argv=None) -> int:
    """Main entry; returns the process exit code."""
    context = ProductContextFactory.create_design_time(sys.argv[1:] if argv is None else argv)
    try:
        created = await context.create_schema()
        if created:
            logger.info("Schema created")
        else:
            logger.info("Schema already up to date")
        return 0
    except Exception as e:
        logger.opt(exception=True).error(f"Schema creation failed: {str(e)}")
        return 1
    finally:
        await context.dispose()


if __name__ == "__main__":
    LogConfig.setup_logging(deployment="init_db")
    sys.exit(asyncio.run(main()))
