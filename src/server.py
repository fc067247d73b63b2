"""Protean Engine runner for the storefront domain.

In production, events are processed asynchronously: the Engine relays the
outbox to the broker and runs the notification event handlers off the
request path.

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import argparse
import asyncio

from protean.server.engine import Engine


def _get_domain():
    from storefront.domain import storefront
    from storefront.utils.logging import configure_logging

    configure_logging()
    storefront.init()
    return storefront


async def run():
    engine = Engine(_get_domain())
    await engine.run()


def main():
    argparse.ArgumentParser(description="Storefront Engine runner").parse_args()
    asyncio.run(run())


if __name__ == "__main__":
    main()
