"""Standalone process that keeps the persisted storefront session fresh."""

from __future__ import annotations

import asyncio
import logging

from storefront.core.config import get_settings
from storefront.core.logging import configure_logging
from storefront.dependencies import get_platform_transport, get_session_keeper

logger = logging.getLogger(__name__)


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    keeper = get_session_keeper()
    logger.info(
        "Session renewal worker started",
        extra={"interval_seconds": settings.session.renew_interval_seconds},
    )
    try:
        await keeper.run_forever()
    finally:
        await get_platform_transport().aclose()


if __name__ == "__main__":  # pragma: no cover - manual execution path
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Session renewal worker stopped")
