#!/usr/bin/env python3
"""
VocabMaster Telegram Bot
Main application entry point
"""

import asyncio
import logging

from vocabmaster.bot_handler import BotHandler
from vocabmaster.config import get_settings


async def main():
    """Main application entry point"""
    settings = get_settings()

    logging.basicConfig(
        level=settings.logging_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Starting VocabMaster bot (catalog source: {settings.catalog_source})...")

    bot_handler = BotHandler(settings)

    try:
        await bot_handler.start()
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Shutdown requested, stopping bot...")
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
