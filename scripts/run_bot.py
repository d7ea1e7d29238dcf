#!/usr/bin/env python3

"""
Trends Bot entry-point
Wires the pieces together and runs them until interrupted:
1. Seed the region directory (built-in regions or ``--regions`` CSV)
2. Start the digest scheduler thread
3. Listen for mentions in the foreground

Usage
-----
python scripts/run_bot.py                 # run the bot
python scripts/run_bot.py --interval 60   # digest every minute
"""

from __future__ import annotations

import argparse
import logging
import math
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from fetchers import MentionPoller, TwitterDMSender, TwitterTrendProvider, build_client
from scripts.digest_scheduler import DigestScheduler
from scripts.ingestion_loop import IngestionLoop
from subscription_engine.region_directory import RegionDirectory
from subscription_engine.registry import SubscriptionRegistry
from subscription_engine.seed_loader import SeedError, load_seed_regions
from trends_bot.config import BotSettings, ConfigError

LOGGER = logging.getLogger(__name__)


def _positive_float(value: str) -> float:
    number = float(value)
    if not (0 < number < math.inf):
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="DM trending-topic digests to region subscribers")
    parser.add_argument("--interval", "-i", type=_positive_float, default=None, help="Digest interval in seconds (default: 15)")
    parser.add_argument("--regions", type=Path, default=None, help="CSV of region,woeid rows to seed the directory")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry-point for the bot. Returns the process exit code."""
    cli_args = _build_parser().parse_args(argv)

    try:
        settings = BotSettings.from_env()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
        LOGGER.error(str(e))
        return 2

    logging.basicConfig(
        level=(cli_args.log_level or settings.log_level).upper(),
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    try:
        settings.require_credentials()
        seed = load_seed_regions(cli_args.regions or settings.regions_csv)
    except (ConfigError, SeedError) as e:
        LOGGER.error(str(e))
        return 2

    registry = SubscriptionRegistry(RegionDirectory(seed), dedupe=settings.dedupe_subscriptions)
    LOGGER.info(f"🌍 Region directory seeded with {len(seed)} regions")

    app_client = build_client(settings.bearer_token)
    user_client = build_client(settings.user_token)
    try:
        scheduler = DigestScheduler(
            registry,
            TwitterTrendProvider(app_client),
            TwitterDMSender(user_client),
            interval_seconds=cli_args.interval if cli_args.interval is not None else settings.digest_interval_seconds,
        )

        stop_event = threading.Event()

        def _signal_handler(signum, frame):
            LOGGER.info(f"Received signal {signum}, shutting down gracefully...")
            stop_event.set()

        signal.signal(signal.SIGINT, _signal_handler)
        signal.signal(signal.SIGTERM, _signal_handler)

        poller = MentionPoller(user_client, settings.bot_user_id, poll_interval=settings.mention_poll_seconds)
        scheduler.start()
        try:
            IngestionLoop(registry, poller).run(stop_event)
        finally:
            scheduler.stop(timeout=30)
    finally:
        app_client.close()
        user_client.close()

    LOGGER.info("🎉 Trends bot shut down cleanly")
    return 0


if __name__ == "__main__":
    sys.exit(main())
