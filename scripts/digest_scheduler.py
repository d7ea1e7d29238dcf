#!/usr/bin/env python3

"""
Digest Scheduler - Every tick, fetch trends once per subscribed region and
DM each subscriber a digest of the regions they follow.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Optional

from subscription_engine.digest import compose_digest, render_trend_block
from subscription_engine.models import NotificationSender, TrendProvider, TrendSnapshot
from subscription_engine.registry import SubscriptionRegistry

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """Counters for one scheduler tick."""

    subscribers: int = 0
    regions_fetched: int = 0
    fetch_failures: int = 0
    sent: int = 0
    send_failures: int = 0


class DigestScheduler:
    """Runs digest ticks on a fixed interval until stopped."""

    def __init__(
        self,
        registry: SubscriptionRegistry,
        trend_provider: TrendProvider,
        sender: NotificationSender,
        interval_seconds: float = 15.0,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the digest scheduler."""
        if not interval_seconds > 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.registry = registry
        self.trend_provider = trend_provider
        self.sender = sender
        self.interval_seconds = interval_seconds
        self.today = today
        self.cycle_count = 0
        self.skipped_count = 0

        self._stop_event = threading.Event()
        self._busy = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._workers: list[threading.Thread] = []

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _trend_block(self, region: str, location_id: Optional[int], day: date) -> Optional[TrendSnapshot]:
        """Fetch and render one region; *None* when the provider fails."""
        if location_id is None:
            logger.warning(f"Region {region!r} has no WOEID, skipping")
            return None
        try:
            trends = self.trend_provider.fetch_trends(location_id)
        except Exception as e:
            logger.error(f"Trend fetch for {region!r} (WOEID {location_id}) failed: {e}")
            return None
        return render_trend_block(region, trends, day)

    def run_tick(self) -> TickReport:
        """Build and send one digest per subscriber."""
        snapshot = self.registry.snapshot()
        report = TickReport(subscribers=len(snapshot))
        day = self.today()

        # Failed regions are cached as None so they are not retried this tick.
        cache: Dict[str, Optional[TrendSnapshot]] = {}

        for user_id, regions in snapshot.subscriptions.items():
            blocks = []
            for region in regions:
                if region not in cache:
                    cache[region] = self._trend_block(region, snapshot.locations.get(region), day)
                    if cache[region] is None:
                        report.fetch_failures += 1
                    else:
                        report.regions_fetched += 1
                if cache[region] is not None:
                    blocks.append(cache[region])

            try:
                self.sender.send(user_id, compose_digest(blocks))
                report.sent += 1
            except Exception as e:
                logger.error(f"Could not deliver digest to user {user_id}: {e}")
                report.send_failures += 1

        return report

    def _run_tick_worker(self) -> None:
        try:
            self.cycle_count += 1
            logger.info(f"🔄 Starting digest tick {self.cycle_count}")
            report = self.run_tick()
            logger.info(
                f"✅ Tick {self.cycle_count}: {report.sent}/{report.subscribers} digests sent, "
                f"{report.regions_fetched} regions fetched, {report.fetch_failures} fetch failures"
            )
        except Exception:
            logger.exception(f"❌ Digest tick {self.cycle_count} failed")
        finally:
            self._busy.release()

    def fire(self) -> Optional[threading.Thread]:
        """Start a tick in the background unless the previous one is still running."""
        if not self._busy.acquire(blocking=False):
            self.skipped_count += 1
            logger.warning("Previous digest tick still running, skipping this one")
            return None

        worker = threading.Thread(target=self._run_tick_worker, name="digest-tick", daemon=True)
        self._workers = [w for w in self._workers if w.is_alive()]
        try:
            worker.start()
        except RuntimeError:
            self._busy.release()
            logger.exception("Could not start digest tick worker")
            return None
        self._workers.append(worker)
        return worker

    def _loop(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            self.fire()

    def start(self) -> None:
        """Start firing ticks every ``interval_seconds``."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="digest-scheduler", daemon=True)
        self._thread.start()
        logger.info(f"⏰ Digest scheduler started, interval {self.interval_seconds}s")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the timer and wait for any in-flight tick."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Digest timer thread did not stop in time")
        for worker in list(self._workers):
            worker.join(timeout)
        self._workers = [w for w in self._workers if w.is_alive()]
        logger.info(f"🏁 Digest scheduler stopped after {self.cycle_count} ticks")
