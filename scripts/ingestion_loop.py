#!/usr/bin/env python3

"""
Ingestion Loop - Turn inbound mentions into subscription updates.
"""

import logging
import threading
from typing import Optional

from subscription_engine.models import MentionEvent, MentionSource, UpdateOutcome, UpdateStatus
from subscription_engine.registry import SubscriptionRegistry
from subscription_engine.request_parser import ParseError, parse_request

logger = logging.getLogger(__name__)

STOP_KEYWORD = "stop"
RECONNECT_SECONDS = 5.0


class IngestionLoop:
    """Consumes mention events one at a time and updates the registry."""

    def __init__(
        self,
        registry: SubscriptionRegistry,
        source: Optional[MentionSource] = None,
        reconnect_seconds: float = RECONNECT_SECONDS,
    ):
        self.registry = registry
        self.source = source
        self.reconnect_seconds = reconnect_seconds
        self.processed_count = 0

    def handle(self, event: MentionEvent) -> Optional[UpdateOutcome]:
        """Apply one mention; returns *None* when the mention is dropped."""
        try:
            request = parse_request(event.text)
        except ParseError as e:
            logger.warning(f"Dropping mention from user {event.user_id}: {e}")
            return None

        if request.region_name.lower() == STOP_KEYWORD:
            removed = self.registry.unsubscribe(event.user_id)
            logger.info(f"User {event.user_id} unsubscribed (had subscriptions: {removed})")
            return None

        if request.location_unresolved:
            logger.warning(f"Mention from user {event.user_id} has a WOEID that is not an integer, ignoring it")

        outcome = self.registry.update(event.user_id, request.region_name, request.location_id)
        if outcome.status is UpdateStatus.REJECTED:
            logger.warning(
                f"Rejected subscription from user {event.user_id} "
                f"for {outcome.region_name!r}: {outcome.reason.value}"
            )
        else:
            logger.info(f"User {event.user_id} -> {outcome.region_name!r} ({outcome.status.value})")
        return outcome

    def run(self, stop_event: threading.Event) -> None:
        """Process events from the source until *stop_event* is set."""
        if self.source is None:
            raise RuntimeError("IngestionLoop.run needs a mention source")

        logger.info("📡 Listening for mentions")
        while not stop_event.is_set():
            try:
                self._consume(stop_event)
            except Exception:
                logger.exception(f"Mention source failed, reconnecting in {self.reconnect_seconds}s")
                stop_event.wait(self.reconnect_seconds)
                continue
            break
        logger.info(f"Mention listener stopped after {self.processed_count} mentions")

    def _consume(self, stop_event: threading.Event) -> None:
        for event in self.source.events(stop_event):
            try:
                self.handle(event)
            except Exception:
                logger.exception(f"Unexpected error handling mention from user {event.user_id}")
            self.processed_count += 1
            if stop_event.is_set():
                break
