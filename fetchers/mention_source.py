"""Poll the bot's mention timeline and yield new mentions as events."""
from __future__ import annotations

import logging
import threading
import time
from typing import Iterator, List, Optional

import httpx

from subscription_engine.models import MentionEvent

from .twitter_http import TwitterAPIError, request_json

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3


class MentionPoller:
    """Long-running mention feed built on ``GET /2/users/:id/mentions``.

    Only mentions newer than the last one seen are returned. Unless
    *backfill* is set, the first poll just records the newest mention id so
    that mentions sent before startup are not replayed.
    """

    def __init__(
        self,
        client: httpx.Client,
        bot_user_id: int,
        poll_interval: float = 60.0,
        backfill: bool = False,
        sleep=time.sleep,
    ):
        self.client = client
        self.bot_user_id = bot_user_id
        self.poll_interval = poll_interval
        self.since_id: Optional[int] = None
        self._primed = backfill
        self._sleep = sleep

    def poll_once(self) -> List[MentionEvent]:
        """Fetch one page of new mentions, oldest first."""
        params = {"expansions": "author_id", "tweet.fields": "author_id", "max_results": 100}
        if self.since_id is not None:
            params["since_id"] = self.since_id

        payload = request_json(self.client, "GET", f"/2/users/{self.bot_user_id}/mentions", params=params)
        if not isinstance(payload, dict):
            raise TwitterAPIError("unexpected mentions payload")
        newest = (payload.get("meta") or {}).get("newest_id")
        if newest is not None:
            try:
                self.since_id = int(newest)
            except (TypeError, ValueError) as e:
                raise TwitterAPIError(f"unexpected newest_id {newest!r}") from e

        if not self._primed:
            self._primed = True
            logger.info(f"Mention feed primed at since_id={self.since_id}")
            return []

        events: List[MentionEvent] = []
        for tweet in reversed(payload.get("data") or []):
            try:
                event = MentionEvent(
                    user_id=int(tweet["author_id"]), text=tweet.get("text", ""), tweet_id=int(tweet["id"])
                )
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed mention {tweet!r}: {e!r}")
                continue
            if event.user_id == self.bot_user_id:
                continue
            events.append(event)
        return events

    def _poll_with_retry(self) -> List[MentionEvent]:
        for attempt in range(MAX_ATTEMPTS):
            try:
                return self.poll_once()
            except TwitterAPIError as e:
                logger.error(f"Mention poll failed on attempt {attempt + 1}: {e}")
                if attempt < MAX_ATTEMPTS - 1:
                    wait_time = 2 ** attempt  # 1s, 2s
                    logger.info(f"Retrying in {wait_time} seconds...")
                    self._sleep(wait_time)
        logger.error(f"Mention poll failed after {MAX_ATTEMPTS} attempts, waiting for next interval")
        return []

    def events(self, stop_event: threading.Event) -> Iterator[MentionEvent]:
        """Yield mentions until *stop_event* is set."""
        while not stop_event.is_set():
            for event in self._poll_with_retry():
                yield event
            stop_event.wait(self.poll_interval)
