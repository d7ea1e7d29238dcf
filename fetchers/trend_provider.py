"""Trending topics per WOEID from the Twitter v1.1 trends endpoint."""
from __future__ import annotations

import logging
from typing import List

import httpx

from .twitter_http import TwitterAPIError, request_json

logger = logging.getLogger(__name__)

TRENDS_PATH = "/1.1/trends/place.json"


class TwitterTrendProvider:
    """Fetch the trending topics for a WOEID from the v1.1 trends endpoint."""

    def __init__(self, client: httpx.Client):
        self.client = client

    def fetch_trends(self, location_id: int) -> List[str]:
        """Return trend names for *location_id* in the order Twitter ranks them."""
        logger.debug(f"Requesting trends for WOEID {location_id}")
        payload = request_json(self.client, "GET", TRENDS_PATH, params={"id": location_id})

        # The endpoint wraps the result in a one-element list.
        if not isinstance(payload, list) or not payload:
            raise TwitterAPIError(f"unexpected trends payload for WOEID {location_id}")

        names = [trend.get("name", "") for trend in payload[0].get("trends", [])]
        return [name for name in names if name]
