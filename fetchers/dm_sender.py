"""Direct-message delivery through the X API v2."""
from __future__ import annotations

import httpx

from .twitter_http import request_json


class TwitterDMSender:
    """Send a text DM to a user id.

    The client must carry a user-context token for the bot account;
    app-only bearer tokens cannot create DM events.
    """

    def __init__(self, client: httpx.Client):
        self.client = client

    def send(self, user_id: int, text: str) -> None:
        request_json(
            self.client,
            "POST",
            f"/2/dm_conversations/with/{user_id}/messages",
            json={"text": text},
        )
