"""httpx adapters for the Twitter/X API: trends, mentions and direct messages."""

from .dm_sender import TwitterDMSender
from .mention_source import MentionPoller
from .trend_provider import TwitterTrendProvider
from .twitter_http import TwitterAPIError, build_client

__all__ = [
    "MentionPoller",
    "TwitterAPIError",
    "TwitterDMSender",
    "TwitterTrendProvider",
    "build_client",
]
