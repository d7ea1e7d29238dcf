"""Subscription Engine.

Turns inbound mention text into region subscriptions and renders the
per-region trend blocks that make up each subscriber's digest.
"""

from .models import MentionEvent, ParsedRequest, TrendSnapshot, UpdateOutcome, UpdateReason, UpdateStatus
from .region_directory import RegionDirectory
from .registry import RegistrySnapshot, SubscriptionRegistry
from .request_parser import parse_request

__all__ = [
    "MentionEvent",
    "ParsedRequest",
    "RegionDirectory",
    "RegistrySnapshot",
    "SubscriptionRegistry",
    "TrendSnapshot",
    "UpdateOutcome",
    "UpdateReason",
    "UpdateStatus",
    "parse_request",
]

__version__ = "0.1.0"
