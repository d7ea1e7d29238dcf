"""Pydantic data models and collaborator protocols shared by the bot."""
from __future__ import annotations

import threading
from enum import Enum
from typing import Iterator, Protocol

from pydantic import BaseModel, Field


class MentionEvent(BaseModel):
    """One inbound mention of the bot account."""

    user_id: int = Field(..., description="Author of the mention")
    text: str = Field(..., description="Raw tweet text, handle included")
    tweet_id: int | None = Field(None, description="Tweet id when known")

    model_config = {
        "frozen": True,
    }


class ParsedRequest(BaseModel):
    """Result of parsing a subscription request."""

    region_name: str
    location_id: int = 0
    location_unresolved: bool = Field(
        False, description="A location part was given but is not a valid integer"
    )

    model_config = {
        "frozen": True,
    }


class TrendSnapshot(BaseModel):
    """Rendered digest block for one region, valid for a single tick."""

    region: str
    text: str

    model_config = {
        "frozen": True,
    }


class UpdateStatus(str, Enum):
    ACCEPTED = "accepted"
    ACCEPTED_NEW_REGION = "accepted_new_region"
    ALREADY_SUBSCRIBED = "already_subscribed"
    REJECTED = "rejected"


class UpdateReason(str, Enum):
    NO_LOCATION_GIVEN = "no_location_given"
    NEW_LOCATION_MISSING_WOEID = "new_location_missing_woeid"
    DUPLICATE_REGION = "duplicate_region"
    INVALID_LOCATION_ID = "invalid_location_id"


class UpdateOutcome(BaseModel):
    """What :meth:`SubscriptionRegistry.update` did with a request."""

    status: UpdateStatus
    region_name: str = ""
    reason: UpdateReason | None = None

    model_config = {
        "frozen": True,
    }

    @property
    def accepted(self) -> bool:
        return self.status is not UpdateStatus.REJECTED

    @classmethod
    def rejected(cls, reason: UpdateReason, region_name: str = "") -> "UpdateOutcome":
        return cls(status=UpdateStatus.REJECTED, region_name=region_name, reason=reason)


# ---------------------------------------------------------------------------
# External collaborators
# ---------------------------------------------------------------------------


class TrendProvider(Protocol):
    """Source of the top trending topics for a location."""

    def fetch_trends(self, location_id: int) -> list[str]: ...


class NotificationSender(Protocol):
    """Delivers a direct message to a user."""

    def send(self, user_id: int, text: str) -> None: ...


class MentionSource(Protocol):
    """Stream of inbound mentions, consumed until *stop_event* is set."""

    def events(self, stop_event: threading.Event) -> Iterator[MentionEvent]: ...
