"""Runtime settings read from the environment (and a ``.env`` file if present)."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

_TRUE = {"1", "true", "yes", "on"}


class ConfigError(RuntimeError):
    """Settings are missing or invalid."""


class BotSettings(BaseModel):
    """Everything the bot needs to start."""

    bearer_token: str = Field("", description="App-only bearer token for the trends endpoint")
    user_token: str = Field("", description="User-context token of the bot account (mentions, DMs)")
    bot_user_id: Optional[int] = Field(None, description="Numeric id of the bot account")
    digest_interval_seconds: float = Field(15.0, gt=0)
    mention_poll_seconds: float = Field(60.0, gt=0)
    regions_csv: Optional[Path] = Field(None, description="CSV seed of region,woeid rows")
    dedupe_subscriptions: bool = False
    log_level: str = "INFO"

    model_config = {
        "frozen": True,
    }

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BotSettings":
        """Build settings from *environ* (defaults to ``os.environ`` after ``load_dotenv``)."""
        if environ is None:
            load_dotenv(find_dotenv(usecwd=True))
            environ = os.environ

        raw = {
            "bearer_token": environ.get("TWITTER_BEARER_TOKEN", ""),
            "user_token": environ.get("TWITTER_USER_TOKEN", ""),
            "bot_user_id": environ.get("TWITTER_BOT_USER_ID") or None,
            "digest_interval_seconds": environ.get("DIGEST_INTERVAL_SECONDS", 15.0),
            "mention_poll_seconds": environ.get("MENTION_POLL_SECONDS", 60.0),
            "regions_csv": environ.get("REGIONS_CSV") or None,
            "dedupe_subscriptions": environ.get("DEDUPE_SUBSCRIPTIONS", "").strip().lower() in _TRUE,
            "log_level": environ.get("LOG_LEVEL", "INFO").upper(),
        }
        try:
            return cls(**raw)
        except ValidationError as exc:
            raise ConfigError(f"invalid configuration: {exc}") from exc

    def require_credentials(self) -> None:
        """Raise :class:`ConfigError` unless every token needed to talk to the API is set."""
        missing = []
        if not self.bearer_token:
            missing.append("TWITTER_BEARER_TOKEN")
        if not self.user_token:
            missing.append("TWITTER_USER_TOKEN")
        if self.bot_user_id is None:
            missing.append("TWITTER_BOT_USER_ID")
        if missing:
            raise ConfigError(f"missing required setting(s): {', '.join(missing)}")
