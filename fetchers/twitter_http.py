"""Shared httpx plumbing for the Twitter/X API adapters."""
from __future__ import annotations

from typing import Any

import httpx

API_ROOT = "https://api.twitter.com"
DEFAULT_TIMEOUT = 10.0


class TwitterAPIError(RuntimeError):
    """A Twitter API call failed at the transport or HTTP level."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def build_client(
    token: str,
    *,
    base_url: str = API_ROOT,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Return an :class:`httpx.Client` that sends *token* as a bearer token."""
    return httpx.Client(
        base_url=base_url,
        headers={"Authorization": f"Bearer {token}", "User-Agent": "trends-bot/0.1"},
        timeout=timeout,
        transport=transport,
    )


def request_json(client: httpx.Client, method: str, url: str, **kwargs: Any) -> Any:
    """Perform a request and return the decoded JSON body.

    Any transport error, non-2xx status or undecodable body is raised as
    :class:`TwitterAPIError`.
    """
    try:
        response = client.request(method, url, **kwargs)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as exc:
        raise TwitterAPIError(
            f"{method} {url} returned {exc.response.status_code}: {exc.response.text[:200]}",
            status_code=exc.response.status_code,
        ) from exc
    except httpx.HTTPError as exc:
        raise TwitterAPIError(f"{method} {url} failed: {exc}") from exc
    except ValueError as exc:
        raise TwitterAPIError(f"{method} {url} returned invalid JSON") from exc
