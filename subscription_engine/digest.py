"""Rendering of trend blocks and whole digest messages."""
from __future__ import annotations

from datetime import date
from typing import Iterable, List

from .models import TrendSnapshot

GREETING = "Good Morning :)"
FOOTER = 'To unsubscribe reply with "stop"'
MAX_TRENDS = 5


def _hashtag(name: str) -> str:
    return name if name.startswith("#") else f"#{name}"


def render_trend_block(region: str, trends: Iterable[str], day: date) -> TrendSnapshot:
    """Render *region*'s header line followed by its top :data:`MAX_TRENDS` trends."""
    lines: List[str] = [f"{region} ({day.day}-{day.strftime('%B')}-{day.year}) :"]
    for idx, name in enumerate(trends):
        if idx == MAX_TRENDS:
            break
        lines.append(f". {_hashtag(name)}")
    return TrendSnapshot(region=region, text="\n".join(lines))


def compose_digest(blocks: Iterable[TrendSnapshot]) -> str:
    """Greeting, one paragraph per block, then the opt-out footer."""
    paragraphs = [GREETING]
    paragraphs.extend(block.text for block in blocks)
    paragraphs.append(FOOTER)
    return "\n\n".join(paragraphs)
