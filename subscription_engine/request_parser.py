"""Parse ``@Bot <region words>[, <woeid>]`` mentions into subscription requests."""
from __future__ import annotations

import re

from .models import ParsedRequest

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")


class ParseError(ValueError):
    """Raised when mention text does not follow the request format."""


class InvalidFormatError(ParseError):
    """The text contains the reserved ``:`` character."""


class TooManyCommasError(ParseError):
    """The text has more than one ``,`` separator."""


def _parse_location_id(text: str) -> int | None:
    """Return *text* as a signed 64-bit integer, or *None* if it is not one."""
    if not _DECIMAL.fullmatch(text):
        return None
    value = int(text)
    if value < _INT64_MIN or value > _INT64_MAX:
        return None
    return value


def parse_request(raw: str) -> ParsedRequest:
    """Split *raw* into a region name and an optional location id.

    The first whitespace-delimited token is the bot handle and is dropped.
    A missing location part gives ``location_id == 0``; a location part that
    is not an integer also gives 0 and sets ``location_unresolved``.

    Raises
    ------
    InvalidFormatError
        *raw* contains ``:``.
    TooManyCommasError
        *raw* contains more than one ``,``.
    """
    if ":" in raw:
        raise InvalidFormatError("request contains ':'")

    parts = raw.split(",")
    if len(parts) > 2:
        raise TooManyCommasError(f"request has {len(parts) - 1} commas, expected at most 1")

    region_name = " ".join(parts[0].split()[1:]).strip()

    if len(parts) == 1:
        return ParsedRequest(region_name=region_name)

    location_id = _parse_location_id(parts[1].strip())
    if location_id is None:
        return ParsedRequest(region_name=region_name, location_id=0, location_unresolved=True)
    return ParsedRequest(region_name=region_name, location_id=location_id)
