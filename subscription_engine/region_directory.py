"""Region name -> WOEID directory.

Not thread-safe on its own: :class:`~subscription_engine.registry.SubscriptionRegistry`
owns the only instance and serialises access to it.
"""
from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional


class RegionError(ValueError):
    """Base class for directory registration failures."""


class DuplicateRegionError(RegionError):
    """The region is already registered under a different WOEID."""


class InvalidLocationIDError(RegionError):
    """A region cannot be registered with WOEID 0."""


class RegionDirectory:
    """Exact-match mapping of region names to location ids."""

    def __init__(self, seed: Optional[Mapping[str, int]] = None):
        self._locations: Dict[str, int] = {}
        for name, location_id in (seed or {}).items():
            self.register(name, location_id)

    def resolve(self, name: str) -> Optional[int]:
        """Return the WOEID for *name*, or *None* if the region is unknown."""
        return self._locations.get(name)

    def register(self, name: str, location_id: int) -> None:
        """Add *name*; re-registering with the same id is a no-op."""
        if location_id == 0:
            raise InvalidLocationIDError(f"region {name!r} needs a non-zero WOEID")

        existing = self._locations.get(name)
        if existing is not None and existing != location_id:
            raise DuplicateRegionError(
                f"region {name!r} is already registered with WOEID {existing}, not {location_id}"
            )
        self._locations[name] = location_id

    def as_dict(self) -> Dict[str, int]:
        return dict(self._locations)

    def __contains__(self, name: object) -> bool:
        return name in self._locations

    def __iter__(self) -> Iterator[str]:
        return iter(self._locations)

    def __len__(self) -> int:
        return len(self._locations)
