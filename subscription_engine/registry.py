"""In-memory subscription registry shared by the ingestion loop and the scheduler."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from .models import UpdateOutcome, UpdateReason, UpdateStatus
from .region_directory import DuplicateRegionError, InvalidLocationIDError, RegionDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrySnapshot:
    """Point-in-time copy of subscriptions plus the WOEIDs they refer to."""

    subscriptions: Mapping[int, Tuple[str, ...]] = field(default_factory=dict)
    locations: Mapping[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.subscriptions)


class SubscriptionRegistry:
    """Maps user ids to the ordered list of regions they follow.

    One lock guards both the subscriber map and the wrapped
    :class:`RegionDirectory`, so a registration and a scheduler snapshot can
    never interleave.
    """

    def __init__(self, directory: Optional[RegionDirectory] = None, dedupe: bool = False):
        self._directory = directory if directory is not None else RegionDirectory()
        self._subscriptions: Dict[int, List[str]] = {}
        self._dedupe = dedupe
        self._lock = threading.Lock()

    def update(self, user_id: int, region_name: str, location_id: int) -> UpdateOutcome:
        """Subscribe *user_id* to *region_name*, registering the region if needed."""
        if region_name == "":
            return UpdateOutcome.rejected(UpdateReason.NO_LOCATION_GIVEN)

        with self._lock:
            status = UpdateStatus.ACCEPTED
            if self._directory.resolve(region_name) is None:
                if location_id == 0:
                    return UpdateOutcome.rejected(UpdateReason.NEW_LOCATION_MISSING_WOEID, region_name)
                try:
                    self._directory.register(region_name, location_id)
                except DuplicateRegionError:
                    return UpdateOutcome.rejected(UpdateReason.DUPLICATE_REGION, region_name)
                except InvalidLocationIDError:
                    return UpdateOutcome.rejected(UpdateReason.INVALID_LOCATION_ID, region_name)
                logger.info(f"Registered new region {region_name!r} (WOEID {location_id})")
                status = UpdateStatus.ACCEPTED_NEW_REGION

            regions = self._subscriptions.setdefault(user_id, [])
            if self._dedupe and region_name in regions:
                return UpdateOutcome(status=UpdateStatus.ALREADY_SUBSCRIBED, region_name=region_name)
            regions.append(region_name)

        return UpdateOutcome(status=status, region_name=region_name)

    def unsubscribe(self, user_id: int) -> bool:
        """Drop every subscription of *user_id*; return whether there were any."""
        with self._lock:
            return self._subscriptions.pop(user_id, None) is not None

    def snapshot(self) -> RegistrySnapshot:
        """Copy subscriptions and region ids under the lock."""
        with self._lock:
            return RegistrySnapshot(
                subscriptions={uid: tuple(regions) for uid, regions in self._subscriptions.items()},
                locations=self._directory.as_dict(),
            )

    def resolve(self, region_name: str) -> Optional[int]:
        with self._lock:
            return self._directory.resolve(region_name)

    def regions_for(self, user_id: int) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._subscriptions.get(user_id, ()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)
