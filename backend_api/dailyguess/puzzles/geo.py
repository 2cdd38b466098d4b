from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .entities import Coordinate, GeoHint

EARTH_RADIUS_KM = 6371.0


def haversine_km(origin: Coordinate, destination: Coordinate) -> float:
    """Great-circle distance on a spherical Earth."""
    lat1, lon1 = map(math.radians, origin)
    lat2, lon2 = map(math.radians, destination)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def compass_direction(origin: Coordinate, destination: Coordinate) -> str:
    """Single-letter direction from origin towards destination.

    The axis with the larger absolute delta wins; ties go to east/west.
    """
    dlat = destination.latitude - origin.latitude
    dlon = destination.longitude - origin.longitude
    if abs(dlat) > abs(dlon):
        return "N" if dlat > 0 else "S"
    return "E" if dlon > 0 else "W"


@dataclass(frozen=True)
class DistanceBands:
    """Qualitative distance labels; each band is (exclusive upper km, label)."""

    bands: Tuple[Tuple[float, str], ...] = (
        (50, "Very close"),
        (200, "Close by"),
        (500, "Same region"),
        (1000, "Same country-scale"),
        (2000, "Same continent-scale"),
    )
    fallback: str = "Far away"

    def label_for(self, distance_km: float) -> str:
        for limit, label in sorted(self.bands):
            if distance_km < limit:
                return label
        return self.fallback


DEFAULT_DISTANCE_BANDS = DistanceBands()


# PUBLIC_INTERFACE
def hint(
    guess: Coordinate,
    target: Coordinate,
    bands: DistanceBands = DEFAULT_DISTANCE_BANDS,
) -> GeoHint:
    """Distance, coarse direction and band label from the guessed place to the target."""
    guess = Coordinate(*guess)
    target = Coordinate(*target)
    distance = haversine_km(guess, target)
    return GeoHint(
        distance_km=round(distance, 1),
        direction=compass_direction(guess, target),
        label=bands.label_for(distance),
    )
