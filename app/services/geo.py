"""Great-circle distance helpers.

Coordinates are ``[lat, lon]`` pairs everywhere in this project: in the
database, in API payloads and in these functions. That is the reverse of
GeoJSON's ``[lon, lat]``. Keep it that way end to end; flipping the order in
one place only is exactly how proximity results go wrong.
"""

from collections.abc import Callable, Iterable, Sequence
from math import atan2, cos, radians, sin, sqrt
from typing import TypeVar

from app.services.exceptions import InvalidCoordinatesError

EARTH_RADIUS_KM = 6371.0
DEFAULT_AVERAGE_SPEED_KMH = 30.0

LatLon = tuple[float, float]
T = TypeVar("T")


def validate_coordinates(point: Sequence[float] | None) -> LatLon:
    """Return ``point`` as a ``(lat, lon)`` tuple or raise InvalidCoordinatesError."""
    if point is None or isinstance(point, (str, bytes)) or len(point) != 2:
        raise InvalidCoordinatesError("Coordinates must be a [latitude, longitude] pair")

    lat, lon = point
    if isinstance(lat, bool) or isinstance(lon, bool):
        raise InvalidCoordinatesError("Coordinates must be numeric")
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        raise InvalidCoordinatesError("Coordinates must be numeric")
    if not -90 <= lat <= 90:
        raise InvalidCoordinatesError(f"Latitude {lat} is outside [-90, 90]")
    if not -180 <= lon <= 180:
        raise InvalidCoordinatesError(f"Longitude {lon} is outside [-180, 180]")

    return float(lat), float(lon)


def distance_km(a: Sequence[float], b: Sequence[float]) -> float:
    """Haversine distance in km between two ``[lat, lon]`` points, one decimal place."""
    lat1, lon1 = validate_coordinates(a)
    lat2, lon2 = validate_coordinates(b)

    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    h = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(h), sqrt(1 - h))

    return round(EARTH_RADIUS_KM * c, 1)


def estimate_travel_minutes(
    distance: float | None, average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH
) -> int | None:
    """Naive travel time at a constant city speed. Advisory only."""
    if distance is None:
        return None
    return round(distance / average_speed_kmh * 60)


def filter_by_distance(
    items: Iterable[T],
    origin: Sequence[float],
    radius_km: float | None,
    locate: Callable[[T], Sequence[float] | None],
) -> list[tuple[T, float]]:
    """Pair each item with its distance from ``origin``, keeping input order.

    Items whose location is missing or invalid have no computable distance
    and are dropped. With a radius, items farther than ``radius_km`` are
    dropped as well; a distance equal to the radius is kept.
    """
    kept: list[tuple[T, float]] = []
    for item in items:
        try:
            distance = distance_km(origin, locate(item))
        except InvalidCoordinatesError:
            continue
        if radius_km is not None and distance > radius_km:
            continue
        kept.append((item, distance))
    return kept
