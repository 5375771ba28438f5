"""
Route Metrics Calculator

Derives distance and duration for a drive route from its location samples.

- Duration: end timestamp minus start timestamp, when both are known
- Distance: sum of great-circle (haversine) distances along the path
  [start?] + waypoints + [end?]; endpoints are included only when present

Waypoints are taken in the order given; the calculator does not sort them.
Metrics are computed once when a route is completed and then frozen.

Usage:
    from drivenote.services.analytics.route_metrics import compute_route_metrics

    metrics = compute_route_metrics(start, waypoints, end)
    print(format_distance(metrics.distance), format_duration(metrics.duration))
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from drivenote.config import settings
from drivenote.models.route import RouteSample


@dataclass(frozen=True)
class RouteMetrics:
    """Derived route metrics. None means not computable."""

    distance: Optional[float] = None  # Metres
    duration: Optional[float] = None  # Seconds


def great_circle_distance(a: RouteSample, b: RouteSample) -> float:
    """
    Haversine distance between two samples in metres.

    Args:
        a: First location sample
        b: Second location sample

    Returns:
        Non-negative distance along the Earth's surface (mean radius).
    """
    lat1, lon1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lon2 = math.radians(b.latitude), math.radians(b.longitude)

    d_lat = lat2 - lat1
    d_lon = lon2 - lon1
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push h marginally outside [0, 1] for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * settings.EARTH_RADIUS_METERS * math.asin(math.sqrt(h))


def path_distance(path: Sequence[RouteSample]) -> Optional[float]:
    """Total distance along consecutive samples, None for fewer than two."""
    if len(path) < 2:
        return None
    return sum(great_circle_distance(a, b) for a, b in zip(path, path[1:]))


def compute_route_metrics(
    start: Optional[RouteSample],
    waypoints: Sequence[RouteSample],
    end: Optional[RouteSample],
) -> RouteMetrics:
    """
    Compute distance and duration for a route.

    Args:
        start: Recorded start sample, if any
        waypoints: Time-ordered intermediate samples
        end: Recorded end sample, if any

    Returns:
        RouteMetrics with distance in metres and duration in seconds.
    """
    duration = None
    if start is not None and end is not None:
        duration = (end.timestamp - start.timestamp).total_seconds()

    path: list[RouteSample] = []
    if start is not None:
        path.append(start)
    path.extend(waypoints)
    if end is not None:
        path.append(end)

    return RouteMetrics(distance=path_distance(path), duration=duration)


def format_distance(distance: Optional[float]) -> str:
    """Human-readable distance: "--", "850 m" or "1.2 km"."""
    if distance is None:
        return "--"
    if distance >= 1000:
        return f"{distance / 1000:.1f} km"
    return f"{distance:.0f} m"


def format_duration(duration: Optional[float]) -> str:
    """Human-readable duration: "--", "42 min" or "1 h 5 min"."""
    if duration is None:
        return "--"

    total = int(duration)
    hours = total // 3600
    minutes = (total % 3600) // 60

    if hours > 0:
        return f"{hours} h {minutes} min"
    return f"{minutes} min"
