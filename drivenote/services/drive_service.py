"""
Drive Route Service

Manages the drive route lifecycle: start, record waypoints, end or cancel.

Distance and duration are computed exactly once, when a route is completed,
and stored on the route. Cancelled routes carry no metrics.

Usage:
    from drivenote.services.drive_service import DriveRouteService

    service = DriveRouteService(store)
    route = service.start_route(start_sample)
    service.record_waypoint(route.id, sample)
    route = service.end_route(route.id, end_sample)
    print(format_distance(route.distance))
"""

import logging
import threading
from datetime import datetime
from typing import Any, Optional, Sequence

from drivenote.db.store import Store
from drivenote.enums.activity import RouteStatus
from drivenote.errors import (
    InvalidRouteTransitionError,
    NotFoundError,
    PersistenceError,
    PreconditionError,
)
from drivenote.models.route import Route, RouteSample
from drivenote.services.analytics.route_metrics import compute_route_metrics
from drivenote.utils.dates import now_local

logger = logging.getLogger(__name__)


class DriveRouteService:
    """
    Service for recording drive routes.

    Only one route can be active at a time.
    """

    def __init__(self, store: Store):
        """
        Initialize the drive route service.

        Args:
            store: Record store holding Route records.
        """
        self.store = store
        self._lock = threading.Lock()

    def get_active_route(self) -> Optional[Route]:
        """Return the route currently being driven, if any."""
        active = self.store.fetch_all(Route, lambda r: r.status == RouteStatus.ACTIVE)
        return active[0] if active else None

    def start_route(
        self,
        start: Optional[RouteSample] = None,
        now: Optional[datetime] = None,
    ) -> Route:
        """
        Start a new route.

        Args:
            start: Start location, None when no fix is available
            now: Start time (default: now)

        Raises:
            InvalidRouteTransitionError: If a route is already active.
        """
        with self._lock:
            active = self.get_active_route()
            if active is not None:
                raise InvalidRouteTransitionError(
                    "A route is already active", details={"route_id": active.id}
                )

            route = Route(start=start, started_at=now or now_local())
            self._persist(route)
            logger.info(f"Started route {route.id}")
            return route

    def record_waypoint(self, route_id: str, sample: RouteSample) -> Route:
        """Append a waypoint to an active route."""
        with self._lock:
            route = self._require_active(route_id)
            updated = self._transition(route, waypoints=[*route.waypoints, sample])
            self._persist(updated)
            return updated

    def end_route(
        self,
        route_id: str,
        end: Optional[RouteSample] = None,
        waypoints: Optional[Sequence[RouteSample]] = None,
        now: Optional[datetime] = None,
    ) -> Route:
        """
        Complete a route and freeze its distance and duration.

        Args:
            route_id: Route to complete
            end: End location, None when no fix is available
            waypoints: Replacement waypoints from an external tracker. They
                are sorted by timestamp before use. Defaults to the waypoints
                recorded on the route.
            now: End time (default: now)

        Returns:
            The completed route.

        Raises:
            NotFoundError: Unknown route.
            InvalidRouteTransitionError: Route is not active.
        """
        with self._lock:
            route = self._require_active(route_id)

            if waypoints is None:
                ordered = list(route.waypoints)
            else:
                ordered = sorted(waypoints, key=lambda s: s.timestamp)

            metrics = compute_route_metrics(route.start, ordered, end)
            completed = self._transition(
                route,
                status=RouteStatus.COMPLETED,
                end=end,
                waypoints=ordered,
                ended_at=now or now_local(),
                distance=metrics.distance,
                duration=metrics.duration,
            )
            self._persist(completed)

            logger.info(
                f"Completed route {route_id}: distance={metrics.distance}, "
                f"duration={metrics.duration}"
            )
            return completed

    def cancel_route(self, route_id: str, now: Optional[datetime] = None) -> Route:
        """Cancel an active route. No metrics are computed."""
        with self._lock:
            route = self._require_active(route_id)
            cancelled = self._transition(
                route, status=RouteStatus.CANCELLED, ended_at=now or now_local()
            )
            self._persist(cancelled)
            logger.info(f"Cancelled route {route_id}")
            return cancelled

    def recent_routes(self, limit: int = 5) -> list[Route]:
        """Most recently started routes first."""
        if limit < 0:
            raise PreconditionError(f"limit must be non-negative, got {limit}")
        routes = self.store.fetch_all(Route)
        routes.sort(key=lambda r: r.started_at, reverse=True)
        return routes[:limit]

    def _require_active(self, route_id: str) -> Route:
        routes = self.store.fetch_all(Route, lambda r: r.id == route_id)
        if not routes:
            raise NotFoundError(f"Route {route_id} not found")

        route = routes[0]
        if route.status != RouteStatus.ACTIVE:
            raise InvalidRouteTransitionError(
                f"Route {route_id} is {route.status.value}, not active",
                details={"route_id": route_id, "status": route.status.value},
            )
        return route

    @staticmethod
    def _transition(route: Route, **update: Any) -> Route:
        """Copy ``route`` with ``update`` applied, re-running validation."""
        data = {**route.model_dump(), **update}
        return Route.model_validate(data)

    def _persist(self, route: Route) -> None:
        self.store.insert(route)
        try:
            self.store.save()
        except PersistenceError as e:
            logger.error(f"Failed to persist route {route.id}: {e}")
            raise PersistenceError("Route updated but not saved", result=route) from e
