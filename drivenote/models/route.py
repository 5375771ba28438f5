"""
Drive Route Models

A route is recorded while driving: an optional start sample, time-ordered
waypoints and an optional end sample. ``distance`` (metres) and ``duration``
(seconds) are derived once when the route is completed.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from drivenote.enums.activity import RouteStatus
from drivenote.models.base import Record


class RouteSample(BaseModel):
    """A single location fix."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    timestamp: datetime
    address: Optional[str] = None


class Route(Record):
    """
    A drive route and its lifecycle state.

    Invariant: distance and duration are only set on completed routes.
    """

    start: Optional[RouteSample] = None
    waypoints: list[RouteSample] = Field(default_factory=list)
    end: Optional[RouteSample] = None
    status: RouteStatus = RouteStatus.ACTIVE
    started_at: datetime
    ended_at: Optional[datetime] = None
    distance: Optional[float] = Field(None, ge=0.0, description="Metres")
    duration: Optional[float] = Field(None, description="Seconds")

    @model_validator(mode="after")
    def _metrics_only_when_completed(self) -> "Route":
        if self.status != RouteStatus.COMPLETED and (
            self.distance is not None or self.duration is not None
        ):
            raise ValueError("distance/duration are only allowed on completed routes")
        return self
