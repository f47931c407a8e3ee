"""Pit stop model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from jolpica.parsing import parse_duration


class PitStop(BaseModel):
    """One pit stop within a race."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    driver_id: str = Field(default="unknown", alias="driverId")
    lap: str | None = None
    stop: str | None = None
    time: str | None = None
    duration: str | None = None

    @property
    def duration_seconds(self) -> float | None:
        return parse_duration(self.duration)
