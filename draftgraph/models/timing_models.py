"""
Timing and transform value types used by segments.

All times are integers in nanoseconds. Timerange is immutable: operations
that change timing build a new Timerange and assign it.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator

from draftgraph.exceptions import InvalidTimerangeError


NANOSECONDS_PER_SECOND = 1_000_000_000


def seconds_to_ns(seconds: float) -> int:
    """Convert seconds to integer nanoseconds (rounded)."""
    return int(round(seconds * NANOSECONDS_PER_SECOND))


# =============================================================================
# TIMERANGE
# =============================================================================


class Timerange(BaseModel):
    """
    A {start, duration} window in nanoseconds.

    The end is exclusive (start + duration). Negative values are rejected
    with InvalidTimerangeError.
    """
    model_config = ConfigDict(frozen=True)

    start: int = Field(default=0, description="Start of the window (ns)")
    duration: int = Field(default=0, description="Length of the window (ns)")

    @model_validator(mode="after")
    def _check_non_negative(self) -> Timerange:
        if self.start < 0 or self.duration < 0:
            raise InvalidTimerangeError(self.start, self.duration)
        return self

    @property
    def end(self) -> int:
        """Exclusive end of the window."""
        return self.start + self.duration

    def contains(self, time: int) -> bool:
        return self.start <= time < self.end

    def overlaps(self, other: Timerange) -> bool:
        return self.start < other.end and other.start < self.end

    def with_start(self, start: int) -> Timerange:
        return Timerange(start=start, duration=self.duration)

    def with_duration(self, duration: int) -> Timerange:
        return Timerange(start=self.start, duration=duration)

    @classmethod
    def from_seconds(cls, start: float, duration: float) -> Timerange:
        """Create a Timerange from second values."""
        return cls(start=seconds_to_ns(start), duration=seconds_to_ns(duration))


# =============================================================================
# CLIP TRANSFORM STATE
# =============================================================================


class ScaleVector(BaseModel):
    x: float = Field(default=1.0, gt=0)
    y: float = Field(default=1.0, gt=0)


class TransformVector(BaseModel):
    """Position offset, normalized to half the canvas in each direction."""
    x: float = Field(default=0.0, ge=-0.5, le=0.5)
    y: float = Field(default=0.0, ge=-0.5, le=0.5)


class ClipSettings(BaseModel):
    """Visual transform state of a segment."""
    scale: ScaleVector = Field(default_factory=ScaleVector)
    transform: TransformVector = Field(default_factory=TransformVector)
    rotation: float = Field(default=0.0, description="Clockwise rotation in degrees")
    alpha: float = Field(default=1.0, ge=0.0, le=1.0)

    def merged(self, patch: ClipPatch | Mapping[str, Any]) -> ClipSettings:
        """
        Return new settings with the fields present in *patch* overwritten.

        Nested vectors merge per axis, so {"scale": {"x": 2}} leaves scale.y
        untouched. The result is fully validated before it is returned.
        """
        if not isinstance(patch, ClipPatch):
            patch = ClipPatch.model_validate(patch)
        data = self.model_dump()
        for key, value in patch.model_dump(exclude_none=True).items():
            if isinstance(value, dict):
                data[key].update(value)
            else:
                data[key] = value
        return ClipSettings.model_validate(data)


class VectorPatch(BaseModel):
    x: float | None = None
    y: float | None = None


class ClipPatch(BaseModel):
    """Partial clip settings: every field optional, absent means unchanged."""
    scale: VectorPatch | None = None
    transform: VectorPatch | None = None
    rotation: float | None = None
    alpha: float | None = None
