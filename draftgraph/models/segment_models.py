"""
Segment: one timed clip instance placed on a track.

A segment references its materials by identifier only. The main material is
one of the primary kinds (video, audio, text); auxiliary materials such as
effects, animations and speed curves live in extra_material_refs, grouped by
category.

Timing invariant kept by every operation here:

    target_timerange.duration == round(source_timerange.duration / speed)
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from draftgraph.exceptions import (
    InvalidSplitPointError,
    InvalidTimerangeError,
    MaterialCategoryMismatchError,
    SpeedOutOfRangeError,
    VolumeOutOfRangeError,
)
from draftgraph.models.base_models import DraftEntity
from draftgraph.models.material_models import (
    Material,
    MaterialCategory,
    PrimaryMaterial,
)
from draftgraph.models.timing_models import ClipPatch, ClipSettings, Timerange

logger = logging.getLogger(__name__)


_PRIMARY_CATEGORY_BY_TYPE: dict[str, MaterialCategory] = {
    "video": MaterialCategory.VIDEOS,
    "audio": MaterialCategory.AUDIOS,
    "text": MaterialCategory.TEXTS,
}


def _check_speed(speed: float) -> float:
    if not 0 < speed < math.inf:
        raise SpeedOutOfRangeError(speed)
    return speed


def _check_volume(volume: float) -> float:
    if not 0.0 <= volume <= 1.0:
        raise VolumeOutOfRangeError(volume)
    return volume


def _duration_at_speed(source_duration: int, speed: float) -> int:
    return int(round(source_duration / speed))


class MaterialRef(BaseModel):
    """Reference to the main material of a segment."""
    model_config = ConfigDict(frozen=True)

    category: MaterialCategory
    id: str


class Segment(DraftEntity):
    """A clip instance with timing, transform and material references."""
    material: MaterialRef | None = Field(
        default=None,
        description="Main material; required before export",
    )
    extra_material_refs: dict[MaterialCategory, list[str]] = Field(
        default_factory=dict,
        description="Auxiliary material ids by category",
    )
    source_timerange: Timerange = Field(
        default_factory=Timerange,
        description="Window read from the material",
    )
    target_timerange: Timerange = Field(
        default_factory=Timerange,
        description="Window occupied on the track",
    )
    clip: ClipSettings = Field(default_factory=ClipSettings)
    volume: float = Field(default=1.0, description="Gain in [0, 1]")
    speed: float = Field(default=1.0, description="Playback rate multiplier")

    @field_validator("speed")
    @classmethod
    def _validate_speed(cls, value: float) -> float:
        return _check_speed(value)

    @field_validator("volume")
    @classmethod
    def _validate_volume(cls, value: float) -> float:
        return _check_volume(value)

    @classmethod
    def create(
        cls,
        material: PrimaryMaterial,
        target_timerange: Timerange,
        source_timerange: Timerange | None = None,
        speed: float | None = None,
        volume: float = 1.0,
        clip: ClipSettings | None = None,
    ) -> Segment:
        """
        Build a segment for *material* with consistent timing.

        - Without a source range, the source starts at 0 and covers
          target duration * speed (speed defaults to 1.0).
        - With a source range and no speed, speed is derived from the two
          durations.
        - With both, the target keeps its start and its duration is
          recomputed from source duration / speed.
        """
        if source_timerange is None:
            speed = _check_speed(1.0 if speed is None else speed)
            source_timerange = Timerange(
                start=0,
                duration=int(round(target_timerange.duration * speed)),
            )
        elif speed is None:
            if target_timerange.duration == 0:
                raise SpeedOutOfRangeError(math.inf)
            speed = source_timerange.duration / target_timerange.duration
        else:
            speed = _check_speed(speed)
            target_timerange = target_timerange.with_duration(
                _duration_at_speed(source_timerange.duration, speed)
            )

        segment = cls(
            source_timerange=source_timerange,
            target_timerange=target_timerange,
            speed=speed,
            volume=volume,
            clip=clip or ClipSettings(),
        )
        segment.set_material(material)
        return segment

    # -------------------------------------------------------------------------
    # Materials
    # -------------------------------------------------------------------------

    @property
    def primary_category(self) -> MaterialCategory | None:
        return self.material.category if self.material else None

    def set_material(self, material: PrimaryMaterial) -> None:
        """Point the segment at a video, audio or text material."""
        category = _PRIMARY_CATEGORY_BY_TYPE.get(getattr(material, "type", ""))
        if category is None:
            raise MaterialCategoryMismatchError(
                material.id,
                expected="videos|audios|texts",
                actual=material.category.value,
            )
        self.material = MaterialRef(category=category, id=material.id)

    def set_extra_materials(
        self, materials: Mapping[MaterialCategory | str, Sequence[Material]]
    ) -> None:
        """
        Replace the references of each category given.

        Categories not mentioned keep their references. Each material must
        belong to the category it is listed under.
        """
        resolved: dict[MaterialCategory, list[str]] = {}
        for key, items in materials.items():
            category = MaterialCategory(key)
            if category.is_primary:
                raise MaterialCategoryMismatchError(
                    items[0].id if items else "",
                    expected="an auxiliary category",
                    actual=category.value,
                )
            for item in items:
                if item.category != category:
                    raise MaterialCategoryMismatchError(
                        item.id, expected=category.value, actual=item.category.value
                    )
            resolved[category] = [item.id for item in items]
        self.extra_material_refs.update(resolved)

    def material_ids(self) -> list[str]:
        """Every material id this segment references, main material first."""
        ids = [self.material.id] if self.material else []
        for refs in self.extra_material_refs.values():
            ids.extend(refs)
        return ids

    # -------------------------------------------------------------------------
    # Timing
    # -------------------------------------------------------------------------

    def set_target_timerange(self, timerange: Timerange) -> None:
        self.target_timerange = timerange

    def set_source_timerange(self, timerange: Timerange) -> None:
        self.source_timerange = timerange

    def set_speed(self, speed: float) -> None:
        """Change speed; the target duration follows, the source is unchanged."""
        _check_speed(speed)
        target = self.target_timerange.with_duration(
            _duration_at_speed(self.source_timerange.duration, speed)
        )
        self.speed = speed
        self.target_timerange = target

    def speed_to_duration(self, duration: int) -> None:
        """Stretch the segment to *duration* on the track by changing speed."""
        if duration < 0:
            raise InvalidTimerangeError(self.target_timerange.start, duration)
        if duration == 0:
            raise SpeedOutOfRangeError(math.inf)
        speed = _check_speed(self.source_timerange.duration / duration)
        target = self.target_timerange.with_duration(duration)
        self.speed = speed
        self.target_timerange = target

    def split_off(self, time: int) -> Segment:
        """
        Cut the segment at absolute track time *time*.

        This segment is shortened to the left half and keeps its id; the
        right half is returned as a new segment with a fresh id. The source
        window is divided in the same ratio as the target window, and both
        halves reference the same materials.
        """
        target = self.target_timerange
        source = self.source_timerange
        if not target.start < time < target.end:
            raise InvalidSplitPointError(self.id, time, target.start, target.end)

        offset = time - target.start
        left_source = round(Fraction(source.duration * offset, target.duration))

        left_target_range = Timerange(start=target.start, duration=offset)
        right_target_range = Timerange(start=time, duration=target.duration - offset)
        left_source_range = Timerange(start=source.start, duration=left_source)
        right_source_range = Timerange(
            start=source.start + left_source,
            duration=source.duration - left_source,
        )

        right = self.clone(new_id=True)
        right.target_timerange = right_target_range
        right.source_timerange = right_source_range
        self.target_timerange = left_target_range
        self.source_timerange = left_source_range
        logger.debug(f"Split segment {self.id} at {time}, new right half {right.id}")
        return right

    # -------------------------------------------------------------------------
    # Appearance
    # -------------------------------------------------------------------------

    def merge_clip(self, patch: ClipPatch | Mapping[str, Any]) -> None:
        self.clip = self.clip.merged(patch)

    def set_volume(self, volume: float) -> None:
        self.volume = _check_volume(volume)

    def to_serializable(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "material_id": self.material.id if self.material else None,
            "extra_material_ids": {
                category.value: list(ids)
                for category, ids in self.extra_material_refs.items()
            },
            "target_timerange": self.target_timerange.model_dump(),
            "source_timerange": self.source_timerange.model_dump(),
            "clip": self.clip.model_dump(),
            "volume": self.volume,
            "speed": self.speed,
        }
