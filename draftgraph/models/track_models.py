"""
Track: an ordered, kind-fixed sequence of segments.
"""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from draftgraph.exceptions import SegmentKindMismatchError
from draftgraph.models.base_models import DraftEntity
from draftgraph.models.material_models import MaterialCategory
from draftgraph.models.segment_models import Segment

logger = logging.getLogger(__name__)


class TrackKind(str, Enum):
    """Type of track content."""
    VIDEO = "video"
    AUDIO = "audio"
    TEXT = "text"

    @property
    def material_category(self) -> MaterialCategory:
        """Main material category of the segments this track accepts."""
        return _CATEGORY_BY_KIND[self]


_CATEGORY_BY_KIND = {
    TrackKind.VIDEO: MaterialCategory.VIDEOS,
    TrackKind.AUDIO: MaterialCategory.AUDIOS,
    TrackKind.TEXT: MaterialCategory.TEXTS,
}


def _check_kind(kind: TrackKind, segment: Segment) -> None:
    category = segment.primary_category
    if category is not None and category != kind.material_category:
        raise SegmentKindMismatchError(segment.id, category.value, kind.value)


class TrackAttribute(IntEnum):
    """Visibility/lock/mute state, stored as a bit set (mute=1, hidden=2, locked=4)."""
    NONE = 0
    MUTE = 1
    HIDDEN = 2
    MUTE_HIDDEN = 3
    LOCKED = 4
    MUTE_LOCKED = 5
    HIDDEN_LOCKED = 6
    ALL = 7


class Track(DraftEntity):
    """
    Sequential container of segments of one kind.

    Segments are owned by exactly one track. The kind is fixed at
    construction; adding a segment whose main material belongs to another
    kind raises SegmentKindMismatchError.
    """
    kind: TrackKind = Field(frozen=True, description="Track type")
    name: str = Field(default="", description="Track name")
    attribute: TrackAttribute = Field(default=TrackAttribute.NONE)
    flag: int = Field(default=0)
    segments: list[Segment] = Field(default_factory=list)

    @field_validator("segments")
    @classmethod
    def _check_segment_kinds(
        cls, segments: list[Segment], info: ValidationInfo
    ) -> list[Segment]:
        kind = info.data.get("kind")
        if kind is not None:
            for segment in segments:
                _check_kind(kind, segment)
        return segments

    @property
    def is_muted(self) -> bool:
        return bool(self.attribute & TrackAttribute.MUTE)

    @property
    def is_hidden(self) -> bool:
        return bool(self.attribute & TrackAttribute.HIDDEN)

    @property
    def is_locked(self) -> bool:
        return bool(self.attribute & TrackAttribute.LOCKED)

    @property
    def end(self) -> int:
        """End of the last segment on the timeline (0 when empty)."""
        return max((s.target_timerange.end for s in self.segments), default=0)

    def set_attribute(self, attribute: TrackAttribute | int) -> None:
        self.attribute = TrackAttribute(attribute)

    def clone(self, new_id: bool = False) -> Track:
        """
        Deep copy of the track.

        With *new_id* the segments get fresh ids as well, so the copy can sit
        in the same draft as the original.
        """
        copy = super().clone(new_id=new_id)
        if new_id:
            copy.segments = [segment.clone(new_id=True) for segment in copy.segments]
        return copy

    def check_kind(self, segment: Segment) -> None:
        """Raise SegmentKindMismatchError if *segment* cannot live on this track."""
        _check_kind(self.kind, segment)

    def add_segment(self, segment: Segment) -> Segment:
        self.check_kind(segment)
        self.segments.append(segment)
        return segment

    def set_segments(self, segments: list[Segment]) -> None:
        for segment in segments:
            self.check_kind(segment)
        self.segments = list(segments)

    def insert_segment_after(self, anchor: Segment, segment: Segment) -> Segment:
        """Insert *segment* right after *anchor* in sequence order."""
        self.check_kind(segment)
        index = self.index_of(anchor.id)
        if index is None:
            self.segments.append(segment)
        else:
            self.segments.insert(index + 1, segment)
        return segment

    def index_of(self, segment_id: str) -> int | None:
        for index, segment in enumerate(self.segments):
            if segment.id == segment_id:
                return index
        return None

    def get_segment(self, segment_id: str) -> Segment | None:
        index = self.index_of(segment_id)
        return None if index is None else self.segments[index]

    def remove_segment(self, segment_id: str) -> Segment | None:
        index = self.index_of(segment_id)
        return None if index is None else self.segments.pop(index)

    def remove_empty_track_space(self) -> None:
        """
        Close every gap so segments sit back to back from time 0.

        Segments are ordered by their current target start; durations are
        unchanged. Running this on a contiguous track is a no-op.
        """
        ordered = sorted(self.segments, key=lambda s: s.target_timerange.start)
        cursor = 0
        for segment in ordered:
            if segment.target_timerange.start != cursor:
                segment.set_target_timerange(segment.target_timerange.with_start(cursor))
            cursor = segment.target_timerange.end
        self.segments = ordered
        logger.debug(f"Compacted track {self.id}: {len(ordered)} segment(s), end={cursor}")

    def to_serializable(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "attribute": int(self.attribute),
            "flag": self.flag,
            "name": self.name,
            "segments": [segment.to_serializable() for segment in self.segments],
        }
