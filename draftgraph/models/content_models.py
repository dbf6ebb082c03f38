"""
Content: the aggregate root of the draft content document.

Content owns the tracks (keyed by id) and every material of the draft. The
operations here are the ones that touch more than one entity and must keep
the graph consistent: splitting segments, attaching effects, animations and
speed materials, and checking that every reference resolves before export.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from draftgraph.exceptions import (
    MissingPrimaryMaterialError,
    RepositoryKeyConflictError,
    UnknownMaterialReferenceError,
)
from draftgraph.models.base_models import Repository, StrictRepository
from draftgraph.models.material_models import (
    AnimationMaterial,
    EffectMaterial,
    Material,
    MaterialCategory,
    MaterialInstanceList,
    MaterialsPatch,
    SpeedMaterial,
)
from draftgraph.models.segment_models import Segment
from draftgraph.models.track_models import Track

logger = logging.getLogger(__name__)


def _check_segment_ids(tracks: list[Track]) -> None:
    seen: set[str] = set()
    for track in tracks:
        for segment in track.segments:
            if segment.id in seen:
                raise RepositoryKeyConflictError(segment.id)
            seen.add(segment.id)


class Content:
    """In-memory draft content: tracks plus the material instance list."""

    def __init__(
        self,
        tracks: list[Track] | None = None,
        materials: MaterialInstanceList | None = None,
    ):
        self.material_instances = (
            materials if materials is not None else MaterialInstanceList()
        )
        self.track_instances: Repository[Track] = Repository()
        if tracks:
            self.set_tracks(tracks)

    # -------------------------------------------------------------------------
    # Materials
    # -------------------------------------------------------------------------

    def set_materials(
        self, materials: MaterialsPatch | MaterialInstanceList | Mapping[Any, list[Material]]
    ) -> None:
        self.material_instances.set_materials(materials)

    def merge_materials(
        self, materials: MaterialsPatch | Mapping[Any, list[Material]]
    ) -> None:
        self.material_instances.merge_materials(materials)

    def _register(self, material: Material) -> None:
        if not self.material_instances.contains(material.id):
            self.material_instances.merge_materials({material.category: [material]})

    # -------------------------------------------------------------------------
    # Tracks
    # -------------------------------------------------------------------------

    @property
    def tracks(self) -> list[Track]:
        return self.track_instances.get_all()

    def set_tracks(self, tracks: list[Track]) -> None:
        """
        Replace all tracks, keeping their identifiers.

        Duplicate track ids, or a segment id used twice across *tracks*,
        raise RepositoryKeyConflictError and leave the current tracks in place.
        """
        strict: StrictRepository[Track] = StrictRepository(tracks)
        _check_segment_ids(strict.get_all())
        self.track_instances = Repository(strict.get_all())

    def add_track(self, track: Track) -> Track:
        """Add or replace *track*; its segment ids must not appear on other tracks."""
        others = [t for t in self.track_instances if t.id != track.id]
        _check_segment_ids(others + [track])
        return self.track_instances.upsert(track)

    def get_track(self, track_id: str) -> Track | None:
        return self.track_instances.get_by_id(track_id)

    def remove_track(self, track_id: str) -> Track | None:
        return self.track_instances.remove_by_id(track_id)

    def find_track_of(self, segment: Segment) -> Track | None:
        """Return the track holding this very *segment* object, or None."""
        for track in self.track_instances:
            if any(candidate is segment for candidate in track.segments):
                return track
        return None

    def _owning_track(self, segment: Segment) -> Track:
        track = self.find_track_of(segment)
        if track is None:
            raise UnknownMaterialReferenceError(
                f"Segment {segment.id} does not belong to any track of this draft",
                missing_ids=[segment.id],
            )
        return track

    def segments(self) -> list[Segment]:
        return [segment for track in self.track_instances for segment in track.segments]

    # -------------------------------------------------------------------------
    # Graph operations
    # -------------------------------------------------------------------------

    def split_segment(self, segment: Segment, time: int) -> tuple[Segment, Segment]:
        """
        Split *segment* at absolute track time *time*.

        The left half is *segment* itself (same object, same id) and the
        right half is a new segment inserted right after it on the same
        track. Both halves keep referencing the same materials.
        """
        track = self._owning_track(segment)
        track.check_kind(segment)
        right = segment.split_off(time)
        track.insert_segment_after(segment, right)
        logger.info(f"Split segment {segment.id} on track {track.id} at {time}")
        return segment, right

    def remove_segment(self, segment: Segment) -> Segment:
        track = self._owning_track(segment)
        track.remove_segment(segment.id)
        return segment

    def apply_effect(self, effect: EffectMaterial, segment: Segment) -> None:
        """Register *effect* if needed and make it the segment's effect."""
        self._owning_track(segment)
        self._register(effect)
        segment.set_extra_materials({MaterialCategory.EFFECTS: [effect]})
        logger.debug(f"Applied effect '{effect.name}' ({effect.id}) to segment {segment.id}")

    def apply_animation(self, animation: AnimationMaterial, segment: Segment) -> None:
        """Attach *animation* to *segment* and record the back reference."""
        self._owning_track(segment)
        animation.segment_id = segment.id
        self._register(animation)
        segment.set_extra_materials({MaterialCategory.MATERIAL_ANIMATIONS: [animation]})

    def segment_of_animation(self, animation: AnimationMaterial) -> Segment | None:
        """Resolve the segment an animation points at through the tracks."""
        if animation.segment_id is None:
            return None
        for track in self.track_instances:
            segment = track.get_segment(animation.segment_id)
            if segment is not None:
                return segment
        return None

    def apply_speed(self, segment: Segment, speed: float) -> SpeedMaterial:
        """
        Change the speed of *segment* and back it with a speed material.

        A speed material referenced only by this segment is updated;
        otherwise a new one is registered and referenced, so halves of a
        split segment do not change each other's speed.
        """
        self._owning_track(segment)
        material = None
        for material_id in segment.extra_material_refs.get(MaterialCategory.SPEEDS, []):
            found = self.material_instances.find(material_id)
            if isinstance(found, SpeedMaterial) and not self._shared(found, segment):
                material = found
                break
        if material is None:
            material = SpeedMaterial(speed=speed)
        segment.set_speed(speed)
        material.speed = speed
        self._register(material)
        segment.set_extra_materials({MaterialCategory.SPEEDS: [material]})
        return material

    # -------------------------------------------------------------------------
    # Integrity
    # -------------------------------------------------------------------------

    def _shared(self, material: Material, segment: Segment) -> bool:
        return any(
            other.id != segment.id and material.id in other.material_ids()
            for other in self.segments()
        )

    def referenced_material_ids(self) -> set[str]:
        return {mid for segment in self.segments() for mid in segment.material_ids()}

    def validate_references(self) -> None:
        """
        Check that every segment is complete, fits its track and that every
        reference resolves.

        Raises MissingPrimaryMaterialError, SegmentKindMismatchError or
        UnknownMaterialReferenceError.
        """
        known = self.material_instances.ids()
        missing: list[str] = []
        for track in self.track_instances:
            for segment in track.segments:
                if segment.material is None:
                    raise MissingPrimaryMaterialError(segment.id)
                track.check_kind(segment)
        for segment in self.segments():
            missing.extend(mid for mid in segment.material_ids() if mid not in known)
        if missing:
            raise UnknownMaterialReferenceError(
                f"Segments reference unknown material(s): {', '.join(missing)}",
                missing_ids=missing,
            )

    def find_orphan_materials(self) -> list[Material]:
        """Materials no segment references."""
        referenced = self.referenced_material_ids()
        return [m for m in self.material_instances.all() if m.id not in referenced]

    def prune_orphan_materials(self) -> list[Material]:
        orphans = self.find_orphan_materials()
        for material in orphans:
            self.material_instances.remove(material.id)
        if orphans:
            logger.info(f"Pruned {len(orphans)} orphan material(s)")
        return orphans

    def to_serializable(self) -> dict[str, Any]:
        self.validate_references()
        return {
            "material_instances": self.material_instances.to_serializable(),
            "track_instances": [track.to_serializable() for track in self.track_instances],
        }
