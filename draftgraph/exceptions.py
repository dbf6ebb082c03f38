"""
Exceptions raised by the draft document model.

Every error derives from DraftError so embedding applications can catch the
whole family in one place. Errors keep the offending values as attributes.
"""

from __future__ import annotations


class DraftError(Exception):
    """Base exception for draft document operations."""
    pass


class InvalidTimerangeError(DraftError):
    """Raised when a timerange has a negative start or duration."""
    def __init__(self, start: int, duration: int):
        self.start = start
        self.duration = duration
        super().__init__(
            f"Invalid timerange (start={start}, duration={duration}): "
            f"start and duration must both be >= 0"
        )


class InvalidSplitPointError(DraftError):
    """Raised when a split time does not fall strictly inside a segment."""
    def __init__(self, segment_id: str, time: int, start: int, end: int):
        self.segment_id = segment_id
        self.time = time
        self.start = start
        self.end = end
        super().__init__(
            f"Cannot split segment {segment_id} at {time}: "
            f"split point must lie strictly inside ({start}, {end})"
        )


class SpeedOutOfRangeError(DraftError):
    """Raised when a playback speed is not strictly positive and finite."""
    def __init__(self, speed: float):
        self.speed = speed
        super().__init__(f"Speed {speed} is out of range: must be > 0")


class VolumeOutOfRangeError(DraftError):
    """Raised when a volume falls outside [0, 1]."""
    def __init__(self, volume: float):
        self.volume = volume
        super().__init__(f"Volume {volume} is out of range: must be within [0, 1]")


class UnknownMaterialReferenceError(DraftError):
    """
    Raised when a reference cannot be resolved inside the document.

    Covers dangling material ids found at export time as well as segments
    that are not owned by any track of the document.
    """
    def __init__(self, message: str, missing_ids: list[str] | None = None):
        self.missing_ids = list(missing_ids or [])
        super().__init__(message)


class RepositoryKeyConflictError(DraftError):
    """Raised by strict repositories when a key is already present."""
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Key already present in repository: {key}")


class AssetNotFoundError(DraftError):
    """Raised when a media path does not resolve to a file."""
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Media asset not found: {path}")


class ProbeFailureError(DraftError):
    """Raised when the media inspection tool fails on an existing file."""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to probe {path}: {reason}")


class SegmentKindMismatchError(DraftError):
    """Raised when a segment is placed on a track of another kind."""
    def __init__(self, segment_id: str, segment_kind: str, track_kind: str):
        self.segment_id = segment_id
        self.segment_kind = segment_kind
        self.track_kind = track_kind
        super().__init__(
            f"Segment {segment_id} of kind '{segment_kind}' "
            f"cannot be placed on a '{track_kind}' track"
        )


class MaterialCategoryMismatchError(DraftError):
    """Raised when a material is referenced under the wrong category."""
    def __init__(self, material_id: str, expected: str, actual: str):
        self.material_id = material_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Material {material_id} belongs to '{actual}', "
            f"not '{expected}'"
        )


class MissingPrimaryMaterialError(DraftError):
    """Raised at export when a segment has no primary material."""
    def __init__(self, segment_id: str):
        self.segment_id = segment_id
        super().__init__(f"Segment {segment_id} has no primary material")


class PresetNotFoundError(DraftError):
    """Raised when a preset name is missing from the catalog."""
    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"No {kind} preset named '{name}'")
