"""
Media descriptors and the meta-info document.

The meta-info document lists every probed media file the draft uses. It is
linked to the content document only through shared material identifiers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from draftgraph.models.material_models import AudioMaterial, VideoMaterial


class MediaDescriptor(BaseModel):
    """Facts about a media file as reported by the probe."""
    path: str = Field(description="Path of the probed file")
    duration: int = Field(ge=0, description="Media duration (ns)")
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    codec: str | None = Field(default=None, description="Primary stream codec name")

    @property
    def has_video(self) -> bool:
        return self.width is not None and self.height is not None


class DraftMaterial(BaseModel):
    """One entry of the meta-info document."""
    id: str
    path: str
    duration: int = Field(ge=0)
    width: int | None = None
    height: int | None = None
    codec: str | None = None


class MetaInfo(BaseModel):
    """Aggregate root of the meta-info document."""
    draft_materials: list[DraftMaterial] = Field(default_factory=list)

    def register(self, material: VideoMaterial | AudioMaterial) -> DraftMaterial:
        """
        Record the media behind *material*, keyed by the material id.

        Registering the same material twice replaces the earlier entry in
        place.
        """
        media = material.media
        entry = DraftMaterial(
            id=material.id,
            path=media.path,
            duration=media.duration,
            width=media.width,
            height=media.height,
            codec=media.codec,
        )
        for index, existing in enumerate(self.draft_materials):
            if existing.id == entry.id:
                self.draft_materials[index] = entry
                return entry
        self.draft_materials.append(entry)
        return entry

    def get(self, material_id: str) -> DraftMaterial | None:
        for entry in self.draft_materials:
            if entry.id == material_id:
                return entry
        return None

    def remove(self, material_id: str) -> DraftMaterial | None:
        for index, entry in enumerate(self.draft_materials):
            if entry.id == material_id:
                return self.draft_materials.pop(index)
        return None

    def ids(self) -> set[str]:
        return {entry.id for entry in self.draft_materials}

    def to_serializable(self) -> dict[str, Any]:
        return {
            "draft_materials": [
                entry.model_dump(mode="json", exclude_none=True)
                for entry in self.draft_materials
            ]
        }
