"""
Material entities and the categorized material instance list.

Materials are the referenceable resources of a draft: media files, texts,
effects, animations, speed curves and beat markers. The document owns them
through MaterialInstanceList; segments only hold their identifiers.
"""

from __future__ import annotations

import logging
from enum import Enum
from itertools import chain
from typing import Annotated, Any, ClassVar, Iterator, Literal, Mapping, Union

from pydantic import BaseModel, Field, field_validator

from draftgraph.exceptions import SpeedOutOfRangeError
from draftgraph.models.base_models import DraftEntity
from draftgraph.models.meta_models import MediaDescriptor

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================


class MaterialCategory(str, Enum):
    """Category keys of the material instance list."""
    VIDEOS = "videos"
    AUDIOS = "audios"
    TEXTS = "texts"
    EFFECTS = "effects"
    MATERIAL_ANIMATIONS = "material_animations"
    SPEEDS = "speeds"
    BEATS = "beats"

    @property
    def is_primary(self) -> bool:
        """Whether materials of this category can be a segment's main material."""
        return self in PRIMARY_CATEGORIES


PRIMARY_CATEGORIES = frozenset(
    {MaterialCategory.VIDEOS, MaterialCategory.AUDIOS, MaterialCategory.TEXTS}
)


# =============================================================================
# MATERIALS
# =============================================================================


class Material(DraftEntity):
    """Base class of all materials."""
    category: ClassVar[MaterialCategory]


class VideoMaterial(Material):
    """A probed video (or still image) file."""
    category: ClassVar[MaterialCategory] = MaterialCategory.VIDEOS

    type: Literal["video"] = "video"
    material_name: str = Field(default="", description="Display name")
    media: MediaDescriptor = Field(description="Probe result for the file")

    @property
    def duration(self) -> int:
        return self.media.duration


class AudioMaterial(Material):
    """A probed audio file."""
    category: ClassVar[MaterialCategory] = MaterialCategory.AUDIOS

    type: Literal["audio"] = "audio"
    name: str = Field(default="", description="Display name")
    media: MediaDescriptor = Field(description="Probe result for the file")

    @property
    def duration(self) -> int:
        return self.media.duration


class TextStroke(BaseModel):
    color: str = Field(default="#000000", pattern=r"^#[0-9A-Fa-f]{6}$")
    width: float = Field(default=0.0, ge=0)


class TextMaterial(Material):
    """Styled text content for subtitle and title segments."""
    category: ClassVar[MaterialCategory] = MaterialCategory.TEXTS

    type: Literal["text"] = "text"
    content: str = Field(description="Text to display")
    font: str = Field(default="", description="Font family or font file path")
    size: float = Field(default=8.0, gt=0)
    color: str = Field(default="#FFFFFF", pattern=r"^#[0-9A-Fa-f]{6}$")
    stroke: TextStroke | None = None


class EffectMaterial(Material):
    """A video effect applied to one or more segments."""
    category: ClassVar[MaterialCategory] = MaterialCategory.EFFECTS

    type: Literal["video_effect"] = "video_effect"
    name: str = Field(description="Display name")
    effect_id: str = Field(default="", description="Effect identifier in the application")
    resource_id: str = Field(default="", description="Downloadable resource identifier")
    adjust_params: dict[str, float] = Field(default_factory=dict)


class AnimationSpec(BaseModel):
    """A single animation inside an animation material."""
    name: str
    animation_type: Literal["in", "out", "loop"] = "in"
    start: int = Field(default=0, ge=0, description="Offset inside the segment (ns)")
    duration: int = Field(default=0, ge=0)
    resource_id: str = ""


class AnimationMaterial(Material):
    """
    Animations attached to a segment.

    segment_id is a lookup-only back reference, resolved through the owning
    document. Neither side owns the other.
    """
    category: ClassVar[MaterialCategory] = MaterialCategory.MATERIAL_ANIMATIONS

    type: Literal["sticker_animation"] = "sticker_animation"
    animations: list[AnimationSpec] = Field(default_factory=list)
    segment_id: str | None = None


class SpeedMaterial(Material):
    """Constant playback speed of a segment."""
    category: ClassVar[MaterialCategory] = MaterialCategory.SPEEDS

    type: Literal["speed"] = "speed"
    speed: float = 1.0
    mode: int = 0

    @field_validator("speed")
    @classmethod
    def _check_speed(cls, value: float) -> float:
        if not value > 0:
            raise SpeedOutOfRangeError(value)
        return value


class BeatMaterial(Material):
    """Beat markers used for music-synchronized cuts."""
    category: ClassVar[MaterialCategory] = MaterialCategory.BEATS

    type: Literal["beats"] = "beats"
    user_beats: list[int] = Field(default_factory=list, description="Beat positions (ns)")
    gear: int = 404
    enable_ai_beats: bool = False


# Closed set of materials a segment can use as its main material
PrimaryMaterial = Annotated[
    Union[VideoMaterial, AudioMaterial, TextMaterial],
    Field(discriminator="type"),
]

MATERIAL_CLASSES: dict[MaterialCategory, type[Material]] = {
    MaterialCategory.VIDEOS: VideoMaterial,
    MaterialCategory.AUDIOS: AudioMaterial,
    MaterialCategory.TEXTS: TextMaterial,
    MaterialCategory.EFFECTS: EffectMaterial,
    MaterialCategory.MATERIAL_ANIMATIONS: AnimationMaterial,
    MaterialCategory.SPEEDS: SpeedMaterial,
    MaterialCategory.BEATS: BeatMaterial,
}


# =============================================================================
# MATERIAL INSTANCE LIST
# =============================================================================


class MaterialsPatch(BaseModel):
    """Partial material mapping: only the categories present are touched."""
    videos: list[VideoMaterial] | None = None
    audios: list[AudioMaterial] | None = None
    texts: list[TextMaterial] | None = None
    effects: list[EffectMaterial] | None = None
    material_animations: list[AnimationMaterial] | None = None
    speeds: list[SpeedMaterial] | None = None
    beats: list[BeatMaterial] | None = None

    @classmethod
    def coerce(
        cls, value: MaterialsPatch | MaterialInstanceList | Mapping[Any, list[Material]]
    ) -> MaterialsPatch:
        """Build a patch from another patch, a full list or a category mapping."""
        if isinstance(value, MaterialsPatch):
            return value
        if isinstance(value, MaterialInstanceList):
            return cls(**{c.value: list(value.get(c)) for c in MaterialCategory})
        return cls.model_validate(
            {MaterialCategory(key).value: list(items) for key, items in value.items()}
        )

    def items(self) -> Iterator[tuple[MaterialCategory, list[Material]]]:
        """Yield (category, materials) for the categories present."""
        for category in MaterialCategory:
            materials = getattr(self, category.value)
            if materials is not None:
                yield category, materials


class MaterialInstanceList(BaseModel):
    """Every material of a document, grouped by category in insertion order."""
    videos: list[VideoMaterial] = Field(default_factory=list)
    audios: list[AudioMaterial] = Field(default_factory=list)
    texts: list[TextMaterial] = Field(default_factory=list)
    effects: list[EffectMaterial] = Field(default_factory=list)
    material_animations: list[AnimationMaterial] = Field(default_factory=list)
    speeds: list[SpeedMaterial] = Field(default_factory=list)
    beats: list[BeatMaterial] = Field(default_factory=list)

    def get(self, category: MaterialCategory | str) -> list[Material]:
        return getattr(self, MaterialCategory(category).value)

    def set_materials(
        self, materials: MaterialsPatch | MaterialInstanceList | Mapping[Any, list[Material]]
    ) -> None:
        """Replace the whole mapping. Categories not given become empty."""
        patch = MaterialsPatch.coerce(materials)
        for category in MaterialCategory:
            setattr(self, category.value, list(getattr(patch, category.value) or []))

    def merge_materials(
        self, materials: MaterialsPatch | Mapping[Any, list[Material]]
    ) -> None:
        """Append the given materials to their categories, keeping what is there."""
        patch = MaterialsPatch.coerce(materials)
        for category, additions in patch.items():
            self.get(category).extend(additions)
            logger.debug(f"Merged {len(additions)} material(s) into '{category.value}'")

    def all(self) -> list[Material]:
        return list(chain.from_iterable(self.get(c) for c in MaterialCategory))

    def ids(self) -> set[str]:
        return {material.id for material in self.all()}

    def find(self, material_id: str) -> Material | None:
        for material in self.all():
            if material.id == material_id:
                return material
        return None

    def contains(self, material_id: str) -> bool:
        return self.find(material_id) is not None

    def remove(self, material_id: str) -> Material | None:
        for category in MaterialCategory:
            materials = self.get(category)
            for index, material in enumerate(materials):
                if material.id == material_id:
                    return materials.pop(index)
        return None

    def count(self) -> int:
        return sum(len(self.get(c)) for c in MaterialCategory)

    def to_serializable(self) -> dict[str, list[dict[str, Any]]]:
        return {
            category.value: [m.to_serializable() for m in self.get(category)]
            for category in MaterialCategory
        }
