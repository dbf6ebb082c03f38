"""
Tests for material entities and the material instance list.
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from draftgraph.exceptions import SpeedOutOfRangeError
from draftgraph.models.material_models import (
    AnimationMaterial,
    AnimationSpec,
    AudioMaterial,
    BeatMaterial,
    EffectMaterial,
    MaterialCategory,
    MaterialInstanceList,
    MaterialsPatch,
    PrimaryMaterial,
    SpeedMaterial,
    TextMaterial,
    TextStroke,
    VideoMaterial,
)
from draftgraph.models.meta_models import MediaDescriptor


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def video() -> VideoMaterial:
    return VideoMaterial(
        material_name="beach.mp4",
        media=MediaDescriptor(
            path="/media/beach.mp4",
            duration=30_000_000_000,
            width=1920,
            height=1080,
            codec="h264",
        ),
    )


@pytest.fixture
def audio() -> AudioMaterial:
    return AudioMaterial(
        name="theme",
        media=MediaDescriptor(path="/media/theme.mp3", duration=60_000_000_000, codec="mp3"),
    )


def _effect(name: str) -> EffectMaterial:
    return EffectMaterial(name=name, effect_id=f"fx-{name}")


# =============================================================================
# MATERIALS
# =============================================================================


class TestMaterials:
    def test_categories(self, video, audio):
        assert video.category == MaterialCategory.VIDEOS
        assert audio.category == MaterialCategory.AUDIOS
        assert TextMaterial(content="hi").category == MaterialCategory.TEXTS
        assert _effect("glow").category == MaterialCategory.EFFECTS
        assert AnimationMaterial().category == MaterialCategory.MATERIAL_ANIMATIONS
        assert SpeedMaterial().category == MaterialCategory.SPEEDS
        assert BeatMaterial().category == MaterialCategory.BEATS

    def test_primary_categories(self):
        assert MaterialCategory.VIDEOS.is_primary
        assert MaterialCategory.TEXTS.is_primary
        assert not MaterialCategory.EFFECTS.is_primary

    def test_media_duration_exposed(self, video):
        assert video.duration == 30_000_000_000

    def test_text_defaults_and_validation(self):
        text = TextMaterial(content="Title", stroke=TextStroke(color="#FF0000", width=2))

        assert text.color == "#FFFFFF"
        assert text.stroke.width == 2

        with pytest.raises(ValidationError):
            TextMaterial(content="Title", color="red")
        with pytest.raises(ValidationError):
            TextMaterial(content="Title", size=0)

    def test_speed_must_be_positive(self):
        with pytest.raises(SpeedOutOfRangeError):
            SpeedMaterial(speed=0)

        material = SpeedMaterial(speed=1.5)
        with pytest.raises(SpeedOutOfRangeError):
            material.speed = -2

        assert material.speed == 1.5

    def test_animation_specs(self):
        animation = AnimationMaterial(
            animations=[AnimationSpec(name="fade_in", duration=500_000_000)]
        )

        assert animation.animations[0].animation_type == "in"
        assert animation.segment_id is None

    def test_primary_union_dispatches_on_type(self, video):
        adapter = TypeAdapter(PrimaryMaterial)

        parsed = adapter.validate_python(video.to_serializable())
        text = adapter.validate_python({"type": "text", "content": "Hello"})

        assert isinstance(parsed, VideoMaterial)
        assert parsed.id == video.id
        assert isinstance(text, TextMaterial)

        with pytest.raises(ValidationError):
            adapter.validate_python({"type": "video_effect", "name": "x"})


# =============================================================================
# MATERIAL INSTANCE LIST
# =============================================================================


class TestMaterialInstanceList:
    def test_empty_serialization_has_every_category(self):
        data = MaterialInstanceList().to_serializable()

        assert list(data) == [
            "videos",
            "audios",
            "texts",
            "effects",
            "material_animations",
            "speeds",
            "beats",
        ]
        assert all(items == [] for items in data.values())

    def test_merge_accumulates_in_call_order(self, video):
        materials = MaterialInstanceList()
        blur, glow, shake = _effect("blur"), _effect("glow"), _effect("shake")

        materials.merge_materials({"effects": [blur]})
        materials.merge_materials({"effects": [glow, shake], "videos": [video]})
        materials.merge_materials(MaterialsPatch(effects=[blur]))

        assert materials.effects == [blur, glow, shake, blur]
        assert materials.videos == [video]

    def test_merge_accepts_category_enum_keys(self, audio):
        materials = MaterialInstanceList()
        materials.merge_materials({MaterialCategory.AUDIOS: [audio]})

        assert materials.get(MaterialCategory.AUDIOS) == [audio]
        assert materials.get("audios")[0] is audio

    def test_merge_rejects_wrong_type_without_partial_apply(self, video, audio):
        materials = MaterialInstanceList()

        with pytest.raises(ValidationError):
            materials.merge_materials({"videos": [video], "effects": [audio]})

        assert materials.videos == []
        assert materials.effects == []

    def test_set_materials_replaces_everything(self, video, audio):
        materials = MaterialInstanceList()
        materials.merge_materials({"videos": [video], "effects": [_effect("blur")]})

        materials.set_materials({"audios": [audio]})

        assert materials.videos == []
        assert materials.effects == []
        assert materials.audios == [audio]
        assert materials.audios[0].id == audio.id

    def test_set_materials_from_another_list(self, video):
        source = MaterialInstanceList(videos=[video])
        target = MaterialInstanceList()

        target.set_materials(source)

        assert target.videos == [video]
        assert target.videos is not source.videos

    def test_find_contains_remove(self, video, audio):
        materials = MaterialInstanceList(videos=[video], audios=[audio])

        assert materials.find(audio.id) is audio
        assert materials.contains(video.id)
        assert materials.ids() == {video.id, audio.id}
        assert materials.count() == 2

        assert materials.remove(video.id) is video
        assert materials.remove(video.id) is None
        assert materials.find("missing") is None
        assert materials.all() == [audio]

    def test_serializes_materials(self, video):
        materials = MaterialInstanceList(videos=[video])

        data = materials.to_serializable()

        assert data["videos"][0]["id"] == video.id
        assert data["videos"][0]["media"]["width"] == 1920
