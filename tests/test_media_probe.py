"""
Tests for ffprobe parsing, the async probe, material factories and presets.

ffprobe itself is never executed: the subprocess call is replaced by a fake
process, and the factories get a fake probe function.
"""

import asyncio
import json

import pytest

from draftgraph.exceptions import AssetNotFoundError, PresetNotFoundError, ProbeFailureError
from draftgraph.models.material_models import AudioMaterial, VideoMaterial
from draftgraph.models.meta_models import MediaDescriptor
from draftgraph.models.preset_models import EffectPreset, PresetCatalog, load_preset_catalog
from draftgraph.operators import material_factory
from draftgraph.utils import media_probe
from draftgraph.utils.media_probe import parse_probe_output, probe_media


VIDEO_PROBE = json.dumps(
    {
        "streams": [
            {"codec_type": "audio", "codec_name": "aac"},
            {"codec_type": "video", "codec_name": "h264", "width": 1920, "height": 1080},
        ],
        "format": {"duration": "12.500000"},
    }
)

AUDIO_PROBE = json.dumps(
    {
        "streams": [{"codec_type": "audio", "codec_name": "mp3"}],
        "format": {"duration": "3.0"},
    }
)


class FakeProcess:
    def __init__(self, stdout: str = "", stderr: str = "", returncode: int = 0):
        self._stdout = stdout.encode()
        self._stderr = stderr.encode()
        self.returncode = returncode

    async def communicate(self):
        return self._stdout, self._stderr


@pytest.fixture
def media_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00")
    return path


def _fake_exec(monkeypatch, process: FakeProcess) -> list:
    calls = []

    async def create_subprocess_exec(*cmd, **kwargs):
        calls.append(cmd)
        return process

    monkeypatch.setattr(media_probe.asyncio, "create_subprocess_exec", create_subprocess_exec)
    return calls


# =============================================================================
# PARSING
# =============================================================================


class TestParseProbeOutput:
    def test_video_file(self):
        media = parse_probe_output("/m/clip.mp4", VIDEO_PROBE)

        assert media.path == "/m/clip.mp4"
        assert media.duration == 12_500_000_000
        assert media.width == 1920
        assert media.height == 1080
        assert media.codec == "h264"
        assert media.has_video

    def test_audio_only_file(self):
        media = parse_probe_output("/m/song.mp3", AUDIO_PROBE)

        assert media.duration == 3_000_000_000
        assert media.width is None
        assert media.codec == "mp3"
        assert not media.has_video

    def test_missing_duration(self):
        with pytest.raises(ProbeFailureError) as exc_info:
            parse_probe_output("/m/x.mp4", json.dumps({"format": {}, "streams": []}))

        assert exc_info.value.path == "/m/x.mp4"

    def test_not_json(self):
        with pytest.raises(ProbeFailureError):
            parse_probe_output("/m/x.mp4", "Invalid data found when processing input")


# =============================================================================
# PROBING
# =============================================================================


class TestProbeMedia:
    def test_missing_file(self, tmp_path):
        with pytest.raises(AssetNotFoundError) as exc_info:
            asyncio.run(probe_media(str(tmp_path / "nope.mp4")))

        assert exc_info.value.path.endswith("nope.mp4")

    def test_directory_is_not_an_asset(self, tmp_path):
        with pytest.raises(AssetNotFoundError):
            asyncio.run(probe_media(str(tmp_path)))

    def test_successful_probe(self, monkeypatch, media_file):
        calls = _fake_exec(monkeypatch, FakeProcess(stdout=VIDEO_PROBE))

        media = asyncio.run(probe_media(str(media_file), ffprobe_bin="/opt/ffprobe"))

        assert media.duration == 12_500_000_000
        assert media.path == str(media_file)
        assert calls[0][0] == "/opt/ffprobe"
        assert calls[0][-1] == str(media_file)

    def test_nonzero_exit(self, monkeypatch, media_file):
        _fake_exec(monkeypatch, FakeProcess(stderr="moov atom not found", returncode=1))

        with pytest.raises(ProbeFailureError) as exc_info:
            asyncio.run(probe_media(str(media_file)))

        assert "code 1" in exc_info.value.reason

    def test_binary_missing(self, monkeypatch, media_file):
        async def create_subprocess_exec(*cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(media_probe.asyncio, "create_subprocess_exec", create_subprocess_exec)

        with pytest.raises(ProbeFailureError):
            asyncio.run(probe_media(str(media_file)))

    def test_concurrent_probes(self, monkeypatch, tmp_path):
        paths = []
        for name in ("a.mp4", "b.mp4", "c.mp4"):
            path = tmp_path / name
            path.write_bytes(b"\x00")
            paths.append(str(path))
        _fake_exec(monkeypatch, FakeProcess(stdout=VIDEO_PROBE))

        async def probe_all():
            return await asyncio.gather(*(probe_media(p) for p in paths))

        results = asyncio.run(probe_all())

        assert [m.path for m in results] == paths


# =============================================================================
# FACTORIES AND PRESETS
# =============================================================================


async def fake_probe(path: str) -> MediaDescriptor:
    return MediaDescriptor(path=path, duration=2_000_000_000, width=640, height=360, codec="vp9")


async def failing_probe(path: str) -> MediaDescriptor:
    raise AssetNotFoundError(path)


@pytest.fixture
def catalog() -> PresetCatalog:
    return PresetCatalog(
        effects={
            "blur": EffectPreset(effect_id="7001", resource_id="r-blur", default_params={"strength": 0.5}),
        },
        audios={"applause": "/stock/applause.wav"},
    )


class TestMaterialFactory:
    def test_video_from_file(self):
        material = asyncio.run(
            material_factory.video_material_from_file("/m/holiday.mp4", probe=fake_probe)
        )

        assert isinstance(material, VideoMaterial)
        assert material.material_name == "holiday.mp4"
        assert material.media.width == 640
        assert material.duration == 2_000_000_000

    def test_audio_from_file(self):
        material = asyncio.run(
            material_factory.audio_material_from_file("/m/voice.wav", probe=fake_probe)
        )

        assert isinstance(material, AudioMaterial)
        assert material.name == "voice"

    def test_explicit_name(self):
        material = asyncio.run(
            material_factory.video_material_from_file("/m/a.mp4", probe=fake_probe, name="Intro")
        )

        assert material.material_name == "Intro"

    def test_probe_errors_propagate(self):
        with pytest.raises(AssetNotFoundError):
            asyncio.run(material_factory.video_material_from_file("/m/gone.mp4", probe=failing_probe))

    def test_audio_from_preset(self, catalog):
        material = asyncio.run(
            material_factory.audio_material_from_preset("applause", catalog, probe=fake_probe)
        )

        assert material.name == "applause"
        assert material.media.path == "/stock/applause.wav"


class TestPresetCatalog:
    def test_effect_uses_defaults_and_overrides(self, catalog):
        effect = catalog.effect("blur", params={"radius": 3.0})

        assert effect.effect_id == "7001"
        assert effect.resource_id == "r-blur"
        assert effect.adjust_params == {"strength": 0.5, "radius": 3.0}

    def test_each_effect_is_a_new_material(self, catalog):
        first = catalog.effect("blur")
        second = catalog.effect("blur")

        assert first.id != second.id
        assert catalog.effects["blur"].default_params == {"strength": 0.5}

    def test_unknown_presets(self, catalog):
        with pytest.raises(PresetNotFoundError) as exc_info:
            catalog.effect("sparkle")
        assert exc_info.value.kind == "effect"

        with pytest.raises(PresetNotFoundError):
            catalog.audio_path("drumroll")

    def test_load_from_file(self, tmp_path, catalog):
        path = tmp_path / "presets.json"
        path.write_text(catalog.model_dump_json(), encoding="utf-8")

        loaded = load_preset_catalog(path)

        assert loaded == catalog
        assert loaded.audio_path("applause") == "/stock/applause.wav"
