"""
Build media materials from files on disk.

Probe errors (AssetNotFoundError, ProbeFailureError) propagate unchanged;
nothing here retries.
"""

from __future__ import annotations

import logging
from pathlib import Path

from draftgraph.models.material_models import AudioMaterial, VideoMaterial
from draftgraph.models.preset_models import PresetCatalog
from draftgraph.utils.media_probe import ProbeFn, probe_media

logger = logging.getLogger(__name__)


async def video_material_from_file(
    path: str,
    probe: ProbeFn = probe_media,
    name: str | None = None,
) -> VideoMaterial:
    media = await probe(path)
    material = VideoMaterial(material_name=name or Path(path).name, media=media)
    logger.info(f"Created video material {material.id} for {path}")
    return material


async def audio_material_from_file(
    path: str,
    probe: ProbeFn = probe_media,
    name: str | None = None,
) -> AudioMaterial:
    media = await probe(path)
    material = AudioMaterial(name=name or Path(path).stem, media=media)
    logger.info(f"Created audio material {material.id} for {path}")
    return material


async def audio_material_from_preset(
    name: str,
    catalog: PresetCatalog,
    probe: ProbeFn = probe_media,
) -> AudioMaterial:
    """Probe the stock audio file the catalog lists under *name*."""
    return await audio_material_from_file(catalog.audio_path(name), probe=probe, name=name)
