"""
Preset catalog for effects and stock audio.

The catalog is plain data loaded from JSON and handed to whoever needs it;
there is no process-wide registry.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from draftgraph.exceptions import PresetNotFoundError
from draftgraph.models.material_models import EffectMaterial


class EffectPreset(BaseModel):
    """Catalog entry describing an effect shipped with the application."""
    effect_id: str
    resource_id: str = ""
    default_params: dict[str, float] = Field(default_factory=dict)


class PresetCatalog(BaseModel):
    effects: dict[str, EffectPreset] = Field(default_factory=dict)
    audios: dict[str, str] = Field(
        default_factory=dict,
        description="Stock audio name -> file path",
    )

    def effect(self, name: str, params: dict[str, float] | None = None) -> EffectMaterial:
        """Build a new effect material from the preset called *name*."""
        preset = self.effects.get(name)
        if preset is None:
            raise PresetNotFoundError("effect", name)
        adjust_params = dict(preset.default_params)
        adjust_params.update(params or {})
        return EffectMaterial(
            name=name,
            effect_id=preset.effect_id,
            resource_id=preset.resource_id,
            adjust_params=adjust_params,
        )

    def audio_path(self, name: str) -> str:
        path = self.audios.get(name)
        if path is None:
            raise PresetNotFoundError("audio", name)
        return path


def load_preset_catalog(path: str | Path) -> PresetCatalog:
    """Read a catalog from a JSON file."""
    return PresetCatalog.model_validate_json(Path(path).read_text(encoding="utf-8"))
