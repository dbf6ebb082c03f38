"""
Draft exporter - turns Content and MetaInfo into the application's JSON files.

Export is a structural dump. The only work done on the way out is the
reference check in Content.to_serializable, so a draft with dangling
material ids never reaches disk.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from draftgraph.models.content_models import Content
from draftgraph.models.material_models import MaterialCategory
from draftgraph.models.meta_models import MetaInfo

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_FILENAME = "draft_content.json"
DEFAULT_META_FILENAME = "draft_meta_info.json"


def export_content(content: Content) -> dict[str, Any]:
    """Serialize *content*; raises if any reference does not resolve."""
    return content.to_serializable()


def export_meta_info(meta_info: MetaInfo) -> dict[str, Any]:
    return meta_info.to_serializable()


def unregistered_media_ids(content: Content, meta_info: MetaInfo) -> list[str]:
    """Video/audio material ids of *content* that *meta_info* does not list."""
    known = meta_info.ids()
    media = (
        content.material_instances.get(MaterialCategory.VIDEOS)
        + content.material_instances.get(MaterialCategory.AUDIOS)
    )
    return [material.id for material in media if material.id not in known]


def write_draft(
    content: Content,
    meta_info: MetaInfo,
    folder: str | Path,
    content_filename: str = DEFAULT_CONTENT_FILENAME,
    meta_filename: str = DEFAULT_META_FILENAME,
) -> tuple[Path, Path]:
    """
    Write both draft documents into *folder*.

    Both documents are serialized before anything is written, so a failed
    reference check leaves the folder untouched.

    Returns:
        (content_path, meta_path)
    """
    content_data = export_content(content)
    meta_data = export_meta_info(meta_info)

    missing = unregistered_media_ids(content, meta_info)
    if missing:
        logger.warning(
            f"{len(missing)} media material(s) missing from meta info: {', '.join(missing)}"
        )

    folder = Path(folder)
    folder.mkdir(parents=True, exist_ok=True)
    content_path = folder / content_filename
    meta_path = folder / meta_filename
    content_path.write_text(json.dumps(content_data, ensure_ascii=False), encoding="utf-8")
    meta_path.write_text(json.dumps(meta_data, ensure_ascii=False), encoding="utf-8")

    logger.info(
        f"Wrote draft to {folder} "
        f"({len(content_data['track_instances'])} track(s), "
        f"{len(meta_data['draft_materials'])} media file(s))"
    )
    return content_path, meta_path
