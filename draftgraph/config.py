"""
Process settings for draftgraph.

Settings come from DRAFTGRAPH_* environment variables, optionally loaded
from a .env file. DraftSettings hands out a prober bound to the configured
ffprobe binary and writes drafts with the configured file names.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from draftgraph.models.content_models import Content
from draftgraph.models.meta_models import MediaDescriptor, MetaInfo
from draftgraph.models.preset_models import PresetCatalog, load_preset_catalog
from draftgraph.operators.draft_exporter import write_draft
from draftgraph.utils.media_probe import probe_media

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(__name__)


@dataclass
class DraftSettings:
    log_level: str = "INFO"
    ffprobe_bin: str = "ffprobe"
    presets_file: str = ""
    content_filename: str = "draft_content.json"
    meta_filename: str = "draft_meta_info.json"

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> DraftSettings:
        load_dotenv(env_file)
        return cls(
            log_level=os.getenv("DRAFTGRAPH_LOG_LEVEL", "INFO").upper(),
            ffprobe_bin=os.getenv("DRAFTGRAPH_FFPROBE_BIN", "ffprobe"),
            presets_file=os.getenv("DRAFTGRAPH_PRESETS_FILE", "").strip(),
            content_filename=os.getenv("DRAFTGRAPH_CONTENT_FILENAME", "draft_content.json"),
            meta_filename=os.getenv("DRAFTGRAPH_META_FILENAME", "draft_meta_info.json"),
        )

    def load_presets(self) -> PresetCatalog:
        """Load the configured preset catalog, or an empty one if none is set."""
        if not self.presets_file:
            return PresetCatalog()
        logger.info(f"Loading presets from {self.presets_file}")
        return load_preset_catalog(self.presets_file)

    async def probe(self, path: str) -> MediaDescriptor:
        """probe_media with the configured ffprobe binary; usable as a ProbeFn."""
        return await probe_media(path, ffprobe_bin=self.ffprobe_bin)

    def write_draft(
        self, content: Content, meta_info: MetaInfo, folder: str | Path
    ) -> tuple[Path, Path]:
        return write_draft(
            content,
            meta_info,
            folder,
            content_filename=self.content_filename,
            meta_filename=self.meta_filename,
        )


def configure_logging(level: str | None = None) -> None:
    level_name = (level or os.getenv("DRAFTGRAPH_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
