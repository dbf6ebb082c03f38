"""Media inspection through ffprobe."""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Awaitable, Callable

from draftgraph.exceptions import AssetNotFoundError, ProbeFailureError
from draftgraph.models.meta_models import MediaDescriptor
from draftgraph.models.timing_models import seconds_to_ns

logger = logging.getLogger(__name__)

# Anything that turns a path into a MediaDescriptor can stand in for probe_media
ProbeFn = Callable[[str], Awaitable[MediaDescriptor]]


def parse_probe_output(path: str, raw: str) -> MediaDescriptor:
    """
    Build a MediaDescriptor from ffprobe JSON output.

    Args:
        path: The probed file (used for the descriptor and error messages)
        raw: stdout of ``ffprobe -of json -show_format -show_streams``

    Returns:
        The descriptor; width/height/codec come from the first video stream,
        falling back to the first stream's codec for audio-only files.

    Raises:
        ProbeFailureError: If the output is not JSON or has no duration
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ProbeFailureError(path, f"unreadable ffprobe output: {e}") from e

    duration = data.get("format", {}).get("duration")
    if duration is None:
        raise ProbeFailureError(path, "duration not reported")

    streams = data.get("streams", [])
    video = next((s for s in streams if s.get("codec_type") == "video"), None)
    primary = video or (streams[0] if streams else {})

    return MediaDescriptor(
        path=path,
        duration=seconds_to_ns(float(duration)),
        width=video.get("width") if video else None,
        height=video.get("height") if video else None,
        codec=primary.get("codec_name"),
    )


async def probe_media(path: str, ffprobe_bin: str = "ffprobe") -> MediaDescriptor:
    """
    Inspect *path* with ffprobe.

    Raises:
        AssetNotFoundError: If the path is not an existing file
        ProbeFailureError: If ffprobe cannot run, exits non-zero, or reports
            no duration
    """
    if not Path(path).is_file():
        raise AssetNotFoundError(path)

    cmd = [
        ffprobe_bin,
        "-v",
        "error",
        "-show_entries",
        "format=duration:stream=codec_type,codec_name,width,height",
        "-of",
        "json",
        str(path),
    ]
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ProbeFailureError(path, f"could not run {ffprobe_bin}: {e}") from e

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        logger.error(f"ffprobe failed for {path}: {stderr.decode(errors='replace')}")
        raise ProbeFailureError(path, f"ffprobe exited with code {process.returncode}")

    descriptor = parse_probe_output(path, stdout.decode(errors="replace"))
    logger.debug(f"Probed {path}: duration={descriptor.duration}ns codec={descriptor.codec}")
    return descriptor
