"""draftgraph - build video-editing drafts as an in-memory document graph.

The graph is made of tracks, segments and the materials they reference.
Once built, it is exported as the content and meta-info JSON documents the
editing application reads.

Usage:
    from draftgraph import Content, MetaInfo, Segment, Timerange, Track, TrackKind
    from draftgraph.operators.material_factory import video_material_from_file
    from draftgraph.operators.draft_exporter import write_draft

    video = await video_material_from_file("clip.mp4")
    track = Track(kind=TrackKind.VIDEO)
    track.add_segment(Segment.create(video, Timerange(start=0, duration=5_000_000_000)))

    content = Content(tracks=[track])
    content.merge_materials({"videos": [video]})
    meta = MetaInfo()
    meta.register(video)
    write_draft(content, meta, "out/")
"""

from .models import (
    AnimationMaterial,
    AnimationSpec,
    AudioMaterial,
    BeatMaterial,
    ClipPatch,
    ClipSettings,
    Content,
    DraftEntity,
    EffectMaterial,
    MaterialCategory,
    MaterialInstanceList,
    MaterialsPatch,
    MediaDescriptor,
    MetaInfo,
    PresetCatalog,
    Repository,
    Segment,
    SpeedMaterial,
    StrictRepository,
    TextMaterial,
    Timerange,
    Track,
    TrackAttribute,
    TrackKind,
    VideoMaterial,
)

__all__ = [
    "AnimationMaterial",
    "AnimationSpec",
    "AudioMaterial",
    "BeatMaterial",
    "ClipPatch",
    "ClipSettings",
    "Content",
    "DraftEntity",
    "EffectMaterial",
    "MaterialCategory",
    "MaterialInstanceList",
    "MaterialsPatch",
    "MediaDescriptor",
    "MetaInfo",
    "PresetCatalog",
    "Repository",
    "Segment",
    "SpeedMaterial",
    "StrictRepository",
    "TextMaterial",
    "Timerange",
    "Track",
    "TrackAttribute",
    "TrackKind",
    "VideoMaterial",
]
