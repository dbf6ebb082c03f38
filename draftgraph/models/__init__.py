from .base_models import DraftEntity, Repository, StrictRepository, new_entity_id
from .timing_models import (
    NANOSECONDS_PER_SECOND,
    ClipPatch,
    ClipSettings,
    ScaleVector,
    Timerange,
    TransformVector,
    VectorPatch,
)
from .meta_models import DraftMaterial, MediaDescriptor, MetaInfo
from .material_models import (
    AnimationMaterial,
    AnimationSpec,
    AudioMaterial,
    BeatMaterial,
    EffectMaterial,
    Material,
    MaterialCategory,
    MaterialInstanceList,
    MaterialsPatch,
    PrimaryMaterial,
    SpeedMaterial,
    TextMaterial,
    TextStroke,
    VideoMaterial,
)
from .segment_models import MaterialRef, Segment
from .track_models import Track, TrackAttribute, TrackKind
from .content_models import Content
from .preset_models import EffectPreset, PresetCatalog, load_preset_catalog
