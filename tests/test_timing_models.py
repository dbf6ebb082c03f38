import pytest
from pydantic import ValidationError

from draftgraph.exceptions import InvalidTimerangeError
from draftgraph.models.timing_models import (
    NANOSECONDS_PER_SECOND,
    ClipPatch,
    ClipSettings,
    Timerange,
    seconds_to_ns,
)


class TestTimerange:
    def test_defaults(self):
        tr = Timerange()

        assert tr.start == 0
        assert tr.duration == 0
        assert tr.end == 0

    def test_end_is_exclusive(self):
        tr = Timerange(start=2_000_000, duration=3_000_000)

        assert tr.end == 5_000_000
        assert tr.contains(2_000_000)
        assert tr.contains(4_999_999)
        assert not tr.contains(5_000_000)

    def test_negative_start_rejected(self):
        with pytest.raises(InvalidTimerangeError) as exc_info:
            Timerange(start=-1, duration=10)

        assert exc_info.value.start == -1

    def test_negative_duration_rejected(self):
        with pytest.raises(InvalidTimerangeError):
            Timerange(start=0, duration=-5)

    def test_is_immutable(self):
        tr = Timerange(start=0, duration=10)

        with pytest.raises(ValidationError):
            tr.start = 5

    def test_overlaps(self):
        a = Timerange(start=0, duration=10)

        assert a.overlaps(Timerange(start=5, duration=10))
        assert not a.overlaps(Timerange(start=10, duration=10))

    def test_with_helpers_return_new_ranges(self):
        tr = Timerange(start=100, duration=50)

        assert tr.with_start(0) == Timerange(start=0, duration=50)
        assert tr.with_duration(10) == Timerange(start=100, duration=10)
        assert tr == Timerange(start=100, duration=50)

    def test_from_seconds(self):
        tr = Timerange.from_seconds(1.5, 2.0)

        assert tr.start == 1_500_000_000
        assert tr.duration == 2 * NANOSECONDS_PER_SECOND

    def test_seconds_to_ns_rounds(self):
        assert seconds_to_ns(0.1) == 100_000_000


class TestClipSettings:
    def test_defaults(self):
        clip = ClipSettings()

        assert clip.scale.x == 1.0
        assert clip.scale.y == 1.0
        assert clip.transform.x == 0.0
        assert clip.rotation == 0.0
        assert clip.alpha == 1.0

    def test_merge_only_touches_given_fields(self):
        clip = ClipSettings(rotation=30.0)

        merged = clip.merged(ClipPatch(alpha=0.5))

        assert merged.alpha == 0.5
        assert merged.rotation == 30.0
        assert merged.scale.x == 1.0

    def test_merge_vectors_per_axis(self):
        clip = ClipSettings()

        merged = clip.merged({"scale": {"x": 2.0}, "transform": {"y": -0.25}})

        assert merged.scale.x == 2.0
        assert merged.scale.y == 1.0
        assert merged.transform.x == 0.0
        assert merged.transform.y == -0.25

    def test_merge_does_not_modify_original(self):
        clip = ClipSettings()
        clip.merged(ClipPatch(rotation=90.0))

        assert clip.rotation == 0.0

    @pytest.mark.parametrize(
        "patch",
        [
            {"alpha": 1.5},
            {"scale": {"x": 0}},
            {"transform": {"x": 0.75}},
        ],
    )
    def test_out_of_range_values_rejected(self, patch):
        with pytest.raises(ValidationError):
            ClipSettings().merged(patch)
