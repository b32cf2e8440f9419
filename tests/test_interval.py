import pytest

from application.dto.selection_dto import SelectionDTO
from audiokit.errors import InvalidArgument
from audiokit.interval import CallForm, parse_call, resolve_interval


def resolve(*args, length: int = 100, sample_rate: int = 1, channels: int = 2) -> SelectionDTO:
    return resolve_interval(
        parse_call(*args),
        buffer_length=length,
        sample_rate=sample_rate,
        channels=channels,
    )


class TestParseCall:
    """Tests for overload dispatch of (time, duration, options)."""

    def test_no_arguments(self) -> None:
        assert parse_call() == CallForm(0, None, {})

    def test_single_mapping_is_options(self) -> None:
        assert parse_call({"channels": 1}) == CallForm(0, None, {"channels": 1})

    def test_single_number_is_time(self) -> None:
        assert parse_call(2.5) == CallForm(2.5, None, {})

    def test_two_numbers(self) -> None:
        assert parse_call(1, 2) == CallForm(1, 2, {})

    def test_number_then_mapping(self) -> None:
        assert parse_call(1, {"channel": 0}) == CallForm(1, None, {"channel": 0})

    def test_all_three(self) -> None:
        assert parse_call(1, 2, {"channel": 0}) == CallForm(1, 2, {"channel": 0})

    def test_options_are_copied(self) -> None:
        options: dict = {"channel": 1}
        form: CallForm = parse_call(options)
        assert form.options == options
        assert form.options is not options

    def test_string_options_rejected(self) -> None:
        with pytest.raises(InvalidArgument, match="options mapping"):
            parse_call("everything")

    def test_non_numeric_time_rejected(self) -> None:
        with pytest.raises(InvalidArgument, match="time"):
            parse_call("1", 2)


class TestResolveInterval:
    """Tests for materializing a call form into a selection."""

    def test_no_arguments_selects_everything(self) -> None:
        sel: SelectionDTO = resolve()
        assert (sel.start, sel.end, sel.length) == (0, 100, 100)
        assert sel.channels == (0, 1)
        assert sel.duration == pytest.approx(100)

    def test_time_only_runs_to_the_end(self) -> None:
        sel: SelectionDTO = resolve(25)
        assert (sel.start, sel.end) == (25, 100)

    def test_time_and_duration(self) -> None:
        sel: SelectionDTO = resolve(10, 20)
        assert (sel.start, sel.end, sel.length) == (10, 30, 20)

    def test_negative_duration_selects_before_time(self) -> None:
        sel: SelectionDTO = resolve(50, -10)
        assert (sel.start, sel.end) == (40, 50)
        assert sel.length == 10

    def test_negative_duration_from_zero_selects_tail(self) -> None:
        """time=0 becomes negative zero, which addresses the end of the buffer."""
        sel: SelectionDTO = resolve(0, -10)
        assert (sel.start, sel.end) == (90, 100)

    def test_negative_duration_without_time_selects_tail(self) -> None:
        sel: SelectionDTO = resolve(None, -10, {})
        assert (sel.start, sel.end) == (90, 100)

    def test_negative_duration_past_start_floors_at_zero(self) -> None:
        sel: SelectionDTO = resolve(5, -10)
        assert (sel.start, sel.end) == (0, 5)

    def test_negative_time_counts_from_end(self) -> None:
        sel: SelectionDTO = resolve(-10)
        assert (sel.start, sel.end) == (90, 100)

    def test_end_clamped_to_buffer(self) -> None:
        sel: SelectionDTO = resolve(90, 50)
        assert (sel.start, sel.end) == (90, 100)

    def test_start_beyond_buffer_clamped(self) -> None:
        sel: SelectionDTO = resolve(500)
        assert (sel.start, sel.end, sel.length) == (100, 100, 0)

    def test_time_scaled_by_sample_rate(self) -> None:
        sel: SelectionDTO = resolve(0.5, 0.25, length=44100, sample_rate=44100)
        assert (sel.start, sel.end) == (22050, 33075)

    def test_float_noise_does_not_drop_a_frame(self) -> None:
        sel: SelectionDTO = resolve(0.29, length=100, sample_rate=100)
        assert sel.start == 29

    def test_from_and_to_options(self) -> None:
        sel: SelectionDTO = resolve({"from": 10, "to": 30})
        assert (sel.start, sel.end) == (10, 30)
        assert (sel.from_, sel.to) == (10, 30)

    def test_length_option_in_frames(self) -> None:
        sel: SelectionDTO = resolve(10, {"length": 5}, sample_rate=2, length=100)
        assert (sel.start, sel.end) == (20, 25)

    def test_duration_option_wins_over_to(self) -> None:
        sel: SelectionDTO = resolve({"from": 10, "to": 30, "duration": 5})
        assert (sel.start, sel.end) == (10, 15)

    def test_explicit_start_and_end(self) -> None:
        sel: SelectionDTO = resolve({"start": 10, "end": 20})
        assert (sel.start, sel.end, sel.length) == (10, 20, 10)
        assert sel.duration == pytest.approx(10)

    def test_negative_explicit_end(self) -> None:
        sel: SelectionDTO = resolve({"start": 10, "end": -10})
        assert (sel.start, sel.end) == (10, 90)

    def test_explicit_end_before_start_rejected(self) -> None:
        with pytest.raises(InvalidArgument, match="ends before it starts"):
            resolve({"start": 80, "end": 20})

    def test_backward_to_is_reordered(self) -> None:
        sel: SelectionDTO = resolve({"from": 30, "to": 10})
        assert (sel.start, sel.end) == (10, 30)

    def test_explicit_bounds_resolve_identically_twice(self) -> None:
        options: dict = {"start": 3, "end": 9, "channels": [1]}
        assert resolve(options) == resolve(options)

    def test_time_fields_agree_with_frames(self) -> None:
        sel: SelectionDTO = resolve(1, 2, length=8000, sample_rate=4000)
        assert sel.from_ == pytest.approx(sel.start / 4000)
        assert sel.to == pytest.approx(sel.end / 4000)
        assert sel.duration == pytest.approx(sel.length / 4000)

    def test_bounds_invariant_over_overloads(self) -> None:
        calls: list = [
            (),
            (0,),
            (3,),
            (-3,),
            (2, 4),
            (2, -4),
            (0, -4),
            (8, 100),
            (-100, 1),
            ({"from": 1, "to": 3},),
            ({"start": -2},),
            ({"start": 6},),
            ({"to": 1, "from": 3},),
            (1, {"duration": -1}),
            ({"length": 3},),
        ]
        for args in calls:
            sel: SelectionDTO = resolve(*args, length=40, sample_rate=4)
            assert 0 <= sel.start <= sel.end <= 40, args
            assert sel.length == sel.end - sel.start, args
            assert sel.duration == pytest.approx(sel.length / 4), args


class TestChannelNormalization:
    """Tests for the channel/channels option."""

    def test_single_channel_alias(self) -> None:
        assert resolve({"channel": 1}).channels == (1,)

    def test_number_becomes_tuple(self) -> None:
        assert resolve({"channels": 0}).channels == (0,)

    def test_order_is_kept(self) -> None:
        assert resolve({"channels": [1, 0]}).channels == (1, 0)

    def test_defaults_to_every_channel(self) -> None:
        assert resolve(channels=4).channels == (0, 1, 2, 3)

    def test_caller_options_not_mutated(self) -> None:
        options: dict = {"channel": 1}
        resolve(options)
        assert options == {"channel": 1}

    def test_non_sequence_rejected(self) -> None:
        with pytest.raises(InvalidArgument, match="Bad `channels`"):
            resolve({"channels": "01"})

    def test_mapping_rejected(self) -> None:
        with pytest.raises(InvalidArgument, match="Bad `channels`"):
            resolve({"channels": {"left": 0}})

    def test_empty_rejected(self) -> None:
        with pytest.raises(InvalidArgument, match="at least one"):
            resolve({"channels": []})

    def test_duplicates_rejected(self) -> None:
        with pytest.raises(InvalidArgument, match="duplicate"):
            resolve({"channels": [0, 0]})

    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(InvalidArgument, match="out of range"):
            resolve({"channels": [2]})

    def test_fractional_index_rejected(self) -> None:
        with pytest.raises(InvalidArgument, match="not a channel index"):
            resolve({"channels": [1.9]})

    def test_whole_float_index_accepted(self) -> None:
        assert resolve({"channels": [1.0]}).channels == (1,)


class TestSelectionExtras:
    """Tests for format aliases and pass-through keys."""

    def test_dtype_is_format_alias(self) -> None:
        assert resolve({"dtype": "int16"}).format == "int16"

    def test_format_kept(self) -> None:
        assert resolve({"format": "float64"}).format == "float64"

    def test_unknown_keys_pass_through(self) -> None:
        sel: SelectionDTO = resolve({"label": "intro"})
        assert sel.extra == {"label": "intro"}

    def test_resolver_keys_not_passed_through(self) -> None:
        assert resolve({"from": 1, "channels": [0], "dtype": "int16"}).extra == {}
