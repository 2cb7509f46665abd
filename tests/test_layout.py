"""Tests for the LED layout registry."""

import math

import pytest

from openpixel.exceptions import LayoutIndexError
from openpixel.layout import LedLayout, strip_positions


@pytest.mark.unit
class TestRegisterLed:
    """Test single LED registration."""

    def test_empty_layout(self, layout):
        """A new layout has no LEDs."""
        assert len(layout) == 0
        assert list(layout.offsets) == []

    def test_offset_is_x_plus_width_times_y(self, layout):
        """Coordinates are flattened row-major."""
        layout.register_led(0, 3, 2)
        assert layout[0] == 3 + 200 * 2

    def test_growth_preserves_earlier_offsets(self, layout):
        """Registering a higher index keeps what was stored below it."""
        layout.register_led(2, 10, 1)
        layout.register_led(7, 5, 5)

        assert layout[2] == 210
        assert layout[7] == 1005
        assert len(layout) == 8

    def test_gaps_default_to_zero(self, layout):
        """Slots created by growth point at offset 0."""
        layout.register_led(5, 1, 1)
        assert list(layout.offsets) == [0, 0, 0, 0, 0, 201]

    def test_reregister_overwrites(self, layout):
        """Registering the same index twice keeps the last position."""
        layout.register_led(0, 1, 0)
        layout.register_led(0, 2, 0)
        assert layout[0] == 2
        assert len(layout) == 1

    def test_lower_index_does_not_shrink(self, layout):
        """The table never shrinks."""
        layout.register_led(9, 0, 0)
        layout.register_led(1, 4, 0)
        assert len(layout) == 10

    def test_grows_past_initial_capacity(self, layout):
        """Indices beyond the initial arena capacity are supported."""
        index = LedLayout.INITIAL_CAPACITY * 3 + 1
        layout.register_led(3, 1, 0)
        layout.register_led(index, 9, 9)

        assert len(layout) == index + 1
        assert layout[3] == 1
        assert layout[index] == 9 + 200 * 9

    def test_negative_index_rejected(self, layout):
        """Negative indices raise instead of wrapping around."""
        with pytest.raises(LayoutIndexError):
            layout.register_led(-1, 0, 0)

    def test_getitem_out_of_range(self, layout):
        """Reading an unregistered index raises IndexError."""
        layout.register_led(0, 0, 0)
        with pytest.raises(IndexError):
            layout[1]

    def test_offsets_is_a_readonly_copy(self, layout):
        """Callers cannot mutate the table through `offsets`."""
        layout.register_led(0, 1, 0)
        offsets = layout.offsets
        with pytest.raises(ValueError):
            offsets[0] = 99
        assert layout[0] == 1

    def test_snapshot_is_independent(self, layout):
        """A snapshot does not change when the layout does."""
        layout.register_led(0, 1, 0)
        snapshot = layout.snapshot()
        layout.register_led(0, 2, 0)
        layout.register_led(1, 3, 0)
        assert list(snapshot) == [1]


@pytest.mark.unit
class TestRegisterStrip:
    """Test strip registration."""

    def test_reversed_strip_placement(self, layout):
        """Reversed strip: positions 80..120 land on indices 4..0."""
        layout.register_strip(0, 5, 100, 50, 10, 0, reversed=True)

        expected_x = {4: 80, 3: 90, 2: 100, 1: 110, 0: 120}
        for index, x in expected_x.items():
            assert layout[index] == x + 200 * 50

    def test_forward_strip_uses_distinct_indices(self, layout):
        """Forward strip: LED i of the strip gets start_index + i."""
        layout.register_strip(10, 5, 100, 50, 10, 0)

        assert len(layout) == 15
        assert [layout[10 + i] for i in range(5)] == [
            x + 200 * 50 for x in (80, 90, 100, 110, 120)
        ]

    def test_forward_and_reversed_mirror(self):
        """The same strip forward and reversed gives mirrored offsets."""
        forward = LedLayout(200, 100)
        backward = LedLayout(200, 100)
        forward.register_strip(0, 6, 100, 50, 7, 0.3)
        backward.register_strip(0, 6, 100, 50, 7, 0.3, reversed=True)

        assert list(forward.offsets) == list(backward.offsets)[::-1]

    def test_vertical_strip(self, layout):
        """An angle of pi/2 runs the strip along +y."""
        layout.register_strip(0, 3, 50, 50, 10, math.pi / 2)

        assert [layout[i] for i in range(3)] == [
            50 + 200 * 40,
            50 + 200 * 50,
            50 + 200 * 60,
        ]

    def test_even_count_extends_past_centre(self):
        """Even strips use an integer half-length: one extra LED on the +x side."""
        assert strip_positions(4, 100, 0, 10) == [(90, 0), (100, 0), (110, 0), (120, 0)]
        assert strip_positions(2, 100, 50, 10) == [(100, 50), (110, 50)]

    def test_demo_strip_start(self):
        """A 64-LED strip across an 800px framebuffer starts at x=46."""
        positions = strip_positions(64, 400, 70, 800 / 70)
        assert positions[0] == (46, 70)
        assert positions[31] == (400, 70)

    def test_rounding_is_half_up(self):
        """Coordinates round with int(v + 0.5)."""
        assert strip_positions(3, 10, 10, 1.5) == [(9, 10), (10, 10), (12, 10)]

    def test_strip_preserves_other_leds(self, layout):
        """Adding a strip keeps LEDs registered before it."""
        layout.register_led(0, 1, 1)
        layout.register_strip(5, 3, 100, 50, 10)
        assert layout[0] == 201
        assert list(layout.offsets[1:5]) == [0, 0, 0, 0]
