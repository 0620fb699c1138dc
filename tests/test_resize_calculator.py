import pytest

from resizer.services.resize_calculator import (
    ResizeVariant,
    calculate_dimensions,
    needs_resize,
    resize_variant,
    round_dimension,
)


class TestCalculateDimensions:
    def test_square_box(self):
        assert calculate_dimensions((2250, 2250), 100, 100) == (100, 100)

    def test_width_only_rounds(self):
        assert calculate_dimensions((1500, 1000), width=1000) == (1000, 667)

    def test_height_only(self):
        assert calculate_dimensions((1500, 1000), height=500) == (750, 500)

    def test_outsized_height_is_bounded_by_width(self):
        assert calculate_dimensions((1500, 1000), 1000, 9999) == (1000, 667)

    def test_outsized_width_is_bounded_by_height(self):
        assert calculate_dimensions((1500, 1000), 9999, 500) == (750, 500)

    def test_no_target_keeps_intrinsic(self):
        assert calculate_dimensions((640, 480)) == (640, 480)

    @pytest.mark.parametrize(
        "intrinsic,box",
        [((1500, 1000), (300, 300)), ((333, 777), (120, 90)), ((4000, 3), (50, 50)), ((7, 9), (700, 900))],
    )
    def test_result_fits_box_and_touches_a_bound(self, intrinsic, box):
        width, height = calculate_dimensions(intrinsic, *box)
        assert 1 <= width <= box[0]
        assert 1 <= height <= box[1]
        assert width == box[0] or height == box[1]

    def test_never_collapses_to_zero(self):
        assert calculate_dimensions((4000, 3), width=50) == (50, 1)


class TestHelpers:
    @pytest.mark.parametrize("value,expected", [(225.0, 225), (99.5, 100), (99.49, 99), (0.5, 1)])
    def test_round_dimension(self, value, expected):
        assert round_dimension(value) == expected

    def test_needs_resize(self):
        assert not needs_resize((2250, 2250), (2250, 2250))
        assert needs_resize((2250, 2250), (100, 100))

    def test_no_target_is_a_no_op(self):
        intrinsic = (1234, 567)
        assert not needs_resize(intrinsic, calculate_dimensions(intrinsic))

    def test_resize_variant(self):
        assert resize_variant(True) is ResizeVariant.FIT
        assert resize_variant(False) is ResizeVariant.THUMBNAIL
