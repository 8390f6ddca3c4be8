"""
Tests for the geometric badge checks
"""

import numpy as np
import pytest

from badge_validator import (
    VALID,
    FailureKind,
    Verdict,
    has_transparency,
    inscribed_circle_mask,
    is_circle_pixel,
    validate_geometry,
    validate_size,
)


class TestCircleGeometry:
    """Tests for the inscribed circle definition"""

    @pytest.mark.parametrize(
        "x, y, expected",
        [
            (2, 2, True),    # center
            (0, 2, True),    # exactly on the radius
            (2, 0, True),
            (3, 3, True),
            (0, 0, False),   # corner
            (3, 0, False),
            (0, 3, False),
        ],
    )
    def test_is_circle_pixel_uses_integer_coordinates(self, x, y, expected):
        """Test pixel membership for a 4x4 badge (center (2, 2), radius 2)"""
        assert is_circle_pixel(x, y, 4) is expected

    def test_mask_matches_pixel_test(self):
        """Test the vectorized mask agrees with the per-pixel test"""
        size = 9
        mask = inscribed_circle_mask(size)
        expected = np.array([[is_circle_pixel(x, y, size) for x in range(size)] for y in range(size)])
        assert mask.shape == (size, size)
        assert np.array_equal(mask, expected)

    def test_margin_shrinks_mask(self):
        """Test a margin only removes pixels near the edge"""
        full = inscribed_circle_mask(64)
        inner = inscribed_circle_mask(64, margin=4)
        assert inner.sum() < full.sum()
        assert not (inner & ~full).any()
        assert inner[32, 32]

    def test_validate_size(self):
        assert validate_size(512, 512, 512)
        assert not validate_size(512, 511, 512)
        assert not validate_size(256, 256, 512)


class TestValidateGeometry:
    """Tests for validate_geometry"""

    @pytest.mark.parametrize("shape", [(100, 100, 4), (512, 511, 4), (511, 512, 4), (1024, 1024, 4)])
    def test_wrong_size(self, shape):
        """Test any size other than 512x512 is rejected"""
        buffer = np.zeros(shape, dtype=np.uint8)
        assert validate_geometry(buffer).kind is FailureKind.WRONG_SIZE

    def test_custom_size(self, make_badge):
        """Test the badge size is configurable"""
        buffer = make_badge(size=64)
        assert validate_geometry(buffer, size=64) == VALID
        assert validate_geometry(buffer).kind is FailureKind.WRONG_SIZE

    def test_no_transparency(self, opaque_image):
        """Test a fully opaque image has no transparent background"""
        assert not has_transparency(opaque_image)
        assert validate_geometry(opaque_image).kind is FailureKind.NO_TRANSPARENCY

    def test_semi_transparent_is_not_transparent(self, opaque_image):
        """Test only alpha == 0 counts as transparent"""
        opaque_image[0, 0, 3] = 1
        assert validate_geometry(opaque_image).kind is FailureKind.NO_TRANSPARENCY

    def test_transparent_in_circle(self, valid_badge):
        """Test a hole inside the circle is rejected"""
        valid_badge[256, 256, 3] = 0
        assert validate_geometry(valid_badge).kind is FailureKind.TRANSPARENT_IN_CIRCLE

    def test_transparent_on_circle_edge(self, valid_badge):
        """Test a pixel exactly at radius distance belongs to the circle"""
        valid_badge[0, 256, 3] = 0
        assert validate_geometry(valid_badge).kind is FailureKind.TRANSPARENT_IN_CIRCLE

    def test_margin_exempts_edge(self, valid_badge):
        """Test pixels within the margin of the edge may be transparent"""
        valid_badge[0, 256, 3] = 0
        assert validate_geometry(valid_badge, margin=2) == VALID
        valid_badge[256, 256, 3] = 0
        assert validate_geometry(valid_badge, margin=2).kind is FailureKind.TRANSPARENT_IN_CIRCLE

    def test_valid_badge(self, valid_badge):
        """Test an opaque disc with transparent corners passes"""
        verdict = validate_geometry(valid_badge)
        assert verdict.ok
        assert verdict == VALID

    def test_size_checked_before_transparency(self):
        """Test the first failing check wins"""
        buffer = np.full((10, 10, 4), 255, dtype=np.uint8)
        assert validate_geometry(buffer).kind is FailureKind.WRONG_SIZE


class TestVerdict:
    """Tests for verdict messages"""

    def test_valid_is_truthy(self):
        assert VALID
        assert VALID.message == "Le badge est valide."

    @pytest.mark.parametrize("kind", list(FailureKind))
    def test_each_failure_has_a_message(self, kind):
        verdict = Verdict(kind)
        assert not verdict
        assert verdict.message.startswith("Le badge")
        assert verdict.message != VALID.message

    def test_message_names_color(self):
        verdict = Verdict(FailureKind.UNJOYFUL_COLOR, color="#123456")
        assert "#123456" in verdict.message
