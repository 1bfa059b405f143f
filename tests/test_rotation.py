"""
Unit tests for make_parallel.geometry.rotation module.

Tests:
- Rotation3D class and constructors
- Composition and inversion
- Rotation of directions and points about axis lines
"""

import numpy as np
import pytest

from conftest import assert_vector_close
from make_parallel.errors import DegenerateGeometryError
from make_parallel.geometry.rotation import Rotation3D, rotate_about_line, rotate_direction
from make_parallel.geometry.vectors import Line


class TestRotation3D:
    """Tests for Rotation3D class."""

    def test_identity(self):
        """Test identity rotation."""
        rot = Rotation3D.identity()
        assert np.allclose(rot.matrix, np.eye(3))
        assert rot.is_identity()

    def test_from_axis_angle_z_90(self):
        """Test 90 degree rotation around Z axis."""
        rot = Rotation3D.from_axis_angle(np.array([0, 0, 1]), np.pi/2)

        # X -> Y
        assert_vector_close(rot.apply([1, 0, 0]), [0, 1, 0])
        # Y -> -X
        assert_vector_close(rot.apply([0, 1, 0]), [-1, 0, 0])

    def test_negative_axis_turns_clockwise(self):
        """A -Z axis reverses the sense of rotation."""
        rot = Rotation3D.from_axis_angle([0, 0, -1], np.pi/2)
        assert_vector_close(rot.apply([0, 1, 0]), [1, 0, 0])

    def test_axis_length_irrelevant(self):
        a = Rotation3D.from_axis_angle([0, 0, 5], 0.3)
        b = Rotation3D.from_axis_angle([0, 0, 1], 0.3)
        assert np.allclose(a.matrix, b.matrix)

    def test_zero_axis_rejected(self):
        with pytest.raises(DegenerateGeometryError):
            Rotation3D.from_axis_angle([0, 0, 0], 1.0)

    def test_wrong_shape_rejected(self):
        with pytest.raises(ValueError, match="3x3"):
            Rotation3D(np.eye(2))

    def test_around_z(self):
        rot = Rotation3D.around_z(np.pi)
        assert_vector_close(rot.apply([1, 0, 0]), [-1, 0, 0])

    def test_apply_multiple_points(self):
        """Test applying rotation to Nx3 array."""
        rot = Rotation3D.around_z(np.pi/2)
        points = np.array([[1, 0, 0], [0, 1, 0], [0, 0, 1]])

        rotated = rot.apply(points)

        assert np.allclose(rotated, [[0, 1, 0], [-1, 0, 0], [0, 0, 1]])

    def test_compose(self):
        """Two quarter turns make a half turn."""
        quarter = Rotation3D.around_z(np.pi/2)
        half = quarter.compose(quarter)
        assert np.allclose(half.matrix, Rotation3D.around_z(np.pi).matrix)

    def test_matmul_operator(self):
        a = Rotation3D.around_z(0.2)
        b = Rotation3D.around_z(0.5)
        assert np.allclose((a @ b).matrix, Rotation3D.around_z(0.7).matrix)

    def test_inverse(self):
        rot = Rotation3D.from_axis_angle([1, 2, 3], 0.8)
        assert (rot @ rot.inverse()).is_identity()

    def test_axis_angle_extraction(self):
        """Test extracting axis and angle."""
        rot = Rotation3D.from_axis_angle([0, 0, -1], 0.4)
        axis, angle = rot.axis_angle

        assert angle == pytest.approx(0.4)
        assert_vector_close(axis, [0, 0, -1])

    def test_axis_angle_of_half_turn(self):
        axis, angle = Rotation3D.around_z(np.pi).axis_angle
        assert angle == pytest.approx(np.pi)
        assert abs(axis[2]) == pytest.approx(1.0)

    def test_determinant_is_one(self):
        rot = Rotation3D.from_axis_angle([1, -1, 2], 1.3)
        assert np.linalg.det(rot.matrix) == pytest.approx(1.0)


class TestRotateAboutLine:
    """Tests for rotation of points and directions about an axis line."""

    def test_point_rotates_about_axis_origin(self):
        axis = Line([1, 1, 0], [0, 0, 1])
        rotated = rotate_about_line([2, 1, 0], axis, np.pi/2)
        assert_vector_close(rotated, [1, 2, 0])

    def test_point_on_axis_unchanged(self):
        axis = Line([3, 4, 0], [0, 0, 2])
        assert_vector_close(rotate_about_line([3, 4, 7], axis, 1.1), [3, 4, 7])

    def test_multiple_points(self):
        axis = Line([1, 0, 0], [0, 0, 1])
        rotated = rotate_about_line([[2, 0, 0], [1, 1, 0]], axis, np.pi)
        assert np.allclose(rotated, [[0, 0, 0], [1, -1, 0]])

    def test_direction_ignores_axis_position(self):
        near = rotate_direction([1, 0, 0], Line([0, 0, 0], [0, 0, 1]), 0.6)
        far = rotate_direction([1, 0, 0], Line([100, -40, 3], [0, 0, 1]), 0.6)
        assert_vector_close(near, far)

    def test_direction_keeps_length(self):
        rotated = rotate_direction([3, 4, 0], Line([0, 0, 0], [0, 0, 1]), 1.0)
        assert np.linalg.norm(rotated) == pytest.approx(5.0)
