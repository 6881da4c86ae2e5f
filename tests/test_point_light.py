"""Unit tests for the point light."""

import math

import pytest
import taichi as ti


class TestPointLight:
    """Tests for point light direction and radiance."""

    def test_direction_is_unit_toward_light(self):
        """The direction should point from the hit point to the light."""
        from pinray.lights.point import PointLight, point_light_direction, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            light = PointLight(
                color=vec3(1.0, 1.0, 1.0), intensity=1.0, position=vec3(0.0, 4.0, 3.0)
            )
            result[None] = point_light_direction(light, vec3(0.0, 0.0, 0.0))

        test_kernel()
        d = result[None]
        assert abs(d[0]) < 1e-6
        assert abs(d[1] - 0.8) < 1e-6
        assert abs(d[2] - 0.6) < 1e-6

    def test_radiance_has_no_falloff(self):
        """Radiance should be intensity * color regardless of distance."""
        from pinray.lights.point import PointLight, point_light_radiance, vec3

        near = ti.Vector.field(3, dtype=ti.f32, shape=())
        far = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            light = PointLight(
                color=vec3(1.0, 0.5, 0.0), intensity=2.0, position=vec3(0.0, 0.0, 0.0)
            )
            near[None] = point_light_radiance(light, vec3(0.0, 0.0, 1.0))
            far[None] = point_light_radiance(light, vec3(0.0, 0.0, 100.0))

        test_kernel()
        for field in (near, far):
            r = field[None]
            assert abs(r[0] - 2.0) < 1e-6
            assert abs(r[1] - 1.0) < 1e-6
            assert abs(r[2]) < 1e-6


class TestPointLightRegistry:
    """Tests for the point light registry."""

    def test_add_and_get(self):
        """Registered lights should be readable inside kernels."""
        from pinray.lights.point import add_point_light, get_point_light, get_point_light_count

        add_point_light((1.0, 0.0, 0.0), 2.0, (10.0, 10.0, -10.0))
        idx = add_point_light((0.0, 0.0, 1.0), 3.0, (1.0, 2.0, 3.0))
        assert idx == 1
        assert get_point_light_count() == 2

        pos = ti.Vector.field(3, dtype=ti.f32, shape=())
        intensity = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            light = get_point_light(1)
            pos[None] = light.position
            intensity[None] = light.intensity

        test_kernel()
        assert pos.to_numpy().tolist() == pytest.approx([1.0, 2.0, 3.0])
        assert intensity[None] == pytest.approx(3.0)

    def test_negative_values_rejected(self):
        """Negative color or intensity should raise ValueError."""
        from pinray.lights.point import add_point_light

        with pytest.raises(ValueError):
            add_point_light((1.0, -1.0, 0.0), 1.0, (0.0, 0.0, 0.0))
        with pytest.raises(ValueError):
            add_point_light((1.0, 1.0, 1.0), -1.0, (0.0, 0.0, 0.0))

    def test_direction_normalized_for_far_light(self):
        """Directions stay unit length for distant lights."""
        from pinray.lights.point import PointLight, point_light_direction, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            light = PointLight(
                color=vec3(1.0, 1.0, 1.0), intensity=1.0, position=vec3(1000.0, -500.0, 20.0)
            )
            result[None] = point_light_direction(light, vec3(1.0, 2.0, 3.0)).norm()

        test_kernel()
        assert math.isclose(result[None], 1.0, abs_tol=1e-5)
