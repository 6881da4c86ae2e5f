"""Unit tests for scene-level intersection.

Tests cover:
- Adding and clearing spheres
- Nearest-hit search across several spheres
- Independence from insertion order
- Shadow (occlusion) queries
"""

import pytest
import taichi as ti


def _trace(origin, direction):
    """Run intersect_scene in a kernel and return (hit, t, material_id)."""
    from pinray.core.ray import make_ray
    from pinray.scene.intersection import intersect_scene

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    mat = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: ti.math.vec3, d: ti.math.vec3):
        record = intersect_scene(make_ray(o, d))
        hit[None] = record.hit
        t_val[None] = record.t
        mat[None] = record.material_id

    test_kernel(ti.math.vec3(*origin), ti.math.vec3(*direction))
    return hit[None], t_val[None], mat[None]


def _shadowed(origin, direction):
    from pinray.core.ray import make_ray
    from pinray.scene.intersection import intersect_scene_shadow

    result = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: ti.math.vec3, d: ti.math.vec3):
        result[None] = intersect_scene_shadow(make_ray(o, d))

    test_kernel(ti.math.vec3(*origin), ti.math.vec3(*direction))
    return result[None]


class TestSceneStorage:
    """Tests for sphere storage."""

    def test_add_and_clear(self):
        """Sphere indices should be sequential and clear should reset them."""
        from pinray.scene.intersection import add_sphere, clear_scene, get_sphere_count, vec3

        assert add_sphere(vec3(0, 0, 0), 1.0, 0) == 0
        assert add_sphere(vec3(1, 0, 0), 1.0, 0) == 1
        assert get_sphere_count() == 2
        clear_scene()
        assert get_sphere_count() == 0

    def test_capacity(self):
        """Exceeding MAX_SPHERES should raise RuntimeError."""
        from pinray.scene.intersection import MAX_SPHERES, add_sphere, num_spheres, vec3

        num_spheres[None] = MAX_SPHERES
        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere(vec3(0, 0, 0), 1.0, 0)


class TestIntersectScene:
    """Tests for nearest-hit search."""

    def test_empty_scene_misses(self):
        """An empty scene should never be hit."""
        hit, _, mat = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0
        assert mat == -1

    def test_nearest_of_several(self):
        """The closest sphere along the ray should win."""
        from pinray.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -20.0), 1.0, 0)
        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, 1)
        add_sphere(vec3(0.0, 0.0, -10.0), 1.0, 2)

        hit, t, mat = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert t == pytest.approx(4.0, abs=1e-5)
        assert mat == 1

    @pytest.mark.parametrize("order", [(0, 1), (1, 0)])
    def test_insertion_order_does_not_matter(self, order):
        """Overlapping spheres should give the same nearest hit in any order."""
        from pinray.scene.intersection import add_sphere, vec3

        spheres = [
            (vec3(0.0, 0.0, -5.0), 2.0, 10),
            (vec3(0.0, 0.5, -4.0), 1.5, 20),
        ]
        for i in order:
            center, radius, mat_id = spheres[i]
            add_sphere(center, radius, mat_id)

        hit, t, mat = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        # Sphere 20 front surface: z = -4 + sqrt(1.5^2 - 0.5^2)
        assert t == pytest.approx(4.0 - 2.0**0.5, abs=1e-4)
        assert mat == 20


class TestIntersectSceneShadow:
    """Tests for the occlusion query."""

    def test_unoccluded(self):
        from pinray.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, 0)
        assert _shadowed((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == 0

    def test_occluded_by_any(self):
        """Any sphere in the way should occlude, not just the first stored."""
        from pinray.scene.intersection import add_sphere, vec3

        add_sphere(vec3(10.0, 0.0, 0.0), 1.0, 0)
        add_sphere(vec3(0.0, 5.0, 0.0), 1.0, 0)
        assert _shadowed((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == 1

    def test_later_spheres_keep_occlusion(self):
        """Spheres stored after the occluder should not clear the result."""
        from pinray.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 5.0, 0.0), 1.0, 0)
        add_sphere(vec3(10.0, 0.0, 0.0), 1.0, 0)
        add_sphere(vec3(-10.0, 0.0, 0.0), 1.0, 0)
        assert _shadowed((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == 1

    def test_leaving_surface_not_self_occluded(self):
        """A shadow ray leaving a sphere's surface outward should not be blocked by it."""
        from pinray.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, 0.0), 1.0, 0)
        assert _shadowed((0.0, 1.0, 0.0), (0.0, 1.0, 0.0)) == 0
