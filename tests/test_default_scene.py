"""End-to-end tests for the built-in demo scene.

A red matte sphere of radius 2 at the origin, seen from (5, 5, 5) with a
focal distance of 50 on an 800 x 800 film of pixel size 0.05, lit by a red
point light at (10, 10, -10) in front of a grey background.
"""

import math

import numpy as np
import pytest


@pytest.fixture(scope="module")
def rendered(tmp_path_factory):
    """Render the demo scene once and save it as PPM."""
    from pinray.core.renderer import Renderer
    from pinray.preview.export import read_ppm
    from pinray.scene.default_scene import create_default_scene

    renderer = Renderer(create_default_scene())
    renderer.render(rows_per_batch=100)
    image = renderer.get_image_numpy().copy()

    path = tmp_path_factory.mktemp("render") / "output.ppm"
    renderer.save_image(path)
    return image, path, read_ppm(path)


class TestDefaultScene:
    """Tests for the scene contents."""

    def test_contents(self):
        from pinray.scene.default_scene import GREY, RED, create_default_scene

        scene = create_default_scene()
        assert scene.get_sphere_count() == 1
        assert scene.get_light_count() == 1
        assert scene.background == GREY
        assert scene.materials[0].params == {"color": RED, "kd": 0.8}
        assert (scene.film.width, scene.film.height, scene.film.pixel_size) == (800, 800, 0.05)
        assert scene.camera.distance == 50.0


class TestEndToEnd:
    """Tests on the rendered demo image."""

    def test_header(self, rendered):
        _, path, _ = rendered
        assert path.read_bytes().startswith(b"P6\n800 800\n255\n")
        assert path.stat().st_size == len(b"P6\n800 800\n255\n") + 800 * 800 * 3

    def test_corners_are_background(self, rendered):
        image, _, pixels = rendered
        for row, col in [(0, 0), (0, 799), (799, 0), (799, 799)]:
            np.testing.assert_allclose(image[row, col], [0.5, 0.5, 0.5])
            assert tuple(pixels[row, col]) == (127, 127, 127)

    def test_center_is_lit_red(self, rendered):
        """The center ray hits the sphere near (1, 1, 1) * 2 / sqrt(3)."""
        image, _, pixels = rendered

        hit = np.full(3, 2.0 / math.sqrt(3.0))
        normal = hit / 2.0
        to_light = np.array([10.0, 10.0, -10.0]) - hit
        cos_theta = np.dot(normal, to_light / np.linalg.norm(to_light))
        expected = 0.8 / math.pi * 2.0 * cos_theta

        r, g, b = image[400, 400]
        assert r == pytest.approx(expected, abs=2e-3)
        assert g == 0.0 and b == 0.0
        assert pixels[400, 400, 0] > 0
        assert tuple(pixels[400, 400, 1:]) == (0, 0)

    def test_sphere_covers_center_region(self, rendered):
        """Pixels around the center are not background."""
        image, _, _ = rendered
        center = image[380:420, 380:420]
        assert not np.any(np.all(center == 0.5, axis=-1))

    def test_unlit_side_is_black(self, rendered):
        """Some sphere pixels face away from the light and render black."""
        image, _, _ = rendered
        black = np.all(image == 0.0, axis=-1)
        assert black.any()


def _reference_render(width, height, pixel_size):
    """Trace the demo scene in NumPy, one pixel at a time.

    Pixel (row, col) is sampled at (x, y) = (row, col) and stored at
    [row, col], the same loop the renderer runs.
    """
    eye = np.array([5.0, 5.0, 5.0])
    up = np.array([0.0, 1.0, 0.0])
    w = eye / np.linalg.norm(eye)
    u = np.cross(up, w)
    u /= np.linalg.norm(u)
    v = np.cross(u, w)
    v /= np.linalg.norm(v)

    light = np.array([10.0, 10.0, -10.0])
    red = np.array([1.0, 0.0, 0.0])
    radius = 2.0

    def nearest_root(origin, direction):
        a = np.dot(direction, direction)
        b = 2.0 * np.dot(origin, direction)
        c = np.dot(origin, origin) - radius * radius
        disc = b * b - 4.0 * a * c
        if disc < 0.0:
            return None
        return (-b - math.sqrt(disc)) / (2.0 * a)

    image = np.full((height, width, 3), 0.5)
    for row in range(height):
        for col in range(width):
            px = pixel_size * (row - 0.5 * (width - 1))
            py = pixel_size * (col - 0.5 * (height - 1))
            direction = px * u + py * v - 50.0 * w
            direction /= np.linalg.norm(direction)

            t = nearest_root(eye, direction)
            if t is None or t <= 1e-4:
                continue

            point = eye + t * direction
            normal = point / radius
            wi = light - point
            wi /= np.linalg.norm(wi)
            color = np.zeros(3)
            t_shadow = nearest_root(point, wi)
            if t_shadow is None or t_shadow <= 1e-4:
                cos_theta = np.dot(normal, wi)
                if cos_theta > 0.0:
                    color = 0.8 * red / math.pi * 2.0 * red * cos_theta
            image[row, col] = color
    return image


class TestOrientation:
    """The render pass samples pixel (row, col) at camera sample (row, col)."""

    @pytest.fixture
    def small_render(self):
        from pinray.core.renderer import render_scene
        from pinray.scene.default_scene import DefaultSceneParams, create_default_scene

        params = DefaultSceneParams(width=40, height=40, pixel_size=0.5)
        return render_scene(create_default_scene(params)).copy()

    def test_scene_is_not_transpose_symmetric(self, small_render):
        assert np.abs(small_render - small_render.transpose(1, 0, 2)).max() > 0.1

    def test_matches_reference_loop(self, small_render):
        expected = _reference_render(40, 40, 0.5)
        np.testing.assert_allclose(small_render, expected, atol=1e-4)

    def test_row_moves_along_u(self):
        """Pixel (row, 0) sees the same ray as sample (row, 0)."""
        from pinray.camera.perspective import PerspectiveCamera, setup_camera
        from pinray.core.film import Film
        from pinray.core.integrator import (
            render_pixel,
            set_background,
            setup_render_target,
        )
        from pinray.scene.manager import SceneManager

        # One sphere on the +u side of a camera looking down -z
        scene = SceneManager()
        mat = scene.add_matte_material((1.0, 1.0, 1.0), 1.0)
        scene.add_sphere((4.0, 0.0, 0.0), 1.0, mat)
        scene.add_point_light((1.0, 1.0, 1.0), 1.0, (4.0, 0.0, 10.0))
        film = Film(width=3, height=3, pixel_size=1.0)
        setup_camera(PerspectiveCamera((0, 0, 10), (0, 0, 0), (0, 1, 0), 2.5), film)
        setup_render_target(film)
        set_background((0.5, 0.5, 0.5))

        # Row 2 offsets the ray toward +u (+x) and hits the sphere
        assert render_pixel(2, 1) != pytest.approx((0.5, 0.5, 0.5))
        assert render_pixel(1, 2) == pytest.approx((0.5, 0.5, 0.5))
        assert render_pixel(0, 1) == pytest.approx((0.5, 0.5, 0.5))
