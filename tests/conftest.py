"""Pytest configuration for pinray tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    destroy the module-level fields the package declares on import.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before any field is declared
    from pinray.core.integrator import (
        clear_render_target,
        reset_render_target,
        set_background,
    )
    from pinray.lights.point import clear_point_lights
    from pinray.materials.matte import clear_matte_materials
    from pinray.scene.intersection import clear_scene
    from pinray.scene.manager import _clear_light_tracking, _clear_material_tracking

    def _clear_all():
        clear_scene()
        clear_matte_materials()
        clear_point_lights()
        _clear_material_tracking()
        _clear_light_tracking()
        clear_render_target()
        reset_render_target()
        set_background((0.0, 0.0, 0.0))

    _clear_all()

    yield

    _clear_all()
