"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector helpers
    intersection: Intersection record threaded through the nearest-hit search
    film: Raster size and pixel size of the camera film
    integrator: Render target, shading and the render kernel
    renderer: Scene-level renderer driving the integrator in row batches

All per-ray computation runs in Taichi functions; the render pass is a single
serialized Taichi kernel.
"""

from .film import Film
from .intersection import IntersectionRecord, make_empty_intersection
from .ray import (
    ADAPTIVE_EPSILON_SCALE,
    EPSILON,
    T_INFINITY,
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    vec3,
)

# Note: integrator and renderer are NOT imported here since they pull in the
# scene registries. Import them directly from pinray.core.integrator or
# pinray.core.renderer when needed.

__all__ = [
    "Film",
    "IntersectionRecord",
    "make_empty_intersection",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "EPSILON",
    "ADAPTIVE_EPSILON_SCALE",
    "T_INFINITY",
]
