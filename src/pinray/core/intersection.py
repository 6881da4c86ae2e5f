"""Intersection record accumulated during the nearest-hit search.

A fresh record is created for every primary ray, passed through each
primitive's intersection routine, and discarded once the pixel is shaded.
Intersection routines take the record by value and return the (possibly)
updated record, so the running "closest t so far" is threaded explicitly
through the traversal instead of being written back onto the ray.
"""

import taichi as ti
import taichi.math as tm

from pinray.core.ray import EPSILON, T_INFINITY

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class IntersectionRecord:
    """Record of the nearest ray-scene intersection found so far.

    Attributes:
        hit: Whether any primitive has been hit (1 if hit, 0 if miss).
        t: The parameter value of the nearest accepted hit. Starts at +inf so
            any real hit replaces it.
        point: The world-space hit point. Only valid if hit == 1.
        normal: The outward unit surface normal. Only valid if hit == 1.
        material_id: The material of the hit primitive, -1 when unset.
        ray_origin: Origin of the ray that produced the hit.
        ray_direction: Direction of the ray that produced the hit.
        ray_epsilon: Adaptive epsilon recorded for the ray at the hit
            (1e-3 * t).
        depth: Recursion depth of the ray that produced the hit.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32
    ray_origin: vec3
    ray_direction: vec3
    ray_epsilon: ti.f32
    depth: ti.i32


@ti.func
def make_empty_intersection() -> IntersectionRecord:
    """Create a record indicating no intersection.

    Returns:
        An IntersectionRecord with hit=0, t=+inf and material_id=-1.
    """
    return IntersectionRecord(
        hit=0,
        t=T_INFINITY,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
        ray_origin=vec3(0.0, 0.0, 0.0),
        ray_direction=vec3(0.0, 0.0, 0.0),
        ray_epsilon=EPSILON,
        depth=0,
    )
