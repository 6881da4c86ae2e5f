"""Ray data structure and vector utilities.

This module provides the Ray dataclass used for primary and shadow rays, along
with the small set of vector helpers the rest of the tracer relies on. All
operations are designed to run inside Taichi kernels.

A ray is the half-line ``origin + t * direction`` restricted to the parameter
interval ``(t_min, t_max)``. Rays are treated as values: the running "nearest
hit so far" distance lives in the intersection record, not on the ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> @ti.kernel
    ... def point_z() -> ti.f32:
    ...     ray = make_ray(origin, direction)
    ...     return ray_at(ray, 5.0).z
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Minimum hit distance accepted by intersection tests (self-intersection guard)
EPSILON = 1e-4

# Scale applied to the hit distance to derive a ray's adaptive epsilon
ADAPTIVE_EPSILON_SCALE = 1e-3

# Upper bound of the default ray interval
T_INFINITY = float("inf")


@ti.dataclass
class Ray:
    """A ray with an origin, a direction and a valid parameter interval.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Camera rays are
            normalized; intersection code does not rely on it.
        t_min: Lower bound of the valid parameter interval (default 0).
        t_max: Upper bound of the valid parameter interval (default +inf).
        epsilon: Self-intersection offset associated with this ray.
        depth: Recursion depth. Always 0, no secondary bounces are traced.
    """

    origin: vec3
    direction: vec3
    t_min: ti.f32
    t_max: ti.f32
    epsilon: ti.f32
    depth: ti.i32


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray with the default interval [0, +inf) and default epsilon.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector.

    Returns:
        A new Ray instance with depth 0.
    """
    return Ray(
        origin=origin,
        direction=direction,
        t_min=0.0,
        t_max=T_INFINITY,
        epsilon=EPSILON,
        depth=0,
    )


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector (no square root)."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The vector must not be zero. Under ``ti.init(debug=True)`` a zero vector
    trips an assertion; otherwise the division propagates NaNs.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
    """
    len_sq = tm.dot(v, v)
    assert len_sq > 0.0, "normalize() called on a zero-length vector"
    return v / ti.sqrt(len_sq)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)
