"""Sphere primitive with ray-sphere intersection.

This module provides a Sphere dataclass, the quadratic solver shared by both
sphere queries, and the two intersection entry points:

- ``intersect_sphere``: closest-hit query that merges into an
  IntersectionRecord, accepting a hit only if it is nearer than the one
  already recorded.
- ``intersect_sphere_shadow``: occlusion query for shadow rays.

The ray-sphere intersection is found by solving:
    |origin + t * direction - center|^2 = radius^2

which expands to the quadratic a*t^2 + b*t + c = 0 with:
    a = dot(direction, direction)
    b = 2 * dot(oc, direction)
    c = dot(oc, oc) - radius^2
    oc = origin - center

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pinray.geometry.sphere import Sphere, intersect_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from pinray.core.intersection import IntersectionRecord
from pinray.core.ray import ADAPTIVE_EPSILON_SCALE, EPSILON, Ray

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. Not validated here; a zero radius
            yields degenerate but finite results.
    """

    center: vec3
    radius: ti.f32


@ti.func
def solve_quadratic(a: ti.f32, b: ti.f32, c: ti.f32):
    """Solve a*t^2 + b*t + c = 0 for real roots.

    Uses q = -0.5 * (b + sign(b) * sqrt(discriminant)), t0 = q / a and
    t1 = c / q, which avoids catastrophic cancellation when b^2 >> 4ac.

    A zero discriminant is a genuine double root and both returned roots are
    equal. If q itself is zero (b == 0 and c == 0) the double root is 0.

    The quadratic coefficient must be non-zero. This is asserted when Taichi
    runs with debug=True; otherwise the division yields IEEE infinities.

    Args:
        a: Quadratic coefficient.
        b: Linear coefficient.
        c: Constant term.

    Returns:
        Tuple of (found, t0, t1) where found is 1 if real roots exist and
        t0 <= t1. Roots are 0 when found == 0.
    """
    assert a != 0.0, "solve_quadratic() requires a non-zero quadratic coefficient"

    found = 0
    t0 = 0.0
    t1 = 0.0

    discriminant = b * b - 4.0 * a * c
    if discriminant >= 0.0:
        found = 1
        root_discriminant = ti.sqrt(discriminant)

        q = 0.0
        if b < 0.0:
            q = -0.5 * (b - root_discriminant)
        else:
            q = -0.5 * (b + root_discriminant)

        if q == 0.0:
            # b == 0 and c == 0: double root at the origin
            t0 = 0.0
            t1 = 0.0
        else:
            t0 = q / a
            t1 = c / q

        if t0 > t1:
            temp = t0
            t0 = t1
            t1 = temp

    return found, t0, t1


@ti.func
def _sphere_coefficients(ray: Ray, sphere: Sphere):
    """Compute oc and the quadratic coefficients for a ray-sphere pair."""
    oc = ray.origin - sphere.center
    a = tm.dot(ray.direction, ray.direction)
    b = 2.0 * tm.dot(oc, ray.direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    return oc, a, b, c


@ti.func
def intersect_sphere_shadow(ray: Ray, sphere: Sphere) -> ti.i32:
    """Test whether a shadow ray is blocked by a sphere.

    The test reports occlusion if the nearer root lies beyond EPSILON. It is
    deliberately not limited by ray.t_max: any intersection along the positive
    half-line counts, even one farther away than the light.

    Args:
        ray: The shadow ray.
        sphere: The sphere to test.

    Returns:
        1 if the sphere occludes the ray, 0 otherwise.
    """
    _, a, b, c = _sphere_coefficients(ray, sphere)
    found, t0, t1 = solve_quadratic(a, b, c)

    occluded = 0
    if found == 1:
        if tm.min(t0, t1) > EPSILON:
            occluded = 1
    return occluded


@ti.func
def intersect_sphere(
    ray: Ray,
    sphere: Sphere,
    material_id: ti.i32,
    record: IntersectionRecord,
) -> IntersectionRecord:
    """Merge a ray-sphere intersection into an intersection record.

    Only the smaller root is considered. It is accepted if
    EPSILON < t < record.t, i.e. it lies in front of the ray origin and is
    closer than any hit recorded so far. Calling this for every primitive in
    any order leaves the globally nearest hit in the record.

    On acceptance the returned record holds the hit point, the outward unit
    normal (oc + d*t) / radius, t, the material id, the producing ray, and
    the ray's adaptive epsilon (1e-3 * t). On rejection the record is
    returned unchanged.

    Args:
        ray: The ray to test.
        sphere: The sphere to test against.
        material_id: Material of the sphere.
        record: The record accumulated so far.

    Returns:
        The updated record.
    """
    oc, a, b, c = _sphere_coefficients(ray, sphere)
    found, t0, t1 = solve_quadratic(a, b, c)

    result = record
    if found == 1:
        t = tm.min(t0, t1)
        if t > EPSILON and t < record.t:
            result = IntersectionRecord(
                hit=1,
                t=t,
                point=ray.origin + t * ray.direction,
                normal=(oc + ray.direction * t) / sphere.radius,
                material_id=material_id,
                ray_origin=ray.origin,
                ray_direction=ray.direction,
                ray_epsilon=ADAPTIVE_EPSILON_SCALE * t,
                depth=ray.depth,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius inside a Taichi kernel."""
    return Sphere(center=center, radius=radius)
