"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with ray-sphere intersection

Intersection routines are Taichi functions. Each shape offers a closest-hit
query that merges into an IntersectionRecord and an occlusion query for
shadow rays.
"""

from .sphere import (
    Sphere,
    intersect_sphere,
    intersect_sphere_shadow,
    make_sphere,
    solve_quadratic,
)

__all__ = [
    "Sphere",
    "intersect_sphere",
    "intersect_sphere_shadow",
    "make_sphere",
    "solve_quadratic",
]
