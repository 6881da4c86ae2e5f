"""Scene-level primitive storage and intersection testing.

This module stores the scene's primitives in Taichi fields and provides the
two scene queries the shader needs:

- ``intersect_scene``: nearest-hit search. A fresh IntersectionRecord is
  passed through every primitive's intersection routine in turn; each routine
  only accepts a hit closer than the one already recorded, so the record ends
  up holding the globally nearest hit without sorting.
- ``intersect_scene_shadow``: occlusion query for shadow rays, returning as
  soon as any primitive blocks the ray.

Both are a brute-force linear scan over all primitives.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pinray.scene.intersection import add_sphere, clear_scene, vec3
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, -1), 0.5, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from pinray.core.intersection import IntersectionRecord, make_empty_intersection
from pinray.core.ray import Ray
from pinray.geometry.sphere import Sphere, intersect_sphere, intersect_sphere_shadow

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive counts to zero. The actual field data is not
    cleared but will be overwritten when new primitives are added.
    """
    num_spheres[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(idx: ti.i32) -> Sphere:
    """Get a stored sphere by index."""
    return Sphere(center=sphere_centers[idx], radius=sphere_radii[idx])


@ti.func
def intersect_scene(ray: Ray) -> IntersectionRecord:
    """Find the nearest intersection of a ray with the scene.

    Args:
        ray: The ray to trace.

    Returns:
        The IntersectionRecord of the nearest hit, or an empty record
        (hit == 0, t == +inf) if nothing was hit.
    """
    record = make_empty_intersection()

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        record = intersect_sphere(ray, get_sphere(i), sphere_material_ids[i], record)

    return record


@ti.func
def intersect_scene_shadow(ray: Ray) -> ti.i32:
    """Test if any primitive occludes a shadow ray.

    Args:
        ray: The shadow ray.

    Returns:
        1 if any primitive was hit, 0 otherwise.
    """
    occluded = 0

    # Spheres after the first occluder are skipped, not tested
    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        if occluded == 0:
            occluded = intersect_sphere_shadow(ray, get_sphere(i))

    return occluded
