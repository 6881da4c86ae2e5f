"""Point light source.

A point light emits from a single position with constant radiance:

    direction(hit) = normalize(position - hit.point)
    radiance(hit)  = intensity * color

The radiance has no inverse-square falloff. Renders therefore look the same
regardless of how far the light is from the scene.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pinray.lights.point import PointLight, point_light_direction
    >>> # Use within a Taichi kernel:
    >>> # wi = point_light_direction(light, record.point)
"""

import taichi as ti
import taichi.math as tm

from pinray.core.ray import normalize

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class PointLight:
    """Point light properties.

    Attributes:
        color: The emitted color (RGB).
        intensity: Scalar multiplier applied to the color.
        position: The light position in world space.
    """

    color: vec3
    intensity: ti.f32
    position: vec3


@ti.func
def point_light_direction(light: PointLight, hit_point: vec3) -> vec3:
    """Unit vector from a surface point toward the light.

    Args:
        light: The point light.
        hit_point: The surface point being shaded. Must not coincide with the
            light position.

    Returns:
        normalize(light.position - hit_point).
    """
    return normalize(light.position - hit_point)


@ti.func
def point_light_radiance(light: PointLight, hit_point: vec3) -> vec3:
    """Radiance arriving at a surface point: intensity * color, no falloff.

    The hit point is part of the light interface but does not affect a point
    light.
    """
    return light.intensity * light.color


# =============================================================================
# Light Field Storage
# =============================================================================

# Maximum number of point lights in the scene
MAX_POINT_LIGHTS = 64

point_light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_POINT_LIGHTS)
point_light_intensities = ti.field(dtype=ti.f32, shape=MAX_POINT_LIGHTS)
point_light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_POINT_LIGHTS)
num_point_lights = ti.field(dtype=ti.i32, shape=())


def clear_point_lights() -> None:
    """Clear all point lights."""
    num_point_lights[None] = 0


def add_point_light(
    color: tuple[float, float, float],
    intensity: float,
    position: tuple[float, float, float],
) -> int:
    """Add a point light to the light registry.

    Args:
        color: The emitted color as (R, G, B). Components must be non-negative.
        intensity: The scalar intensity. Must be non-negative.
        position: The light position as (x, y, z).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of point lights is exceeded.
        ValueError: If a color component or the intensity is negative.
    """
    for i, component in enumerate(color):
        if component < 0.0:
            raise ValueError(f"Light color component {i} = {component} is negative.")
    if intensity < 0.0:
        raise ValueError(f"Light intensity must be non-negative, got {intensity}")

    idx = num_point_lights[None]
    if idx >= MAX_POINT_LIGHTS:
        raise RuntimeError(f"Maximum number of point lights ({MAX_POINT_LIGHTS}) exceeded")

    point_light_colors[idx] = vec3(color[0], color[1], color[2])
    point_light_intensities[idx] = intensity
    point_light_positions[idx] = vec3(position[0], position[1], position[2])
    num_point_lights[None] = idx + 1
    return idx


def get_point_light_count() -> int:
    """Get the number of point lights in the registry."""
    return int(num_point_lights[None])


@ti.func
def get_point_light(light_idx: ti.i32) -> PointLight:
    """Get a point light from the registry by index."""
    return PointLight(
        color=point_light_colors[light_idx],
        intensity=point_light_intensities[light_idx],
        position=point_light_positions[light_idx],
    )
