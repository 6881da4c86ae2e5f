"""Matte (Lambertian) material implementation.

This module implements the ideal diffuse BRDF, which reflects incident light
equally in all directions:

    f_r(wi, wo) = kd * base_color / pi

where kd in [0, 1] is the diffuse reflectance coefficient. The value does not
depend on the incoming or outgoing directions; they are part of the signature
so every material shares one reflectance interface.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pinray.materials.matte import MatteMaterial, eval_matte
    >>> # Use within a Taichi kernel:
    >>> # f = eval_matte(material, light_dir, view_dir, normal)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class MatteMaterial:
    """Matte (ideal diffuse) material properties.

    Attributes:
        base_color: The surface color (RGB).
        kd: Diffuse reflectance coefficient, expected in [0, 1]. The shading
            code does not clamp or validate it.
    """

    base_color: vec3
    kd: ti.f32


@ti.func
def eval_matte(material: MatteMaterial, wi: vec3, wo: vec3, normal: vec3) -> vec3:
    """Evaluate the matte BRDF.

    Returns the BRDF value only; the cosine term is applied by the shader.

    Args:
        material: The matte material.
        wi: Direction toward the light (unused).
        wo: Direction of the incoming view ray (unused).
        normal: Surface normal at the shading point (unused).

    Returns:
        kd * base_color / pi.
    """
    return material.kd * material.base_color / tm.pi


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of matte materials in the scene
MAX_MATTE_MATERIALS = 256

# Storage for matte material properties
matte_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATTE_MATERIALS)
matte_kds = ti.field(dtype=ti.f32, shape=MAX_MATTE_MATERIALS)
num_matte_materials = ti.field(dtype=ti.i32, shape=())


def clear_matte_materials() -> None:
    """Clear all matte materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_matte_materials[None] = 0


def add_matte_material(base_color: tuple[float, float, float], kd: float) -> int:
    """Add a matte material to the material registry.

    Args:
        base_color: The surface color as (R, G, B), each component in [0, 1].
        kd: The diffuse reflectance coefficient in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If a color component or kd is outside [0, 1].
    """
    for i, component in enumerate(base_color):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Base color component {i} = {component} is outside [0, 1]."
            )
    if kd < 0.0 or kd > 1.0:
        raise ValueError(
            f"Diffuse coefficient kd = {kd} is outside [0, 1]. "
            "This would violate energy conservation."
        )

    idx = num_matte_materials[None]
    if idx >= MAX_MATTE_MATERIALS:
        raise RuntimeError(
            f"Maximum number of matte materials ({MAX_MATTE_MATERIALS}) exceeded"
        )

    matte_colors[idx] = vec3(base_color[0], base_color[1], base_color[2])
    matte_kds[idx] = kd
    num_matte_materials[None] = idx + 1
    return idx


def get_matte_material_count() -> int:
    """Get the number of matte materials in the registry."""
    return int(num_matte_materials[None])


@ti.func
def get_matte_material(material_idx: ti.i32) -> MatteMaterial:
    """Get a matte material from the registry by index."""
    return MatteMaterial(base_color=matte_colors[material_idx], kd=matte_kds[material_idx])


@ti.func
def eval_matte_by_id(material_idx: ti.i32, wi: vec3, wo: vec3, normal: vec3) -> vec3:
    """Evaluate the matte BRDF for a registered material.

    Args:
        material_idx: The index of the material in the registry.
        wi: Direction toward the light.
        wo: Direction of the incoming view ray.
        normal: Surface normal at the shading point.

    Returns:
        The BRDF value (RGB).
    """
    return eval_matte(get_matte_material(material_idx), wi, wo, normal)
