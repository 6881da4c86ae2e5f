"""Material module for surface reflectance.

Components:
    matte: Lambertian (ideal diffuse) reflectance
"""

from .matte import (
    MAX_MATTE_MATERIALS,
    MatteMaterial,
    add_matte_material,
    clear_matte_materials,
    eval_matte,
    eval_matte_by_id,
    get_matte_material,
    get_matte_material_count,
)

__all__ = [
    "MAX_MATTE_MATERIALS",
    "MatteMaterial",
    "add_matte_material",
    "clear_matte_materials",
    "eval_matte",
    "eval_matte_by_id",
    "get_matte_material",
    "get_matte_material_count",
]
