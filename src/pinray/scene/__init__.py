"""Scene module for primitive storage, traversal and configuration.

Components:
    intersection: Sphere storage plus nearest-hit and shadow queries
    manager: SceneManager aggregate with material and light registration
    default_scene: The built-in single-sphere demo scene

Scene data lives in Taichi fields with a Structure-of-Arrays layout; the
SceneManager owns their contents.
"""

from .default_scene import (
    BLACK,
    BLUE,
    GREEN,
    GREY,
    RED,
    WHITE,
    DefaultSceneParams,
    create_default_camera,
    create_default_scene,
)
from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
    intersect_scene_shadow,
)
from .manager import (
    MAX_LIGHTS,
    MAX_MATERIALS,
    LightInfo,
    LightType,
    MaterialInfo,
    MaterialType,
    SceneConfig,
    SceneManager,
    SphereInfo,
    load_scene,
)

__all__ = [
    # Intersection
    "MAX_SPHERES",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "intersect_scene_shadow",
    # Manager
    "MAX_LIGHTS",
    "MAX_MATERIALS",
    "LightInfo",
    "LightType",
    "MaterialInfo",
    "MaterialType",
    "SceneConfig",
    "SceneManager",
    "SphereInfo",
    "load_scene",
    # Default scene
    "BLACK",
    "BLUE",
    "GREEN",
    "GREY",
    "RED",
    "WHITE",
    "DefaultSceneParams",
    "create_default_camera",
    "create_default_scene",
]
