"""Light module.

Components:
    point: Point light with constant radiance
"""

from .point import (
    MAX_POINT_LIGHTS,
    PointLight,
    add_point_light,
    clear_point_lights,
    get_point_light,
    get_point_light_count,
    point_light_direction,
    point_light_radiance,
)

__all__ = [
    "MAX_POINT_LIGHTS",
    "PointLight",
    "add_point_light",
    "clear_point_lights",
    "get_point_light",
    "get_point_light_count",
    "point_light_direction",
    "point_light_radiance",
]
