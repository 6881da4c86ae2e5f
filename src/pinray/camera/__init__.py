"""Camera module for primary ray generation.

Components:
    perspective: Pinhole camera placed with eye, target, up and focal distance
"""

from .perspective import (
    PerspectiveCamera,
    compute_uvw,
    generate_ray,
    get_camera_info,
    setup_camera,
)

__all__ = [
    "PerspectiveCamera",
    "compute_uvw",
    "generate_ray",
    "get_camera_info",
    "setup_camera",
]
