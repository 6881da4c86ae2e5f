"""Perspective (pinhole) camera for primary ray generation.

The camera is placed with look-at parameters (eye, target, up) and a focal
distance d from the eye to the film plane. It builds an orthonormal basis once
at setup:

- w: points from target toward eye (the camera looks down -w)
- u: normalize(cross(up, w)), the first film axis
- v: normalize(cross(u, w)), the second film axis

A pixel sample (x, y) is mapped to a film-plane offset centered on the image:

    px = pixel_size * (x - 0.5 * (width - 1))
    py = pixel_size * (y - 0.5 * (height - 1))

and the primary ray leaves the eye along normalize(px*u + py*v - d*w).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pinray.camera.perspective import PerspectiveCamera, setup_camera
    >>> from pinray.core.film import Film
    >>>
    >>> camera = PerspectiveCamera(
    ...     eye=(5.0, 5.0, 5.0),
    ...     target=(0.0, 0.0, 0.0),
    ...     up=(0.0, 1.0, 0.0),
    ...     distance=50.0,
    ... )
    >>> setup_camera(camera, Film(800, 800, 0.05))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = generate_ray(400.0, 400.0)  # Ray through the image center
"""

import logging
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from pinray.core.film import Film
from pinray.core.ray import Ray, make_ray, normalize, vec3

logger = logging.getLogger(__name__)

# Below this length a basis vector is treated as degenerate
_DEGENERATE_LENGTH = 1e-8

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PerspectiveCamera:
    """Configuration for a perspective (pinhole) camera.

    Attributes:
        eye: Camera position in world space (x, y, z).
        target: Point the camera is looking at in world space (x, y, z).
        up: Up direction for camera orientation. Must not be collinear with
            the eye-target axis.
        distance: Focal distance from the eye to the film plane (positive).
    """

    eye: tuple[float, float, float]
    target: tuple[float, float, float]
    up: tuple[float, float, float]
    distance: float


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_eye = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Down
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward (opposite view)

_camera_distance = ti.field(dtype=ti.f32, shape=())

# Film parameters captured at setup
_film_width = ti.field(dtype=ti.i32, shape=())
_film_height = ti.field(dtype=ti.i32, shape=())
_film_pixel_size = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def _normalized(vector: npt.NDArray[np.float64], name: str) -> npt.NDArray[np.float64]:
    norm = float(np.linalg.norm(vector))
    if norm < _DEGENERATE_LENGTH:
        raise ValueError(f"Degenerate camera basis: {name} has zero length")
    return vector / norm


def compute_uvw(
    eye: tuple[float, float, float],
    target: tuple[float, float, float],
    up: tuple[float, float, float],
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Compute the camera's orthonormal basis.

    Args:
        eye: Camera position.
        target: Look-at point.
        up: Up direction.

    Returns:
        Tuple (u, v, w) of unit NumPy vectors.

    Raises:
        ValueError: If eye equals target, or up is zero or collinear with the
            eye-target axis.
    """
    eye_arr = np.asarray(eye, dtype=np.float64)
    target_arr = np.asarray(target, dtype=np.float64)
    up_arr = np.asarray(up, dtype=np.float64)

    try:
        w = _normalized(eye_arr - target_arr, "eye - target")
        u = _normalized(np.cross(up_arr, w), "cross(up, w)")
    except ValueError as err:
        raise ValueError(
            f"Invalid camera configuration (eye={eye}, target={target}, up={up}): "
            "up must be non-zero and not collinear with the view axis"
        ) from err
    v = _normalized(np.cross(u, w), "cross(u, w)")

    return u, v, w


def setup_camera(camera: PerspectiveCamera, film: Film) -> None:
    """Initialize camera state from configuration.

    Computes the orthonormal basis and stores it, together with the film
    geometry needed to map pixel samples onto the film plane. Must be called
    before rendering.

    Args:
        camera: Camera configuration.
        film: The film the camera exposes.

    Raises:
        ValueError: If the camera configuration is invalid.
    """
    if camera.distance <= 0.0:
        raise ValueError(f"Camera focal distance must be positive, got {camera.distance}")

    u, v, w = compute_uvw(camera.eye, camera.target, camera.up)

    _camera_eye[None] = [float(c) for c in camera.eye]
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _camera_distance[None] = camera.distance

    _film_width[None] = film.width
    _film_height[None] = film.height
    _film_pixel_size[None] = film.pixel_size

    logger.debug(
        "Camera set up: eye=%s u=%s v=%s w=%s d=%s film=%dx%d",
        camera.eye,
        u.tolist(),
        v.tolist(),
        w.tolist(),
        camera.distance,
        film.width,
        film.height,
    )


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def generate_ray(sample_x: ti.f32, sample_y: ti.f32) -> Ray:
    """Generate the primary ray through a film-space sample.

    The camera holds no per-call state, so the same sample always yields the
    same ray.

    Args:
        sample_x: Sample position along u (the render pass passes the row).
        sample_y: Sample position along v (the render pass passes the column).

    Returns:
        A Ray from the eye through the sample, interval [0, +inf).
    """
    pixel_size = _film_pixel_size[None]
    width = ti.cast(_film_width[None], ti.f32)
    height = ti.cast(_film_height[None], ti.f32)

    px = pixel_size * (sample_x - 0.5 * (width - 1.0))
    py = pixel_size * (sample_y - 0.5 * (height - 1.0))

    film_point = px * _camera_u[None] + py * _camera_v[None]
    direction = normalize(film_point - _camera_distance[None] * _camera_w[None])

    return make_ray(_camera_eye[None], direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float] | float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with eye, u, v, w, distance and pixel_size.
    """
    eye_vec = _camera_eye[None]
    u_vec = _camera_u[None]
    v_vec = _camera_v[None]
    w_vec = _camera_w[None]

    return {
        "eye": (float(eye_vec[0]), float(eye_vec[1]), float(eye_vec[2])),
        "u": (float(u_vec[0]), float(u_vec[1]), float(u_vec[2])),
        "v": (float(v_vec[0]), float(v_vec[1]), float(v_vec[2])),
        "w": (float(w_vec[0]), float(w_vec[1]), float(w_vec[2])),
        "distance": float(_camera_distance[None]),
        "pixel_size": float(_film_pixel_size[None]),
    }
