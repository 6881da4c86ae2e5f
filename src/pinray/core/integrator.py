"""Direct-illumination integrator with hard shadows.

This module implements the render pass. For every pixel, in row-major order:

1. The camera generates the primary ray for the sample (row, col): the
   row selects the offset along u and the column the offset along v.
2. The nearest hit is found with a linear scan over the scene.
3. A miss writes the background color.
4. A hit is shaded by summing, over every light, the material reflectance
   times the light radiance times cos(theta), skipping lights whose shadow
   ray is blocked or that lie behind the surface.

There are no secondary bounces; rays keep depth 0.

The render pass runs as one Taichi kernel whose outer loop is serialized, so
pixels are evaluated one at a time in a deterministic order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pinray.core.integrator import render_image, setup_render_target
    >>> from pinray.scene.default_scene import create_default_scene
    >>>
    >>> scene = create_default_scene()
    >>> film = scene.prepare()
    >>> setup_render_target(film)
    >>> render_image()
"""

import logging

import numpy as np
import numpy.typing as npt
import taichi as ti

from pinray.camera.perspective import generate_ray
from pinray.core.film import Film
from pinray.core.intersection import IntersectionRecord
from pinray.core.ray import Ray, dot, make_ray, vec3
from pinray.lights.point import get_point_light, point_light_direction, point_light_radiance
from pinray.materials.matte import eval_matte_by_id
from pinray.scene.intersection import intersect_scene, intersect_scene_shadow
from pinray.scene.manager import (
    LightType,
    MaterialType,
    get_light_count,
    get_light_type,
    get_light_type_index,
    get_material_type,
    get_material_type_index,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())
_pixel_size = ti.field(dtype=ti.f32, shape=())

# Color buffer indexed [row, col] (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

# Color written for rays that hit nothing
_background = ti.Vector.field(3, dtype=ti.f32, shape=())

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(film: Film) -> None:
    """Initialize the render target for a film.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_HEIGHT x MAX_IMAGE_WIDTH to avoid Taichi
    kernel recompilation.

    Args:
        film: The film describing the image to render.

    Raises:
        ValueError: If the film exceeds the maximum supported size.
    """
    if film.width > MAX_IMAGE_WIDTH or film.height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({film.width}x{film.height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = film.width
    _image_height[None] = film.height
    _pixel_size[None] = film.pixel_size
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Mark the render target as not set up."""
    _render_target_initialized[None] = 0


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def get_film() -> Film:
    """Get the film the render target was set up with.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    return Film(width=width, height=height, pixel_size=float(_pixel_size[None]))


def set_background(color: tuple[float, float, float]) -> None:
    """Set the color written for pixels whose primary ray misses the scene."""
    _background[None] = [float(c) for c in color]


def get_background() -> tuple[float, float, float]:
    """Get the current background color."""
    bg = _background[None]
    return (float(bg[0]), float(bg[1]), float(bg[2]))


def _check_pixel(row: int, col: int) -> None:
    width, height = get_image_dimensions()
    if not (0 <= row < height and 0 <= col < width):
        raise IndexError(f"Pixel ({row}, {col}) outside {width}x{height} render target")


def set_pixel(row: int, col: int, color: tuple[float, float, float]) -> None:
    """Write a color into the render target.

    Args:
        row: Pixel row.
        col: Pixel column.
        color: RGB color. Values are stored unclamped.

    Raises:
        RuntimeError: If the render target has not been set up.
        IndexError: If the pixel lies outside the film.
    """
    _check_render_target_initialized()
    _check_pixel(row, col)
    _color_buffer[row, col] = [float(c) for c in color]


def get_pixel(row: int, col: int) -> tuple[float, float, float]:
    """Read a color from the render target.

    Raises:
        RuntimeError: If the render target has not been set up.
        IndexError: If the pixel lies outside the film.
    """
    _check_render_target_initialized()
    _check_pixel(row, col)
    color = _color_buffer[row, col]
    return (float(color[0]), float(color[1]), float(color[2]))


# =============================================================================
# Material and Light Dispatch
# =============================================================================


@ti.func
def _eval_material(material_id: ti.i32, wi: vec3, wo: vec3, normal: vec3) -> vec3:
    """Evaluate the reflectance of a material by its unified ID.

    Unknown material types reflect nothing.
    """
    f = vec3(0.0, 0.0, 0.0)
    mat_type = get_material_type(material_id)
    type_idx = get_material_type_index(material_id)

    if mat_type == int(MaterialType.MATTE):
        f = eval_matte_by_id(type_idx, wi, wo, normal)

    return f


@ti.func
def _light_direction(light_id: ti.i32, hit_point: vec3) -> vec3:
    """Unit direction from a hit point toward a light."""
    wi = vec3(0.0, 0.0, 0.0)
    light_type = get_light_type(light_id)
    type_idx = get_light_type_index(light_id)

    if light_type == int(LightType.POINT):
        wi = point_light_direction(get_point_light(type_idx), hit_point)

    return wi


@ti.func
def _light_radiance(light_id: ti.i32, hit_point: vec3) -> vec3:
    """Radiance a light delivers to a hit point."""
    radiance = vec3(0.0, 0.0, 0.0)
    light_type = get_light_type(light_id)
    type_idx = get_light_type_index(light_id)

    if light_type == int(LightType.POINT):
        radiance = point_light_radiance(get_point_light(type_idx), hit_point)

    return radiance


# =============================================================================
# Shading
# =============================================================================


@ti.func
def shade(ray: Ray, record: IntersectionRecord) -> vec3:
    """Direct lighting at a hit point.

    Each light is tested on its own: a shadow ray leaves the hit point toward
    the light, and if nothing blocks it and the light is in front of the
    surface, f * radiance * cos(theta) is added. The material sees the
    shadow direction and the direction of the incoming ray, unflipped.

    Args:
        ray: The ray that produced the hit.
        record: The nearest-hit record (hit == 1).

    Returns:
        The accumulated color.
    """
    color = vec3(0.0, 0.0, 0.0)
    incoming = ray.direction

    for light_id in range(get_light_count()):
        wi = _light_direction(light_id, record.point)
        shadow_ray = make_ray(record.point, wi)

        if intersect_scene_shadow(shadow_ray) == 0:
            cos_theta = dot(record.normal, wi)
            if cos_theta > 0.0:
                f = _eval_material(record.material_id, wi, incoming, record.normal)
                color += f * _light_radiance(light_id, record.point) * cos_theta

    return color


@ti.func
def trace_pixel(row: ti.i32, col: ti.i32) -> vec3:
    """Compute the color of one pixel.

    Args:
        row: Pixel row, used as the sample x coordinate (along u).
        col: Pixel column, used as the sample y coordinate (along v).

    Returns:
        The pixel color, or the background color on a miss.
    """
    ray = generate_ray(ti.cast(row, ti.f32), ti.cast(col, ti.f32))
    record = intersect_scene(ray)

    color = _background[None]
    if record.hit == 1:
        color = shade(ray, record)

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(row_start: ti.i32, row_end: ti.i32, width: ti.i32):
    """Render rows [row_start, row_end) into the color buffer.

    The outer loop is serialized so pixels are written in row-major order.
    """
    ti.loop_config(serialize=True)
    for row in range(row_start, row_end):
        for col in range(width):
            _color_buffer[row, col] = trace_pixel(row, col)


@ti.kernel
def _render_single_pixel(row: ti.i32, col: ti.i32) -> vec3:
    """Trace a single pixel without writing it. Used for testing."""
    return trace_pixel(row, col)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_pixel(row: int, col: int) -> tuple[float, float, float]:
    """Trace a single pixel and return its color.

    This is a Python-callable function for testing. It does not touch the
    color buffer.

    Raises:
        RuntimeError: If render target has not been set up.
        IndexError: If the pixel lies outside the film.
    """
    _check_render_target_initialized()
    _check_pixel(row, col)

    color = _render_single_pixel(row, col)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_rows(row_start: int, row_end: int) -> None:
    """Render a band of rows into the color buffer.

    Args:
        row_start: First row to render (inclusive).
        row_end: Row to stop at (exclusive). Clamped to the film height.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    row_start = max(0, row_start)
    row_end = min(height, row_end)
    if row_start >= row_end:
        return

    _render_rows(row_start, row_end, width)


def render_image() -> None:
    """Render the whole image into the color buffer.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    logger.debug("Rendering %dx%d image", width, height)
    _render_rows(0, height, width)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Values are returned as rendered, without clamping. The array shape is
    (height, width, 3), indexed [row, col].

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()
    image = full_image[:height, :width, :]

    return image.astype(np.float32)
