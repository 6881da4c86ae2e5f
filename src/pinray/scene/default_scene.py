"""Built-in demo scene.

A single red matte sphere at the origin, lit by one red point light and seen
from above and to the side:

- Sphere: center (0, 0, 0), radius 2, matte RED with kd = 0.8
- Light: point light at (10, 10, -10), color RED, intensity 2
- Camera: eye (5, 5, 5) looking at the origin, up (0, 1, 0), distance 50
- Film: 800 x 800 pixels of size 0.05
- Background: GREY

The sphere covers the middle of the image; the corners show background.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pinray.scene.default_scene import create_default_scene
    >>> from pinray.core.renderer import render_scene
    >>>
    >>> image = render_scene(create_default_scene())
"""

from dataclasses import dataclass

from pinray.camera.perspective import PerspectiveCamera
from pinray.core.film import Film
from pinray.scene.manager import SceneManager

# =============================================================================
# Named Colors
# =============================================================================

BLACK = (0.0, 0.0, 0.0)
WHITE = (1.0, 1.0, 1.0)
RED = (1.0, 0.0, 0.0)
GREEN = (0.0, 1.0, 0.0)
BLUE = (0.0, 0.0, 1.0)
GREY = (0.5, 0.5, 0.5)


# =============================================================================
# Default Scene Parameters
# =============================================================================


@dataclass
class DefaultSceneParams:
    """Parameters of the demo scene.

    The defaults reproduce the classic single-sphere setup. Override them to
    tweak the image size or lighting without building a scene by hand.

    Example:
        >>> params = DefaultSceneParams(width=200, height=200, pixel_size=0.2)
        >>> scene = create_default_scene(params)
    """

    width: int = 800
    height: int = 800
    pixel_size: float = 0.05
    background: tuple[float, float, float] = GREY
    sphere_color: tuple[float, float, float] = RED
    sphere_kd: float = 0.8
    light_color: tuple[float, float, float] = RED
    light_intensity: float = 2.0
    light_position: tuple[float, float, float] = (10.0, 10.0, -10.0)


DEFAULT_EYE = (5.0, 5.0, 5.0)
DEFAULT_TARGET = (0.0, 0.0, 0.0)
DEFAULT_UP = (0.0, 1.0, 0.0)
DEFAULT_DISTANCE = 50.0

SPHERE_CENTER = (0.0, 0.0, 0.0)
SPHERE_RADIUS = 2.0


def create_default_camera() -> PerspectiveCamera:
    """Camera at (5, 5, 5) looking at the origin."""
    return PerspectiveCamera(
        eye=DEFAULT_EYE,
        target=DEFAULT_TARGET,
        up=DEFAULT_UP,
        distance=DEFAULT_DISTANCE,
    )


def create_default_scene(params: DefaultSceneParams | None = None) -> SceneManager:
    """Create the demo scene.

    Args:
        params: Optional overrides. Defaults to DefaultSceneParams().

    Returns:
        A SceneManager with sphere, light, camera, film and background set.
    """
    if params is None:
        params = DefaultSceneParams()

    scene = SceneManager()
    scene.set_background(params.background)
    scene.set_film(Film(params.width, params.height, params.pixel_size))
    scene.set_camera(create_default_camera())

    scene.add_matte_sphere(
        center=SPHERE_CENTER,
        radius=SPHERE_RADIUS,
        color=params.sphere_color,
        kd=params.sphere_kd,
    )
    scene.add_point_light(
        color=params.light_color,
        intensity=params.light_intensity,
        position=params.light_position,
    )

    return scene
