"""Unified scene manager coordinating primitives, materials, lights and view.

This module provides the explicit scene aggregate the renderer consumes. It
coordinates primitive storage with material assignment, registers lights,
and owns the camera, film and background color.

Materials and lights form closed families. Each registered material or light
gets a unified ID; the manager records, in Taichi fields, which type the ID
belongs to and where its parameters live in the type-specific registry. The
shader dispatches on that type tag.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pinray.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> mat_id = scene.add_matte_material(color=(1.0, 0.0, 0.0), kd=0.8)
    >>> scene.add_sphere(center=(0, 0, 0), radius=2.0, material_id=mat_id)
    >>> scene.add_point_light(color=(1.0, 0.0, 0.0), intensity=2.0, position=(10, 10, -10))
"""

import json
import logging
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any

import taichi as ti
import taichi.math as tm

from pinray.camera.perspective import PerspectiveCamera, setup_camera
from pinray.core.film import Film
from pinray.lights.point import (
    add_point_light,
    clear_point_lights,
)
from pinray.materials.matte import (
    add_matte_material,
    clear_matte_materials,
)
from pinray.scene.intersection import (
    add_sphere,
    clear_scene,
    get_sphere_count,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

DEFAULT_BACKGROUND = (0.0, 0.0, 0.0)


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the shader to determine which reflectance
    function to call.
    """

    MATTE = 0


class LightType(IntEnum):
    """Enumeration of supported light types."""

    POINT = 0


# Unified material ID table, shared by every material type
MAX_MATERIALS = 256

# Unified light ID table
MAX_LIGHTS = 64

# Type tag per material ID
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# Slot of the material in its type registry
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())

# Type tag and registry slot per light ID
light_types = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_type_indices = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def _clear_material_tracking() -> None:
    """Forget every unified material ID."""
    num_materials[None] = 0


def _clear_light_tracking() -> None:
    """Forget every unified light ID."""
    num_lights[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material ID.

    Args:
        material_id: The unified material ID.

    Returns:
        The material type as an integer (see MaterialType enum).
        Returns -1 for invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local index for a given material ID.

    Returns:
        The index into the type-specific material arrays, or -1 for invalid
        material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@ti.func
def get_light_count() -> ti.i32:
    """Get the number of registered lights (Taichi side)."""
    return num_lights[None]


@ti.func
def get_light_type(light_id: ti.i32) -> ti.i32:
    """Get the light type for a given light ID, or -1 if invalid."""
    result = -1
    if 0 <= light_id < num_lights[None]:
        result = light_types[light_id]
    return result


@ti.func
def get_light_type_index(light_id: ti.i32) -> ti.i32:
    """Get the type-local index for a given light ID, or -1 if invalid."""
    result = -1
    if 0 <= light_id < num_lights[None]:
        result = light_type_indices[light_id]
    return result


@dataclass
class MaterialInfo:
    """Python-side record of a registered material.

    Attributes:
        material_id: The unified material ID.
        material_type: The type of material.
        type_index: The index within the type-specific material array.
        params: The material parameters as provided during creation.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """Python-side record of a sphere.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class LightInfo:
    """Python-side record of a registered light.

    Attributes:
        light_id: The unified light ID.
        light_type: The type of light.
        type_index: The index within the type-specific light array.
        params: The light parameters as provided during creation.
    """

    light_id: int
    light_type: LightType
    type_index: int
    params: dict[str, Any]


@dataclass
class SceneConfig:
    """Plain-data form of a scene, as read from or written to JSON.

    Attributes:
        materials: List of material configurations.
        spheres: List of sphere configurations.
        lights: List of light configurations.
        camera: Camera configuration, or None.
        film: Film configuration, or None.
        background: Background color.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    camera: dict[str, Any] | None = None
    film: dict[str, Any] | None = None
    background: tuple[float, float, float] = DEFAULT_BACKGROUND


def _vec3_tuple(values: Any, name: str) -> tuple[float, float, float]:
    """Convert a 3-element sequence from a configuration into a float tuple."""
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {values!r}")
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Scene aggregate: primitives, materials, lights, camera, film, background.

    The manager is constructed once, filled with scene content, and handed
    to the renderer. Geometry and emitter data go into the Taichi registries
    immediately; ``prepare()`` uploads the view (camera, film, background)
    right before a render.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        spheres: List of SphereInfo for all spheres in the scene.
        lights: List of LightInfo for all registered lights.
        camera: The scene camera, or None until set.
        film: The film to render onto, or None until set.
        background: Color written for pixels whose ray misses everything.

    Example:
        >>> scene = SceneManager()
        >>> red = scene.add_matte_material(color=(1.0, 0.0, 0.0), kd=0.8)
        >>> scene.add_sphere((0, 0, 0), 2.0, red)
        >>> scene.add_point_light((1.0, 1.0, 1.0), 2.0, (10, 10, -10))
        >>> scene.set_camera(PerspectiveCamera((5, 5, 5), (0, 0, 0), (0, 1, 0), 50.0))
        >>> scene.set_film(Film(800, 800, 0.05))
    """

    def __init__(self) -> None:
        """Create an empty scene, resetting the global registries."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.lights: list[LightInfo] = []
        self.camera: PerspectiveCamera | None = None
        self.film: Film | None = None
        self.background: tuple[float, float, float] = DEFAULT_BACKGROUND
        self._clear_all()

    def _clear_all(self) -> None:
        """Empty the registries and reset the view."""
        clear_scene()
        clear_matte_materials()
        clear_point_lights()
        _clear_material_tracking()
        _clear_light_tracking()
        self.materials.clear()
        self.spheres.clear()
        self.lights.clear()
        self.camera = None
        self.film = None
        self.background = DEFAULT_BACKGROUND

    def clear(self) -> None:
        """Clear the entire scene.

        Resets the Taichi registries as well as the Python-side records.
        """
        self._clear_all()

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_matte_material(
        self,
        color: tuple[float, float, float],
        kd: float,
    ) -> int:
        """Add a matte (Lambertian) material to the scene.

        Args:
            color: The base color as (R, G, B), each component in [0, 1].
            kd: The diffuse reflectance coefficient in [0, 1].

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If a color component or kd is outside [0, 1].
        """
        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        type_index = add_matte_material(color, kd)

        material_types[material_id] = int(MaterialType.MATTE)
        material_type_indices[material_id] = type_index
        num_materials[None] = material_id + 1

        info = MaterialInfo(
            material_id=material_id,
            material_type=MaterialType.MATTE,
            type_index=type_index,
            params={"color": tuple(color), "kd": kd},
        )
        self.materials.append(info)

        return material_id

    def get_material_count(self) -> int:
        """Number of registered materials."""
        return int(num_materials[None])

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: The unified material ID to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id is invalid or radius is not positive.
        """
        if material_id < 0 or material_id >= num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")

        center_vec = vec3(center[0], center[1], center[2])
        sphere_index = add_sphere(center_vec, radius, material_id)

        info = SphereInfo(
            sphere_index=sphere_index,
            center=tuple(center),
            radius=radius,
            material_id=material_id,
        )
        self.spheres.append(info)

        return sphere_index

    def add_matte_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float],
        kd: float,
    ) -> tuple[int, int]:
        """Add a sphere with a new matte material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_matte_material(color, kd)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def get_sphere_count(self) -> int:
        """Number of spheres stored."""
        return get_sphere_count()

    def get_primitive_count(self) -> int:
        """Number of primitives of every shape."""
        return self.get_sphere_count()

    # =========================================================================
    # Light Management
    # =========================================================================

    def add_point_light(
        self,
        color: tuple[float, float, float],
        intensity: float,
        position: tuple[float, float, float],
    ) -> int:
        """Add a point light to the scene.

        Args:
            color: The emitted color as (R, G, B).
            intensity: Scalar intensity applied to the color.
            position: The light position as (x, y, z).

        Returns:
            The unified light ID.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If the color or intensity is negative.
        """
        light_id = num_lights[None]
        if light_id >= MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

        type_index = add_point_light(color, intensity, position)

        light_types[light_id] = int(LightType.POINT)
        light_type_indices[light_id] = type_index
        num_lights[None] = light_id + 1

        info = LightInfo(
            light_id=light_id,
            light_type=LightType.POINT,
            type_index=type_index,
            params={
                "color": tuple(color),
                "intensity": intensity,
                "position": tuple(position),
            },
        )
        self.lights.append(info)

        return light_id

    def get_light_count(self) -> int:
        """Number of registered lights."""
        return int(num_lights[None])

    # =========================================================================
    # View Management
    # =========================================================================

    def set_camera(self, camera: PerspectiveCamera) -> None:
        """Set the scene camera."""
        self.camera = camera

    def set_film(self, film: Film) -> None:
        """Set the film the scene is rendered onto."""
        self.film = film

    def set_background(self, color: tuple[float, float, float]) -> None:
        """Set the background color used for rays that miss every primitive."""
        self.background = _vec3_tuple(color, "background")

    def prepare(self) -> Film:
        """Upload the camera for rendering and return the film.

        Returns:
            The scene film.

        Raises:
            RuntimeError: If the camera or film has not been set.
            ValueError: If the camera configuration is invalid.
        """
        if self.camera is None:
            raise RuntimeError("Scene has no camera. Call set_camera() first.")
        if self.film is None:
            raise RuntimeError("Scene has no film. Call set_film() first.")

        setup_camera(self.camera, self.film)
        logger.info(
            "Scene ready: %d sphere(s), %d material(s), %d light(s), %dx%d film",
            self.get_sphere_count(),
            self.get_material_count(),
            self.get_light_count(),
            self.film.width,
            self.film.height,
        )
        return self.film

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig(background=self.background)

        for mat in self.materials:
            mat_config: dict[str, Any] = {
                "type": mat.material_type.name.lower(),
                "color": list(mat.params["color"]),
                "kd": mat.params["kd"],
            }
            config.materials.append(mat_config)

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        for light in self.lights:
            config.lights.append(
                {
                    "type": light.light_type.name.lower(),
                    "color": list(light.params["color"]),
                    "intensity": light.params["intensity"],
                    "position": list(light.params["position"]),
                }
            )

        if self.camera is not None:
            config.camera = {
                "eye": list(self.camera.eye),
                "target": list(self.camera.target),
                "up": list(self.camera.up),
                "distance": self.camera.distance,
            }

        if self.film is not None:
            config.film = {
                "width": self.film.width,
                "height": self.film.height,
                "pixel_size": self.film.pixel_size,
            }

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Replaces the current scene. Materials are loaded first since spheres
        refer to them by ID.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        for mat_config in config.materials:
            mat_type = mat_config.get("type", "matte").lower()
            if mat_type == "matte":
                color = _vec3_tuple(mat_config.get("color", [0.5, 0.5, 0.5]), "material color")
                kd = float(mat_config.get("kd", 1.0))
                self.add_matte_material(color, kd)
            else:
                raise ValueError(f"Unknown material type: {mat_type}")

        for sphere_config in config.spheres:
            center = _vec3_tuple(sphere_config.get("center", [0, 0, 0]), "sphere center")
            radius = float(sphere_config.get("radius", 1.0))
            material_id = int(sphere_config.get("material_id", 0))
            self.add_sphere(center, radius, material_id)

        for light_config in config.lights:
            light_type = light_config.get("type", "point").lower()
            if light_type == "point":
                color = _vec3_tuple(light_config.get("color", [1, 1, 1]), "light color")
                intensity = float(light_config.get("intensity", 1.0))
                position = _vec3_tuple(light_config.get("position", [0, 0, 0]), "light position")
                self.add_point_light(color, intensity, position)
            else:
                raise ValueError(f"Unknown light type: {light_type}")

        if config.camera is not None:
            self.set_camera(
                PerspectiveCamera(
                    eye=_vec3_tuple(config.camera.get("eye", [0, 0, 1]), "camera eye"),
                    target=_vec3_tuple(config.camera.get("target", [0, 0, 0]), "camera target"),
                    up=_vec3_tuple(config.camera.get("up", [0, 1, 0]), "camera up"),
                    distance=float(config.camera.get("distance", 1.0)),
                )
            )

        if config.film is not None:
            self.set_film(
                Film(
                    width=int(config.film.get("width", 800)),
                    height=int(config.film.get("height", 800)),
                    pixel_size=float(config.film.get("pixel_size", 0.05)),
                )
            )

        self.set_background(config.background)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        data: dict[str, Any] = {
            "background": list(config.background),
            "materials": config.materials,
            "spheres": config.spheres,
            "lights": config.lights,
        }
        if config.camera is not None:
            data["camera"] = config.camera
        if config.film is not None:
            data["film"] = config.film
        return data

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials', 'spheres', 'lights', 'camera',
                'film' and 'background' keys. Missing keys fall back to an
                empty list or no value.
        """
        config = SceneConfig(
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
            lights=data.get("lights", []),
            camera=data.get("camera"),
            film=data.get("film"),
            background=data.get("background", DEFAULT_BACKGROUND),
        )
        self.from_config(config)

    def save(self, path: str | Path) -> None:
        """Write the scene to a JSON file."""
        Path(path).write_text(json.dumps(self.to_dict(), indent=2))


def load_scene(path: str | Path) -> SceneManager:
    """Load a scene from a JSON file.

    Args:
        path: Path to a JSON scene description.

    Returns:
        A populated SceneManager.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON or describes an invalid scene.
    """
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a JSON object")

    scene = SceneManager()
    scene.from_dict(data)
    logger.debug("Loaded scene from %s", path)
    return scene
