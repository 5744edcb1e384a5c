"""Scene description and upload.

This module provides the Scene class, the construction interface for
renderable scenes. A scene holds an ordered list of things (spheres and
planes), a list of point lights and a camera, each described on the Python
side. Surfaces are named ("shiny", "checkerboard") and resolved through a
name mapping that callers may replace.

upload() copies the scene into the Taichi fields read by the tracer,
replacing whatever was there. The fields hold one scene at a time and must
not be changed while a render is running.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.manager import Scene
    >>> scene = Scene()
    >>> scene.set_camera(position=(3.0, 2.0, 4.0), look_at=(-1.0, 0.5, 0.0))
    >>> scene.add_plane(normal=(0.0, 1.0, 0.0), offset=0.0, surface="checkerboard")
    >>> scene.add_sphere(center=(0.0, 1.0, -0.25), radius=1.0, surface="shiny")
    >>> scene.add_light(position=(0.0, 3.5, 0.0), color=(0.21, 0.21, 0.35))
    >>> scene.upload()
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from whitted.camera.camera import Camera, clear_camera, setup_camera
from whitted.scene.intersection import (
    MAX_LIGHTS,
    MAX_THINGS,
    add_light,
    add_plane,
    add_sphere,
    clear_scene,
)
from whitted.surfaces.surface import SURFACES, SurfaceType, resolve_surface

logger = logging.getLogger(__name__)

Vec3Tuple = tuple[float, float, float]


def _vec3(values: Sequence[float], name: str) -> Vec3Tuple:
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


@dataclass
class SphereInfo:
    """A sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere.
        surface: The surface of the sphere.
    """

    center: Vec3Tuple
    radius: float
    surface: SurfaceType


@dataclass
class PlaneInfo:
    """A plane in the scene.

    Attributes:
        normal: Unit normal of the plane's front side.
        offset: Signed offset; dot(normal, p) + offset == 0 on the plane.
        surface: The surface of the plane.
    """

    normal: Vec3Tuple
    offset: float
    surface: SurfaceType


@dataclass
class LightInfo:
    """A point light.

    Attributes:
        position: Light position in world space.
        color: Light colour (RGB, unclamped).
    """

    position: Vec3Tuple
    color: Vec3Tuple


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        camera: {"position": [x, y, z], "look_at": [x, y, z]}, or empty.
        things: Thing configurations in scan order, each either
            {"type": "sphere", "center", "radius", "surface"} or
            {"type": "plane", "normal", "offset", "surface"}.
        lights: Light configurations {"position", "color"}.
    """

    camera: dict[str, Any] = field(default_factory=dict)
    things: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


class Scene:
    """Things, lights and camera of a renderable scene.

    Attributes:
        things: SphereInfo/PlaneInfo entries in scan order. The index of an
            entry is the thing index reported by intersection queries.
        lights: LightInfo entries.
        camera: The camera, or None until set_camera() is called.

    Example:
        >>> scene = Scene(surfaces={"mirror": SurfaceType.SHINY, **SURFACES})
        >>> scene.add_sphere((0, 0, 0), 1.0, surface="mirror")
        0
    """

    def __init__(self, surfaces: Mapping[str, SurfaceType] | None = None) -> None:
        """Initialize an empty scene.

        Args:
            surfaces: Name mapping used to resolve surface names.
                Defaults to the built-in SURFACES.
        """
        self.surfaces: Mapping[str, SurfaceType] = dict(SURFACES if surfaces is None else surfaces)
        self.things: list[SphereInfo | PlaneInfo] = []
        self.lights: list[LightInfo] = []
        self.camera: Camera | None = None
        self._camera_look_at: tuple[Vec3Tuple, Vec3Tuple] | None = None

    def clear(self) -> None:
        """Remove all things, lights and the camera."""
        self.things.clear()
        self.lights.clear()
        self.camera = None
        self._camera_look_at = None

    # =========================================================================
    # Construction
    # =========================================================================

    def set_camera(self, position: Sequence[float], look_at: Sequence[float]) -> Camera:
        """Place the camera at ``position`` looking toward ``look_at``.

        Returns:
            The constructed Camera.
        """
        pos = _vec3(position, "Camera position")
        target = _vec3(look_at, "Camera look_at")
        self.camera = Camera.look_at(pos, target)
        self._camera_look_at = (pos, target)
        return self.camera

    def _check_thing_capacity(self) -> None:
        if len(self.things) >= MAX_THINGS:
            raise RuntimeError(f"Maximum number of things ({MAX_THINGS}) exceeded")

    def add_sphere(
        self,
        center: Sequence[float],
        radius: float,
        surface: str | int | SurfaceType = "shiny",
    ) -> int:
        """Add a sphere.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            surface: Surface name or SurfaceType.

        Returns:
            The thing index of the sphere.

        Raises:
            RuntimeError: If the maximum number of things is exceeded.
            ValueError: If the radius is not positive or the surface is unknown.
        """
        self._check_thing_capacity()
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")

        info = SphereInfo(
            center=_vec3(center, "Sphere center"),
            radius=float(radius),
            surface=resolve_surface(surface, self.surfaces),
        )
        self.things.append(info)
        return len(self.things) - 1

    def add_plane(
        self,
        normal: Sequence[float],
        offset: float,
        surface: str | int | SurfaceType = "checkerboard",
    ) -> int:
        """Add a plane.

        The normal is normalized before it is stored.

        Args:
            normal: Normal of the plane's front side as (x, y, z).
            offset: Signed offset; dot(normal, p) + offset == 0 on the plane.
            surface: Surface name or SurfaceType.

        Returns:
            The thing index of the plane.

        Raises:
            RuntimeError: If the maximum number of things is exceeded.
            ValueError: If the normal is zero or the surface is unknown.
        """
        self._check_thing_capacity()
        nx, ny, nz = _vec3(normal, "Plane normal")
        mag = math.sqrt(nx * nx + ny * ny + nz * nz)
        if mag == 0.0:
            raise ValueError("Plane normal must be non-zero")

        info = PlaneInfo(
            normal=(nx / mag, ny / mag, nz / mag),
            offset=float(offset),
            surface=resolve_surface(surface, self.surfaces),
        )
        self.things.append(info)
        return len(self.things) - 1

    def add_light(self, position: Sequence[float], color: Sequence[float]) -> int:
        """Add a point light.

        Returns:
            The index of the light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
        """
        if len(self.lights) >= MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
        info = LightInfo(
            position=_vec3(position, "Light position"),
            color=_vec3(color, "Light color"),
        )
        self.lights.append(info)
        return len(self.lights) - 1

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_thing_count(self) -> int:
        """Get the number of things in the scene."""
        return len(self.things)

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return len(self.lights)

    def get_thing(self, index: int) -> SphereInfo | PlaneInfo:
        """Get a thing by the index reported from intersection queries."""
        return self.things[index]

    # =========================================================================
    # Upload
    # =========================================================================

    def upload(self) -> None:
        """Copy the scene into the tracer's Taichi fields.

        Raises:
            RuntimeError: If no camera has been set.
        """
        if self.camera is None:
            raise RuntimeError("Scene has no camera. Call set_camera() first.")

        clear_scene()
        clear_camera()

        for thing in self.things:
            if isinstance(thing, SphereInfo):
                add_sphere(thing.center, thing.radius, int(thing.surface))
            else:
                add_plane(thing.normal, thing.offset, int(thing.surface))

        for light in self.lights:
            add_light(light.position, light.color)

        setup_camera(self.camera)

        logger.debug(
            "Uploaded scene with %d things and %d lights",
            len(self.things),
            len(self.lights),
        )

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def _surface_key(self, surface: SurfaceType) -> str:
        for name, value in self.surfaces.items():
            if value == surface:
                return name
        return surface.name.lower()

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()

        if self._camera_look_at is not None:
            position, look_at = self._camera_look_at
            config.camera = {"position": list(position), "look_at": list(look_at)}

        for thing in self.things:
            if isinstance(thing, SphereInfo):
                config.things.append(
                    {
                        "type": "sphere",
                        "center": list(thing.center),
                        "radius": thing.radius,
                        "surface": self._surface_key(thing.surface),
                    }
                )
            else:
                config.things.append(
                    {
                        "type": "plane",
                        "normal": list(thing.normal),
                        "offset": thing.offset,
                        "surface": self._surface_key(thing.surface),
                    }
                )

        for light in self.lights:
            config.lights.append({"position": list(light.position), "color": list(light.color)})

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene first.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        if config.camera:
            try:
                self.set_camera(config.camera["position"], config.camera["look_at"])
            except KeyError as err:
                raise ValueError(f"Camera configuration is missing {err}") from None

        for thing_config in config.things:
            thing_type = str(thing_config.get("type", "")).lower()
            if thing_type == "sphere":
                self.add_sphere(
                    thing_config.get("center", [0.0, 0.0, 0.0]),
                    thing_config.get("radius", 1.0),
                    thing_config.get("surface", "shiny"),
                )
            elif thing_type == "plane":
                self.add_plane(
                    thing_config.get("normal", [0.0, 1.0, 0.0]),
                    thing_config.get("offset", 0.0),
                    thing_config.get("surface", "checkerboard"),
                )
            else:
                raise ValueError(f"Unknown thing type: {thing_type!r}")

        for light_config in config.lights:
            try:
                self.add_light(light_config["position"], light_config["color"])
            except KeyError as err:
                raise ValueError(f"Light configuration is missing {err}") from None

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "camera": config.camera,
            "things": config.things,
            "lights": config.lights,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'camera', 'things', 'lights' keys.
        """
        config = SceneConfig(
            camera=data.get("camera", {}),
            things=data.get("things", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    @classmethod
    def from_description(
        cls,
        data: dict[str, Any],
        surfaces: Mapping[str, SurfaceType] | None = None,
    ) -> Scene:
        """Build a new scene from a dictionary description."""
        scene = cls(surfaces)
        scene.from_dict(data)
        return scene

    def __repr__(self) -> str:
        """Return a string representation of the scene."""
        return f"Scene(things={len(self.things)}, lights={len(self.lights)})"
