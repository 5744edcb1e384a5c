"""Demo scene configuration.

This module provides a factory for the classic Whitted demo scene:
- A checkerboard floor (the plane y = 0)
- A large shiny sphere resting on the floor near the origin
- A small shiny sphere in front of it
- Four dim coloured lights (red, blue, green and a bluish white overhead)
- A camera at (3, 2, 4) looking toward (-1, 0.5, 0)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.demo import create_demo_scene
    >>> scene = create_demo_scene()
    >>> scene.upload()
"""

from dataclasses import dataclass, field

from whitted.scene.manager import Scene

# =============================================================================
# Demo Scene Constants
# =============================================================================

CAMERA_POSITION = (3.0, 2.0, 4.0)
CAMERA_LOOK_AT = (-1.0, 0.5, 0.0)

FLOOR_NORMAL = (0.0, 1.0, 0.0)
FLOOR_OFFSET = 0.0

LARGE_SPHERE_CENTER = (0.0, 1.0, -0.25)
LARGE_SPHERE_RADIUS = 1.0
SMALL_SPHERE_CENTER = (-1.0, 0.5, 1.5)
SMALL_SPHERE_RADIUS = 0.5

DEMO_LIGHTS = (
    ((-2.0, 2.5, 0.0), (0.49, 0.07, 0.07)),
    ((1.5, 2.5, 1.5), (0.07, 0.07, 0.49)),
    ((1.5, 2.5, -1.5), (0.07, 0.49, 0.071)),
    ((0.0, 3.5, 0.0), (0.21, 0.21, 0.35)),
)


@dataclass
class DemoSceneParams:
    """Parameters for customizing the demo scene.

    Attributes:
        camera_position: Camera position. Default (3, 2, 4).
        camera_look_at: Point the camera looks at. Default (-1, 0.5, 0).
        floor_surface: Surface name of the floor. Default "checkerboard".
        sphere_surface: Surface name of both spheres. Default "shiny".
        lights: (position, color) pairs. Default DEMO_LIGHTS.
    """

    camera_position: tuple[float, float, float] = CAMERA_POSITION
    camera_look_at: tuple[float, float, float] = CAMERA_LOOK_AT
    floor_surface: str = "checkerboard"
    sphere_surface: str = "shiny"
    lights: list[tuple[tuple[float, float, float], tuple[float, float, float]]] = field(
        default_factory=lambda: list(DEMO_LIGHTS)
    )


def create_demo_scene(params: DemoSceneParams | None = None) -> Scene:
    """Create the demo scene.

    Things are added in the order floor, large sphere, small sphere, so their
    thing indices are 0, 1 and 2.

    Args:
        params: Optional customization. Defaults to DemoSceneParams().

    Returns:
        The demo Scene (not yet uploaded).
    """
    if params is None:
        params = DemoSceneParams()

    scene = Scene()
    scene.set_camera(params.camera_position, params.camera_look_at)

    scene.add_plane(FLOOR_NORMAL, FLOOR_OFFSET, params.floor_surface)
    scene.add_sphere(LARGE_SPHERE_CENTER, LARGE_SPHERE_RADIUS, params.sphere_surface)
    scene.add_sphere(SMALL_SPHERE_CENTER, SMALL_SPHERE_RADIUS, params.sphere_surface)

    for position, color in params.lights:
        scene.add_light(position, color)

    return scene
