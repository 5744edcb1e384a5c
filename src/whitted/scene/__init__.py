"""Scene module for scene description, storage and ray queries.

Components:
    intersection: Thing/light arena in Taichi fields and scene-level queries
    manager: Scene builder, serialization and upload
    demo: The classic demo scene

Scene data is organized for GPU access:
    - One Structure-of-Arrays arena for all things, in scan order
    - Intersection results refer to things by arena index
    - Lights stored as position/colour arrays
"""

from .demo import DemoSceneParams, create_demo_scene
from .intersection import (
    MAX_LIGHTS,
    MAX_THINGS,
    SceneHitRecord,
    ThingKind,
    add_light,
    add_plane,
    add_sphere,
    clear_scene,
    closest_intersection,
    get_light_count,
    get_thing_count,
    intersect_thing,
    query_closest_intersection,
    query_test_ray,
    thing_normal,
    thing_surface,
)
from .manager import LightInfo, PlaneInfo, Scene, SceneConfig, SphereInfo

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "ThingKind",
    "add_sphere",
    "add_plane",
    "add_light",
    "clear_scene",
    "get_thing_count",
    "get_light_count",
    "intersect_thing",
    "thing_normal",
    "thing_surface",
    "closest_intersection",
    "query_closest_intersection",
    "query_test_ray",
    "MAX_THINGS",
    "MAX_LIGHTS",
    # Manager module
    "Scene",
    "SceneConfig",
    "SphereInfo",
    "PlaneInfo",
    "LightInfo",
    # Demo module
    "create_demo_scene",
    "DemoSceneParams",
]
