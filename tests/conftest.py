"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. fast_math is off so
    the infinite-scale fallback of normalize() keeps IEEE semantics.
    """
    ti.init(arch=ti.cpu, random_seed=42, fast_math=False)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene storage, camera and render target around each test."""
    # Import here to avoid circular imports and ensure Taichi is initialized
    from whitted.camera.camera import clear_camera
    from whitted.core.tracer import clear_render_target
    from whitted.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_camera()
        clear_render_target()

    _clear_all()

    yield

    _clear_all()
