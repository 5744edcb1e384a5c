"""Tests for the band-by-band renderer.

Tests cover:
- RenderConfig validation
- Progress callbacks and progressive iteration
- Cancellation between bands
- Row partition independence
- Pixel iteration and the render() convenience function
"""

import numpy as np
import pytest


@pytest.fixture
def demo_scene():
    """Uploaded demo scene."""
    from whitted.scene.demo import create_demo_scene

    scene = create_demo_scene()
    scene.upload()
    return scene


class TestRenderConfig:
    """Tests for RenderConfig validation."""

    def test_defaults(self):
        from whitted.core.renderer import RenderConfig

        config = RenderConfig()
        assert (config.width, config.height) == (512, 512)
        assert config.max_depth == 5
        assert config.band_size == 16

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"width": 0}, "positive"),
            ({"height": -3}, "positive"),
            ({"width": 4096}, "exceed maximum"),
            ({"max_depth": -1}, "max_depth"),
            ({"band_size": 0}, "band_size"),
        ],
    )
    def test_invalid(self, kwargs, match):
        from whitted.core.renderer import RenderConfig

        with pytest.raises(ValueError, match=match):
            RenderConfig(**kwargs)


class TestRenderer:
    """Tests for Renderer."""

    def test_properties_and_repr(self):
        from whitted.core.renderer import Renderer

        renderer = Renderer(32, 24, max_depth=3)
        assert renderer.width == 32
        assert renderer.height == 24
        assert renderer.max_depth == 3
        assert renderer.rows_done == 0
        assert repr(renderer) == "Renderer(width=32, height=24, max_depth=3)"

    def test_from_config(self):
        from whitted.core.renderer import RenderConfig, Renderer

        renderer = Renderer.from_config(RenderConfig(width=20, height=10, band_size=4))
        assert (renderer.width, renderer.height) == (20, 10)

    def test_render_produces_finite_image(self, demo_scene):
        from whitted.core.renderer import Renderer

        renderer = Renderer(32, 24)
        assert renderer.render() is True
        image = renderer.get_image_numpy()
        assert image.shape == (24, 32, 3)
        assert image.dtype == np.float32
        assert np.isfinite(image).all()
        assert (image >= 0.0).all()
        # Something is lit
        assert image.max() > 0.0

    def test_progress_callback(self, demo_scene):
        from whitted.core.renderer import Renderer

        calls = []
        renderer = Renderer(16, 20)
        renderer.render(band_size=8, callback=lambda done, total: calls.append((done, total)))
        assert calls == [(8, 20), (16, 20), (20, 20)]
        assert renderer.rows_done == 20

    def test_render_progressive(self, demo_scene):
        from whitted.core.renderer import Renderer

        renderer = Renderer(8, 10)
        steps = list(renderer.render_progressive(band_size=4))
        assert steps == [(4, 10), (8, 10), (10, 10)]

    def test_cancel_before_start(self, demo_scene):
        from whitted.core.renderer import Renderer

        renderer = Renderer(8, 8)
        assert renderer.render(should_cancel=lambda: True) is False
        assert renderer.rows_done == 0
        assert not renderer.get_image_numpy().any()

    def test_cancel_between_bands(self, demo_scene):
        from whitted.core.renderer import Renderer

        checks = []

        def should_cancel():
            checks.append(True)
            return len(checks) > 2

        renderer = Renderer(8, 16)
        assert renderer.render(band_size=4, should_cancel=should_cancel) is False
        assert renderer.rows_done == 8
        image = renderer.get_image_numpy()
        # Unrendered rows stay black
        assert not image[8:].any()

    def test_band_partition_does_not_change_image(self, demo_scene):
        from whitted.core.renderer import Renderer

        renderer = Renderer(24, 18)
        renderer.render(band_size=18)
        whole = renderer.get_image_numpy().copy()

        renderer.reset()
        renderer.render(band_size=5)
        banded = renderer.get_image_numpy()

        np.testing.assert_allclose(banded, whole, rtol=1e-6, atol=1e-7)

    def test_for_each_pixel(self, demo_scene):
        from whitted.core.renderer import Renderer

        renderer = Renderer(4, 3)
        renderer.render()
        image = renderer.get_image_numpy()

        visited = []
        renderer.for_each_pixel(lambda x, y, color: visited.append((x, y, color)))

        assert [(x, y) for x, y, _ in visited] == [(x, y) for y in range(3) for x in range(4)]
        for x, y, color in visited:
            assert color == pytest.approx(tuple(image[y, x]))

    def test_render_pixel(self, demo_scene):
        from whitted.core.renderer import Renderer

        renderer = Renderer(16, 16)
        renderer.render()
        image = renderer.get_image_numpy()
        assert renderer.render_pixel(5, 9) == pytest.approx(tuple(image[9, 5]), rel=1e-5, abs=1e-6)

    def test_get_image_uint8(self, demo_scene):
        from whitted.core.renderer import Renderer

        renderer = Renderer(8, 8)
        renderer.render()
        image = renderer.get_image_uint8()
        assert image.shape == (8, 8, 3)
        assert image.dtype == np.uint8

    def test_render_without_upload(self):
        from whitted.core.renderer import Renderer

        renderer = Renderer(8, 8)
        with pytest.raises(RuntimeError, match="Camera not set up"):
            renderer.render()


class TestRenderFunction:
    """Tests for the render() convenience function."""

    def test_render_scene(self):
        from whitted.core.renderer import render
        from whitted.scene.demo import create_demo_scene

        image = render(create_demo_scene(), 20, 10)
        assert image.shape == (10, 20, 3)
        assert np.isfinite(image).all()

    def test_depth_changes_image(self):
        from whitted.core.renderer import render
        from whitted.scene.demo import create_demo_scene

        scene = create_demo_scene()
        shallow = render(scene, 16, 16, max_depth=0).copy()
        deep = render(scene, 16, 16, max_depth=5)
        assert not np.allclose(shallow, deep)

    def test_scene_without_camera(self):
        from whitted.core.renderer import render
        from whitted.scene.manager import Scene

        scene = Scene()
        scene.add_sphere((0.0, 0.0, 0.0), 1.0)
        with pytest.raises(RuntimeError, match="no camera"):
            render(scene, 8, 8)
