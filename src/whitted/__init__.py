"""Whitted-style recursive ray tracer built on Taichi.

This package renders scenes of spheres and planes lit by point lights, with:
- Nearest-hit ray casting against every object (no acceleration structure)
- Shadow-tested Lambertian diffuse and Phong specular lighting
- Mirror reflection bounded by a maximum recursion depth
- Position-dependent surfaces (shiny, checkerboard)

Subpackages:
    core: Vector algebra, the tracer kernels and the renderer
    geometry: Sphere and plane primitives
    surfaces: Surface properties and surface dispatch
    scene: Scene description, storage and intersection queries
    camera: Look-at camera and primary ray generation
    preview: Image export
"""

__version__ = "0.1.0"
