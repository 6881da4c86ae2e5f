"""Minimal offline ray tracer built on Taichi.

This package renders scenes made of spheres, matte materials and point lights
with one primary ray per pixel, direct illumination and hard shadows.

Subpackages:
    core: Ray and intersection record structures, render target and render loop
    geometry: Shape primitives and intersection algorithms
    materials: Reflectance (BRDF) models
    lights: Light sources for direct illumination
    camera: Camera models with ray generation
    scene: Scene storage, traversal and configuration
    preview: Image export and console progress display
"""

__version__ = "0.1.0"
