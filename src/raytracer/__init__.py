"""CPU Whitted-style ray tracer with a Taichi preview window.

This package provides a teaching ray tracer with support for:
- Spheres, transformed boxes, triangles and triangle meshes
- Phong shading with hard shadows and recursive mirror reflections
- Row-band multi-threaded rendering into an in-memory framebuffer
- OFF mesh import and PNG export

Subpackages:
    core: Ray and vector utilities, integrator, framebuffer and renderer
    geometry: Shape primitives and intersection algorithms
    materials: Phong material model
    scene: Scene container, editing API, default scene and OFF loader
    camera: Look-at pinhole camera with ray generation
    preview: Display, export and interactive window utilities
"""

__version__ = "0.1.0"
