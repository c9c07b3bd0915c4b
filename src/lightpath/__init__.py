"""A Monte Carlo ray tracer built on Taichi.

Scenes are flat collections of transformed spheres and cubes with diffuse,
metallic or dielectric materials, lit by a sky gradient and seen through a
thin-lens camera.

Subpackages:
    core: Vector algebra, colors, matrices, configuration, integrator and render loop
    geometry: Shape primitives and their intersection routines
    materials: Material types and their scattering functions
    scene: Objects, groups, hit selection, field storage and demo scenes
    camera: Thin-lens camera with ray generation
    preview: Pixel buffer and image export

Modules that declare Taichi fields (``core.sampling``, ``core.integrator``,
``core.renderer``, ``scene.storage``, ``camera.thin_lens`` and the material
variant modules) must be imported after ``ti.init``.
"""

__version__ = "0.1.0"
