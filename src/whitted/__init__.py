"""Whitted-style recursive ray tracer with voxel-grid acceleration.

Rays are cast from a pinhole camera, resolved against the scene through a
sparse voxel grid (3D-DDA traversal) and shaded with a recursive Phong model
covering emission, ambient, diffuse and specular light, transparent shadows,
mirror reflection and transmission.

Subpackages:
    core: Vector algebra, colors, render configuration, the shading
        integrator, the render target and the rendering loop
    geometry: Shape primitives and the geometry collection
    accel: Bounding boxes, the voxel grid and the ray query strategies
    materials: Phong material coefficients
    lighting: Ambient, directional, point and spot lights
    scene: Scene aggregate, dict/XML loading and the demo scene
    camera: Pinhole camera and primary ray generation
    preview: Display pipeline, PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
