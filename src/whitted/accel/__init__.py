"""Spatial acceleration.

Components:
    aabb: Axis-aligned bounding boxes with the slab ray test
    voxel_grid: Sparse uniform grid with 3D-DDA traversal
    accelerator: LinearAccelerator and VoxelAccelerator query strategies
"""

from .aabb import AABB

# voxel_grid and accelerator depend on geometry, which itself imports aabb;
# import them directly from their modules.

__all__ = ["AABB"]
