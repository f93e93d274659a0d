"""Pinhole camera with a rectangular view plane.

The camera sits at ``location`` looking along ``to`` with ``up`` pointing up
in the image; ``right = to x up`` completes the basis. The view plane is a
``width`` x ``height`` rectangle centred at ``location + distance * to`` and
split into an nx x ny pixel grid. The ray for column j and row i passes
through the pixel centre

    x_j =  (j - (nx - 1) / 2) * width / nx
    y_i = -(i - (ny - 1) / 2) * height / ny
    p_ij = vp_center + x_j * right + y_i * up

so row 0 is the top of the image.

Depth of field replaces the single pinhole ray with ``dof_rays`` rays per
pixel. Each starts at a random point of a square aperture of side
``aperture`` spanned by ``right`` and ``up`` around the location, and aims
at the point ``focal_distance`` along the pinhole ray. Surfaces at the focal
distance stay sharp; the renderer averages the samples of each pixel.

Cameras are assembled with CameraBuilder, which reports the first missing
field by name.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> camera = (
    ...     CameraBuilder()
    ...     .set_location(Point(0, 0, 1000))
    ...     .look_at(Point(0, 0, 0))
    ...     .set_vp_size(200, 200)
    ...     .set_vp_distance(1000)
    ...     .set_resolution(500, 500)
    ...     .build()
    ... )
    >>> camera.construct_ray(500, 500, 250, 250)
    >>> directions = camera.ray_directions()  # (500, 500, 3) via Taichi
"""

from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.whitted.core.ray import Point, Ray, Vector, is_zero

# =============================================================================
# Ray Direction Kernel
# =============================================================================


@ti.kernel
def _fill_directions(
    directions: ti.template(),
    basis: ti.template(),
    rx: ti.f64,
    ry: ti.f64,
):
    # basis holds: location, view plane centre, right, up
    ny = directions.shape[0]
    nx = directions.shape[1]
    for i, j in directions:
        xj = (ti.cast(j, ti.f64) - (nx - 1) * 0.5) * rx
        yi = -(ti.cast(i, ti.f64) - (ny - 1) * 0.5) * ry
        pij = basis[1] + xj * basis[2] + yi * basis[3]
        directions[i, j] = (pij - basis[0]).normalized()


@ti.kernel
def _fill_lens_samples(
    origins: ti.template(),
    directions: ti.template(),
    primary: ti.template(),
    basis: ti.template(),
    focal_distance: ti.f64,
    half_aperture: ti.f64,
):
    # basis holds: location, right, up
    for i, j, s in origins:
        focus = basis[0] + focal_distance * primary[i, j]
        offset_x = (ti.random(ti.f64) * 2.0 - 1.0) * half_aperture
        offset_y = (ti.random(ti.f64) * 2.0 - 1.0) * half_aperture
        origin = basis[0] + offset_x * basis[1] + offset_y * basis[2]
        origins[i, j, s] = origin
        directions[i, j, s] = (focus - origin).normalized()


class RayDirectionGrid:
    """Taichi buffers holding the primary ray direction of every pixel.

    Fields are allocated on first use, so ``ti.init`` must have been called
    before ``compute``.
    """

    def __init__(self, nx: int, ny: int) -> None:
        self.nx = nx
        self.ny = ny
        self._directions = None
        self._basis = None

    def compute(
        self,
        location: Point,
        vp_center: Point,
        right: Vector,
        up: Vector,
        rx: float,
        ry: float,
    ) -> npt.NDArray[np.float64]:
        """Fill the grid and return it as an array of shape (ny, nx, 3)."""
        if self._directions is None:
            self._directions = ti.Vector.field(3, dtype=ti.f64, shape=(self.ny, self.nx))
            self._basis = ti.Vector.field(3, dtype=ti.f64, shape=4)
        for index, value in enumerate((location, vp_center, right, up)):
            self._basis[index] = value.to_tuple()
        _fill_directions(self._directions, self._basis, rx, ry)
        return self._directions.to_numpy()

    def compute_lens(
        self,
        samples: int,
        location: Point,
        right: Vector,
        up: Vector,
        focal_distance: float,
        aperture: float,
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Jitter the rays of the last ``compute`` call across the aperture.

        Args:
            samples: Rays per pixel.
            location: Aperture centre.
            right: Horizontal aperture axis.
            up: Vertical aperture axis.
            focal_distance: Distance along each pinhole ray to its focus point.
            aperture: Side of the square aperture.

        Returns:
            Origins and unit directions, each of shape (ny, nx, samples, 3).
        """
        if self._directions is None:
            raise RuntimeError("compute must run before compute_lens")
        shape = (self.ny, self.nx, samples)
        origins = ti.Vector.field(3, dtype=ti.f64, shape=shape)
        directions = ti.Vector.field(3, dtype=ti.f64, shape=shape)
        lens_basis = ti.Vector.field(3, dtype=ti.f64, shape=3)
        for index, value in enumerate((location, right, up)):
            lens_basis[index] = value.to_tuple()
        _fill_lens_samples(
            origins, directions, self._directions, lens_basis, focal_distance, aperture * 0.5
        )
        return origins.to_numpy(), directions.to_numpy()


# =============================================================================
# Camera
# =============================================================================

# Depth of field defaults, used once dof_rays > 1
DEFAULT_APERTURE = 1.5
DEFAULT_FOCAL_DISTANCE = 500.0


def _check_depth_of_field(dof_rays: int, aperture: float, focal_distance: float) -> None:
    if dof_rays < 1:
        raise ValueError(f"dof_rays must be at least 1, got {dof_rays}")
    if aperture < 0:
        raise ValueError(f"aperture must not be negative, got {aperture}")
    if focal_distance <= 0:
        raise ValueError(f"focal_distance must be positive, got {focal_distance}")


@dataclass(frozen=True, eq=False)
class Camera:
    """An immutable pinhole camera.

    Attributes:
        location: Camera position.
        to: Unit viewing direction.
        up: Unit up direction, perpendicular to ``to``.
        width: View plane width.
        height: View plane height.
        distance: Distance from the location to the view plane.
        nx: Horizontal resolution in pixels.
        ny: Vertical resolution in pixels.
        dof_rays: Rays per pixel; 1 is a plain pinhole camera.
        aperture: Side of the square lens aperture used when dof_rays > 1.
        focal_distance: Distance to the plane in focus when dof_rays > 1.

    Raises:
        ValueError: If ``to`` and ``up`` are not perpendicular, a size,
            distance or resolution is not positive, or the depth of field
            settings are invalid.
    """

    location: Point
    to: Vector
    up: Vector
    width: float
    height: float
    distance: float
    nx: int = 1
    ny: int = 1
    dof_rays: int = 1
    aperture: float = DEFAULT_APERTURE
    focal_distance: float = DEFAULT_FOCAL_DISTANCE
    right: Vector = field(init=False)
    vp_center: Point = field(init=False)

    def __post_init__(self) -> None:
        to = self.to.normalize()
        up = self.up.normalize()
        if not is_zero(to.dot(up)):
            raise ValueError("the vectors to and up are not perpendicular")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("the view plane width and height must be positive")
        if self.distance <= 0:
            raise ValueError("the view plane distance must be positive")
        if self.nx <= 0 or self.ny <= 0:
            raise ValueError("the resolution must be positive")
        _check_depth_of_field(self.dof_rays, self.aperture, self.focal_distance)
        object.__setattr__(self, "to", to)
        object.__setattr__(self, "up", up)
        object.__setattr__(self, "right", to.cross(up).normalize())
        object.__setattr__(self, "vp_center", self.location.add(to.scale(self.distance)))

    def construct_ray(self, nx: int, ny: int, j: int, i: int) -> Ray:
        """Ray from the camera through the centre of pixel (column j, row i)."""
        ry = self.height / ny
        rx = self.width / nx
        yi = -(i - (ny - 1) * 0.5) * ry
        xj = (j - (nx - 1) * 0.5) * rx

        pij = self.vp_center
        if not is_zero(xj):
            pij = pij.add(self.right.scale(xj))
        if not is_zero(yi):
            pij = pij.add(self.up.scale(yi))
        return Ray(self.location, pij.subtract(self.location))

    def ray_directions(self) -> npt.NDArray[np.float64]:
        """Unit directions of every primary ray, shape (ny, nx, 3).

        Computed with a Taichi kernel; requires ``ti.init``.
        """
        return RayDirectionGrid(self.nx, self.ny).compute(
            self.location,
            self.vp_center,
            self.right,
            self.up,
            self.width / self.nx,
            self.height / self.ny,
        )

    @property
    def has_depth_of_field(self) -> bool:
        return self.dof_rays > 1

    def lens_samples(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Origins and unit directions of every depth of field ray.

        Both arrays have shape (ny, nx, dof_rays, 3). Aperture offsets come
        from ``ti.random``, so they follow the seed given to ``ti.init``.
        """
        grid = RayDirectionGrid(self.nx, self.ny)
        grid.compute(
            self.location,
            self.vp_center,
            self.right,
            self.up,
            self.width / self.nx,
            self.height / self.ny,
        )
        return grid.compute_lens(
            self.dof_rays,
            self.location,
            self.right,
            self.up,
            self.focal_distance,
            self.aperture,
        )


class CameraBuilder:
    """Step-by-step Camera construction.

    Every setter validates its own arguments and returns the builder.
    ``build`` raises ValueError naming the first required field that was
    never set.
    """

    def __init__(self) -> None:
        self._location: Point | None = None
        self._to: Vector | None = None
        self._up: Vector | None = None
        self._width: float | None = None
        self._height: float | None = None
        self._distance: float | None = None
        self._nx = 1
        self._ny = 1
        self._dof_rays = 1
        self._aperture = DEFAULT_APERTURE
        self._focal_distance = DEFAULT_FOCAL_DISTANCE

    def set_location(self, location: Point) -> "CameraBuilder":
        self._location = location
        return self

    def set_direction(self, to: Vector, up: Vector) -> "CameraBuilder":
        """Set the viewing and up directions; they must be perpendicular."""
        if not is_zero(to.dot(up)):
            raise ValueError("the vectors to and up are not perpendicular")
        self._to = to.normalize()
        self._up = up.normalize()
        return self

    def look_at(self, target: Point, up: Vector = Vector.Y) -> "CameraBuilder":
        """Aim at a target point, deriving a perpendicular up vector.

        Requires the location to be set first.
        """
        if self._location is None:
            raise ValueError("Missing camera field: location (set it before look_at)")
        to = target.subtract(self._location).normalize()
        right = to.cross(up).normalize()
        self._to = to
        self._up = right.cross(to).normalize()
        return self

    def set_vp_size(self, width: float, height: float) -> "CameraBuilder":
        if width <= 0 or height <= 0:
            raise ValueError("the view plane width and height must be positive")
        self._width = width
        self._height = height
        return self

    def set_vp_distance(self, distance: float) -> "CameraBuilder":
        if distance <= 0:
            raise ValueError("the view plane distance must be positive")
        self._distance = distance
        return self

    def set_resolution(self, nx: int, ny: int) -> "CameraBuilder":
        if nx <= 0 or ny <= 0:
            raise ValueError("the resolution must be positive")
        self._nx = nx
        self._ny = ny
        return self

    def set_depth_of_field(
        self, dof_rays: int, aperture: float, focal_distance: float
    ) -> "CameraBuilder":
        """Cast dof_rays aperture-jittered rays per pixel, focused at focal_distance.

        A single ray per pixel (the default) disables depth of field.
        """
        _check_depth_of_field(dof_rays, aperture, focal_distance)
        self._dof_rays = dof_rays
        self._aperture = aperture
        self._focal_distance = focal_distance
        return self

    def build(self) -> Camera:
        for name, value in (
            ("location", self._location),
            ("to", self._to),
            ("up", self._up),
            ("width", self._width),
            ("height", self._height),
            ("distance", self._distance),
        ):
            if value is None:
                raise ValueError(f"Missing camera field: {name}")
        return Camera(
            location=self._location,
            to=self._to,
            up=self._up,
            width=self._width,
            height=self._height,
            distance=self._distance,
            nx=self._nx,
            ny=self._ny,
            dof_rays=self._dof_rays,
            aperture=self._aperture,
            focal_distance=self._focal_distance,
        )
