"""Image rendering loop with optional process-pool parallelism.

Primary rays for the whole image are generated up front by the camera's
Taichi kernels: one direction per pixel for a pinhole camera, or
``dof_rays`` aperture-jittered rays per pixel when depth of field is on.
Rows are then shaded independently:

    - ``workers == 0``: rows are traced in order in the calling process.
    - ``workers > 0``: each row is a task for a ProcessPoolExecutor. The
      tracer (scene, geometries, acceleration grid) is pickled once per
      worker through the pool initializer, not once per row.

Cancellation is cooperative and checked between rows: rows still queued are
dropped, rows already written stay in the render target.

Example:
    >>> renderer = Renderer(camera, tracer, workers=4,
    ...                     progress=lambda done, total: print(f"{done}/{total}"))
    >>> target = renderer.render()
    >>> save_png(target, "scene.png")
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, Future, ProcessPoolExecutor, wait
from typing import Any

import numpy as np
import numpy.typing as npt

from src.whitted.camera.pinhole import Camera
from src.whitted.core.color import Color
from src.whitted.core.integrator import RayTracer
from src.whitted.core.ray import Point, Ray, Vector
from src.whitted.core.render_target import RenderTarget

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
RowTracer = Callable[..., list[Color]]

# Tracer installed in each worker process by the pool initializer
_worker_tracer: RayTracer | None = None


def _install_tracer(tracer: RayTracer) -> None:
    global _worker_tracer
    _worker_tracer = tracer


def trace_row(
    tracer: RayTracer, location: Point, directions: npt.NDArray[np.float64]
) -> list[Color]:
    """Shade one row of primary rays sharing the camera location."""
    return [tracer.trace_ray(Ray(location, Vector(*d))) for d in directions]


def trace_lens_row(
    tracer: RayTracer,
    origins: npt.NDArray[np.float64],
    directions: npt.NDArray[np.float64],
) -> list[Color]:
    """Shade one row of depth of field samples, averaging each pixel.

    Args:
        tracer: Shades each sample ray.
        origins: Sample ray origins of shape (nx, samples, 3).
        directions: Sample ray directions of shape (nx, samples, 3).

    Returns:
        One averaged color per pixel, left to right.
    """
    colors = []
    for pixel_origins, pixel_directions in zip(origins, directions):
        total = Color.BLACK
        for origin, direction in zip(pixel_origins, pixel_directions):
            total = total.add(tracer.trace_ray(Ray(Point(*origin), Vector(*direction))))
        colors.append(total.reduce(len(pixel_directions)))
    return colors


def _render_row_task(row: int, trace: RowTracer, args: tuple[Any, ...]) -> tuple[int, list[Color]]:
    return row, trace(_worker_tracer, *args)


class Renderer:
    """Renders a camera's pixel grid with a tracer.

    Attributes:
        camera: Provides the pixel grid and primary rays.
        tracer: Shades each primary ray.
        workers: Worker processes; 0 renders serially in-process.
        progress: Optional callback receiving (rows_done, rows_total).
    """

    def __init__(
        self,
        camera: Camera,
        tracer: RayTracer,
        *,
        workers: int | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.camera = camera
        self.tracer = tracer
        self.workers = tracer.config.workers if workers is None else workers
        if self.workers < 0:
            raise ValueError(f"workers must not be negative, got {self.workers}")
        self.progress = progress
        self._cancel = threading.Event()

    def cancel(self) -> None:
        """Stop rendering after the rows currently in flight."""
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def render(self, target: RenderTarget | None = None) -> RenderTarget:
        """Render the full image into ``target`` (a new one if omitted).

        Args:
            target: Buffer to fill; must match the camera resolution.

        Returns:
            The filled render target. After a cancel, rows that were never
            rendered keep their previous contents.

        Raises:
            ValueError: If ``target`` does not match the camera resolution.
        """
        camera = self.camera
        if target is None:
            target = RenderTarget(camera.nx, camera.ny)
        elif (target.width, target.height) != (camera.nx, camera.ny):
            raise ValueError(
                f"Render target is {target.width}x{target.height}, camera is {camera.nx}x{camera.ny}"
            )

        jobs = self._row_jobs()
        logger.info(
            "Rendering %s at %dx%d with %d worker(s), %d ray(s) per pixel",
            self.tracer.scene.name,
            camera.nx,
            camera.ny,
            self.workers,
            camera.dof_rays,
        )
        start = time.perf_counter()
        if self.workers == 0:
            done = self._render_serial(target, jobs)
        else:
            done = self._render_parallel(target, jobs)

        elapsed = time.perf_counter() - start
        if self.cancelled:
            logger.info("Render cancelled after %d/%d rows (%.2fs)", done, camera.ny, elapsed)
        else:
            logger.info("Render finished in %.2fs", elapsed)
        return target

    def _row_jobs(self) -> list[tuple[RowTracer, tuple[Any, ...]]]:
        """Row shading function and its arguments for every image row."""
        camera = self.camera
        if camera.has_depth_of_field:
            origins, directions = camera.lens_samples()
            return [(trace_lens_row, (origins[row], directions[row])) for row in range(camera.ny)]
        directions = camera.ray_directions()
        return [(trace_row, (camera.location, directions[row])) for row in range(camera.ny)]

    def _report(self, done: int) -> None:
        if self.progress is not None:
            self.progress(done, self.camera.ny)

    def _render_serial(
        self, target: RenderTarget, jobs: list[tuple[RowTracer, tuple[Any, ...]]]
    ) -> int:
        done = 0
        for row, (trace, args) in enumerate(jobs):
            if self.cancelled:
                break
            target.write_row(row, trace(self.tracer, *args))
            done += 1
            self._report(done)
        return done

    def _render_parallel(
        self, target: RenderTarget, jobs: list[tuple[RowTracer, tuple[Any, ...]]]
    ) -> int:
        done = 0
        with ProcessPoolExecutor(
            max_workers=self.workers,
            initializer=_install_tracer,
            initargs=(self.tracer,),
        ) as executor:
            pending: set[Future] = {
                executor.submit(_render_row_task, row, trace, args)
                for row, (trace, args) in enumerate(jobs)
            }
            while pending:
                finished, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in finished:
                    if future.cancelled():
                        continue
                    row, colors = future.result()
                    target.write_row(row, colors)
                    done += 1
                    self._report(done)
                if self.cancelled and pending:
                    for future in pending:
                        future.cancel()
                    executor.shutdown(wait=True, cancel_futures=True)
                    # Rows already running finish; keep their results
                    for future in pending:
                        if future.done() and not future.cancelled():
                            row, colors = future.result()
                            target.write_row(row, colors)
                            done += 1
                            self._report(done)
                    break
        return done
