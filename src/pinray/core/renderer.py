"""Scene renderer driving the integrator in row batches.

This module provides a convenient wrapper around the core integrator that
supports:
- Rendering an explicit SceneManager without touching module state directly
- Batch rendering (a band of rows per kernel launch)
- Progress callbacks for UI updates

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pinray.core.renderer import Renderer
    >>> from pinray.scene.default_scene import create_default_scene
    >>>
    >>> renderer = Renderer(create_default_scene())
    >>> renderer.render(rows_per_batch=50)
    >>> renderer.save_image("output.ppm")
"""

from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from pinray.core.film import Film
from pinray.core.integrator import (
    clear_render_target,
    get_image_numpy,
    render_rows,
    set_background,
    setup_render_target,
)
from pinray.preview.export import image_to_uint8, save_image
from pinray.scene.manager import SceneManager

# Type alias for progress callback
# Callback receives (rows_completed, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders a scene into the integrator's render target.

    Construction uploads the scene's view (camera, film, background) and sets
    up the render target. Rendering then proceeds in bands of rows, in row
    order.

    Attributes:
        scene: The scene being rendered.
        film: The film the scene is rendered onto.
    """

    def __init__(self, scene: SceneManager) -> None:
        """Prepare a scene for rendering.

        Args:
            scene: A scene with camera and film set.

        Raises:
            RuntimeError: If the scene has no camera or film.
            ValueError: If the camera is invalid or the film is too large.
        """
        self.scene = scene
        self.film: Film = scene.prepare()
        setup_render_target(self.film)
        set_background(scene.background)
        self._rows_completed = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.film.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.film.height

    @property
    def rows_completed(self) -> int:
        """Number of rows rendered since the last reset."""
        return self._rows_completed

    @property
    def is_complete(self) -> bool:
        """Whether every row of the film has been rendered."""
        return self._rows_completed >= self.height

    def reset(self) -> None:
        """Clear the render target so the image can be rendered again."""
        clear_render_target()
        self._rows_completed = 0

    def render(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the remaining rows of the image.

        Args:
            rows_per_batch: Number of rows to render before each callback.
                None renders the whole image in one batch.
            callback: Optional callback called after each batch. Receives
                (rows_completed, total_rows).

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(rows_per_batch=100, callback=progress)
        """
        for done, total in self.render_progressive(rows_per_batch):
            if callback is not None:
                callback(done, total)

    def render_progressive(
        self,
        rows_per_batch: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the remaining rows, yielding progress after each batch.

        This is a generator-based alternative to render() with callbacks,
        useful for checking for cancellation between batches.

        Args:
            rows_per_batch: Number of rows to render before each yield.

        Yields:
            Tuple of (rows_completed, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        if rows_per_batch is None:
            rows_per_batch = self.height
        if rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        while self._rows_completed < self.height:
            row_end = min(self._rows_completed + rows_per_batch, self.height)
            render_rows(self._rows_completed, row_end)
            self._rows_completed = row_end
            yield (self._rows_completed, self.height)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as a (height, width, 3) float32 array."""
        return get_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as 8-bit RGB, clamped and truncated."""
        return image_to_uint8(self.get_image_numpy())

    def save_image(self, filepath: str | Path) -> Path:
        """Save the rendered image.

        Args:
            filepath: Destination path. ``.ppm`` writes binary PPM, other
                suffixes are handed to Pillow.

        Returns:
            The path written.
        """
        return save_image(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"rows_completed={self.rows_completed})"
        )


def render_scene(scene: SceneManager) -> npt.NDArray[np.float32]:
    """Render a scene in one pass and return the image.

    Args:
        scene: A scene with camera and film set.

    Returns:
        NumPy array of shape (height, width, 3).
    """
    renderer = Renderer(scene)
    renderer.render()
    return renderer.get_image_numpy()
