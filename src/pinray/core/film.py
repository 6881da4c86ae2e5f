"""Film description shared by the camera and the render target."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Film:
    """The camera's film: raster size and world-space pixel size.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixel_size: World-space edge length of one pixel on the film plane.
    """

    width: int
    height: int
    pixel_size: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Film dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.pixel_size <= 0.0:
            raise ValueError(f"Film pixel size must be positive, got {self.pixel_size}")

    @property
    def pixel_count(self) -> int:
        """Total number of pixels on the film."""
        return self.width * self.height
