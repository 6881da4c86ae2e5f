"""Image export utilities for rendered images.

This module provides functions for saving rendered images to files.

Supported formats:
    - PPM (binary P6, written directly)
    - PNG and any other format Pillow can write

Colors are converted to 8 bits by clamping each channel to [0, 1], scaling
by 255 and truncating. No gamma correction or tone mapping is applied.

Example:
    >>> from pinray.preview.export import save_image
    >>> from pinray.core.renderer import render_scene
    >>> from pinray.scene.default_scene import create_default_scene
    >>>
    >>> image = render_scene(create_default_scene())
    >>> save_image(image, "output.ppm")
"""

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

PPM_MAGIC = b"P6"
PPM_MAX_VALUE = 255


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8 for export.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    clamped = np.clip(np.asarray(image, dtype=np.float32), 0.0, 1.0)
    return (clamped * PPM_MAX_VALUE).astype(np.uint8)


def _check_rgb(image: npt.NDArray) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")


def encode_ppm(image: npt.NDArray[np.floating]) -> bytes:
    """Encode an image as binary PPM (P6).

    Args:
        image: Float image array of shape (H, W, 3), row 0 at the top.

    Returns:
        The header ``P6\\n<width> <height>\\n255\\n`` followed by the RGB
        bytes in row-major order.

    Raises:
        ValueError: If the image is not (H, W, 3).
    """
    image = np.asarray(image)
    _check_rgb(image)

    height, width = image.shape[:2]
    header = b"%s\n%d %d\n%d\n" % (PPM_MAGIC, width, height, PPM_MAX_VALUE)
    return header + image_to_uint8(image).tobytes()


def save_ppm(image: npt.NDArray[np.floating], filepath: str | Path) -> Path:
    """Save an image as a binary PPM (P6) file.

    Args:
        image: Float image array of shape (H, W, 3).
        filepath: Output file path.

    Returns:
        The path written.
    """
    path = Path(filepath)
    path.write_bytes(encode_ppm(image))
    logger.debug("Wrote PPM %s", path)
    return path


def _read_header_tokens(data: bytes, count: int) -> tuple[list[bytes], int]:
    """Read whitespace-separated header tokens, skipping ``#`` comments.

    Returns:
        The tokens and the offset of the first byte after the single
        whitespace character that ends the last token.
    """
    tokens: list[bytes] = []
    pos = 0
    while len(tokens) < count:
        if pos >= len(data):
            raise ValueError("Truncated PPM header")
        byte = data[pos : pos + 1]
        if byte.isspace():
            pos += 1
        elif byte == b"#":
            end = data.find(b"\n", pos)
            pos = len(data) if end < 0 else end + 1
        else:
            start = pos
            while pos < len(data) and not data[pos : pos + 1].isspace():
                pos += 1
            tokens.append(data[start:pos])
    return tokens, pos + 1


def decode_ppm(data: bytes) -> npt.NDArray[np.uint8]:
    """Decode a binary PPM (P6) with a maximum value of 255.

    Args:
        data: The file contents.

    Returns:
        Array of shape (height, width, 3) with dtype uint8.

    Raises:
        ValueError: If the data is not an 8-bit P6 image.
    """
    tokens, offset = _read_header_tokens(data, 4)
    magic, width_tok, height_tok, max_tok = tokens
    if magic != PPM_MAGIC:
        raise ValueError(f"Not a binary PPM file (magic {magic!r})")

    width, height, max_value = int(width_tok), int(height_tok), int(max_tok)
    if max_value != PPM_MAX_VALUE:
        raise ValueError(f"Unsupported PPM max value {max_value}")

    expected = width * height * 3
    pixels = data[offset : offset + expected]
    if len(pixels) != expected:
        raise ValueError(f"PPM pixel data truncated: expected {expected} bytes, got {len(pixels)}")

    return np.frombuffer(pixels, dtype=np.uint8).reshape(height, width, 3)


def read_ppm(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read a binary PPM (P6) file written by save_ppm()."""
    return decode_ppm(Path(filepath).read_bytes())


def save_image(image: npt.NDArray[np.floating], filepath: str | Path) -> Path:
    """Save an image, choosing the format from the file suffix.

    ``.ppm`` is written as binary PPM. Every other suffix is handed to
    Pillow, so ``.png``, ``.bmp`` and friends work as long as Pillow
    supports them.

    Args:
        image: Float image array of shape (H, W, 3).
        filepath: Output file path.

    Returns:
        The path written.
    """
    path = Path(filepath)
    if path.suffix.lower() == ".ppm":
        return save_ppm(image, path)

    image = np.asarray(image)
    _check_rgb(image)
    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(path)
    logger.debug("Wrote %s via Pillow", path)
    return path


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
