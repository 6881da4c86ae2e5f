"""Unit tests for image export."""

import numpy as np
import pytest


class TestImageToUint8:
    """Tests for float to byte conversion."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.0, 0),
            (1.0, 255),
            (0.5, 127),
            (0.999, 254),
            (1.5, 255),
            (-0.2, 0),
        ],
    )
    def test_clamp_and_truncate(self, value, expected):
        from pinray.preview.export import image_to_uint8

        image = np.full((1, 1, 3), value, dtype=np.float32)
        assert image_to_uint8(image)[0, 0, 0] == expected


class TestPPM:
    """Tests for binary PPM encoding and decoding."""

    def test_header_and_layout(self):
        """Header first, then rows top to bottom, RGB per pixel."""
        from pinray.preview.export import encode_ppm

        image = np.zeros((2, 3, 3), dtype=np.float32)
        image[0, 2] = (1.0, 0.0, 0.0)
        image[1, 0] = (0.0, 0.0, 1.0)

        data = encode_ppm(image)
        header = b"P6\n3 2\n255\n"
        assert data.startswith(header)
        body = data[len(header) :]
        assert len(body) == 2 * 3 * 3
        assert body[6:9] == b"\xff\x00\x00"
        assert body[9:12] == b"\x00\x00\xff"

    def test_red_pixel_bytes(self, tmp_path):
        """Pure red should serialize to (255, 0, 0)."""
        from pinray.preview.export import read_ppm, save_ppm

        image = np.array([[[1.0, 0.0, 0.0]]], dtype=np.float32)
        path = save_ppm(image, tmp_path / "red.ppm")
        assert tuple(read_ppm(path)[0, 0]) == (255, 0, 0)

    def test_decode_with_comment(self):
        from pinray.preview.export import decode_ppm

        data = b"P6\n# made by hand\n2 1\n255\n" + bytes([1, 2, 3, 4, 5, 6])
        pixels = decode_ppm(data)
        assert pixels.shape == (1, 2, 3)
        assert pixels[0, 1].tolist() == [4, 5, 6]

    @pytest.mark.parametrize(
        "data, match",
        [
            (b"P3\n1 1\n255\n0 0 0", "Not a binary PPM"),
            (b"P6\n1 1\n65535\n" + bytes(6), "max value"),
            (b"P6\n2 2\n255\n" + bytes(5), "truncated"),
            (b"P6\n2", "Truncated PPM header"),
        ],
    )
    def test_decode_errors(self, data, match):
        from pinray.preview.export import decode_ppm

        with pytest.raises(ValueError, match=match):
            decode_ppm(data)

    def test_rejects_non_rgb(self):
        from pinray.preview.export import encode_ppm

        with pytest.raises(ValueError, match="H, W, 3"):
            encode_ppm(np.zeros((4, 4), dtype=np.float32))


class TestSaveImage:
    """Tests for suffix-based dispatch."""

    def test_ppm_suffix(self, tmp_path):
        from pinray.preview.export import save_image

        path = save_image(np.zeros((2, 2, 3), dtype=np.float32), tmp_path / "out.PPM")
        assert path.read_bytes().startswith(b"P6\n2 2\n255\n")

    def test_png_via_pillow(self, tmp_path):
        from PIL import Image

        from pinray.preview.export import save_image

        image = np.zeros((3, 5, 3), dtype=np.float32)
        image[1, 4] = (0.0, 1.0, 0.0)
        path = save_image(image, tmp_path / "out.png")

        with Image.open(path) as loaded:
            assert loaded.size == (5, 3)
            assert loaded.mode == "RGB"
            assert loaded.getpixel((4, 1)) == (0, 255, 0)


class TestComputeRMSE:
    def test_identical(self):
        from pinray.preview.export import compute_rmse

        a = np.random.default_rng(0).random((4, 4, 3))
        assert compute_rmse(a, a) == 0.0

    def test_shape_mismatch(self):
        from pinray.preview.export import compute_rmse

        with pytest.raises(ValueError):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))
