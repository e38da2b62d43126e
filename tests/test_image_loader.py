import numpy as np
import pytest
from PIL import Image

from lithomesh import ImageLoadError, load_image, prepare_raster
from lithomesh.image_loader import detect_jpeg_artifacts, is_format_supported, supported_formats_filter


def stripes(size=64, block=8, step=100):
    """Vertical bands that change intensity on every 8-px block boundary."""
    cols = (np.arange(size) // block) % 2 * step
    return Image.fromarray(np.tile(cols, (size, 1)).astype(np.uint8))


class TestPrepareRaster:
    def test_inverts_intensity(self):
        image = Image.fromarray(np.array([[0, 255], [10, 20]], dtype=np.uint8))
        np.testing.assert_array_equal(prepare_raster(image), [[255, 0], [245, 235]])

    def test_flip_mirrors_rows_before_inverting(self):
        image = Image.fromarray(np.array([[0, 255], [10, 20]], dtype=np.uint8))
        np.testing.assert_array_equal(prepare_raster(image, flip_vertical=True), [[245, 235], [255, 0]])

    def test_result_is_uint8(self):
        raster = prepare_raster(Image.new('RGB', (3, 2), (255, 255, 255)))
        assert raster.dtype == np.uint8
        assert raster.shape == (2, 3)
        assert raster.max() == 0


class TestLoadImage:
    def test_color_image_is_converted(self, tmp_path):
        path = tmp_path / "color.png"
        Image.new('RGB', (20, 10), (200, 30, 30)).save(path)

        result = load_image(path)
        assert result.image.mode == 'L'
        assert result.was_converted
        assert not result.was_resized
        assert result.original_format == "PNG"
        assert result.original_size == (20, 10)

    def test_grayscale_image_is_kept(self, tmp_path):
        path = tmp_path / "gray.png"
        Image.new('L', (20, 10), 90).save(path)
        result = load_image(path)
        assert not result.was_converted
        assert result.image.getpixel((0, 0)) == 90

    def test_resize_keeps_aspect_ratio(self, tmp_path):
        path = tmp_path / "big.png"
        Image.new('L', (400, 200), 0).save(path)

        result = load_image(path, max_size=100, force_resize=True)
        assert result.was_resized
        assert result.image.size == (100, 50)
        assert result.original_size == (400, 200)

    def test_tall_image_resize(self, tmp_path):
        path = tmp_path / "tall.png"
        Image.new('L', (30, 300), 0).save(path)
        assert load_image(path, max_size=150, force_resize=True).image.size == (15, 150)

    def test_no_resize_without_force(self, tmp_path):
        path = tmp_path / "big.png"
        Image.new('L', (400, 200), 0).save(path)
        result = load_image(path, max_size=100)
        assert not result.was_resized
        assert result.image.size == (400, 200)

    def test_smooth_jpeg_has_no_warning(self, tmp_path):
        path = tmp_path / "flat.jpg"
        Image.new('L', (64, 64), 128).save(path, quality=90)
        result = load_image(path)
        assert result.original_format == "JPEG"
        assert not result.has_quality_warning

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        with pytest.raises(ImageLoadError):
            load_image(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImageLoadError):
            load_image(tmp_path / "nope.png")


class TestJpegArtifacts:
    def test_sharp_block_edges_are_flagged(self):
        assert detect_jpeg_artifacts(stripes())

    def test_smooth_image_is_not_flagged(self):
        assert not detect_jpeg_artifacts(Image.new('L', (64, 64), 128))

    def test_small_image_is_not_flagged(self):
        assert not detect_jpeg_artifacts(stripes(size=8))


@pytest.mark.parametrize("ext, expected", [
    (".png", True), ("JPG", True), (".jpeg", True), ("webp", True), (".TIF", True),
    (".bmp", True), (".gif", False), ("", False),
])
def test_is_format_supported(ext, expected):
    assert is_format_supported(ext) is expected


def test_formats_filter_lists_every_extension():
    text = supported_formats_filter()
    assert text.startswith("Images (*.png")
    assert "*.webp" in text and "All Files (*)" in text
