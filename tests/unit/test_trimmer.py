"""
Unit tests for transparent padding trimming.
"""
import pytest
from PIL import Image

from mockbatch.imaging.trimmer import TransparentTrimmer


@pytest.mark.unit
class TestTransparentTrimmer:

    def test_trims_to_content_box(self, padded_png):
        with Image.open(padded_png) as img:
            result = TransparentTrimmer.trim(img)

        assert result.trimmed
        assert result.box == (10, 5, 30, 25)
        assert result.image.size == (20, 20)

    def test_content_pixels_unchanged(self, padded_png):
        with Image.open(padded_png) as img:
            img.load()
            result = TransparentTrimmer.trim(img)

        assert result.image.getpixel((0, 0)) == (0, 200, 0, 255)
        assert result.image.getpixel((19, 19)) == (0, 200, 0, 255)

    def test_opaque_image_untouched(self):
        img = Image.new("RGB", (30, 30), (10, 20, 30))

        result = TransparentTrimmer.trim(img)

        assert not result.trimmed
        assert result.image is img

    def test_fully_transparent_untouched(self):
        img = Image.new("RGBA", (30, 30), (0, 0, 0, 0))

        result = TransparentTrimmer.trim(img)

        assert not result.trimmed
        assert result.image.size == (30, 30)

    def test_no_padding_means_nothing_to_trim(self):
        img = Image.new("RGBA", (12, 12), (1, 2, 3, 255))

        assert not TransparentTrimmer.trim(img).trimmed

    def test_alpha_threshold_ignores_faint_halo(self):
        img = Image.new("RGBA", (50, 50), (0, 0, 0, 0))
        img.paste((255, 255, 255, 5), (0, 0, 50, 50))
        img.paste((255, 0, 0, 255), (20, 20, 30, 30))

        assert TransparentTrimmer.trim(img).box is None
        assert TransparentTrimmer.trim(img, alpha_threshold=10).box == (20, 20, 30, 30)

    def test_one_sided_padding(self):
        img = Image.new("RGBA", (40, 10), (0, 0, 0, 0))
        img.paste((9, 9, 9, 255), (0, 0, 25, 10))

        result = TransparentTrimmer.trim(img)

        assert result.box == (0, 0, 25, 10)

