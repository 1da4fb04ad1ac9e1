from __future__ import annotations
from pathlib import Path
from typing import Optional

from PIL import Image
from psd_tools import PSDImage

from mockbatch.errors import UnsupportedFormat

FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".tif": "TIFF",
    ".tiff": "TIFF",
    ".psd": "PSD",
}

JPEG_MODES = ("L", "RGB", "CMYK")
COLOUR_SPACE = {"L": "grey", "LA": "grey", "RGB": "rgb", "RGBA": "rgb", "CMYK": "cmyk"}


class Encoders:
    """Per-format save options for trimmed images and mock-up exports."""

    @staticmethod
    def format_for(path: Path) -> str:
        fmt = FORMATS.get(Path(path).suffix.lower())
        if fmt is None:
            raise UnsupportedFormat(path, FORMATS)
        return fmt

    @staticmethod
    def save_like_source(img: Image.Image, out_path: Path, jpeg_quality: int = 95,
                         png_compression: int = 9, icc_profile: Optional[bytes] = None) -> Path:
        """Save in the format implied by ``out_path``'s extension (lower-cased)."""
        out_path = Path(out_path)
        out_path = out_path.with_suffix(out_path.suffix.lower())
        fmt = Encoders.format_for(out_path)

        if fmt == "JPEG":
            kw = {"quality": jpeg_quality, "subsampling": 0}
            out = Encoders.flatten_alpha(img)
            # a profile only describes the source colour space
            if icc_profile and Encoders.same_colour_space(img.mode, out.mode):
                kw["icc_profile"] = icc_profile
            out.save(out_path, "JPEG", **kw)
        elif fmt == "PNG":
            kw = {"compress_level": png_compression}
            if icc_profile:
                kw["icc_profile"] = icc_profile
            img.save(out_path, "PNG", **kw)
        elif fmt == "TIFF":
            kw = {"compression": "raw"}
            if icc_profile:
                kw["icc_profile"] = icc_profile
            img.save(out_path, "TIFF", **kw)
        else:
            if img.mode not in ("RGB", "RGBA", "L", "CMYK"):
                img = img.convert("RGBA")
            PSDImage.frompil(img).save(str(out_path))
        return out_path

    @staticmethod
    def export_png(img: Image.Image, out_path: Path, web: bool = True, compression: int = 5) -> Path:
        """PNG-24 with transparency.

        ``web``: optimized, no colour profile, no metadata.
        Otherwise a plain save at ``compression`` (0..9).
        """
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        rgba = img.convert("RGBA")
        if web:
            rgba.info = {}  # drops icc_profile, exif, text chunks
            rgba.save(out_path, "PNG", optimize=True)
        else:
            rgba.save(out_path, "PNG", compress_level=compression)
        return out_path

    @staticmethod
    def flatten_alpha(img: Image.Image, background=(255, 255, 255)) -> Image.Image:
        """Image JPEG can hold: alpha composited onto ``background``; L, RGB and CMYK pass through."""
        if img.mode in JPEG_MODES:
            return img
        if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
            rgba = img.convert("RGBA")
            base = Image.new("RGB", rgba.size, background)
            base.paste(rgba, mask=rgba.getchannel("A"))
            return base
        return img.convert("RGB")

    @staticmethod
    def same_colour_space(src_mode: str, out_mode: str) -> bool:
        return COLOUR_SPACE.get(src_mode) == COLOUR_SPACE.get(out_mode)
