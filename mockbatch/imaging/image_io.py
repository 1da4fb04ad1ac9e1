from __future__ import annotations
import io
import re
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

import requests
from PIL import Image
from psd_tools import PSDImage

from mockbatch.layout.geometry import Size

_UNSAFE_CHARS = re.compile(r'[/\\:*?"<>|]')


class ImageIO:
    """Loading local/remote/PSD images and filename utilities."""

    PSD_EXTS = {".psd", ".psb"}

    @staticmethod
    def is_url(path_or_url: str) -> bool:
        return str(path_or_url).startswith(("http://", "https://"))

    @staticmethod
    def suffix(path_or_url: str) -> str:
        s = str(path_or_url)
        if ImageIO.is_url(s):
            s = urlparse(s).path
        return PurePosixPath(s.replace("\\", "/")).suffix.lower()

    @staticmethod
    def stem(path_or_url: str) -> str:
        s = str(path_or_url)
        if ImageIO.is_url(s):
            s = unquote(urlparse(s).path)
        name = PurePosixPath(s.replace("\\", "/")).name
        return re.sub(r"\.[^.]+$", "", name)

    @staticmethod
    def read_bytes(path_or_url: str) -> bytes:
        if ImageIO.is_url(path_or_url):
            r = requests.get(path_or_url, timeout=60)
            r.raise_for_status()
            return r.content
        with open(path_or_url, "rb") as f:
            return f.read()

    @staticmethod
    def load_image(path_or_url: str) -> Image.Image:
        """Decoded, fully loaded image. PSD/PSB come back flattened."""
        data = ImageIO.read_bytes(str(path_or_url))
        if ImageIO.suffix(path_or_url) in ImageIO.PSD_EXTS:
            psd = PSDImage.open(io.BytesIO(data))
            img = psd.composite()
            if img is None:
                return Image.new("RGBA", psd.size, (0, 0, 0, 0))
            return img
        img = Image.open(io.BytesIO(data))
        img.load()
        return img

    @staticmethod
    def load_rgba(path_or_url: str) -> Image.Image:
        img = ImageIO.load_image(path_or_url)
        if img.mode in ("I;16", "I;16B", "I;16L", "I"):
            # 16-bit greyscale; squash to 8 bits before colour conversion
            img = img.convert("I").point(lambda v: v * (1 / 256)).convert("L")
        return img.convert("RGBA")

    @staticmethod
    def measure(path_or_url: str) -> Size:
        """Natural pixel size. Local non-PSD files are measured from the header only."""
        s = str(path_or_url)
        if ImageIO.is_url(s):
            w, h = ImageIO.load_image(s).size
        elif ImageIO.suffix(s) in ImageIO.PSD_EXTS:
            w, h = PSDImage.open(s).size
        else:
            with Image.open(s) as img:
                w, h = img.size
        return Size(w, h)

    @staticmethod
    def sanitize_name(name: str) -> str:
        return _UNSAFE_CHARS.sub("_", name)

    @staticmethod
    def output_name(design: str, mockup: str, ext: str = ".png") -> str:
        return ImageIO.sanitize_name(f"{ImageIO.stem(design)}_{ImageIO.stem(mockup)}{ext}")
