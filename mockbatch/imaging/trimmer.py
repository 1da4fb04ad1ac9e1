from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np
from PIL import Image


@dataclass(frozen=True)
class TrimResult:
    image: Image.Image
    box: Optional[Tuple[int, int, int, int]]  # l, t, r, b of kept content; None if untouched

    @property
    def trimmed(self) -> bool:
        return self.box is not None


class TransparentTrimmer:
    """Crops transparent padding on all four sides."""

    @staticmethod
    def has_alpha(img: Image.Image) -> bool:
        return img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info)

    @staticmethod
    def content_box(img: Image.Image, alpha_threshold: int = 0) -> Optional[Tuple[int, int, int, int]]:
        """Bounding box of pixels with alpha > threshold, or None if there are none."""
        alpha = np.array(img.convert("RGBA").getchannel("A"))
        mask = (alpha > alpha_threshold).astype(np.uint8)
        pts = cv2.findNonZero(mask)
        if pts is None:
            return None
        x, y, w, h = cv2.boundingRect(pts)
        return x, y, x + w, y + h

    @staticmethod
    def trim(img: Image.Image, alpha_threshold: int = 0) -> TrimResult:
        # No alpha or nothing opaque: leave as is
        if not TransparentTrimmer.has_alpha(img):
            return TrimResult(img, None)
        box = TransparentTrimmer.content_box(img, alpha_threshold)
        if box is None or box == (0, 0, img.width, img.height):
            return TrimResult(img, None)
        return TrimResult(img.crop(box), box)
