import numpy as np
from PIL import Image

from mockbatch.imaging.placeholder_detector import dark_mask, to_bgr
from mockbatch.layout.geometry import Rect


class OverlayComposer:
    """Builds the frame layer that sits above the design in a flat template."""
    @staticmethod
    def build_frame_overlay(template: Image.Image, box: Rect, margin: int = 2) -> Image.Image:
        """Template with its dark pixels in and around ``box`` made transparent."""
        rgba = template.convert("RGBA")
        dark = dark_mask(to_bgr(rgba)) > 0
        near_box = np.zeros(dark.shape, dtype=bool)
        l, t = max(0, int(box.x) - margin), max(0, int(box.y) - margin)
        r, b = int(box.right) + margin, int(box.bottom) + margin
        near_box[t:b, l:r] = True
        arr = np.array(rgba)
        arr[dark & near_box, 3] = 0
        return Image.fromarray(arr)
