import cv2
import numpy as np
from PIL import Image

from mockbatch.layout.geometry import Rect

# HSV range treated as "placeholder black"
DARK_LOWER = np.array([0, 0, 0], np.uint8)
DARK_UPPER = np.array([179, 80, 60], np.uint8)


def to_bgr(img: Image.Image) -> np.ndarray:
    return cv2.cvtColor(np.array(img.convert("RGB")), cv2.COLOR_RGB2BGR)


def dark_mask(template_bgr: np.ndarray) -> np.ndarray:
    hsv = cv2.cvtColor(template_bgr, cv2.COLOR_BGR2HSV)
    return cv2.inRange(hsv, DARK_LOWER, DARK_UPPER)


class PlaceholderDetector:
    """Detects the dark placeholder rectangle within a flat template image."""
    @staticmethod
    def detect_dark_box(template: Image.Image, inset: int = 2) -> Rect:
        mask = dark_mask(to_bgr(template))
        cnts, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        if not cnts:
            raise LookupError("No dark placeholder rectangle found in template.")
        x, y, w, h = cv2.boundingRect(max(cnts, key=cv2.contourArea))
        # Stay off the anti-aliased edge
        return Rect(x + inset, y + inset, max(1, w - 2 * inset), max(1, h - 2 * inset))
