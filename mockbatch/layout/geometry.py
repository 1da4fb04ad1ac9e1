from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Size:
    w: float
    h: float

    @property
    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def as_int(self) -> Tuple[int, int]:
        return int(round(self.w)), int(round(self.h))


@dataclass(frozen=True)
class Rect:
    """Axis-aligned pixel box. Snapshot only; re-measure after every transform."""
    x: float
    y: float
    w: float
    h: float

    def __post_init__(self):
        if self.w < 0 or self.h < 0:
            raise ValueError(f"Rect size must be >= 0, got {self.w}x{self.h}")

    @classmethod
    def from_ltrb(cls, l: float, t: float, r: float, b: float) -> "Rect":
        return cls(l, t, r - l, b - t)

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.w * 0.5, self.y + self.h * 0.5

    @property
    def size(self) -> Size:
        return Size(self.w, self.h)

    @property
    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def scaled_about_center(self, percent: float) -> "Rect":
        cx, cy = self.center
        w = self.w * percent / 100.0
        h = self.h * percent / 100.0
        return Rect(cx - w * 0.5, cy - h * 0.5, w, h)


@dataclass(frozen=True)
class PlacementResult:
    scale_percent: float
    dx: float
    dy: float
    needs_scale: bool = True

    @property
    def needs_translate(self) -> bool:
        return self.dx != 0 or self.dy != 0
