from __future__ import annotations
import math
import re
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from PIL import Image

from mockbatch.imaging.encoders import Encoders
from mockbatch.imaging.image_io import ImageIO
from mockbatch.layout.geometry import Rect, Size

DEFAULT_HISTORY_STATES = 20


def _px(v: float) -> int:
    # half-up, not banker's rounding
    return int(math.floor(v + 0.5))


def normalize_name(name: str) -> str:
    return re.sub(r"\s+", "", name or "").lower()


def _with_opacity(img: Image.Image, opacity: float) -> Image.Image:
    if opacity >= 1.0:
        return img
    out = img.copy()
    alpha = out.getchannel("A").point(lambda a: int(a * max(0.0, opacity)))
    out.putalpha(alpha)
    return out


def _composite_at(canvas: Image.Image, img: Image.Image, x: int, y: int):
    """alpha_composite that tolerates negative destinations."""
    if x < 0 or y < 0:
        cx, cy = max(0, -x), max(0, -y)
        if cx >= img.width or cy >= img.height:
            return
        img = img.crop((cx, cy, img.width, img.height))
        x, y = max(0, x), max(0, y)
    if x >= canvas.width or y >= canvas.height:
        return
    canvas.alpha_composite(img, (x, y))


class Layer:
    kind = "layer"

    def __init__(self, name: str, visible: bool = True, opacity: float = 1.0):
        self.name = name
        self.visible = visible
        self.opacity = opacity

    def render_onto(self, canvas: Image.Image):
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.name!r}>"


class PixelLayer(Layer):
    kind = "pixel"

    def __init__(self, name: str, image: Image.Image, offset: Tuple[int, int] = (0, 0), **kw):
        super().__init__(name, **kw)
        self.image = image.convert("RGBA")
        self.offset = (int(offset[0]), int(offset[1]))

    @property
    def bounds(self) -> Rect:
        return Rect(self.offset[0], self.offset[1], self.image.width, self.image.height)

    def render_onto(self, canvas: Image.Image):
        _composite_at(canvas, _with_opacity(self.image, self.opacity), *self.offset)


class SmartObjectLayer(Layer):
    """Placed content kept at natural size plus a uniform scale and float position."""
    kind = "smartobject"

    def __init__(self, name: str, content: Image.Image, position: Tuple[float, float] = (0.0, 0.0),
                 scale: float = 1.0, source: Optional[str] = None, linked: bool = False, **kw):
        super().__init__(name, **kw)
        self._content = content.convert("RGBA")
        self.position = (float(position[0]), float(position[1]))
        self.scale = float(scale)
        self.source = source
        self.linked = linked

    @property
    def content(self) -> Image.Image:
        if self.linked and self.source:
            return ImageIO.load_rgba(self.source)
        return self._content

    @property
    def natural_size(self) -> Size:
        return Size(self._content.width, self._content.height)

    @property
    def bounds(self) -> Rect:
        nat = self.natural_size
        w = max(1, _px(nat.w * self.scale))
        h = max(1, _px(nat.h * self.scale))
        return Rect(_px(self.position[0]), _px(self.position[1]), w, h)

    @property
    def exact_center(self) -> Tuple[float, float]:
        nat = self.natural_size
        return (self.position[0] + nat.w * self.scale * 0.5,
                self.position[1] + nat.h * self.scale * 0.5)

    def state(self):
        return self._content, self.position, self.scale, self.source, self.linked

    def set_state(self, state):
        self._content, self.position, self.scale, self.source, self.linked = state

    def render_onto(self, canvas: Image.Image):
        b = self.bounds
        img = self.content
        size = (int(b.w), int(b.h))
        if img.size != size:
            img = img.resize(size, Image.LANCZOS)
        _composite_at(canvas, _with_opacity(img, self.opacity), int(b.x), int(b.y))


class GroupLayer(Layer):
    kind = "group"

    def __init__(self, name: str, layers: Optional[List[Layer]] = None, **kw):
        super().__init__(name, **kw)
        self.layers: List[Layer] = list(layers or [])  # bottom to top

    def render_onto(self, canvas: Image.Image):
        group = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        for layer in self.layers:
            if layer.visible:
                layer.render_onto(group)
        canvas.alpha_composite(_with_opacity(group, self.opacity))


@dataclass(frozen=True)
class Snapshot:
    states: Tuple[Tuple[SmartObjectLayer, tuple], ...]


class Document:
    """In-memory layered document: the editing surface mock-ups are worked on."""

    history_states = DEFAULT_HISTORY_STATES  # BatchSession overrides this

    def __init__(self, size: Tuple[int, int], layers: Optional[List[Layer]] = None,
                 path: Optional[Path] = None, history_states: Optional[int] = None):
        self.size = (int(size[0]), int(size[1]))
        self.layers: List[Layer] = list(layers or [])  # bottom to top
        self.path = Path(path) if path else None
        depth = history_states if history_states is not None else type(self).history_states
        self._history = deque(maxlen=max(1, depth))
        self.closed = False

    @property
    def name(self) -> str:
        return self.path.name if self.path else "Untitled"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        """Discard every change and drop pixel data. Documents are never saved back."""
        self.layers = []
        self._history.clear()
        self.closed = True

    # ----- layer tree -----
    def walk(self, top_down: bool = True) -> Iterator[Layer]:
        def _walk(layers):
            seq = reversed(layers) if top_down else layers
            for layer in seq:
                yield layer
                if isinstance(layer, GroupLayer):
                    yield from _walk(layer.layers)
        return _walk(self.layers)

    def smart_objects(self) -> List[SmartObjectLayer]:
        return [l for l in self.walk() if isinstance(l, SmartObjectLayer)]

    def find_smart_object(self, name: str) -> Optional[SmartObjectLayer]:
        """Depth-first from the top of the stack; ignores case and whitespace."""
        key = normalize_name(name)
        for layer in self.walk():
            if isinstance(layer, SmartObjectLayer) and normalize_name(layer.name) == key:
                return layer
        return None

    # ----- history -----
    def snapshot(self) -> Snapshot:
        return Snapshot(tuple((so, so.state()) for so in self.smart_objects()))

    def restore(self, snap: Snapshot):
        for so, state in snap.states:
            so.set_state(state)
        self._history.clear()

    def _record(self, layer: SmartObjectLayer):
        self._history.append((layer, layer.state()))

    @property
    def history_depth(self) -> int:
        return len(self._history)

    def step_backward(self) -> bool:
        if not self._history:
            return False
        layer, state = self._history.pop()
        layer.set_state(state)
        return True

    # ----- transforms -----
    def bounding_box(self, layer: Layer, excluding_effects: bool = True) -> Rect:
        # layers carry no effects, so both variants report the same box
        return layer.bounds

    def reset_transform(self, layer: SmartObjectLayer):
        """Back to natural size, keeping the current center."""
        self._record(layer)
        cx, cy = layer.exact_center
        nat = layer.natural_size
        layer.scale = 1.0
        layer.position = (cx - nat.w * 0.5, cy - nat.h * 0.5)

    def scale_layer(self, layer: SmartObjectLayer, percent: float):
        """Uniform scale relative to the current size, anchored at the center."""
        if percent <= 0:
            raise ValueError(f"Scale percent must be > 0, got {percent}")
        self._record(layer)
        cx, cy = layer.exact_center
        layer.scale *= percent / 100.0
        nat = layer.natural_size
        layer.position = (cx - nat.w * layer.scale * 0.5, cy - nat.h * layer.scale * 0.5)

    def translate_layer(self, layer: SmartObjectLayer, dx: float, dy: float):
        self._record(layer)
        layer.position = (layer.position[0] + dx, layer.position[1] + dy)

    def replace_contents(self, layer: SmartObjectLayer, source, embed: bool = True):
        """Swap the placed content. The current transform is carried over to the new content."""
        self._record(layer)
        cx, cy = layer.exact_center
        img = ImageIO.load_rgba(str(source))
        layer._content = img
        layer.source = str(source)
        layer.linked = not embed
        layer.position = (cx - img.width * layer.scale * 0.5, cy - img.height * layer.scale * 0.5)

    # ----- output -----
    def flatten(self) -> Image.Image:
        canvas = Image.new("RGBA", self.size, (0, 0, 0, 0))
        for layer in self.layers:
            if layer.visible:
                layer.render_onto(canvas)
        return canvas

    def export(self, out_path: Path, web: bool = True, compression: int = 5) -> Path:
        return Encoders.export_png(self.flatten(), Path(out_path), web=web, compression=compression)
