"""Opens mock-up templates as layered :class:`Document` objects.

Three kinds of template are understood:

* ``.psd`` / ``.psb`` -- read with psd-tools. Groups are kept, smart-object
  layers become :class:`SmartObjectLayer`, everything else is rasterised
  (effects and blending baked in) into :class:`PixelLayer`.
* ``.json`` -- a layer manifest, e.g.::

      {"size": [1200, 900],
       "layers": [
         {"name": "Shirt", "image": "shirt.png"},
         {"name": "Print", "type": "group", "layers": [
           {"name": "DESIGN_SMART", "type": "smartobject", "bounds": [400, 250, 400, 400]}
         ]},
         {"name": "Folds", "image": "folds.png", "opacity": 0.6}
       ]}

  Layers are listed bottom to top; image paths are relative to the manifest.
* flat rasters -- the placeholder is the dark box found by
  :class:`PlaceholderDetector` (or ``Config.PLACEHOLDER_BOX``). The template is
  split into the placeholder and, above it, the template with the dark box
  punched out.
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import List

from PIL import Image
from psd_tools import PSDImage

from mockbatch.config import Config
from mockbatch.errors import RegionNotFound, UnsupportedFormat
from mockbatch.imaging.document import Document, GroupLayer, Layer, PixelLayer, SmartObjectLayer
from mockbatch.imaging.image_io import ImageIO
from mockbatch.imaging.overlay_composer import OverlayComposer
from mockbatch.imaging.placeholder_detector import PlaceholderDetector
from mockbatch.layout.geometry import Rect

PSD_EXTS = {".psd", ".psb"}
MANIFEST_EXTS = {".json"}
RASTER_EXTS = {".png", ".jpg", ".jpeg", ".tif", ".tiff"}


def open_mockup(path, cfg: Config = Config()) -> Document:
    path = Path(path)
    ext = path.suffix.lower()
    if ext in PSD_EXTS:
        return _open_psd(path)
    if ext in MANIFEST_EXTS:
        return _open_manifest(path)
    if ext in RASTER_EXTS:
        return _open_flat(path, cfg)
    raise UnsupportedFormat(path, PSD_EXTS | MANIFEST_EXTS | RASTER_EXTS)


# ----- PSD / PSB -----
def _open_psd(path: Path) -> Document:
    psd = PSDImage.open(path)
    return Document(psd.size, _convert_psd_layers(psd), path=path)


def _convert_psd_layers(group) -> List[Layer]:
    out: List[Layer] = []
    for layer in group:  # psd-tools iterates bottom to top
        if layer.is_group():
            out.append(GroupLayer(layer.name, _convert_psd_layers(layer),
                                  visible=layer.visible, opacity=layer.opacity / 255.0))
            continue
        img = layer.composite() if layer.visible else layer.topil()
        if img is None:
            continue
        left, top = layer.bbox[0], layer.bbox[1]
        if layer.kind == "smartobject":
            out.append(SmartObjectLayer(layer.name, img, position=(left, top), visible=layer.visible))
        else:
            out.append(PixelLayer(layer.name, img, offset=(left, top), visible=layer.visible))
    return out


# ----- JSON manifest -----
def _open_manifest(path: Path) -> Document:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    try:
        w, h = data["size"]
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"{path.name}: manifest needs \"size\": [w, h]") from e
    layers = [_manifest_layer(spec, path.parent) for spec in data.get("layers", [])]
    return Document((w, h), layers, path=path)


def _manifest_layer(spec: dict, base: Path) -> Layer:
    name = spec.get("name", "")
    kind = spec.get("type", "pixel").lower()
    common = {"visible": spec.get("visible", True), "opacity": float(spec.get("opacity", 1.0))}

    if kind == "group":
        return GroupLayer(name, [_manifest_layer(s, base) for s in spec.get("layers", [])], **common)

    if kind == "smartobject":
        bounds = Rect(*spec["bounds"]) if "bounds" in spec else None
        if "image" in spec:
            content = ImageIO.load_rgba(str(base / spec["image"]))
        elif bounds is not None:
            content = Image.new("RGBA", bounds.size.as_int(), (0, 0, 0, 0))
        else:
            raise ValueError(f'Smart object "{name}" needs "image" or "bounds"')
        if bounds is None:
            return SmartObjectLayer(name, content, position=(spec.get("x", 0), spec.get("y", 0)), **common)
        scale = min(bounds.w / content.width, bounds.h / content.height)
        so = SmartObjectLayer(name, content, position=(bounds.x, bounds.y), scale=scale, **common)
        # keep the placed box centered on the declared bounds
        bcx, bcy = bounds.center
        so.position = (bcx - content.width * scale * 0.5, bcy - content.height * scale * 0.5)
        return so

    if kind == "pixel":
        if "image" not in spec:
            raise ValueError(f'Pixel layer "{name}" needs "image"')
        img = ImageIO.load_rgba(str(base / spec["image"]))
        return PixelLayer(name, img, offset=(spec.get("x", 0), spec.get("y", 0)), **common)

    raise ValueError(f'Unknown layer type "{kind}" for "{name}"')


# ----- flat raster template -----
def _open_flat(path: Path, cfg: Config) -> Document:
    template = ImageIO.load_rgba(str(path))
    if cfg.DETECT_PLACEHOLDER:
        try:
            box = PlaceholderDetector.detect_dark_box(template)
        except LookupError as e:
            raise RegionNotFound(cfg.TARGET_LAYER, path.name) from e
    else:
        box = Rect.from_ltrb(*cfg.PLACEHOLDER_BOX)

    placeholder = Image.new("RGBA", box.size.as_int(), (0, 0, 0, 0))
    layers = [
        SmartObjectLayer(cfg.TARGET_LAYER, placeholder, position=(box.x, box.y)),
        PixelLayer("Frame", OverlayComposer.build_frame_overlay(template, box)),
    ]
    return Document(template.size, layers, path=path)
