"""
Shared test fixtures for mockbatch tests.
"""
import json
from pathlib import Path

import pytest
from PIL import Image

from mockbatch.config import Config
from mockbatch.imaging.document import Document


@pytest.fixture
def cfg() -> Config:
    """Default configuration with the report disabled."""
    return Config(WRITE_REPORT=False)


@pytest.fixture(autouse=True)
def restore_history_depth():
    """BatchSession changes the class-wide history depth; keep tests isolated."""
    saved = Document.history_states
    yield
    Document.history_states = saved


@pytest.fixture
def padded_png(tmp_path: Path) -> Path:
    """60x40 transparent PNG with an opaque green block at (10, 5)-(30, 25)."""
    img = Image.new("RGBA", (60, 40), (0, 0, 0, 0))
    img.paste((0, 200, 0, 255), (10, 5, 30, 25))
    path = tmp_path / "padded.png"
    img.save(path, "PNG")
    return path


@pytest.fixture
def wide_design(tmp_path: Path) -> Path:
    """200x100 opaque red design."""
    path = tmp_path / "designs" / "wide.png"
    path.parent.mkdir(exist_ok=True)
    Image.new("RGBA", (200, 100), (255, 0, 0, 255)).save(path, "PNG")
    return path


@pytest.fixture
def tall_design(tmp_path: Path) -> Path:
    """50x200 opaque blue design."""
    path = tmp_path / "designs" / "tall.png"
    path.parent.mkdir(exist_ok=True)
    Image.new("RGBA", (50, 200), (0, 0, 255, 255)).save(path, "PNG")
    return path


@pytest.fixture
def manifest_mockup(tmp_path: Path) -> Path:
    """300x300 white mock-up; placeholder "Design_Smart " at (50, 100, 200, 100) inside a group."""
    folder = tmp_path / "mockups"
    folder.mkdir(exist_ok=True)
    Image.new("RGB", (300, 300), (255, 255, 255)).save(folder / "shirt.png")
    manifest = {
        "size": [300, 300],
        "layers": [
            {"name": "Shirt", "image": "shirt.png"},
            {"name": "Print area", "type": "group", "layers": [
                {"name": "Design_Smart ", "type": "smartobject", "bounds": [50, 100, 200, 100]},
            ]},
        ],
    }
    path = folder / "tee.json"
    path.write_text(json.dumps(manifest), encoding="utf-8")
    return path


@pytest.fixture
def flat_template(tmp_path: Path) -> Path:
    """200x200 white template with a black box at (40, 60)-(160, 140)."""
    folder = tmp_path / "mockups"
    folder.mkdir(exist_ok=True)
    img = Image.new("RGB", (200, 200), (255, 255, 255))
    img.paste((0, 0, 0), (40, 60, 160, 140))
    path = folder / "frame.png"
    img.save(path, "PNG")
    return path



class FakePsdLayer:
    """Stand-in for a psd-tools leaf layer; only what the loader reads."""

    def __init__(self, name, image, left=0, top=0, kind="pixel", visible=True):
        self.name = name
        self.kind = kind
        self.visible = visible
        self.bbox = (left, top, left + image.width, top + image.height)
        self._image = image

    def is_group(self):
        return False

    def composite(self):
        return self._image

    def topil(self):
        return self._image


class FakePsdGroup(list):
    def __init__(self, name, layers, opacity=255, visible=True):
        super().__init__(layers)
        self.name = name
        self.opacity = opacity
        self.visible = visible

    def is_group(self):
        return True


@pytest.fixture
def smart_psd_mockup(tmp_path: Path, mocker) -> Path:
    """300x300 PSD: white background, a half-opaque "Print" group holding the
    transparent 200x100 smart object at (50, 100), and a hidden black guide."""
    psd = FakePsdGroup("root", [
        FakePsdLayer("Background", Image.new("RGBA", (300, 300), (255, 255, 255, 255))),
        FakePsdGroup("Print", [
            FakePsdLayer("DESIGN_SMART", Image.new("RGBA", (200, 100), (0, 0, 0, 0)),
                         left=50, top=100, kind="smartobject"),
        ], opacity=128),
        FakePsdLayer("Guides", Image.new("RGBA", (10, 10), (0, 0, 0, 255)), visible=False),
    ])
    psd.size = (300, 300)
    folder = tmp_path / "mockups"
    folder.mkdir(exist_ok=True)
    path = folder / "hoodie.psd"
    path.write_bytes(b"")
    mocker.patch("mockbatch.imaging.mockup_loader.PSDImage.open", return_value=psd)
    return path


@pytest.fixture
def layered_psd(tmp_path: Path) -> Path:
    """80x60 PSD written by psd-tools: white "bg" and a red 20x10 "art" layer at (40, 30)."""
    from psd_tools import PSDImage
    from psd_tools.api.layers import PixelLayer

    psd = PSDImage.new("RGB", (80, 60))
    psd.append(PixelLayer.frompil(Image.new("RGB", (80, 60), (255, 255, 255)), psd, "bg"))
    psd.append(PixelLayer.frompil(Image.new("RGB", (20, 10), (255, 0, 0)), psd, "art", top=30, left=40))
    path = tmp_path / "mockups" / "card.psd"
    path.parent.mkdir(exist_ok=True)
    psd.save(str(path))
    return path
