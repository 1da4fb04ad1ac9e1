from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

@dataclass(frozen=True)
class Config:
    # Paths (CLI / GUI normally override these)
    INPUT_DIR: Optional[Path] = None
    OUTPUT_DIR: Optional[Path] = None
    REPORT_NAME: str = "report.csv"
    WRITE_REPORT: bool = True

    # Accepted inputs (lower-case extensions)
    TRIM_EXTS: FrozenSet[str] = frozenset({".jpg", ".jpeg", ".png", ".tif", ".tiff", ".psd"})
    DESIGN_EXTS: FrozenSet[str] = frozenset({".png", ".jpg", ".jpeg", ".psd"})
    MOCKUP_EXTS: FrozenSet[str] = frozenset({".psd", ".psb", ".json", ".png", ".jpg", ".jpeg", ".tif", ".tiff"})

    # Mock-up placeholder
    TARGET_LAYER: str = "DESIGN_SMART"  # case/whitespace-insensitive
    DETECT_PLACEHOLDER: bool = True     # flat templates only
    PLACEHOLDER_BOX: Tuple[int, int, int, int] = (120, 160, 1840, 1000)  # l, t, r, b

    # Placement
    SCALE_EPSILON: float = 0.01  # percent

    # Export
    USE_SAVE_FOR_WEB: bool = True  # PNG-24, optimized, no profile/metadata
    PNG_COMPRESSION: int = 5       # 0..9, native PNG only
    TRIM_PNG_COMPRESSION: int = 9
    JPEG_QUALITY: int = 95
    EMBED_COLOR_PROFILE: bool = True

    # Trim
    ALPHA_THRESHOLD: int = 0  # alpha > threshold counts as content

    # Session preferences
    HISTORY_STATES: int = 2
    MAX_IMAGE_PIXELS: Optional[int] = 500_000_000  # warns above, refuses above twice this; None disables
    CV_THREADS: int = 1
    SHOW_WARNINGS: bool = False

    def __post_init__(self):
        if not 0 <= self.PNG_COMPRESSION <= 9:
            raise ValueError(f"PNG_COMPRESSION must be 0..9, got {self.PNG_COMPRESSION}")
        if not 0 <= self.ALPHA_THRESHOLD <= 254:
            raise ValueError(f"ALPHA_THRESHOLD must be 0..254, got {self.ALPHA_THRESHOLD}")
        if not 1 <= self.JPEG_QUALITY <= 100:
            raise ValueError(f"JPEG_QUALITY must be 1..100, got {self.JPEG_QUALITY}")
