from __future__ import annotations
import warnings
from dataclasses import dataclass
from typing import Optional

import cv2
from PIL import Image

from mockbatch.config import Config
from mockbatch.imaging.document import Document


@dataclass(frozen=True)
class Preferences:
    """Process-wide settings a batch changes for its duration."""
    max_image_pixels: Optional[int]
    cv_threads: int
    history_states: int

    @classmethod
    def current(cls) -> "Preferences":
        return cls(
            max_image_pixels=Image.MAX_IMAGE_PIXELS,
            cv_threads=cv2.getNumThreads(),
            history_states=Document.history_states,
        )

    @classmethod
    def for_batch(cls, cfg: Config) -> "Preferences":
        return cls(
            max_image_pixels=cfg.MAX_IMAGE_PIXELS,
            cv_threads=cfg.CV_THREADS,
            history_states=cfg.HISTORY_STATES,
        )

    def apply(self):
        Image.MAX_IMAGE_PIXELS = self.max_image_pixels
        cv2.setNumThreads(self.cv_threads)
        Document.history_states = self.history_states


class BatchSession:
    """Applies batch preferences on enter and always restores the previous ones on exit.

    Warning filters are scoped the same way; with ``SHOW_WARNINGS`` off, Pillow's
    decompression-bomb and psd-tools warnings are silenced for the run.

        with BatchSession(cfg):
            pipeline.run(...)
    """

    def __init__(self, cfg: Config):
        self.batch = Preferences.for_batch(cfg)
        self.show_warnings = cfg.SHOW_WARNINGS
        self.saved: Optional[Preferences] = None
        self._warnings = None

    def __enter__(self) -> "BatchSession":
        self.saved = Preferences.current()
        self._warnings = warnings.catch_warnings()
        self._warnings.__enter__()
        if not self.show_warnings:
            warnings.simplefilter("ignore", Image.DecompressionBombWarning)
            warnings.filterwarnings("ignore", module="psd_tools")
        self.batch.apply()
        return self

    def __exit__(self, exc_type, exc, tb):
        try:
            if self.saved is not None:
                self.saved.apply()
        finally:
            self.saved = None
            if self._warnings is not None:
                self._warnings.__exit__(exc_type, exc, tb)
                self._warnings = None
        return False
