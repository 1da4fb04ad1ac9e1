from pathlib import Path
from typing import Iterable, List, Tuple

from mockbatch.errors import InputMissing
from mockbatch.imaging.image_io import ImageIO


class FileService:
    """Folder listing and input validation for the batch jobs."""

    @staticmethod
    def require_dir(folder, what: str) -> Path:
        if not folder:
            raise InputMissing(f"No {what} selected")
        folder = Path(folder)
        if not folder.is_dir():
            raise InputMissing(f"{what.capitalize()} does not exist: {folder}")
        return folder

    @staticmethod
    def ensure_dir(folder, what: str) -> Path:
        if not folder:
            raise InputMissing(f"No {what} selected")
        folder = Path(folder)
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    @staticmethod
    def require_files(files: Iterable, what: str) -> List[str]:
        items = [str(f) for f in (files or []) if str(f).strip()]
        if not items:
            raise InputMissing(f"No {what} selected")
        return items

    @staticmethod
    def split_supported(paths: Iterable, exts) -> Tuple[List[str], List[str]]:
        """(supported, unsupported), extension match ignores case."""
        ok, rejected = [], []
        for p in paths:
            (ok if ImageIO.suffix(str(p)) in exts else rejected).append(str(p))
        return ok, rejected

    @staticmethod
    def list_files(folder: Path) -> List[Path]:
        return sorted((p for p in folder.iterdir() if p.is_file()), key=lambda p: p.name.lower())
