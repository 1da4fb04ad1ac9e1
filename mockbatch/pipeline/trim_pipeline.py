from __future__ import annotations
from pathlib import Path

from mockbatch.config import Config
from mockbatch.errors import InputMissing, UnsupportedFormat
from mockbatch.imaging.encoders import Encoders
from mockbatch.imaging.image_io import ImageIO
from mockbatch.imaging.trimmer import TransparentTrimmer
from mockbatch.pipeline.report import BatchReport
from mockbatch.services.file_service import FileService
from mockbatch.session import BatchSession


class TrimPipeline:
    """Trims transparent padding off every supported image in a folder, keeping its format."""

    def __init__(self, cfg: Config):
        self.cfg = cfg

    def run(self, input_dir=None, output_dir=None) -> BatchReport:
        in_dir = FileService.require_dir(input_dir or self.cfg.INPUT_DIR, "input folder")
        out_dir = FileService.ensure_dir(output_dir or self.cfg.OUTPUT_DIR, "output folder")

        files, rejected = FileService.split_supported(FileService.list_files(in_dir), self.cfg.TRIM_EXTS)
        if not files:
            raise InputMissing(f"No supported images found in {in_dir}")

        report = BatchReport("trim")
        for path in rejected:
            report.skip(Path(path).name, str(UnsupportedFormat(Path(path).name, self.cfg.TRIM_EXTS)))

        total = len(files)
        with BatchSession(self.cfg):
            for i, path in enumerate(files, start=1):
                name = Path(path).name
                try:
                    out_path = self.trim_file(Path(path), out_dir / name, report)
                    print(f"[{i}/{total}] OK -> {out_path.name}")
                except Exception as e:
                    report.fail(name, e)
                    print(f"[{i}/{total}] FAIL ({path}): {e}")

        print(f"Done. Finished processing {total} image(s). {report.summary()}")
        return report

    def trim_file(self, src: Path, dst: Path, report: BatchReport) -> Path:
        img = ImageIO.load_image(str(src))
        result = TransparentTrimmer.trim(img, self.cfg.ALPHA_THRESHOLD)
        icc = img.info.get("icc_profile") if self.cfg.EMBED_COLOR_PROFILE else None
        out_path = Encoders.save_like_source(
            result.image, dst,
            jpeg_quality=self.cfg.JPEG_QUALITY,
            png_compression=self.cfg.TRIM_PNG_COMPRESSION,
            icc_profile=icc,
        )
        report.success(src.name, out_path, reason=None if result.trimmed else "nothing to trim")
        return out_path
