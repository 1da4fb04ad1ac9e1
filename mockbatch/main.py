import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from mockbatch.config import Config
from mockbatch.errors import InputMissing
from mockbatch.pipeline.mockup_pipeline import MockupPipeline
from mockbatch.pipeline.report import BatchReport
from mockbatch.pipeline.trim_pipeline import TrimPipeline
from mockbatch.services.report_service import ReportService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mockbatch",
        description="Batch transparent trim and mock-up export",
    )
    parser.add_argument("--no-report", action="store_true", help="Do not write report.csv to the output folder")
    parser.add_argument("--show-warnings", action="store_true", help="Keep Pillow/psd-tools warnings visible")
    sub = parser.add_subparsers(dest="command", required=True)

    trim = sub.add_parser("trim", help="Trim transparent padding and re-save in the original format")
    trim.add_argument("input_dir", nargs="?", default=None, help="Folder with JPG/PNG/TIF/PSD images")
    trim.add_argument("output_dir", nargs="?", default=None, help="Folder for the trimmed copies")
    trim.add_argument("--alpha-threshold", type=int, default=Config.ALPHA_THRESHOLD,
                      help="Alpha at or below this counts as transparent (default: %(default)s)")
    trim.add_argument("--jpeg-quality", type=int, default=Config.JPEG_QUALITY)

    mock = sub.add_parser("mockups", help="Place designs into mock-up placeholders and export PNGs")
    mock.add_argument("--designs", nargs="+", default=[], help="Design images (PNG/JPG/PSD) or http(s) URLs")
    mock.add_argument("--mockups", nargs="+", default=[], help="Mock-ups (PSD/PSB, JSON manifest, or flat template)")
    mock.add_argument("--out", dest="out_dir", default=None, help="Output folder")
    mock.add_argument("--layer", default=Config.TARGET_LAYER, help="Placeholder layer name (default: %(default)s)")
    mock.add_argument("--png-compression", type=int, default=Config.PNG_COMPRESSION,
                      help="0-9, only with --native-png (default: %(default)s)")
    mock.add_argument("--native-png", action="store_true", help="Plain PNG save instead of web-optimized PNG-24")
    mock.add_argument("--box", nargs=4, type=int, metavar=("L", "T", "R", "B"), default=None,
                      help="Placeholder box for flat templates instead of dark-box detection")
    return parser


def config_from_args(args) -> Config:
    cfg = Config(WRITE_REPORT=not args.no_report, SHOW_WARNINGS=args.show_warnings)
    if args.command == "trim":
        return replace(cfg, ALPHA_THRESHOLD=args.alpha_threshold, JPEG_QUALITY=args.jpeg_quality)
    cfg = replace(
        cfg,
        TARGET_LAYER=args.layer,
        PNG_COMPRESSION=args.png_compression,
        USE_SAVE_FOR_WEB=not args.native_png,
    )
    if args.box:
        cfg = replace(cfg, DETECT_PLACEHOLDER=False, PLACEHOLDER_BOX=tuple(args.box))
    return cfg


def write_report(cfg: Config, report: BatchReport, out_dir) -> Optional[Path]:
    if not cfg.WRITE_REPORT or not out_dir:
        return None
    path = ReportService(Path(out_dir) / cfg.REPORT_NAME).write(report)
    print(f"Report: {path}")
    return path


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = config_from_args(args)
    except ValueError as e:
        print(f"Invalid option: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "trim":
            report = TrimPipeline(cfg).run(args.input_dir, args.output_dir)
            out_dir = args.output_dir
        else:
            report = MockupPipeline(cfg).run(args.designs, args.mockups, args.out_dir)
            out_dir = args.out_dir
    except InputMissing as e:
        print(f"Nothing to do: {e}", file=sys.stderr)
        return 2

    write_report(cfg, report, out_dir)
    return 0 if report.all_ok else 1


if __name__ == "__main__":
    sys.exit(main())
