from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Sequence

from mockbatch.config import Config
from mockbatch.errors import InputMissing, PerItemFailure, RegionNotFound, UnsupportedFormat
from mockbatch.imaging.image_io import ImageIO
from mockbatch.imaging.mockup_loader import open_mockup
from mockbatch.layout.geometry import Size
from mockbatch.layout.placement import fit_and_center
from mockbatch.pipeline.report import BatchReport
from mockbatch.services.file_service import FileService
from mockbatch.session import BatchSession


def _label(path_or_url: str) -> str:
    return path_or_url if ImageIO.is_url(path_or_url) else Path(path_or_url).name


class MockupPipeline:
    """Drops every design into the placeholder of every mock-up and exports flattened PNGs.

    Each mock-up is opened once; after every design the document is rolled back
    to a snapshot taken before the first replacement.
    """

    def __init__(self, cfg: Config):
        self.cfg = cfg
        self.dim_cache: Dict[str, Size] = {}

    def run(self, designs: Sequence, mockups: Sequence, out_dir=None) -> BatchReport:
        designs = FileService.require_files(designs, "designs")
        mockups = FileService.require_files(mockups, "mock-ups")
        out_dir = FileService.ensure_dir(out_dir or self.cfg.OUTPUT_DIR, "output folder")

        report = BatchReport("mockups")
        designs, bad_designs = FileService.split_supported(designs, self.cfg.DESIGN_EXTS)
        mockups, bad_mockups = FileService.split_supported(mockups, self.cfg.MOCKUP_EXTS)
        for p in bad_designs:
            report.skip(_label(p), str(UnsupportedFormat(_label(p), self.cfg.DESIGN_EXTS)))
        for p in bad_mockups:
            report.skip(_label(p), str(UnsupportedFormat(_label(p), self.cfg.MOCKUP_EXTS)))
        if not designs:
            raise InputMissing("No supported designs selected")
        if not mockups:
            raise InputMissing("No supported mock-ups selected")

        with BatchSession(self.cfg):
            readable = self.measure_designs(designs, report)
            total = len(readable) * len(mockups)
            done = 0
            for mockup in mockups:
                done = self.process_mockup(mockup, readable, out_dir, report, done, total)

        print(f"All exports finished. Saved to: {out_dir.resolve()} | {report.summary()}")
        return report

    def measure_designs(self, designs: List[str], report: BatchReport) -> List[str]:
        """Natural size of each design, read once. Unreadable designs are dropped."""
        readable = []
        for design in designs:
            if design not in self.dim_cache:
                try:
                    size = ImageIO.measure(design)
                except Exception as e:
                    report.skip(_label(design), f"unreadable design: {e}")
                    print(f"Skip design: {design} - {e}")
                    continue
                if size.is_empty:
                    report.skip(_label(design), "design has no pixels")
                    print(f"Skip design: {design} - empty")
                    continue
                self.dim_cache[design] = size
            readable.append(design)
        return readable

    def process_mockup(self, mockup: str, designs: List[str], out_dir: Path,
                       report: BatchReport, done: int, total: int) -> int:
        mock_name = _label(mockup)
        try:
            doc = open_mockup(mockup, self.cfg)
        except RegionNotFound as e:
            report.skip(mock_name, str(e))
            print(f"SKIP {e}")
            return done + len(designs)
        except Exception as e:
            report.fail(mock_name, PerItemFailure(mock_name, e))
            print(f"FAIL mock-up {mockup}: {e}")
            return done + len(designs)

        with doc:
            so = doc.find_smart_object(self.cfg.TARGET_LAYER)
            if so is None:
                e = RegionNotFound(self.cfg.TARGET_LAYER, mock_name)
                report.skip(mock_name, str(e))
                print(f"SKIP {e}")
                return done + len(designs)

            # Placeholder box, recorded once before any replacement
            box = doc.bounding_box(so, excluding_effects=True)
            if box.is_empty:
                report.skip(mock_name, f'Layer "{so.name}" has an empty box')
                return done + len(designs)
            base_state = doc.snapshot()

            for design in designs:
                done += 1
                design_name = _label(design)
                out_path = out_dir / ImageIO.output_name(design, mockup)
                try:
                    doc.replace_contents(so, design, embed=True)
                    fit_and_center(doc, so, box, self.dim_cache[design], self.cfg.SCALE_EPSILON)
                    doc.export(out_path, web=self.cfg.USE_SAVE_FOR_WEB, compression=self.cfg.PNG_COMPRESSION)
                    report.success(design_name, out_path, target=mock_name)
                    print(f"[{done}/{total}] OK -> {out_path.name}")
                except Exception as e:
                    report.fail(design_name, e, target=mock_name)
                    print(f"[{done}/{total}] FAIL ({design} on {mockup}): {e}")
                finally:
                    doc.restore(base_state)
        return done
