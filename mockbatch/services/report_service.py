import csv
from pathlib import Path

from mockbatch.pipeline.report import BatchReport

FIELDS = ["job", "item", "target", "status", "reason", "output"]


class ReportService:
    """Writes a batch report as CSV."""
    def __init__(self, csv_path: Path):
        self.csv_path = Path(csv_path)

    def write(self, report: BatchReport) -> Path:
        self.csv_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.csv_path, "w", encoding="utf-8-sig", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=FIELDS)
            writer.writeheader()
            for r in report.results:
                writer.writerow({
                    "job": report.job,
                    "item": r.item,
                    "target": r.target or "",
                    "status": r.status,
                    "reason": r.reason or "",
                    "output": str(r.output) if r.output else "",
                })
        return self.csv_path

    def read_rows(self):
        with open(self.csv_path, "r", encoding="utf-8-sig", newline="") as f:
            return list(csv.DictReader(f))
