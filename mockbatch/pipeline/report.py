from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

OK = "ok"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass(frozen=True)
class ItemResult:
    item: str
    status: str
    target: Optional[str] = None  # mock-up, for design x mock-up pairs
    reason: Optional[str] = None
    output: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.status == OK


@dataclass
class BatchReport:
    """Per-item outcomes of one batch run."""
    job: str
    results: List[ItemResult] = field(default_factory=list)

    def success(self, item: str, output: Path, target: Optional[str] = None, reason: Optional[str] = None):
        self.results.append(ItemResult(str(item), OK, target, reason, output))

    def skip(self, item: str, reason: str, target: Optional[str] = None):
        self.results.append(ItemResult(str(item), SKIPPED, target, reason))

    def fail(self, item: str, error, target: Optional[str] = None):
        self.results.append(ItemResult(str(item), FAILED, target, str(error)))

    def _count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def succeeded(self) -> int:
        return self._count(OK)

    @property
    def skipped(self) -> int:
        return self._count(SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(FAILED)

    @property
    def all_ok(self) -> bool:
        """Skipped items are reported but do not count as failures."""
        return self.failed == 0

    @property
    def outputs(self) -> List[Path]:
        return [r.output for r in self.results if r.ok and r.output]

    def summary(self) -> str:
        return f"{self.job}: {self.succeeded} ok, {self.skipped} skipped, {self.failed} failed"
