from typing import Optional


class BatchError(Exception):
    """Base class for batch job errors."""


class InputMissing(BatchError):
    """No folder/file chosen, or nothing usable in it. Fatal for the run."""


class UnsupportedFormat(BatchError):
    def __init__(self, path, allowed=None):
        self.path = path
        self.allowed = sorted(allowed) if allowed else []
        msg = f"Unsupported format: {path}"
        if self.allowed:
            msg += f" (expected one of {', '.join(self.allowed)})"
        super().__init__(msg)


class RegionNotFound(BatchError):
    def __init__(self, name: str, document: str):
        self.name = name
        self.document = document
        super().__init__(f'Layer "{name}" not found in {document}')


class PerItemFailure(BatchError):
    """A single design or mock-up could not be opened, transformed or exported."""
    def __init__(self, item: str, cause: Optional[BaseException] = None):
        self.item = item
        self.cause = cause
        super().__init__(f"{item}: {cause}" if cause else item)
