from __future__ import annotations


class ScannerError(Exception):
    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class NotMetadataError(ScannerError):
    def __init__(self, message: str = "Line is not a metadata line.") -> None:
        super().__init__(message, "NOT_METADATA")


class BadEstimateError(ScannerError):
    def __init__(self, estimate: str) -> None:
        super().__init__(f"Cannot parse time estimate: {estimate!r}", "BAD_ESTIMATE")
        self.estimate = estimate


class FileOpenError(ScannerError):
    pass


class ScanRootError(ScannerError):
    pass
