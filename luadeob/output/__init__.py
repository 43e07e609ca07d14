"""Output subsystem — writes cleaned source and technique reports."""

from luadeob.output.writer import ResultWriter

__all__ = [
    "ResultWriter",
]
