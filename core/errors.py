"""Exception types raised by the analysis engine."""
from typing import Optional


class AnalysisError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(AnalysisError):
    """The caller supplied no usable URL. Terminal, no partial report."""


class ProbeFailure(AnalysisError):
    """A single network probe failed.

    Raised inside the fetch layer and recovered there by degrading the
    affected field to its empty default. Never reaches the caller.
    """

    def __init__(self, probe: str, target: str, reason: Optional[str] = None):
        self.probe = probe
        self.target = target
        self.reason = reason
        message = f"{probe} probe failed for {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
