from dataclasses import dataclass, field
from typing import Tuple

# Where a signature looks for its substring
SIGNAL_SOURCES = ("server", "x-powered-by", "html")

@dataclass(frozen=True)
class EvidenceRule:
    """A single substring signature for detecting a technology."""
    source: str # one of SIGNAL_SOURCES
    pattern: str # lowercase substring, matched case-insensitively

@dataclass(frozen=True)
class Technology:
    """A technology and the signatures that reveal it."""
    name: str
    evidence_rules: Tuple[EvidenceRule, ...] = field(default_factory=tuple)
