from typing import Dict, Optional, Sequence, Tuple
import logging
from core.context import ScanContext
from models.technology import Technology
from rules.rules_loader import get_rules

logger = logging.getLogger(__name__)


def detect_technologies(
    headers: Dict[str, str],
    html: str,
    rules: Sequence[Technology],
) -> Tuple[str, ...]:
    """
    Match the signature table against the Server and X-Powered-By headers
    and the page body.

    Matching is case-insensitive substring containment. Each technology is
    reported once, in table order.
    """
    headers = {k.lower(): v for k, v in (headers or {}).items()}
    signals = {
        "server": (headers.get("server") or "").lower(),
        "x-powered-by": (headers.get("x-powered-by") or "").lower(),
        "html": (html or "").lower(),
    }

    detected = []
    for tech in rules:
        if tech.name in detected:
            continue
        for rule in tech.evidence_rules:
            haystack = signals.get(rule.source, "")
            if haystack and rule.pattern in haystack:
                logger.debug(f"TechnologyAnalyzer matched {tech.name} on {rule.source} ({rule.pattern!r})")
                detected.append(tech.name)
                break
    return tuple(detected)


class TechnologyAnalyzer:
    def __init__(self, rules: Optional[Sequence[Technology]] = None):
        self.rules = tuple(rules) if rules is not None else get_rules()

    async def analyze(self, context: ScanContext) -> Tuple[str, ...]:
        technologies = detect_technologies(context.headers, context.html, self.rules)
        logger.debug(f"TechnologyAnalyzer: {len(technologies)} technologies detected")
        return technologies
