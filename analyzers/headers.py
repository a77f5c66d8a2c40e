from typing import Dict, Tuple
import logging
from core.context import ScanContext
from models.report import SecurityHeaderFindings

# Header checklist, in SecurityHeaderFindings field order
SECURITY_HEADERS: Tuple[Tuple[str, str], ...] = (
    ("strict-transport-security", "strict_transport_security"),
    ("x-frame-options", "x_frame_options"),
    ("x-content-type-options", "x_content_type_options"),
    ("content-security-policy", "content_security_policy"),
    ("x-xss-protection", "x_xss_protection"),
    ("referrer-policy", "referrer_policy"),
)


def check_security_headers(headers: Dict[str, str]) -> SecurityHeaderFindings:
    """Presence-only check; any value, even an empty one, counts."""
    present = {name.lower() for name in (headers or {})}
    return SecurityHeaderFindings(
        **{field: header in present for header, field in SECURITY_HEADERS}
    )


class SecurityHeadersAnalyzer:
    """Presence check for the six recommended security response headers."""

    async def analyze(self, context: ScanContext) -> SecurityHeaderFindings:
        logger = logging.getLogger(__name__)
        # A failed fetch has no headers, which scores as all missing
        findings = check_security_headers(context.headers)
        logger.debug(f"SecurityHeadersAnalyzer: {sum(findings.checks)}/{len(findings.checks)} present, score {findings.score}")
        return findings
