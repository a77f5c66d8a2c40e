import re
import logging

from core.context import ScanContext
from models.report import SeoFindings

logger = logging.getLogger(__name__)


def _attribute_pattern(tag: str, attribute: str, value: str) -> "re.Pattern[str]":
    """Match <tag ... attribute=value ...> with any attribute order and
    double, single or no quotes around the value."""
    value = re.escape(value)
    return re.compile(
        rf"<{tag}\s(?:[^>]*?\s)?{attribute}\s*=\s*(?:\"{value}\"|'{value}'|{value}(?=[\s/>]))",
        re.IGNORECASE,
    )


TITLE_PATTERN = re.compile(r"<title(?:\s[^>]*)?>(.*?)</title\s*>", re.IGNORECASE | re.DOTALL)
DESCRIPTION_PATTERN = _attribute_pattern("meta", "name", "description")
VIEWPORT_PATTERN = _attribute_pattern("meta", "name", "viewport")
CANONICAL_PATTERN = _attribute_pattern("link", "rel", "canonical")


def has_title(html: str) -> bool:
    """True when the page has a <title> with non-whitespace text."""
    return any(match.group(1).strip() for match in TITLE_PATTERN.finditer(html))


def check_seo(html: str, has_robots_txt: bool, has_sitemap: bool) -> SeoFindings:
    html = html or ""
    return SeoFindings(
        has_title=has_title(html),
        has_description=bool(DESCRIPTION_PATTERN.search(html)),
        has_viewport=bool(VIEWPORT_PATTERN.search(html)),
        has_canonical=bool(CANONICAL_PATTERN.search(html)),
        has_robots_txt=has_robots_txt,
        has_sitemap=has_sitemap,
    )


class SeoAnalyzer:
    """On-page SEO basics plus robots.txt / sitemap.xml reachability."""

    async def analyze(self, context: ScanContext) -> SeoFindings:
        # Scored once, with the reachability results already in the context
        findings = check_seo(context.html, context.has_robots_txt, context.has_sitemap)
        logger.debug(f"SeoAnalyzer: {sum(findings.checks)}/{len(findings.checks)} checks passed, score {findings.score}")
        return findings
