import asyncio
import httpx
import logging
from typing import Optional

from analyzers.headers import SecurityHeadersAnalyzer
from analyzers.seo import SeoAnalyzer
from analyzers.technologies import TechnologyAnalyzer
from core.context import ScanContext, TLSInfo
from core.grading import calculate_security_grade
from core.normalizer import normalize_url
from core.report import assemble_report
from fetch.dns_client import DEFAULT_DNS_TIMEOUT, DEFAULT_DOH_ENDPOINT, get_dns_records
from fetch.http_client import AUXILIARY_TIMEOUT, DEFAULT_TIMEOUT, check_reachable, probe_url
from fetch.tls_client import DEFAULT_TLS_TIMEOUT, get_tls_info
from models.report import AnalysisReport
from models.target import NormalizedTarget
from rules.rules_loader import get_rules


class Engine:
    """Analyzes one URL per call. Holds only immutable configuration, so a
    single instance can serve many concurrent analyses."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        auxiliary_timeout: float = AUXILIARY_TIMEOUT,
        dns_timeout: float = DEFAULT_DNS_TIMEOUT,
        doh_endpoint: str = DEFAULT_DOH_ENDPOINT,
        inspect_tls: bool = True,
        tls_timeout: float = DEFAULT_TLS_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            timeout: Main page fetch timeout in seconds
            auxiliary_timeout: robots.txt / sitemap.xml fetch timeout in seconds
            dns_timeout: Per record type DNS-over-HTTPS timeout in seconds
            doh_endpoint: DNS-over-HTTPS JSON endpoint
            inspect_tls: Read issuer/expiry/protocol from a TLS handshake
            tls_timeout: TLS handshake timeout in seconds
            transport: Optional httpx transport for every HTTP request
        """
        self.logger = logging.getLogger(__name__)
        self.timeout = timeout
        self.auxiliary_timeout = auxiliary_timeout
        self.dns_timeout = dns_timeout
        self.doh_endpoint = doh_endpoint
        self.inspect_tls = inspect_tls
        self.tls_timeout = tls_timeout
        self.transport = transport

        self.headers_analyzer = SecurityHeadersAnalyzer()
        self.seo_analyzer = SeoAnalyzer()
        self.technology_analyzer = TechnologyAnalyzer(get_rules())
        self.logger.debug(f"Loaded {len(self.technology_analyzer.rules)} technology signatures")

    async def analyze(self, url: Optional[str]) -> AnalysisReport:
        """Normalize, probe and analyze a URL.

        Raises:
            InvalidInputError: when no usable URL was supplied
        """
        target = normalize_url(url)
        self.logger.info(f"Analyzing {target.normalized_url}")
        context = await self.scan_url(target)
        report = await self.analyze_context(context)
        self.logger.info(
            f"Finished {target.normalized_url}: grade {report.security.grade}, "
            f"{len(report.technologies)} technologies, {report.performance.response_time_ms}ms"
        )
        return report

    async def scan_url(self, target: NormalizedTarget) -> ScanContext:
        """Run every network probe for the target concurrently.

        Each probe carries its own timeout and degrades to an empty result
        on failure, so a slow or failing probe never affects its siblings.
        """
        logger = self.logger
        origin = target.origin
        logger.debug(f"Probing {target.normalized_url}, {origin}/robots.txt, {origin}/sitemap.xml and DNS for {target.domain}")

        main, has_robots_txt, has_sitemap, dns, tls = await asyncio.gather(
            probe_url(target.normalized_url, timeout=self.timeout, transport=self.transport),
            check_reachable(f"{origin}/robots.txt", timeout=self.auxiliary_timeout, transport=self.transport),
            check_reachable(f"{origin}/sitemap.xml", timeout=self.auxiliary_timeout, transport=self.transport),
            get_dns_records(target.domain, timeout=self.dns_timeout, endpoint=self.doh_endpoint, transport=self.transport),
            self._inspect_tls(target),
        )

        if main.fetch_failed:
            logger.info(f"Main page fetch failed for {target.normalized_url} after {main.response_time_ms}ms")
        else:
            logger.debug(f"Main page: status={main.status_code}, {len(main.body)} chars in {main.response_time_ms}ms")
        logger.debug(f"robots.txt: {has_robots_txt}, sitemap.xml: {has_sitemap}, A records: {len(dns.a_records)}")

        return ScanContext(
            target=target,
            main=main,
            has_robots_txt=has_robots_txt,
            has_sitemap=has_sitemap,
            dns=dns,
            tls=tls,
        )

    async def _inspect_tls(self, target: NormalizedTarget) -> Optional[TLSInfo]:
        if not self.inspect_tls or not target.is_https:
            return None
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(None, get_tls_info, target.domain, target.port, self.tls_timeout),
                timeout=self.tls_timeout + 1,
            )
        except asyncio.TimeoutError:
            self.logger.debug(f"TLS inspection for {target.domain} timed out")
            return None

    async def analyze_context(self, context: ScanContext) -> AnalysisReport:
        header_findings, seo, technologies = await asyncio.gather(
            self.headers_analyzer.analyze(context),
            self.seo_analyzer.analyze(context),
            self.technology_analyzer.analyze(context),
        )
        security = calculate_security_grade(context.ssl_valid, header_findings)
        return assemble_report(context, header_findings, seo, technologies, security)


async def analyze_url(url: Optional[str], **engine_options) -> AnalysisReport:
    """Analyze a single URL with a throwaway Engine."""
    return await Engine(**engine_options).analyze(url)
