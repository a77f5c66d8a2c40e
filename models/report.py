from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


def percentage(count: int, total: int) -> int:
    """Whole-number percentage, rounding halves up (1/6 -> 17, 4/6 -> 67)."""
    if total <= 0:
        return 0
    return int(count * 100 / total + 0.5)


@dataclass(frozen=True)
class DnsRecordSet:
    """DNS answer data per record type. Failed lookups stay empty, never None."""
    a_records: Tuple[str, ...] = ()
    mx_records: Tuple[str, ...] = ()
    ns_records: Tuple[str, ...] = ()
    txt_records: Tuple[str, ...] = ()


@dataclass(frozen=True)
class HttpProbeResult:
    """Outcome of one GET against the target origin."""
    status_ok: bool
    headers: Dict[str, str] # lowercased header name -> value
    body: str
    response_time_ms: int
    fetch_failed: bool
    status_code: Optional[int] = None

    @classmethod
    def failed(cls, response_time_ms: int) -> "HttpProbeResult":
        return cls(
            status_ok=False,
            headers={},
            body="",
            response_time_ms=response_time_ms,
            fetch_failed=True,
        )


@dataclass(frozen=True)
class SecurityHeaderFindings:
    strict_transport_security: bool = False
    x_frame_options: bool = False
    x_content_type_options: bool = False
    content_security_policy: bool = False
    x_xss_protection: bool = False
    referrer_policy: bool = False

    @property
    def checks(self) -> Tuple[bool, ...]:
        return (
            self.strict_transport_security,
            self.x_frame_options,
            self.x_content_type_options,
            self.content_security_policy,
            self.x_xss_protection,
            self.referrer_policy,
        )

    @property
    def score(self) -> int:
        return percentage(sum(self.checks), len(self.checks))


@dataclass(frozen=True)
class SeoFindings:
    has_title: bool = False
    has_description: bool = False
    has_viewport: bool = False
    has_canonical: bool = False
    has_robots_txt: bool = False
    has_sitemap: bool = False

    @property
    def checks(self) -> Tuple[bool, ...]:
        return (
            self.has_title,
            self.has_description,
            self.has_viewport,
            self.has_canonical,
            self.has_robots_txt,
            self.has_sitemap,
        )

    @property
    def score(self) -> int:
        return percentage(sum(self.checks), len(self.checks))


@dataclass(frozen=True)
class SecurityAssessment:
    grade: str
    score: int
    issues: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = () # paired 1:1 with issues


@dataclass(frozen=True)
class BasicInfo:
    domain: str
    ip: Optional[str]
    protocol: str
    port: int


@dataclass(frozen=True)
class SslInfo:
    """SSL summary. `valid` and `grade` are heuristic; the rest come from a
    TLS handshake when one succeeded and are None (unknown) otherwise."""
    valid: bool
    grade: str
    issuer: Optional[str] = None
    expires_at: Optional[str] = None
    protocol: Optional[str] = None


@dataclass(frozen=True)
class HeaderInfo:
    server: Optional[str]
    x_powered_by: Optional[str]
    content_type: Optional[str]
    security_headers: SecurityHeaderFindings = field(default_factory=SecurityHeaderFindings)


@dataclass(frozen=True)
class PerformanceInfo:
    response_time_ms: int
    content_length: Optional[int]
    compression: bool


@dataclass(frozen=True)
class AnalysisReport:
    url: str
    timestamp: str
    basic_info: BasicInfo
    ssl: SslInfo
    dns: DnsRecordSet
    headers: HeaderInfo
    performance: PerformanceInfo
    technologies: Tuple[str, ...]
    seo: SeoFindings
    security: SecurityAssessment
