"""Composes analyzer output into the final report and its JSON shape."""
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from core.context import ScanContext
from models.report import (
    AnalysisReport,
    BasicInfo,
    HeaderInfo,
    PerformanceInfo,
    SecurityAssessment,
    SecurityHeaderFindings,
    SeoFindings,
    SslInfo,
)

COMPRESSION_ENCODINGS = ("gzip", "br", "deflate")


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _content_length(headers: Dict[str, str], body: str) -> int:
    try:
        declared = int(headers.get("content-length", ""))
    except ValueError:
        declared = 0
    return declared if declared > 0 else len(body)


def assemble_report(
    context: ScanContext,
    header_findings: SecurityHeaderFindings,
    seo: SeoFindings,
    technologies: Sequence[str],
    security: SecurityAssessment,
    timestamp: Optional[str] = None,
) -> AnalysisReport:
    target = context.target
    headers = context.headers
    tls = context.tls or {}
    ssl_valid = context.ssl_valid

    return AnalysisReport(
        url=target.normalized_url,
        timestamp=timestamp or utc_timestamp(),
        basic_info=BasicInfo(
            domain=target.domain,
            ip=context.dns.a_records[0] if context.dns.a_records else None,
            protocol=target.scheme,
            port=target.port,
        ),
        ssl=SslInfo(
            valid=ssl_valid,
            grade="A" if ssl_valid else "F",
            issuer=tls.get("issuer"),
            expires_at=tls.get("expires_at"),
            protocol=tls.get("protocol"),
        ),
        dns=context.dns,
        headers=HeaderInfo(
            server=headers.get("server"),
            x_powered_by=headers.get("x-powered-by"),
            content_type=headers.get("content-type"),
            security_headers=header_findings,
        ),
        performance=PerformanceInfo(
            response_time_ms=context.main.response_time_ms if context.main else 0,
            content_length=_content_length(headers, context.html),
            compression=any(
                encoding in headers.get("content-encoding", "").lower()
                for encoding in COMPRESSION_ENCODINGS
            ),
        ),
        technologies=tuple(technologies),
        seo=seo,
        security=security,
    )


def serialize_report(report: AnalysisReport) -> Dict[str, Any]:
    """The camelCase JSON object returned to callers."""
    security_headers = report.headers.security_headers
    return {
        "url": report.url,
        "timestamp": report.timestamp,
        "basicInfo": {
            "domain": report.basic_info.domain,
            "ip": report.basic_info.ip,
            "protocol": report.basic_info.protocol,
            "port": report.basic_info.port,
        },
        "ssl": {
            "valid": report.ssl.valid,
            "issuer": report.ssl.issuer,
            "expiresAt": report.ssl.expires_at,
            "grade": report.ssl.grade,
            "protocol": report.ssl.protocol,
        },
        "dns": {
            "aRecords": list(report.dns.a_records),
            "mxRecords": list(report.dns.mx_records),
            "txtRecords": list(report.dns.txt_records),
            "nsRecords": list(report.dns.ns_records),
        },
        "headers": {
            "server": report.headers.server,
            "xPoweredBy": report.headers.x_powered_by,
            "contentType": report.headers.content_type,
            "securityHeaders": {
                "strictTransportSecurity": security_headers.strict_transport_security,
                "xFrameOptions": security_headers.x_frame_options,
                "xContentTypeOptions": security_headers.x_content_type_options,
                "contentSecurityPolicy": security_headers.content_security_policy,
                "xXssProtection": security_headers.x_xss_protection,
                "referrerPolicy": security_headers.referrer_policy,
            },
            "score": security_headers.score,
        },
        "performance": {
            "responseTime": report.performance.response_time_ms,
            "contentLength": report.performance.content_length,
            "compression": report.performance.compression,
        },
        "technologies": list(report.technologies),
        "seo": {
            "hasTitle": report.seo.has_title,
            "hasDescription": report.seo.has_description,
            "hasViewport": report.seo.has_viewport,
            "hasCanonical": report.seo.has_canonical,
            "hasRobotsTxt": report.seo.has_robots_txt,
            "hasSitemap": report.seo.has_sitemap,
            "score": report.seo.score,
        },
        "security": {
            "grade": report.security.grade,
            "issues": list(report.security.issues),
            "recommendations": list(report.security.recommendations),
        },
    }
