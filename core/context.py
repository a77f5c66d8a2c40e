from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from models.report import DnsRecordSet, HttpProbeResult
from models.target import NormalizedTarget

# Summary of the peer certificate: issuer, expires_at, protocol
TLSInfo = Dict[str, Any]

@dataclass(frozen=True)
class ScanContext:
    """Everything the probes collected for one target, handed to the analyzers."""
    target: NormalizedTarget
    main: Optional[HttpProbeResult] # None only when the main page was never probed
    has_robots_txt: bool = False
    has_sitemap: bool = False
    dns: DnsRecordSet = field(default_factory=DnsRecordSet)
    tls: Optional[TLSInfo] = None

    @property
    def headers(self) -> Dict[str, str]:
        if self.main is None or self.main.fetch_failed:
            return {}
        return self.main.headers

    @property
    def html(self) -> str:
        if self.main is None:
            return ""
        return self.main.body

    @property
    def fetch_failed(self) -> bool:
        return self.main is None or self.main.fetch_failed

    @property
    def ssl_valid(self) -> bool:
        # Heuristic: an https page that loaded under certificate verification
        return self.target.is_https and not self.fetch_failed
