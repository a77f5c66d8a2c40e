from dataclasses import dataclass


@dataclass(frozen=True)
class NormalizedTarget:
    """A user-supplied URL canonicalized into something fetchable."""
    raw_url: str
    normalized_url: str # always carries an explicit http/https scheme
    domain: str
    scheme: str
    port: int # 443 for https, 80 for http unless given explicitly

    @property
    def origin(self) -> str:
        host = f"[{self.domain}]" if ":" in self.domain else self.domain # IPv6 literal
        default_port = 443 if self.scheme == "https" else 80
        if self.port == default_port:
            return f"{self.scheme}://{host}"
        return f"{self.scheme}://{host}:{self.port}"

    @property
    def is_https(self) -> bool:
        return self.scheme == "https"
