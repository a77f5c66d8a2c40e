import ssl
import socket
import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Tuple

# Default TLS connection timeout (in seconds)
DEFAULT_TLS_TIMEOUT = 5.0

logger = logging.getLogger(__name__)


def _flatten_cert_field(cert_field: Tuple[Tuple[Tuple[str, str], ...], ...]) -> Dict[str, str]:
    """Flatten the nested tuple structure of a certificate issuer/subject."""
    result = {}
    for rdn in cert_field:
        for item in rdn:
            if isinstance(item, tuple) and len(item) == 2:
                key, value = item
                result[key] = value
    return result


def _expiry_to_iso(not_after: Optional[str]) -> Optional[str]:
    if not not_after:
        return None
    try:
        seconds = ssl.cert_time_to_seconds(not_after)
    except ValueError:
        logger.debug(f"Unparseable certificate expiry: {not_after}")
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def get_tls_info(hostname: str, port: int = 443, timeout: Optional[float] = None) -> Optional[Dict[str, Any]]:
    """
    Performs a verified TLS handshake and summarizes the peer certificate.

    Blocking; the engine runs it in an executor.

    Args:
        hostname: Server name to connect to and verify against
        port: TCP port (default: 443)
        timeout: Connection timeout in seconds (default: 5s)

    Returns:
        Dict with issuer, expires_at and protocol, or None if the handshake fails
    """
    if not hostname:
        return None

    logger.debug(f"TLS certificate fetch for {hostname}:{port}")
    context = ssl.create_default_context()
    timeout_value = timeout or DEFAULT_TLS_TIMEOUT

    try:
        with socket.create_connection((hostname, port), timeout=timeout_value) as sock:
            with context.wrap_socket(sock, server_hostname=hostname) as ssock:
                cert = ssock.getpeercert() or {}
                protocol = ssock.version()
    except (ssl.SSLError, socket.timeout, OSError, UnicodeError) as e:
        logger.debug(f"TLS error for {hostname}: {type(e).__name__}")
        return None

    issuer = _flatten_cert_field(cert.get("issuer", ()))
    info = {
        "issuer": issuer.get("organizationName") or issuer.get("commonName"),
        "expires_at": _expiry_to_iso(cert.get("notAfter")),
        "protocol": protocol.replace("TLSv", "TLS ") if protocol else None,
    }
    logger.debug(f"TLS certificate found for {hostname} (issuer: {info['issuer'] or 'N/A'}, {info['protocol']})")
    return info
