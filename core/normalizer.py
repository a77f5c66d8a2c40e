"""Turns free-form user input into a fetchable absolute URL."""
import logging
import re
from typing import Optional
from urllib.parse import urlsplit

from core.errors import InvalidInputError
from models.target import NormalizedTarget

DEFAULT_SCHEME = "https"
DEFAULT_PORTS = {"https": 443, "http": 80}

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

logger = logging.getLogger(__name__)


def _fallback_domain(url: str) -> str:
    """Best-effort domain when the URL cannot be parsed: strip the scheme,
    keep what precedes the first '/', drop any credentials and port."""
    rest = _SCHEME_RE.sub("", url).split("/", 1)[0]
    rest = rest.rsplit("@", 1)[-1]
    if rest.startswith("["):
        return rest[1:].split("]", 1)[0]
    return rest.split(":", 1)[0].lower()


def normalize_url(raw_url: Optional[str]) -> NormalizedTarget:
    """
    Canonicalize a user-supplied URL.

    Input without an http:// or https:// prefix gets https:// prepended
    (after any leading slashes are dropped); otherwise it is passed through with only surrounding whitespace removed.

    Raises:
        InvalidInputError: when the input is empty or no domain can be derived
    """
    if raw_url is None or not str(raw_url).strip():
        raise InvalidInputError("URL is required")

    normalized_url = str(raw_url).strip()
    if not _SCHEME_RE.match(normalized_url):
        # Protocol-relative input ("//host/path") keeps its host
        normalized_url = f"{DEFAULT_SCHEME}://{normalized_url.lstrip('/')}"
    scheme = normalized_url.split("://", 1)[0].lower()

    domain = None
    port = None
    try:
        parsed = urlsplit(normalized_url)
        domain = parsed.hostname
        port = parsed.port
    except ValueError as e:
        logger.debug(f"Could not parse {normalized_url!r}: {e}")

    if not domain:
        domain = _fallback_domain(normalized_url)
        logger.debug(f"Using fallback domain {domain!r} for {normalized_url!r}")
    if not domain:
        raise InvalidInputError(f"Could not determine a domain from {raw_url!r}")

    return NormalizedTarget(
        raw_url=str(raw_url),
        normalized_url=normalized_url,
        domain=domain,
        scheme=scheme,
        port=port or DEFAULT_PORTS[scheme],
    )
